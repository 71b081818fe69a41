# core/images/generator.py
"""Turn a list's title, owner and covers into PNG share images."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .covers import fetch_covers, generate_placeholder_covers
from .presets import SIZE_PRESETS, DEFAULT_REQUIRED_SIZES
from .render import new_canvas, render_to_png, RenderResult
from .templates import get_template, TemplateEntry, TemplateProps, TierRow
from .templates.tier_list import covers_per_row

logger = logging.getLogger(__name__)

PREVIEW_TITLE = "My Favorite Audiobooks"
PREVIEW_USERNAME = "sampleuser"
PREVIEW_DESCRIPTION = "A curated collection of great listens"


class TemplateNotFoundError(Exception):
    """Raised for an unknown template id."""


class UnsupportedSizeError(Exception):
    """Raised when a template cannot render a size."""


@dataclass
class ListImageBook:
    asin: str
    cover_image_url: Optional[str] = None
    title: Optional[str] = None
    tier: Optional[str] = None


@dataclass
class ListImageInput:
    list_id: str
    title: str
    username: str
    template_id: str
    books: list[ListImageBook] = field(default_factory=list)
    description: Optional[str] = None
    # Tier lists: the list's tier labels in display order
    tiers: Optional[list[str]] = None
    sizes: Optional[Sequence[str]] = None


def _require_template(template_id: str) -> TemplateEntry:
    template = get_template(template_id)
    if template is None:
        raise TemplateNotFoundError(f"Unknown template: {template_id}")
    return template


def _tiered_books(books: list[ListImageBook], tiers: list[str], per_row: int):
    """Group books by tier, keeping at most per_row books per tier row."""
    ordered: list[ListImageBook] = []
    rows: list[TierRow] = []
    for label in tiers:
        in_tier = [b for b in books if b.tier == label][:per_row]
        ordered.extend(in_tier)
        rows.append(TierRow(label, len(in_tier)))
    return ordered, rows


def render_template(template: TemplateEntry, size: str, props_kwargs: dict, covers: list) -> RenderResult:
    preset = SIZE_PRESETS[size]
    props = TemplateProps(width=preset.width, height=preset.height, covers=covers, **props_kwargs)
    canvas = new_canvas(preset.width, preset.height, template.background)
    template.render(canvas, props)
    return render_to_png(canvas)


def generate_list_images(data: ListImageInput) -> dict[str, RenderResult]:
    """Render a list's share image in every requested size.

    Args:
        data: List title, owner, books and template choice

    Returns:
        Mapping of size name to RenderResult

    Raises:
        TemplateNotFoundError: If the template id is not registered
    """
    template = _require_template(data.template_id)
    sizes = data.sizes or DEFAULT_REQUIRED_SIZES
    results: dict[str, RenderResult] = {}

    for size in sizes:
        if size not in SIZE_PRESETS or size not in template.supported_sizes:
            logger.warning(f"Unknown size preset: {size}, skipping")
            continue

        slot_specs = template.get_slot_specs(size)
        books = data.books
        tier_rows = None
        if template.tiered and data.tiers:
            books, tier_rows = _tiered_books(data.books, data.tiers, covers_per_row(size))

        cover_urls = [book.cover_image_url for book in books[:template.slot_count]]
        covers = fetch_covers(cover_urls, slot_specs)

        results[size] = render_template(template, size, {
            "title": data.title,
            "username": data.username,
            "description": data.description,
            "tiers": tier_rows,
        }, covers)
        logger.info(f"Rendered {template.id} {size} image for list {data.list_id}")

    return results


def render_template_preview(template_id: str, size: str = "og") -> RenderResult:
    """Render a template with placeholder covers and sample text.

    Raises:
        TemplateNotFoundError: If the template id is not registered
        UnsupportedSizeError: If the size is not a preset or not supported by the template
    """
    template = _require_template(template_id)
    if size not in SIZE_PRESETS or size not in template.supported_sizes:
        raise UnsupportedSizeError(f"Template {template_id} does not support size {size}")

    covers = generate_placeholder_covers(template.get_slot_specs(size))
    return render_template(template, size, {
        "title": PREVIEW_TITLE,
        "username": PREVIEW_USERNAME,
        "description": PREVIEW_DESCRIPTION,
    }, covers)
