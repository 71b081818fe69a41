# core/images/templates/registry.py
"""
Template registry.

Each template module registers one TemplateEntry at import time. An entry knows
how many covers it shows, which sizes and list types it supports, where its
cover slots are for a size, and how to draw itself onto a canvas.
"""

from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional

from PIL import Image

from core.sa.models import ListType


class SlotSpec(NamedTuple):
    id: str
    w: int
    h: int


class TierRow(NamedTuple):
    label: str
    cover_count: int


@dataclass
class TemplateProps:
    width: int
    height: int
    title: str
    username: str
    covers: list
    description: Optional[str] = None
    # Tier templates only: labels and how many of the covers belong to each row
    tiers: Optional[list[TierRow]] = None

    @property
    def is_og(self) -> bool:
        return self.width > self.height

    def cover(self, index: int):
        return self.covers[index] if index < len(self.covers) else None


@dataclass
class TemplateEntry:
    id: str
    name: str
    slot_count: int
    get_slot_specs: Callable[[str], list[SlotSpec]]
    render: Callable[[Image.Image, TemplateProps], None]
    background: str
    description: Optional[str] = None
    supported_sizes: tuple[str, ...] = ("og", "square")
    list_types: tuple[str, ...] = (ListType.RECOMMENDATION.value,)
    # Tier templates want covers grouped by tier with per-row counts
    tiered: bool = field(default=False)

    def supports(self, list_type: str) -> bool:
        return list_type in self.list_types

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "slotCount": self.slot_count,
            "supportedSizes": list(self.supported_sizes),
            "listTypes": list(self.list_types),
        }


_registry: dict[str, TemplateEntry] = {}


def register_template(entry: TemplateEntry) -> TemplateEntry:
    _registry[entry.id] = entry
    return entry


def get_template(template_id: str) -> Optional[TemplateEntry]:
    return _registry.get(template_id)


def get_all_templates() -> list[TemplateEntry]:
    """All registered templates, sorted by name."""
    return sorted(_registry.values(), key=lambda t: t.name.lower())


def get_template_list(list_type: Optional[str] = None) -> list[dict]:
    """Template metadata for API responses, optionally filtered by list type."""
    templates = get_all_templates()
    if list_type:
        templates = [t for t in templates if t.supports(list_type)]
    return [t.to_dict() for t in templates]
