# core/images/templates/minimal_banner.py
"""Text-focused layout with three covers beside (OG) or below (square) the title."""
from core import config
from ..presets import SIZE_PRESETS
from ..render import paste_cover, draw_text, truncate, wrap_text
from .registry import register_template, SlotSpec, TemplateEntry, TemplateProps

GAP = 10
COVER_COUNT = 3


def _layout(preset: str) -> dict:
    width, height = SIZE_PRESETS[preset]
    if preset == "og":
        padding = 40
        cover_w = int(width * 0.35) - padding
        cover_h = (height - padding * 2 - GAP * 2) // 3
    else:
        padding = 48
        cover_w = (width - padding * 2 - GAP * 2) // 3
        cover_h = int(height * 0.35)
    return {"padding": padding, "cover_w": cover_w, "cover_h": cover_h}


def get_slot_specs(preset: str) -> list[SlotSpec]:
    layout = _layout(preset)
    return [SlotSpec(f"cover-{i}", layout["cover_w"], layout["cover_h"]) for i in range(COVER_COUNT)]


def _draw_text_stack(canvas, props: TemplateProps, x: int, top: int, bottom: int, max_width: int) -> None:
    if props.is_og:
        brand_size, title_size, desc_size, byline_size = 13, 36, 16, 14
        title_chars, desc_chars, spacing = 45, 100, 12
    else:
        brand_size, title_size, desc_size, byline_size = 14, 42, 18, 16
        title_chars, desc_chars, spacing = 35, 120, 16

    title_lines = wrap_text(truncate(props.title, title_chars), title_size, max_width, 2, bold=True)
    desc_lines = []
    if props.description:
        desc_lines = wrap_text(truncate(props.description, desc_chars), desc_size, max_width, 3)

    title_line_h = int(title_size * 1.15)
    desc_line_h = int(desc_size * 1.4)
    block_h = (brand_size + spacing + title_line_h * len(title_lines) + spacing
               + (desc_line_h * len(desc_lines) + spacing if desc_lines else 0) + byline_size)
    y = top + max(0, (bottom - top - block_h) // 2)

    draw_text(canvas, (x, y), config.BRAND_NAME.upper(), brand_size, "#a16207", bold=True)
    y += brand_size + spacing
    for line in title_lines:
        draw_text(canvas, (x, y), line, title_size, "#1c1917", bold=True)
        y += title_line_h
    y += spacing
    if desc_lines:
        for line in desc_lines:
            draw_text(canvas, (x, y), line, desc_size, "#78716c")
            y += desc_line_h
        y += spacing
    draw_text(canvas, (x, y), f"by {props.username}", byline_size, "#a8a29e")


def render(canvas, props: TemplateProps) -> None:
    layout = _layout("og" if props.is_og else "square")
    padding = layout["padding"]
    cover_w, cover_h = layout["cover_w"], layout["cover_h"]

    if props.is_og:
        cover_x = props.width - padding - cover_w
        column_h = cover_h * COVER_COUNT + GAP * (COVER_COUNT - 1)
        cover_y = (props.height - column_h) // 2
        for i in range(COVER_COUNT):
            paste_cover(canvas, props.cover(i), cover_x, cover_y + i * (cover_h + GAP), cover_w, cover_h, radius=8)
        text_right = cover_x - padding // 2
        _draw_text_stack(canvas, props, padding, padding, props.height - padding, text_right - padding)
        return

    cover_y = props.height - padding - cover_h
    for i in range(COVER_COUNT):
        paste_cover(canvas, props.cover(i), padding + i * (cover_w + GAP), cover_y, cover_w, cover_h, radius=8)
    _draw_text_stack(canvas, props, padding, padding, cover_y - GAP, props.width - padding * 2)


register_template(TemplateEntry(
    id="minimal-banner",
    name="Minimal",
    description="Text-focused with 3 covers on the side",
    slot_count=3,
    get_slot_specs=get_slot_specs,
    render=render,
    background="#fafaf9",
))
