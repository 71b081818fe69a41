# core/images/templates/hero.py
"""One large cover with three smaller covers alongside (OG) or below (square)."""
from core import config
from ..presets import SIZE_PRESETS
from ..render import paste_cover, draw_text, truncate
from .registry import register_template, SlotSpec, TemplateEntry, TemplateProps

GAP = 8
OG_TITLE_HEIGHT = 52
SQUARE_TITLE_HEIGHT = 100
SMALL_COUNT = 3


def _layout(preset: str) -> dict:
    width, height = SIZE_PRESETS[preset]
    if preset == "og":
        padding = 24
        hero_w = int((width - padding * 3) * 0.45)
        hero_h = height - padding * 2
        small_w = (width - padding * 3) - hero_w
        small_h = (hero_h - OG_TITLE_HEIGHT - GAP * 3) // 3
    else:
        padding = 32
        content_h = height - SQUARE_TITLE_HEIGHT - padding * 2 - GAP
        hero_w = width - padding * 2
        hero_h = int(content_h * 0.65)
        small_w = (hero_w - GAP * 2) // 3
        small_h = int(content_h * 0.35)
    return {
        "padding": padding,
        "hero_w": hero_w,
        "hero_h": hero_h,
        "small_w": small_w,
        "small_h": small_h,
    }


def get_slot_specs(preset: str) -> list[SlotSpec]:
    layout = _layout(preset)
    return [SlotSpec("hero", layout["hero_w"], layout["hero_h"])] + [
        SlotSpec(f"small-{i}", layout["small_w"], layout["small_h"]) for i in range(SMALL_COUNT)
    ]


def draw_title_block(canvas, props: TemplateProps, x: int, y: int) -> None:
    """Title plus byline in the indigo palette shared by the hero layouts."""
    if props.is_og:
        draw_text(canvas, (x, y), truncate(props.title, 35), 26, "#e0e7ff", bold=True)
        draw_text(canvas, (x, y + 26 + 8), f"by {props.username} · {config.BRAND_NAME}", 14, "#a5b4fc")
    else:
        top = y + (SQUARE_TITLE_HEIGHT - (32 + 16 + 10)) // 2
        draw_text(canvas, (x, top), truncate(props.title, 30), 32, "#e0e7ff", bold=True)
        draw_text(canvas, (x, top + 32 + 10), f"by {props.username} · {config.BRAND_NAME}", 16, "#a5b4fc")


def render(canvas, props: TemplateProps) -> None:
    layout = _layout("og" if props.is_og else "square")
    padding = layout["padding"]

    if props.is_og:
        paste_cover(canvas, props.cover(0), padding, padding, layout["hero_w"], layout["hero_h"], radius=12)
        right_x = padding * 2 + layout["hero_w"]
        draw_title_block(canvas, props, right_x, padding)
        y = padding + OG_TITLE_HEIGHT + GAP
        for i in range(SMALL_COUNT):
            paste_cover(canvas, props.cover(i + 1), right_x, y, layout["small_w"], layout["small_h"], radius=8)
            y += layout["small_h"] + GAP
        return

    draw_title_block(canvas, props, padding, padding)
    hero_y = padding + SQUARE_TITLE_HEIGHT + GAP
    paste_cover(canvas, props.cover(0), padding, hero_y, layout["hero_w"], layout["hero_h"], radius=12)
    row_y = hero_y + layout["hero_h"] + GAP
    for i in range(SMALL_COUNT):
        x = padding + i * (layout["small_w"] + GAP)
        paste_cover(canvas, props.cover(i + 1), x, row_y, layout["small_w"], layout["small_h"], radius=8)


register_template(TemplateEntry(
    id="hero",
    name="Hero",
    description="One large cover with smaller books alongside",
    slot_count=4,
    get_slot_specs=get_slot_specs,
    render=render,
    background="#1e1b4b",
))
