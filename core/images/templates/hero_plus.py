# core/images/templates/hero_plus.py
"""
One large cover with six smaller covers.

OG: hero on the left, three rows of two on the right.
Square: three small on top, hero in the middle, three small on the bottom.
"""
from ..presets import SIZE_PRESETS
from ..render import paste_cover
from .hero import draw_title_block, GAP, OG_TITLE_HEIGHT, SQUARE_TITLE_HEIGHT
from .registry import register_template, SlotSpec, TemplateEntry, TemplateProps

SMALL_COUNT = 6


def _layout(preset: str) -> dict:
    width, height = SIZE_PRESETS[preset]
    if preset == "og":
        padding = 24
        hero_w = int((width - padding * 3) * 0.45)
        hero_h = height - padding * 2
        right_w = (width - padding * 3) - hero_w
        small_w = (right_w - GAP) // 2
        small_h = (hero_h - OG_TITLE_HEIGHT - GAP * 3) // 3
    else:
        padding = 32
        content_h = height - SQUARE_TITLE_HEIGHT - padding * 2 - GAP * 2
        small_h = int(content_h * 0.2)
        hero_h = content_h - small_h * 2
        hero_w = width - padding * 2
        small_w = (hero_w - GAP * 2) // 3
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


def render(canvas, props: TemplateProps) -> None:
    layout = _layout("og" if props.is_og else "square")
    padding = layout["padding"]
    small_w, small_h = layout["small_w"], layout["small_h"]

    if props.is_og:
        paste_cover(canvas, props.cover(0), padding, padding, layout["hero_w"], layout["hero_h"], radius=12)
        right_x = padding * 2 + layout["hero_w"]
        draw_title_block(canvas, props, right_x, padding)
        for i in range(SMALL_COUNT):
            row, col = divmod(i, 2)
            x = right_x + col * (small_w + GAP)
            y = padding + OG_TITLE_HEIGHT + GAP + row * (small_h + GAP)
            paste_cover(canvas, props.cover(i + 1), x, y, small_w, small_h, radius=8)
        return

    draw_title_block(canvas, props, padding, padding)
    top_row_y = padding + SQUARE_TITLE_HEIGHT + GAP
    hero_y = top_row_y + small_h + GAP
    bottom_row_y = hero_y + layout["hero_h"] + GAP
    for i in range(3):
        x = padding + i * (small_w + GAP)
        paste_cover(canvas, props.cover(i + 1), x, top_row_y, small_w, small_h, radius=8)
        paste_cover(canvas, props.cover(i + 4), x, bottom_row_y, small_w, small_h, radius=8)
    paste_cover(canvas, props.cover(0), padding, hero_y, layout["hero_w"], layout["hero_h"], radius=12)


register_template(TemplateEntry(
    id="hero-plus",
    name="Hero+",
    description="One large cover with six smaller books around it",
    slot_count=7,
    get_slot_specs=get_slot_specs,
    render=render,
    background="#1e1b4b",
))
