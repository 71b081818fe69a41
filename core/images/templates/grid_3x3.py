# core/images/templates/grid_3x3.py
from core import config
from ..presets import SIZE_PRESETS
from ..render import paste_cover, draw_text, text_width, truncate
from .registry import register_template, SlotSpec, TemplateEntry, TemplateProps

COLS = 3
ROWS = 3


def _layout(preset: str) -> dict:
    width, height = SIZE_PRESETS[preset]
    is_og = preset == "og"
    title_height = 80 if is_og else 120
    gap = 4 if is_og else 6
    return {
        "title_height": title_height,
        "gap": gap,
        "slot_w": (width - gap * (COLS + 1)) // COLS,
        "slot_h": (height - title_height - gap * (ROWS + 1)) // ROWS,
    }


def get_slot_specs(preset: str) -> list[SlotSpec]:
    layout = _layout(preset)
    return [SlotSpec(f"slot-{i}", layout["slot_w"], layout["slot_h"]) for i in range(COLS * ROWS)]


def render(canvas, props: TemplateProps) -> None:
    preset = "og" if props.is_og else "square"
    layout = _layout(preset)
    gap = layout["gap"]
    title_size = 28 if props.is_og else 36
    byline_size = 14 if props.is_og else 18
    brand_size = 12 if props.is_og else 14

    # Title bar
    text_top = (layout["title_height"] - (title_size + byline_size + 6)) // 2
    draw_text(canvas, (gap * 4, text_top), truncate(props.title, 40), title_size, "#f8fafc", bold=True)
    draw_text(canvas, (gap * 4, text_top + title_size + 6), f"by {props.username}", byline_size, "#94a3b8")
    brand_w = text_width(config.BRAND_NAME, brand_size)
    draw_text(
        canvas,
        (props.width - gap * 4 - brand_w, (layout["title_height"] - brand_size) // 2),
        config.BRAND_NAME, brand_size, "#64748b",
    )

    # Grid
    for i in range(COLS * ROWS):
        row, col = divmod(i, COLS)
        x = gap + col * (layout["slot_w"] + gap)
        y = layout["title_height"] + gap + row * (layout["slot_h"] + gap)
        paste_cover(canvas, props.cover(i), x, y, layout["slot_w"], layout["slot_h"], radius=6)


register_template(TemplateEntry(
    id="grid-3x3",
    name="Grid",
    description="3x3 grid of book covers",
    slot_count=9,
    get_slot_specs=get_slot_specs,
    render=render,
    background="#0f172a",
))
