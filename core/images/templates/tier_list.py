# core/images/templates/tier_list.py
"""
Tier rows with coloured backgrounds and covers.

OG: 4 rows of label + 5 covers. Square: 4 rows of label + 3 covers.
Only offered for TIER lists.
"""
from core import config
from core.sa.models import ListType
from ..presets import SIZE_PRESETS
from ..render import paste_cover, draw_text, text_width, truncate, fill_rounded
from .registry import register_template, SlotSpec, TemplateEntry, TemplateProps, TierRow

GAP = 4
ROWS = 4

# (default label, row background, label background)
TIER_COLOURS = [
    ("S", "#dc2626", "#b91c1c"),
    ("A", "#ea580c", "#c2410c"),
    ("B", "#eab308", "#ca8a04"),
    ("C", "#16a34a", "#15803d"),
]


def covers_per_row(preset: str) -> int:
    return 5 if preset == "og" else 3


def _layout(preset: str) -> dict:
    width, height = SIZE_PRESETS[preset]
    is_og = preset == "og"
    title_height = 60 if is_og else 80
    per_row = covers_per_row(preset)
    label_width = 200 if is_og else 240
    content_h = height - GAP * 2
    content_w = width - GAP * 2
    row_height = (content_h - title_height - GAP * ROWS) // ROWS
    cover_w = (content_w - label_width - GAP * 2 - GAP * (per_row - 1)) // per_row
    return {
        "title_height": title_height,
        "per_row": per_row,
        "label_width": label_width,
        "row_height": row_height,
        "cover_w": cover_w,
        "cover_h": row_height - GAP * 2,
    }


def get_slot_specs(preset: str) -> list[SlotSpec]:
    layout = _layout(preset)
    return [
        SlotSpec(f"tier-{r}-slot-{c}", layout["cover_w"], layout["cover_h"])
        for r in range(ROWS)
        for c in range(layout["per_row"])
    ]


def _rows(props: TemplateProps, per_row: int) -> list[TierRow]:
    # Without tier data (previews) every row is filled
    if not props.tiers:
        return [TierRow(label, per_row) for label, _, _ in TIER_COLOURS]
    rows = [TierRow(t.label, min(t.cover_count, per_row)) for t in props.tiers[:ROWS]]
    for label, _, _ in TIER_COLOURS[len(rows):]:
        rows.append(TierRow(label, 0))
    return rows


def render(canvas, props: TemplateProps) -> None:
    preset = "og" if props.is_og else "square"
    layout = _layout(preset)
    per_row = layout["per_row"]
    title_size = 22 if props.is_og else 28
    byline_size = 12 if props.is_og else 14
    label_size = 36 if props.is_og else 44

    # Title bar
    text_top = GAP + (layout["title_height"] - (title_size + byline_size + 6)) // 2
    draw_text(canvas, (GAP + 16, text_top), truncate(props.title, 40), title_size, "#f8fafc", bold=True)
    draw_text(canvas, (GAP + 16, text_top + title_size + 6),
              f"by {props.username} · {config.BRAND_NAME}", byline_size, "#94a3b8")

    offset = 0
    row_y = GAP + layout["title_height"] + GAP
    for row_index, row in enumerate(_rows(props, per_row)):
        _, background, label_background = TIER_COLOURS[row_index]
        row_box = (GAP, row_y, props.width - GAP - 1, row_y + layout["row_height"] - 1)
        fill_rounded(canvas, row_box, background, radius=8)
        label_right = GAP + layout["label_width"] - 1
        fill_rounded(canvas, (GAP, row_y, label_right, row_box[3]), label_background, radius=8)
        fill_rounded(canvas, (label_right - 8, row_y, label_right, row_box[3]), label_background)

        label = truncate(row.label, 6)
        label_w = text_width(label, label_size, bold=True)
        draw_text(
            canvas,
            (GAP + (layout["label_width"] - label_w) // 2, row_y + (layout["row_height"] - label_size) // 2),
            label, label_size, "#ffffff", bold=True,
        )

        for col in range(row.cover_count):
            x = GAP + layout["label_width"] + GAP + col * (layout["cover_w"] + GAP)
            paste_cover(canvas, props.cover(offset + col), x, row_y + GAP,
                        layout["cover_w"], layout["cover_h"], radius=6)
        offset += row.cover_count
        row_y += layout["row_height"] + GAP


register_template(TemplateEntry(
    id="tier-list",
    name="Tier List",
    description="Classic S/A/B/C tier rows with colored backgrounds",
    slot_count=20,
    get_slot_specs=get_slot_specs,
    render=render,
    background="#1a1a2e",
    list_types=(ListType.TIER.value,),
    tiered=True,
))
