# core/images/render.py
"""Pillow drawing helpers shared by the templates, and PNG encoding."""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageDraw, ImageOps

from .fonts import load_font

ELLIPSIS = "…"


@dataclass
class RenderResult:
    buffer: bytes
    width: int
    height: int
    content_type: str = "image/png"


def new_canvas(width: int, height: int, background: str) -> Image.Image:
    return Image.new("RGB", (width, height), background)


def truncate(text: str, max_chars: int) -> str:
    return text[:max_chars] + ELLIPSIS if len(text) > max_chars else text


def rounded_mask(size: tuple[int, int], radius: int) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255)
    return mask


def paste_cover(canvas: Image.Image, cover, x: int, y: int, w: int, h: int, radius: int = 0) -> None:
    """Paste a cover into a slot, cropping to fill it (object-fit: cover)."""
    if cover is None or w <= 0 or h <= 0:
        return
    fitted = ImageOps.fit(cover.image.convert("RGB"), (w, h), Image.Resampling.LANCZOS)
    mask = rounded_mask((w, h), radius) if radius else None
    canvas.paste(fitted, (x, y), mask)


def fill_rounded(canvas: Image.Image, box: tuple[int, int, int, int], color: str, radius: int = 0) -> None:
    draw = ImageDraw.Draw(canvas)
    if radius:
        draw.rounded_rectangle(box, radius=radius, fill=color)
    else:
        draw.rectangle(box, fill=color)


def text_height(font) -> int:
    left, top, right, bottom = font.getbbox("Ag")
    return bottom


def draw_text(canvas: Image.Image, xy: tuple[int, int], text: str, size: int, color: str,
              bold: bool = False) -> int:
    """Draw one line of text and return its rendered width."""
    font = load_font(size, bold)
    draw = ImageDraw.Draw(canvas)
    draw.text(xy, text, font=font, fill=color)
    return int(draw.textlength(text, font=font))


def text_width(text: str, size: int, bold: bool = False) -> int:
    font = load_font(size, bold)
    return int(ImageDraw.Draw(Image.new("L", (1, 1))).textlength(text, font=font))


def render_to_png(canvas: Image.Image) -> RenderResult:
    output = BytesIO()
    canvas.save(output, format="PNG", optimize=True)
    return RenderResult(buffer=output.getvalue(), width=canvas.width, height=canvas.height)


def wrap_text(text: str, size: int, max_width: int, max_lines: int, bold: bool = False) -> list[str]:
    """Greedy word wrap to a pixel width, ellipsizing the last line if text remains."""
    words = text.split()
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}".strip()
        if current and text_width(candidate, size, bold) > max_width:
            lines.append(current)
            current = word
            if len(lines) == max_lines:
                lines[-1] = lines[-1].rstrip(".,;:") + ELLIPSIS
                return lines
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines[:max_lines]
