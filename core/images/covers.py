# core/images/covers.py
"""
Cover art for share images.

Covers are downloaded with a small thread pool. Any slot without a usable
cover gets a generated placeholder tile instead.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Sequence

import requests
from PIL import Image, ImageDraw

from core import config
from .fonts import load_font

logger = logging.getLogger(__name__)

USER_AGENT = "audioshlf-image-generator/1.0"
PLACEHOLDER_BACKGROUND = "#334155"
PLACEHOLDER_TEXT = "#64748b"

IMAGE_HEADERS = (
    b'\xff\xd8\xff',  # JPEG
    b'\x89PNG\r\n',   # PNG
    b'GIF87a',        # GIF
    b'GIF89a',        # GIF
    b'RIFF',          # WEBP
)


@dataclass
class CoverAsset:
    image: Image.Image
    is_placeholder: bool


def generate_placeholder(width: int, height: int) -> Image.Image:
    """Neutral tile with the brand name, sized to a slot."""
    width, height = max(width, 1), max(height, 1)
    tile = Image.new("RGB", (width, height), PLACEHOLDER_BACKGROUND)
    draw = ImageDraw.Draw(tile)
    font = load_font(max(11, min(width, height) // 10))
    text = config.BRAND_NAME
    text_w = draw.textlength(text, font=font)
    left, top, right, bottom = font.getbbox(text)
    draw.text(((width - text_w) / 2, (height - bottom) / 2), text, font=font, fill=PLACEHOLDER_TEXT)
    return tile


def generate_placeholder_covers(slot_specs: Sequence) -> list[CoverAsset]:
    """Placeholder covers for every slot, used by template previews."""
    return [CoverAsset(generate_placeholder(spec.w, spec.h), True) for spec in slot_specs]


def _looks_like_image(content: bytes) -> bool:
    return any(content.startswith(header) for header in IMAGE_HEADERS)


def fetch_cover(url: str) -> Optional[Image.Image]:
    """Download one cover.

    Returns:
        The decoded image, or None if the download or decode failed
    """
    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=config.COVER_FETCH_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.warning(f"Cover fetch error for {url}: {e}")
        return None

    if not response.ok:
        logger.warning(f"Cover fetch failed ({response.status_code}): {url}")
        return None

    if not _looks_like_image(response.content):
        logger.warning(f"Cover at {url} is not an image")
        return None

    try:
        image = Image.open(BytesIO(response.content))
        image.load()
    except OSError as e:
        logger.warning(f"Could not decode cover {url}: {e}")
        return None

    if image.mode != "RGB":
        image = image.convert("RGB")
    return image


def fetch_covers(cover_urls: Sequence[Optional[str]], slot_specs: Sequence) -> list[CoverAsset]:
    """Resolve a cover for every slot.

    Args:
        cover_urls: Ordered cover URLs, None where a title has no cover
        slot_specs: Slot specifications from the template, used to size placeholders

    Returns:
        One CoverAsset per slot spec
    """
    results: list[Optional[CoverAsset]] = [None] * len(slot_specs)
    work = []
    for index, spec in enumerate(slot_specs):
        url = cover_urls[index] if index < len(cover_urls) else None
        if url:
            work.append((index, url))
        else:
            results[index] = CoverAsset(generate_placeholder(spec.w, spec.h), True)

    if work:
        with ThreadPoolExecutor(max_workers=config.COVER_FETCH_CONCURRENCY) as executor:
            fetched = list(executor.map(lambda item: fetch_cover(item[1]), work))
        for (index, _), image in zip(work, fetched):
            spec = slot_specs[index]
            if image is None:
                results[index] = CoverAsset(generate_placeholder(spec.w, spec.h), True)
            else:
                results[index] = CoverAsset(image, False)

    return results
