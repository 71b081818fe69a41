# core/images/fonts.py
import logging
from functools import lru_cache

from PIL import ImageFont

from core import config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False):
    """Load the configured TTF at a pixel size, falling back to Pillow's bundled font.

    Fonts are cached per (size, weight) for the life of the process.
    """
    path = config.IMAGE_FONT_BOLD_PATH if bold else config.IMAGE_FONT_PATH
    path = path or config.IMAGE_FONT_PATH
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError as e:
            logger.warning(f"Could not load font {path}: {e}, using default font")
    return ImageFont.load_default(size=size)
