# core/images/presets.py
"""
Size presets for share images.

og: 1200x630, the Open Graph link preview size.
square: 1080x1080, for general posting.
"""
from typing import NamedTuple

class SizePreset(NamedTuple):
    width: int
    height: int

SIZE_PRESETS = {
    "og": SizePreset(1200, 630),
    "square": SizePreset(1080, 1080),
}

DEFAULT_REQUIRED_SIZES = ("og", "square")
