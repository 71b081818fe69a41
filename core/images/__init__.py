# core/images/__init__.py
from .presets import SIZE_PRESETS, DEFAULT_REQUIRED_SIZES
from .render import RenderResult
from .generator import (
    ListImageBook,
    ListImageInput,
    generate_list_images,
    render_template_preview,
    TemplateNotFoundError,
    UnsupportedSizeError,
)
from .templates import get_template, get_template_list

__all__ = [
    'SIZE_PRESETS',
    'DEFAULT_REQUIRED_SIZES',
    'RenderResult',
    'ListImageBook',
    'ListImageInput',
    'generate_list_images',
    'render_template_preview',
    'TemplateNotFoundError',
    'UnsupportedSizeError',
    'get_template',
    'get_template_list',
]
