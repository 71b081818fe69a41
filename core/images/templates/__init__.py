# core/images/templates/__init__.py
from .registry import (
    SlotSpec,
    TierRow,
    TemplateProps,
    TemplateEntry,
    register_template,
    get_template,
    get_all_templates,
    get_template_list,
)

# Register the built-in templates
from . import grid_3x3, hero, hero_plus, minimal_banner, tier_list  # noqa: F401

__all__ = [
    'SlotSpec',
    'TierRow',
    'TemplateProps',
    'TemplateEntry',
    'register_template',
    'get_template',
    'get_all_templates',
    'get_template_list',
]
