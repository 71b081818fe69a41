# core/validation/__init__.py
from .result import ValidationResult
from .username import validate_username, is_reserved_username
from .lists import (
    validate_list_name,
    validate_list_description,
    validate_list_type,
    validate_tiers,
    validate_list_items,
)

__all__ = [
    'ValidationResult',
    'validate_username',
    'is_reserved_username',
    'validate_list_name',
    'validate_list_description',
    'validate_list_type',
    'validate_tiers',
    'validate_list_items',
]
