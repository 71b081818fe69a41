# core/validation/lists.py
from core import config
from core.sa.models import ListType
from .result import ValidationResult, VALID, invalid

LIST_RULES = {
    "name_min": 3,
    "name_max": 80,
    "description_max": 500,
    "tiers_min": 1,
    "tiers_max": 10,
    "tier_label_max": 20,
}

def validate_list_name(name) -> ValidationResult:
    if not isinstance(name, str) or not name.strip():
        return invalid("List name is required")

    trimmed = name.strip()
    if len(trimmed) < LIST_RULES["name_min"]:
        return invalid(f"List name must be at least {LIST_RULES['name_min']} characters")
    if len(trimmed) > LIST_RULES["name_max"]:
        return invalid(f"List name must be {LIST_RULES['name_max']} characters or fewer")
    return VALID

def validate_list_description(description) -> ValidationResult:
    if description is None:
        return VALID
    if not isinstance(description, str):
        return invalid("Description must be a string")
    if len(description.strip()) > LIST_RULES["description_max"]:
        return invalid(f"Description must be {LIST_RULES['description_max']} characters or fewer")
    return VALID

def validate_list_type(list_type) -> ValidationResult:
    if list_type not in (ListType.RECOMMENDATION.value, ListType.TIER.value):
        return invalid("List type must be RECOMMENDATION or TIER")
    return VALID

def validate_tiers(tiers) -> ValidationResult:
    if not isinstance(tiers, list):
        return invalid("Tiers must be an array")
    if len(tiers) < LIST_RULES["tiers_min"]:
        return invalid("At least one tier is required")
    if len(tiers) > LIST_RULES["tiers_max"]:
        return invalid(f"A maximum of {LIST_RULES['tiers_max']} tiers is allowed")

    for i, tier in enumerate(tiers):
        if not isinstance(tier, str):
            return invalid(f"Tier at index {i} must be a string")
        trimmed = tier.strip()
        if len(trimmed) < 1:
            return invalid(f"Tier at index {i} must not be empty")
        if len(trimmed) > LIST_RULES["tier_label_max"]:
            return invalid(f"Tier at index {i} must be {LIST_RULES['tier_label_max']} characters or fewer")
    return VALID

def validate_list_items(items, max_items: int = config.MAX_LIST_ITEMS) -> ValidationResult:
    if not isinstance(items, list):
        return invalid("Items must be an array")
    if len(items) > max_items:
        return invalid(f"A maximum of {max_items} items is allowed")

    seen = set()
    for item in items:
        asin = item.get("titleAsin") if isinstance(item, dict) else None
        if not asin or not isinstance(asin, str):
            return invalid("Each item must have a valid titleAsin")
        if asin in seen:
            return invalid(f"Duplicate ASIN found: {asin}")
        seen.add(asin)
    return VALID
