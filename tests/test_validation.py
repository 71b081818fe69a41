# tests/test_validation.py

import pytest
from core.validation import (
    validate_username,
    is_reserved_username,
    validate_list_name,
    validate_list_description,
    validate_list_type,
    validate_tiers,
    validate_list_items,
)

@pytest.mark.parametrize("username", ["abc", "reader-42", "a1b", "x" * 30])
def test_valid_usernames(username):
    assert validate_username(username).valid is True

@pytest.mark.parametrize("username, error", [
    (None, "Username is required"),
    ("", "Username is required"),
    (42, "Username is required"),
    ("Reader", "Username must be lowercase"),
    ("ab", "Username must be at least 3 characters"),
    ("x" * 31, "Username must be 30 characters or fewer"),
    ("-reader", None),
    ("reader-", None),
    ("read_er", None),
    ("read--er", "Username must not contain consecutive hyphens"),
    ("admin", "This username is reserved"),
    ("dashboard", "This username is reserved"),
])
def test_invalid_usernames(username, error):
    result = validate_username(username)
    assert result.valid is False
    if error:
        assert result.error == error
    else:
        assert result.error.startswith("Username may only contain")

def test_reserved_check_ignores_case():
    assert is_reserved_username("API") is True
    assert is_reserved_username("reader") is False

def test_list_name():
    assert validate_list_name("  Top picks  ").valid is True
    assert validate_list_name(None).error == "List name is required"
    assert validate_list_name("   ").error == "List name is required"
    assert validate_list_name(" ab ").error == "List name must be at least 3 characters"
    assert validate_list_name("x" * 81).error == "List name must be 80 characters or fewer"

def test_list_description():
    assert validate_list_description(None).valid is True
    assert validate_list_description("x" * 500).valid is True
    assert validate_list_description("x" * 501).error == "Description must be 500 characters or fewer"
    assert validate_list_description(5).error == "Description must be a string"

def test_list_type():
    assert validate_list_type("TIER").valid is True
    assert validate_list_type("RECOMMENDATION").valid is True
    assert validate_list_type("tier").error == "List type must be RECOMMENDATION or TIER"
    assert validate_list_type(None).valid is False

def test_tiers():
    """Test tier label rules."""
    assert validate_tiers(["S", "A", "B"]).valid is True
    assert validate_tiers("S,A").error == "Tiers must be an array"
    assert validate_tiers([]).error == "At least one tier is required"
    assert validate_tiers([str(i) for i in range(11)]).error == "A maximum of 10 tiers is allowed"
    assert validate_tiers(["S", 1]).error == "Tier at index 1 must be a string"
    assert validate_tiers(["S", "  "]).error == "Tier at index 1 must not be empty"
    assert validate_tiers(["x" * 21]).error == "Tier at index 0 must be 20 characters or fewer"

def test_list_items():
    """Test item shape, count and duplicate rules."""
    assert validate_list_items([]).valid is True
    assert validate_list_items([{"titleAsin": "B1"}, {"titleAsin": "B2"}]).valid is True
    assert validate_list_items({"titleAsin": "B1"}).error == "Items must be an array"
    assert validate_list_items([{"asin": "B1"}]).error == "Each item must have a valid titleAsin"
    assert validate_list_items(["B1"]).error == "Each item must have a valid titleAsin"
    assert validate_list_items([{"titleAsin": "B1"}, {"titleAsin": "B1"}]).error == "Duplicate ASIN found: B1"

def test_list_items_limit():
    items = [{"titleAsin": f"B{i}"} for i in range(3)]
    assert validate_list_items(items, max_items=2).error == "A maximum of 2 items is allowed"
    assert validate_list_items([{"titleAsin": f"B{i}"} for i in range(100)]).valid is True
    assert validate_list_items([{"titleAsin": f"B{i}"} for i in range(101)]).valid is False

@pytest.mark.parametrize("name, valid", [
    ("abc", True),
    ("x" * 80, True),
    ("  abc  ", True),
    ("ab", False),
    ("x" * 81, False),
])
def test_list_name_length_bounds(name, valid):
    assert validate_list_name(name).valid is valid

@pytest.mark.parametrize("count, valid", [
    (1, True),
    (10, True),
    (0, False),
    (11, False),
])
def test_tier_count_bounds(count, valid):
    assert validate_tiers([f"T{i}" for i in range(count)]).valid is valid
