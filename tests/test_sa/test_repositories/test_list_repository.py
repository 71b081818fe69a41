# tests/test_sa/test_repositories/test_list_repository.py

import pytest
from core.sa.repositories.list import ListRepository
from core.sa.models import List, ListItem, ImageStatus

@pytest.fixture
def list_repo(db_session):
    """Fixture to create a ListRepository instance."""
    return ListRepository(db_session)

def test_create_list(list_repo, sample_user):
    """Test creating a list with defaults."""
    lst = list_repo.create_list(sample_user.id, "Road trip listens")
    assert lst.id is not None
    assert lst.type == "RECOMMENDATION"
    assert lst.tiers == []
    assert lst.image_status == ImageStatus.NONE.value
    assert lst.image_version == 0

def test_create_tier_list(list_repo, sample_user):
    lst = list_repo.create_list(sample_user.id, "Tiers", list_type="TIER", tiers=["S", "A"])
    assert lst.type == "TIER"
    assert lst.tiers == ["S", "A"]

def test_get_user_lists_with_counts(list_repo, sample_user, sample_list, tier_list):
    """Test fetching a user's lists with item counts, most recently updated first."""
    empty = list_repo.create_list(sample_user.id, "Empty list")
    rows = list_repo.get_user_lists(sample_user.id)
    assert rows[0][0].id == empty.id
    counts = {lst.id: count for lst, count in rows}
    assert counts == {empty.id: 0, sample_list.id: 2, tier_list.id: 2}

def test_get_user_lists_only_own(list_repo, other_user, sample_list):
    assert list_repo.get_user_lists(other_user.id) == []

def test_update_list(list_repo, sample_list):
    """Test updating editable fields bumps updated_at."""
    before = sample_list.updated_at
    updated = list_repo.update_list(sample_list.id, name="Renamed", description="Now with notes")
    assert updated.name == "Renamed"
    assert updated.description == "Now with notes"
    assert updated.updated_at >= before

def test_update_list_rejects_type(list_repo, sample_list):
    """Test that the list type cannot be changed through the repository."""
    with pytest.raises(ValueError, match="Cannot update list field 'type'"):
        list_repo.update_list(sample_list.id, type="TIER")

def test_update_nonexistent_list(list_repo):
    assert list_repo.update_list("missing", name="Nope") is None

def test_delete_list_cascades_items(list_repo, db_session, sample_list):
    """Test that deleting a list removes its items."""
    assert list_repo.delete_list(sample_list.id) is True
    assert list_repo.get_by_id(sample_list.id) is None
    assert db_session.query(ListItem).count() == 0
    assert list_repo.delete_list(sample_list.id) is False

def test_get_items_in_position_order(list_repo, sample_list):
    """Test that items come back by position, not insertion order."""
    items = list_repo.get_items(sample_list.id)
    assert [i.title_asin for i in items] == ["B000000001", "B000000002"]
    assert len(items) == 2

def test_replace_items(list_repo, sample_list):
    """Test that replacing items drops the old set."""
    items = list_repo.replace_items(sample_list.id, [
        {"titleAsin": "B000000003", "position": 5},
        {"titleAsin": "B000000001", "position": 2},
    ])
    assert [(i.title_asin, i.position) for i in items] == [("B000000001", 2), ("B000000003", 5)]
    assert [i.title_asin for i in list_repo.get_items(sample_list.id)] == ["B000000001", "B000000003"]

def test_replace_items_defaults_position_to_index(list_repo, sample_list):
    items = list_repo.replace_items(sample_list.id, [
        {"titleAsin": "B000000002"},
        {"titleAsin": "B000000001"},
    ])
    assert [(i.title_asin, i.position) for i in items] == [("B000000002", 0), ("B000000001", 1)]

def test_replace_items_with_empty_list(list_repo, sample_list):
    assert list_repo.replace_items(sample_list.id, []) == []
    assert list_repo.get_items(sample_list.id) == []

def test_get_items_in_tier_order(list_repo, tier_list):
    """Test that tier lists order by the list's tier order, then position."""
    items = list_repo.get_items_in_tier_order(tier_list)
    assert [(i.tier, i.title_asin) for i in items] == [("S", "B000000001"), ("A", "B000000002")]

def test_get_items_in_tier_order_without_tiers(list_repo, sample_list):
    items = list_repo.get_items_in_tier_order(sample_list)
    assert [i.title_asin for i in items] == ["B000000001", "B000000002"]

def test_set_image_status(list_repo, sample_list):
    lst = list_repo.set_image_status(sample_list, ImageStatus.FAILED, "boom")
    assert lst.image_status == "FAILED"
    assert lst.image_error == "boom"
