# tests/test_api/test_list_routes.py

import pytest
from datetime import datetime, timedelta, UTC
from unittest.mock import patch

from core.sa.models import List, ListItem, ImageStatus
from core.storage.s3 import StorageError

@pytest.fixture
def ready_list(db_session, sample_list):
    """A list whose share images have been generated"""
    sample_list.image_template_id = "grid-3x3"
    sample_list.image_status = ImageStatus.READY.value
    sample_list.image_version = 2
    sample_list.image_og_key = f"lists/{sample_list.id}/v2/og.png"
    sample_list.image_square_key = f"lists/{sample_list.id}/v2/square.png"
    sample_list.image_generated_at = datetime.now(UTC) - timedelta(minutes=5)
    db_session.commit()
    return sample_list

def test_lists_require_session(client):
    assert client.get("/api/lists").status_code == 401

def test_get_lists(auth_client, sample_list, tier_list):
    """Test listing your own lists with item counts."""
    lists = auth_client.get("/api/lists").json()["lists"]
    by_id = {lst["id"]: lst for lst in lists}
    assert by_id[sample_list.id]["itemCount"] == 2
    assert by_id[sample_list.id]["type"] == "RECOMMENDATION"
    assert by_id[tier_list.id]["tiers"] == ["S", "A", "B"]
    assert by_id[tier_list.id]["imageStatus"] == "NONE"

def test_create_recommendation_list(auth_client):
    """Test creating a list trims the name and returns it empty."""
    response = auth_client.post("/api/lists", json={
        "name": "  Best of 2024  ",
        "description": " Loved these ",
        "type": "RECOMMENDATION",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Best of 2024"
    assert data["description"] == "Loved these"
    assert data["tiers"] == []
    assert data["items"] == []
    assert data["itemCount"] == 0
    assert data["imageOgUrl"] is None

def test_create_list_blank_description_is_null(auth_client):
    response = auth_client.post("/api/lists", json={"name": "Blank", "description": "   ", "type": "RECOMMENDATION"})
    assert response.status_code == 201
    assert response.json()["description"] is None

def test_create_tier_list_defaults_tiers(auth_client):
    data = auth_client.post("/api/lists", json={"name": "Tiers", "type": "TIER"}).json()
    assert data["tiers"] == ["S", "A", "B", "C", "D"]

def test_create_tier_list_custom_tiers(auth_client):
    data = auth_client.post("/api/lists", json={
        "name": "Tiers", "type": "TIER", "tiers": [" Loved ", "Liked"], "imageTemplateId": "tier-list",
    }).json()
    assert data["tiers"] == ["Loved", "Liked"]
    assert data["imageTemplateId"] == "tier-list"

@pytest.mark.parametrize("body, error", [
    ({"type": "RECOMMENDATION"}, "List name is required"),
    ({"name": "ab", "type": "RECOMMENDATION"}, "List name must be at least 3 characters"),
    ({"name": "Valid", "type": "SHELF"}, "List type must be RECOMMENDATION or TIER"),
    ({"name": "Valid"}, "List type must be RECOMMENDATION or TIER"),
    ({"name": "Valid", "type": "TIER", "tiers": []}, "At least one tier is required"),
    ({"name": "Valid", "type": "RECOMMENDATION", "imageTemplateId": "nope"}, "Unknown template: nope"),
    ({"name": "Valid", "type": "RECOMMENDATION", "imageTemplateId": "tier-list"},
     "Template tier-list does not support RECOMMENDATION lists"),
])
def test_create_list_validation(auth_client, body, error):
    response = auth_client.post("/api/lists", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": error}

def test_create_list_invalid_json(auth_client):
    response = auth_client.post("/api/lists", content=b"{bad", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}

def test_get_list(auth_client, sample_list, fake_metadata):
    """Test that items come back in position order with title metadata."""
    data = auth_client.get(f"/api/lists/{sample_list.id}").json()
    assert [i["titleAsin"] for i in data["items"]] == ["B000000001", "B000000002"]
    assert data["items"][0]["title"]["title"] == "Project Hail Mary"
    assert data["items"][0]["position"] == 0

def test_get_list_errors(auth_client, other_client, sample_list):
    response = auth_client.get("/api/lists/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "List not found"}

    response = other_client.get(f"/api/lists/{sample_list.id}")
    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}

def test_update_list(auth_client, sample_list):
    data = auth_client.put(f"/api/lists/{sample_list.id}", json={
        "name": "Renamed list", "description": None, "imageTemplateId": "hero",
    }).json()
    assert data["name"] == "Renamed list"
    assert data["description"] is None
    assert data["imageTemplateId"] == "hero"

def test_update_list_type_is_immutable(auth_client, sample_list):
    """Test that the type cannot change, even to the same value."""
    response = auth_client.put(f"/api/lists/{sample_list.id}", json={"type": "RECOMMENDATION"})
    assert response.status_code == 400
    assert response.json() == {"error": "List type is immutable and cannot be changed"}

def test_update_tiers(auth_client, sample_list, tier_list):
    data = auth_client.put(f"/api/lists/{tier_list.id}", json={"tiers": ["Top", "Rest"]}).json()
    assert data["tiers"] == ["Top", "Rest"]

    response = auth_client.put(f"/api/lists/{sample_list.id}", json={"tiers": ["Top"]})
    assert response.status_code == 400

def test_update_list_regenerate_queues_task(auth_client, db_session, sample_list):
    """Test that regenerateImage marks the list GENERATING and queues rendering."""
    with patch("api.routes.lists.regenerate_list_images_task") as task:
        data = auth_client.put(f"/api/lists/{sample_list.id}", json={
            "imageTemplateId": "grid-3x3", "regenerateImage": True,
        }).json()
    assert data["imageStatus"] == "GENERATING"
    task.assert_called_once_with(sample_list.id)

def test_update_list_regenerate_without_template(auth_client, sample_list):
    response = auth_client.put(f"/api/lists/{sample_list.id}", json={"regenerateImage": True})
    assert response.status_code == 400
    assert response.json() == {"error": "No template selected. Choose a template first."}

def test_delete_list(auth_client, db_session, sample_list):
    response = auth_client.delete(f"/api/lists/{sample_list.id}")
    assert response.status_code == 204
    assert db_session.get(List, sample_list.id) is None
    assert db_session.query(ListItem).count() == 0

def test_delete_foreign_list(other_client, sample_list):
    assert other_client.delete(f"/api/lists/{sample_list.id}").status_code == 403

def test_replace_items(auth_client, sample_list, sample_library, fake_metadata):
    """Test replacing the items of a ranked list."""
    response = auth_client.put(f"/api/lists/{sample_list.id}/items", json={"items": [
        {"titleAsin": "B000000003", "position": 0},
        {"titleAsin": "B000000001", "position": 1},
    ]})
    assert response.status_code == 200
    data = response.json()
    assert [i["titleAsin"] for i in data["items"]] == ["B000000003", "B000000001"]
    assert data["itemCount"] == 2

def test_replace_items_requires_library(auth_client, sample_list, sample_library):
    response = auth_client.put(f"/api/lists/{sample_list.id}/items", json={"items": [
        {"titleAsin": "B000000001"}, {"titleAsin": "B777"}, {"titleAsin": "B888"},
    ]})
    assert response.status_code == 400
    assert response.json() == {"error": "Some ASINs are not in your library", "missing": ["B777", "B888"]}

@pytest.mark.parametrize("items, error", [
    ("B1", "Items must be an array"),
    ([{"titleAsin": "B000000001"}, {"titleAsin": "B000000001"}], "Duplicate ASIN found: B000000001"),
    ([{"titleAsin": "B000000001", "position": "first"}], "Position must be an integer (ASIN: B000000001)"),
    ([{"titleAsin": "B000000001", "tier": "S"}],
     "Tier must not be set for RECOMMENDATION list items (ASIN: B000000001)"),
])
def test_replace_items_validation(auth_client, sample_list, sample_library, items, error):
    response = auth_client.put(f"/api/lists/{sample_list.id}/items", json={"items": items})
    assert response.status_code == 400
    assert response.json() == {"error": error}

def test_replace_tier_items(auth_client, tier_list, sample_library, fake_metadata):
    data = auth_client.put(f"/api/lists/{tier_list.id}/items", json={"items": [
        {"titleAsin": "B000000001", "tier": "B", "position": 0},
        {"titleAsin": "B000000003", "tier": "S", "position": 1},
    ]}).json()
    assert [(i["titleAsin"], i["tier"]) for i in data["items"]] == [("B000000001", "B"), ("B000000003", "S")]

@pytest.mark.parametrize("item, error", [
    ({"titleAsin": "B000000001"}, "Tier is required for TIER list items (ASIN: B000000001)"),
    ({"titleAsin": "B000000001", "tier": "Z"}, 'Invalid tier "Z" for ASIN B000000001. Valid tiers: S, A, B'),
])
def test_replace_tier_items_validation(auth_client, tier_list, sample_library, item, error):
    response = auth_client.put(f"/api/lists/{tier_list.id}/items", json={"items": [item]})
    assert response.status_code == 400
    assert response.json() == {"error": error}

def test_regenerate_images(auth_client, db_session, sample_list):
    """Test synchronous regeneration returns the new version."""
    sample_list.image_template_id = "grid-3x3"
    db_session.commit()

    def fake_regenerate(session, lst):
        lst.image_version += 1
        lst.image_status = ImageStatus.READY.value
        return lst

    with patch("api.routes.lists.regenerate_list_images", side_effect=fake_regenerate):
        response = auth_client.post(f"/api/lists/{sample_list.id}/regenerate-images")
    assert response.status_code == 200
    assert response.json() == {"imageVersion": 1, "imageStatus": "READY"}

def test_regenerate_images_without_template(auth_client, sample_list):
    response = auth_client.post(f"/api/lists/{sample_list.id}/regenerate-images")
    assert response.status_code == 400
    assert response.json() == {"error": "No template selected. Choose a template first."}

def test_regenerate_images_cooldown(auth_client, db_session, sample_list):
    """Test that regenerating again within the cooldown is rate limited."""
    sample_list.image_template_id = "grid-3x3"
    sample_list.image_generated_at = datetime.now(UTC) - timedelta(seconds=5)
    db_session.commit()

    response = auth_client.post(f"/api/lists/{sample_list.id}/regenerate-images")
    assert response.status_code == 429
    body = response.json()
    assert body["error"] == "Please wait before regenerating"
    assert 0 < body["retryAfter"] <= 25

def test_regenerate_images_failure(auth_client, db_session, sample_list):
    sample_list.image_template_id = "grid-3x3"
    db_session.commit()
    with patch("api.routes.lists.regenerate_list_images", side_effect=StorageError("down")):
        response = auth_client.post(f"/api/lists/{sample_list.id}/regenerate-images")
    assert response.status_code == 500
    assert response.json() == {"error": "Image generation failed"}

def test_ready_list_exposes_image_urls(auth_client, ready_list):
    data = auth_client.get(f"/api/lists/{ready_list.id}").json()
    assert data["imageOgUrl"] == f"/api/lists/{ready_list.id}/og-image"
    assert data["imageSquareUrl"] == f"/api/lists/{ready_list.id}/square-image"
    assert data["imageVersion"] == 2

def test_og_image_redirect(client, ready_list):
    """Test that the public image route redirects to a presigned URL."""
    with patch("api.routes.lists.get_signed_image_url", return_value="https://s3/signed-og") as sign:
        response = client.get(f"/api/lists/{ready_list.id}/og-image", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://s3/signed-og"
    assert response.headers["cache-control"] == "public, max-age=3600"
    sign.assert_called_once_with(ready_list.image_og_key, expires_in=3600)

def test_square_image_redirect(client, ready_list):
    with patch("api.routes.lists.get_signed_image_url", return_value="https://s3/signed-square") as sign:
        response = client.get(f"/api/lists/{ready_list.id}/square-image", follow_redirects=False)
    assert response.headers["location"] == "https://s3/signed-square"
    sign.assert_called_once_with(ready_list.image_square_key, expires_in=3600)

def test_image_redirect_errors(client, sample_list, ready_list):
    assert client.get("/api/lists/missing/og-image").json() == {"error": "List not found"}

    ready_list.image_status = ImageStatus.GENERATING.value
    response = client.get(f"/api/lists/{ready_list.id}/og-image")
    assert response.status_code == 404
    assert response.json() == {"error": "No image available"}

def test_image_redirect_storage_failure(client, ready_list):
    with patch("api.routes.lists.get_signed_image_url", side_effect=StorageError("down")):
        response = client.get(f"/api/lists/{ready_list.id}/og-image", follow_redirects=False)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to serve image"}

def test_templates(auth_client):
    templates = auth_client.get("/api/templates").json()["templates"]
    assert len(templates) == 5
    tier_only = auth_client.get("/api/templates", params={"listType": "TIER"}).json()["templates"]
    assert [t["id"] for t in tier_only] == ["tier-list"]
    assert auth_client.get("/api/templates", params={"listType": "SHELF"}).status_code == 400
