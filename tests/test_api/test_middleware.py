# tests/test_api/test_middleware.py

import pytest
from api.middleware import page_gate_redirect

READER = {"sub": "u1", "isAdmin": False}
ADMIN = {"sub": "u2", "isAdmin": True}

@pytest.mark.parametrize("path, claims, expected", [
    ("/api/lists", None, None),
    ("/api/admin/users", READER, None),
    ("/admin", None, "/api/auth/signin?callbackUrl=%2Fadmin"),
    ("/admin/users", READER, "/library"),
    ("/admin/users", ADMIN, None),
    ("/dashboard", None, "/signin?callbackUrl=%2Fdashboard"),
    ("/library/wishlist", None, "/signin?callbackUrl=%2Flibrary%2Fwishlist"),
    ("/dashboard", READER, None),
    ("/signin", READER, "/dashboard"),
    ("/signin", None, None),
    ("/reader/lists/abc", None, None),
])
def test_page_gate_redirect(path, claims, expected):
    assert page_gate_redirect(path, claims) == expected

def test_gate_redirects_page_requests(client):
    response = client.get("/dashboard", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/signin?callbackUrl=%2Fdashboard"

def test_gate_redirects_non_admins(auth_client):
    response = auth_client.get("/admin", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/library"

def test_gate_leaves_api_to_routes(client):
    """Test that API routes answer 401 themselves instead of redirecting."""
    response = client.get("/api/lists", follow_redirects=False)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

def test_cors_allows_extension_origin(client):
    response = client.options(
        "/api/sync/token",
        headers={
            "Origin": "chrome-extension://abcdefghijklmnop",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "chrome-extension://abcdefghijklmnop"
