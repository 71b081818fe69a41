# tests/test_auth_tokens.py

import pytest
import jwt
from datetime import datetime, timedelta, UTC
from unittest.mock import patch, MagicMock

from core import config
from core.auth import (
    create_session_token,
    decode_session_token,
    SessionError,
    generate_sync_token,
    verify_sync_token,
    extract_bearer_token,
    SyncTokenError,
    is_admin,
    require_admin,
    AdminRequiredError,
)
from core.auth.session import sign_state, verify_state
from core.auth import oauth
from core.sa.models import User

def test_session_token_round_trip():
    """Test that a session token carries the user id, email and admin flag."""
    token = create_session_token("user-1", "reader@example.com", is_admin=True)
    claims = decode_session_token(token)
    assert claims["sub"] == "user-1"
    assert claims["email"] == "reader@example.com"
    assert claims["isAdmin"] is True

def test_expired_session_token():
    issued = datetime.now(UTC) - timedelta(seconds=config.SESSION_MAX_AGE_SECONDS + 60)
    token = create_session_token("user-1", "reader@example.com", now=issued)
    with pytest.raises(SessionError, match="Session expired"):
        decode_session_token(token)

def test_tampered_session_token():
    token = jwt.encode({"sub": "user-1", "exp": datetime.now(UTC) + timedelta(hours=1)}, "wrong", algorithm="HS256")
    with pytest.raises(SessionError, match="Invalid session"):
        decode_session_token(token)

def test_oauth_state_round_trip():
    assert verify_state(sign_state("/library")) == "/library"
    with pytest.raises(SessionError):
        verify_state("garbage")

def test_generate_sync_token():
    """Test that a sync token is signed with the sync scope and a 15 minute expiry."""
    now = datetime(2026, 1, 1, 12, 0, 0, 500, tzinfo=UTC)
    token, jti, expires_at = generate_sync_token("user-1", now=now)
    assert expires_at == datetime(2026, 1, 1, 12, 15, 0, tzinfo=UTC)

    payload = jwt.decode(token, config.JWT_SECRET, algorithms=["HS256"], options={"verify_exp": False, "verify_iat": False})
    assert payload["sub"] == "user-1"
    assert payload["jti"] == jti
    assert payload["scope"] == "sync:upload"
    assert payload["exp"] - payload["iat"] == 15 * 60

def test_verify_sync_token():
    token, jti, _ = generate_sync_token("user-1")
    payload = verify_sync_token(token)
    assert payload["jti"] == jti

def test_verify_expired_sync_token():
    token, _, _ = generate_sync_token("user-1", now=datetime.now(UTC) - timedelta(minutes=16))
    with pytest.raises(SyncTokenError, match="Token expired"):
        verify_sync_token(token)

def test_verify_sync_token_wrong_secret():
    token = jwt.encode({"sub": "u", "jti": "j", "scope": "sync:upload",
                        "exp": datetime.now(UTC) + timedelta(minutes=5)}, "other-secret", algorithm="HS256")
    with pytest.raises(SyncTokenError, match="Invalid token"):
        verify_sync_token(token)

def test_verify_sync_token_wrong_scope():
    """Test that a correctly signed token with another scope is rejected."""
    token = jwt.encode({"sub": "u", "jti": "j", "scope": "admin",
                        "exp": datetime.now(UTC) + timedelta(minutes=5)}, config.JWT_SECRET, algorithm="HS256")
    with pytest.raises(SyncTokenError, match="Invalid token scope"):
        verify_sync_token(token)

@pytest.mark.parametrize("header, expected", [
    ("Bearer abc.def", "abc.def"),
    (None, None),
    ("", None),
    ("Bearer", None),
    ("Bearer ", None),
    ("bearer abc", None),
    ("Basic abc", None),
    ("Bearer a b", None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected

def test_admin_checks():
    admin = User(email="a@example.com", is_admin=True)
    reader = User(email="r@example.com", is_admin=False)
    assert is_admin(admin) is True
    assert is_admin(reader) is False
    assert is_admin(None) is False
    assert require_admin(admin) is admin
    with pytest.raises(AdminRequiredError):
        require_admin(reader)

def test_authorization_url_requires_client_id(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", "")
    with pytest.raises(oauth.OAuthError):
        oauth.build_authorization_url("state")

def test_authorization_url(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", "client-123")
    url = oauth.build_authorization_url("signed-state")
    assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
    assert "client_id=client-123" in url
    assert "state=signed-state" in url

def test_exchange_code_failure():
    """Test that a failed token exchange surfaces as OAuthError."""
    response = MagicMock()
    response.raise_for_status.side_effect = oauth.requests.HTTPError("400")
    with patch("core.auth.oauth.requests.post", return_value=response):
        with pytest.raises(oauth.OAuthError, match="Token exchange failed"):
            oauth.exchange_code("bad-code")

def test_exchange_code_returns_id_token():
    response = MagicMock()
    response.json.return_value = {"id_token": "id.token.value"}
    with patch("core.auth.oauth.requests.post", return_value=response):
        assert oauth.exchange_code("code") == "id.token.value"

def test_is_configured_admin(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_EMAIL", "Boss@Example.com ")
    assert oauth.is_configured_admin("boss@example.com") is True
    assert oauth.is_configured_admin("reader@example.com") is False
    monkeypatch.setattr(config, "ADMIN_EMAIL", "")
    assert oauth.is_configured_admin("boss@example.com") is False
