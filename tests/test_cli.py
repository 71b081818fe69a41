# tests/test_cli.py

import json
import pytest
from unittest.mock import patch
from click.testing import CliRunner

from cli.main import cli
from core.images.covers import generate_placeholder_covers
from core.sa.database import Database
from core.sa.models import User, LibraryEntry, List, SyncHistory

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def db_url(tmp_path):
    """File database shared by the CLI invocations of one test"""
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    database = Database(url)
    database.init_db()
    database.engine.dispose()
    return url

@pytest.fixture
def invoke(runner, db_url):
    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--database-url", db_url, *args], **kwargs)
    return _invoke

@pytest.fixture
def cli_db(db_url):
    database = Database(db_url)
    yield database
    database.engine.dispose()

def test_db_init(runner, tmp_path):
    url = f"sqlite:///{tmp_path / 'fresh.db'}"
    result = runner.invoke(cli, ["--database-url", url, "db", "init"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output

def test_db_drop_requires_confirmation(invoke):
    result = invoke("db", "drop", input="n\n")
    assert result.exit_code != 0

    result = invoke("db", "drop", "--yes")
    assert result.exit_code == 0
    assert "All tables dropped" in result.output

def test_users_create_and_list(invoke):
    """Test creating users and listing them."""
    result = invoke("users", "create", "reader@example.com", "--name", "Reader")
    assert result.exit_code == 0
    assert "Created user" in result.output

    result = invoke("users", "create", "reader@example.com")
    assert result.exit_code != 0
    assert "already exists" in result.output

    result = invoke("users", "list")
    assert result.exit_code == 0
    assert "reader@example.com" in result.output

def test_users_list_empty(invoke):
    result = invoke("users", "list")
    assert "No users found" in result.output

def test_users_promote_and_demote(invoke, cli_db):
    invoke("users", "create", "reader@example.com")

    result = invoke("users", "promote", "reader@example.com")
    assert result.exit_code == 0
    assert "now an admin" in result.output
    with cli_db.get_db() as session:
        assert session.query(User).one().is_admin is True

    result = invoke("users", "demote", "reader@example.com")
    assert "no longer an admin" in result.output
    with cli_db.get_db() as session:
        assert session.query(User).one().is_admin is False

def test_users_promote_unknown(invoke):
    result = invoke("users", "promote", "nobody@example.com")
    assert result.exit_code != 0
    assert "No user with email nobody@example.com" in result.output

def test_templates_list(invoke):
    result = invoke("templates", "list")
    assert result.exit_code == 0
    for template_id in ("grid-3x3", "hero", "hero-plus", "minimal-banner", "tier-list"):
        assert template_id in result.output

    result = invoke("templates", "list", "--list-type", "TIER")
    assert "tier-list" in result.output
    assert "grid-3x3" not in result.output

def test_templates_preview(invoke, tmp_path):
    """Test writing a preview PNG to disk."""
    output = tmp_path / "preview.png"
    result = invoke("templates", "preview", "minimal-banner", "--size", "square", "--output", str(output))
    assert result.exit_code == 0
    assert "1080x1080" in result.output
    assert output.read_bytes().startswith(b"\x89PNG")

def test_templates_preview_unknown(invoke, tmp_path):
    result = invoke("templates", "preview", "nope", "--output", str(tmp_path / "x.png"))
    assert result.exit_code != 0
    assert "Template not found: nope" in result.output

def test_sync_import(invoke, cli_db, tmp_path):
    """Test importing a library export file for a user."""
    with cli_db.get_db() as session:
        user = User(email="reader@example.com")
        session.add(user)
        session.flush()
        user_id = user.id

    export = tmp_path / "library.json"
    export.write_text(json.dumps({"titles": [
        {"asin": "B1", "title": "One", "authors": [], "source": "LIBRARY", "dateAdded": "2024-01-01",
         "listeningProgress": 100},
        {"asin": "B2", "title": "Two", "authors": [], "source": "WISHLIST", "dateAdded": "2024-01-01"},
    ]}))

    result = invoke("sync", "import", user_id, str(export))
    assert result.exit_code == 0, result.output
    assert "Imported: 2" in result.output

    with cli_db.get_db() as session:
        assert session.query(LibraryEntry).count() == 2
        assert session.query(SyncHistory).one().titles_imported == 2

def test_sync_import_invalid_file(invoke, tmp_path):
    export = tmp_path / "library.json"
    export.write_text(json.dumps({"titles": "nope"}))
    result = invoke("sync", "import", "someone", str(export))
    assert result.exit_code != 0
    assert "Missing or invalid titles array" in result.output

def test_sync_import_unknown_user(invoke, tmp_path):
    export = tmp_path / "library.json"
    export.write_text(json.dumps({"titles": []}))
    result = invoke("sync", "import", "missing", str(export))
    assert result.exit_code != 0
    assert "User not found: missing" in result.output

def test_lists_regenerate(invoke, cli_db, fake_metadata):
    """Test regenerating a list's images from the command line."""
    with cli_db.get_db() as session:
        user = User(email="reader@example.com")
        session.add(user)
        session.flush()
        lst = List(user_id=user.id, name="Favourites", type="RECOMMENDATION", image_template_id="hero")
        session.add(lst)
        session.flush()
        list_id = lst.id

    with patch("core.images.generator.fetch_covers",
               side_effect=lambda urls, specs: generate_placeholder_covers(specs)), \
         patch("core.services.list_images.upload_image", side_effect=lambda key, data: key):
        result = invoke("lists", "regenerate", list_id)

    assert result.exit_code == 0, result.output
    assert "Images ready" in result.output
    assert f"lists/{list_id}/v1/og.png" in result.output

def test_lists_regenerate_without_template(invoke, cli_db):
    with cli_db.get_db() as session:
        user = User(email="reader@example.com")
        session.add(user)
        session.flush()
        lst = List(user_id=user.id, name="Favourites", type="RECOMMENDATION")
        session.add(lst)
        session.flush()
        list_id = lst.id

    result = invoke("lists", "regenerate", list_id)
    assert result.exit_code != 0
    assert "No template selected" in result.output

def test_lists_regenerate_unknown(invoke):
    result = invoke("lists", "regenerate", "missing")
    assert result.exit_code != 0
    assert "List not found: missing" in result.output
