# tests/conftest.py
import sys
import pytest
from pathlib import Path
from unittest.mock import patch

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from fastapi.testclient import TestClient

from core import config
from core.auth import create_session_token
from core.sa.database import Database, get_db
from core.sa.models import User, LibraryEntry, List, ListItem, ListType
from core.services import metadata as metadata_service

SAMPLE_METADATA = {
    "B000000001": {
        "asin": "B000000001",
        "title": "Project Hail Mary",
        "subtitle": None,
        "authors": [{"asin": "A1", "name": "Andy Weir"}],
        "narrators": [{"name": "Ray Porter"}],
        "image": "https://covers.example.com/B000000001.jpg",
        "runtimeLengthMin": 970,
    },
    "B000000002": {
        "asin": "B000000002",
        "title": "Dungeon Crawler Carl",
        "subtitle": "Book 1",
        "authors": [{"asin": "A2", "name": "Matt Dinniman"}],
        "narrators": [{"name": "Jeff Hays"}],
        "image": "https://covers.example.com/B000000002.jpg",
        "runtimeLengthMin": 825,
    },
}

@pytest.fixture
def database():
    """Fresh in-memory database per test"""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.engine.dispose()

@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(autouse=True)
def clear_metadata_cache():
    metadata_service.clear_cache()
    yield
    metadata_service.clear_cache()

@pytest.fixture
def fake_metadata():
    """Serve title metadata from SAMPLE_METADATA instead of Audnexus"""
    def lookup(asin, *args, **kwargs):
        return SAMPLE_METADATA.get(asin)

    with patch("core.services.metadata.fetch_title_metadata", side_effect=lookup) as mocked:
        yield mocked

@pytest.fixture
def sample_user(db_session):
    """Create a sample user for testing."""
    user = User(email="reader@example.com", name="Test Reader")
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture
def other_user(db_session):
    user = User(email="other@example.com", name="Other Reader", username="other-reader")
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture
def admin_user(db_session):
    user = User(email="admin@example.com", name="Admin", is_admin=True)
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture
def sample_library(db_session, sample_user):
    """Two owned titles and one wishlist title for the sample user."""
    entries = [
        LibraryEntry(user_id=sample_user.id, title_asin="B000000001", source="LIBRARY",
                     progress=100, status="Finished"),
        LibraryEntry(user_id=sample_user.id, title_asin="B000000002", source="LIBRARY",
                     progress=40, status="In Progress"),
        LibraryEntry(user_id=sample_user.id, title_asin="B000000003", source="WISHLIST"),
    ]
    db_session.add_all(entries)
    db_session.commit()
    return entries

@pytest.fixture
def sample_list(db_session, sample_user):
    """A ranked list whose items were inserted out of position order."""
    lst = List(user_id=sample_user.id, name="Best of 2024", type=ListType.RECOMMENDATION.value)
    db_session.add(lst)
    db_session.commit()
    db_session.add_all([
        ListItem(list_id=lst.id, title_asin="B000000002", position=1),
        ListItem(list_id=lst.id, title_asin="B000000001", position=0),
    ])
    db_session.commit()
    return lst

@pytest.fixture
def tier_list(db_session, sample_user):
    lst = List(user_id=sample_user.id, name="Sci-fi tiers", type=ListType.TIER.value,
               tiers=["S", "A", "B"], image_template_id="tier-list")
    db_session.add(lst)
    db_session.commit()
    db_session.add_all([
        ListItem(list_id=lst.id, title_asin="B000000002", position=0, tier="A"),
        ListItem(list_id=lst.id, title_asin="B000000001", position=1, tier="S"),
    ])
    db_session.commit()
    return lst

@pytest.fixture
def app(db_session):
    """The API with get_db bound to the test session"""
    from api.main import app as fastapi_app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()

@pytest.fixture
def client(app):
    return TestClient(app)

def session_cookie(user: User) -> dict:
    return {config.SESSION_COOKIE_NAME: create_session_token(user.id, user.email, user.is_admin)}

@pytest.fixture
def auth_client(app, sample_user):
    """Client signed in as the sample user"""
    return TestClient(app, cookies=session_cookie(sample_user))

@pytest.fixture
def other_client(app, other_user):
    return TestClient(app, cookies=session_cookie(other_user))

@pytest.fixture
def admin_client(app, admin_user):
    return TestClient(app, cookies=session_cookie(admin_user))
