"""Pytest configuration and fixtures."""

import os

# Must be set before the app (and its engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from pantry_assistant.api.dependencies import get_conversation_store, get_llm_service  # noqa: E402
from pantry_assistant.database import Base, get_db  # noqa: E402
from pantry_assistant.main import app  # noqa: E402
from pantry_assistant.models.pantry import PantryItem  # noqa: E402
from pantry_assistant.services.auth import create_access_token  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id."""

    def __init__(self, *args, user_id: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id


SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from pantry_assistant import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def mock_llm():
    """LLM service whose tool call returns whatever the test sets."""
    llm = MagicMock()
    llm.generate_tool_call = AsyncMock(return_value={"action": "none", "speak": "Okay."})
    return llm


@pytest.fixture(scope="function")
def client(db, mock_llm):
    """Create a test client with database and LLM overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_service] = lambda: mock_llm
    get_conversation_store.cache_clear()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    get_conversation_store.cache_clear()


@pytest.fixture
def auth_headers():
    """Bearer token for user 1."""
    token = create_access_token(1)
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=1)


@pytest.fixture
def make_pantry_item(db):
    """Factory for pantry rows."""

    def _make(name: str, category: str = "fridge", user_id: int = 1, **kwargs) -> PantryItem:
        item = PantryItem(user_id=user_id, name=name, category=category, **kwargs)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make
