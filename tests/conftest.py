"""Shared test fixtures for the Kanban Boards tests"""

import os
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the app
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_PATH"] = ""
os.environ["ENVIRONMENT"] = "development"

from kanban_boards.config import Settings  # noqa: E402
from kanban_boards.dependencies import build_container, get_container  # noqa: E402
from kanban_boards.result import Result  # noqa: E402
from tests.factories import create_user  # noqa: E402


# =============================================================================
# Mock repositories and collaborators
# =============================================================================

@pytest.fixture
def repos():
    """MagicMock repositories with empty defaults.

    Users exist for any non-empty id unless a test says otherwise.
    """
    mocks = SimpleNamespace(
        users=MagicMock(),
        boards=MagicMock(),
        board_members=MagicMock(),
        lists=MagicMock(),
        cards=MagicMock(),
        labels=MagicMock(),
        comments=MagicMock(),
        activities=MagicMock(),
    )
    mocks.users.find_by_id.side_effect = lambda user_id: create_user(user_id) if user_id else None
    mocks.boards.find_by_id.return_value = None
    mocks.board_members.find_by_board_id_and_user_id.return_value = None
    mocks.board_members.count_active_by_board_id.return_value = 2
    mocks.lists.find_by_id.return_value = None
    mocks.lists.count_by_board_id.return_value = 0
    mocks.lists.find_max_position_by_board_id.return_value = None
    mocks.lists.find_by_board_id_and_position_greater_than.return_value = []
    mocks.lists.find_by_board_id_order_by_position.return_value = []
    mocks.cards.count_by_board_id.return_value = 0
    mocks.cards.count_by_list_id.return_value = 0
    mocks.cards.find_by_list_id_order_by_position.return_value = []

    for repo in vars(mocks).values():
        repo.save.side_effect = lambda entity: entity
        repo.save_all.side_effect = lambda entities: list(entities)
    return mocks


@pytest.fixture
def permissions():
    """Permission service mock that allows everything"""
    mock = MagicMock()
    for name in ("can_read", "can_write", "can_admin", "can_manage_members", "can_archive", "can_toggle_star", "can_delete"):
        getattr(mock, name).return_value = Result.ok(True)
    return mock


@pytest.fixture
def activity():
    """Activity helper mock; display names resolve to the user id"""
    mock = MagicMock()
    mock.user_name.side_effect = lambda user_id: user_id
    return mock


# =============================================================================
# In-memory container
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_path="", secret_key="test-secret-key-for-testing-only")


@pytest.fixture
def container(test_settings):
    """Fully wired services on an in-memory TinyDB"""
    built = build_container(test_settings)
    yield built
    built.db.close()


@pytest.fixture
def owner(container):
    return container.users.save(create_user("owner-1", first_name="Olive", last_name="Owner"))


@pytest.fixture
def editor(container):
    return container.users.save(create_user("editor-1", first_name="Eddie", last_name="Editor"))


@pytest.fixture
def viewer(container):
    return container.users.save(create_user("viewer-1", first_name="Vera", last_name="Viewer"))


# =============================================================================
# API client
# =============================================================================

@pytest_asyncio.fixture
async def test_client(container) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client calling the app in-process"""
    from kanban_boards.main import app

    app.dependency_overrides[get_container] = lambda: container
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user id"""
    from kanban_boards.auth.jwt import create_access_token

    def build(user_id: str, email: str = None) -> dict:
        token = create_access_token(data={"sub": user_id, "email": email or f"{user_id}@example.com"})
        return {"Authorization": f"Bearer {token}"}

    return build
