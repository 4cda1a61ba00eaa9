"""Activity helper, name cache and activity query tests"""

import pytest

from kanban_boards.failures import PermissionDenied
from kanban_boards.models.activity import ActivityType
from kanban_boards.result import Result
from kanban_boards.services.activity import ActivityHelper, ActivityService, NameLookup
from kanban_boards.services.validation import MessageResolver
from tests.factories import create_board, create_user


@pytest.fixture
def names(repos):
    return NameLookup(repos.users, repos.boards)


class TestNameLookup:
    """Test cached display names"""

    def test_user_name_is_cached(self, names, repos):
        assert names.user_name("u1") == "Test User"
        assert names.user_name("u1") == "Test User"

        repos.users.find_by_id.assert_called_once_with("u1")

    def test_forget_user_refreshes_name(self, names, repos):
        names.user_name("u1")
        repos.users.find_by_id.side_effect = lambda user_id: create_user(user_id, first_name="Renamed")

        names.forget_user("u1")

        assert names.user_name("u1") == "Renamed User"

    def test_forget_board_refreshes_title(self, names, repos):
        repos.boards.find_by_id.return_value = create_board(title="Old")
        assert names.board_name("b1") == "Old"
        repos.boards.find_by_id.return_value = create_board(title="New")

        names.forget_board("b1")

        assert names.board_name("b1") == "New"

    def test_unknown_user_falls_back_to_id(self, names, repos):
        repos.users.find_by_id.side_effect = lambda user_id: None

        assert names.user_name("ghost") == "ghost"


class TestActivityHelper:
    """Test fire-and-forget logging"""

    def test_payload_carries_names(self, names, repos):
        repos.boards.find_by_id.return_value = create_board(title="Roadmap")
        helper = ActivityHelper(repos.activities, names)

        activity = helper.log(ActivityType.LIST_CREATE, "u1", {"listTitle": "To Do"}, board_id="b1")

        assert activity.payload == {"actorName": "Test User", "boardName": "Roadmap", "listTitle": "To Do"}

    def test_storage_failure_is_swallowed(self, names, repos):
        repos.activities.save.side_effect = RuntimeError("disk full")
        helper = ActivityHelper(repos.activities, names)

        assert helper.log(ActivityType.BOARD_CREATE, "u1", board_id="b1") is None


class TestActivityService:
    """Test get_board_activity"""

    def test_denial_uses_resolved_message(self, repos, permissions):
        permissions.can_read.return_value = Result.ok(False)
        messages = MessageResolver({"validation.board.access.denied": "no access to this board"})
        service = ActivityService(repos.activities, permissions, messages)

        result = service.get_board_activity("b1", "stranger")

        assert isinstance(result.failure, PermissionDenied)
        assert result.failure.message == "no access to this board"
        repos.activities.find_by_board_id.assert_not_called()

    def test_resolver_failure_passed_through(self, repos, permissions):
        failure = PermissionDenied(message="member inactive", error_code="MEMBER_INACTIVE")
        permissions.can_read.return_value = Result.fail(failure)
        service = ActivityService(repos.activities, permissions)

        assert service.get_board_activity("b1", "u1").failure is failure

    def test_limit_is_forwarded(self, repos, permissions):
        repos.activities.find_by_board_id.return_value = []
        service = ActivityService(repos.activities, permissions)

        result = service.get_board_activity("b1", "u1", limit=5)

        assert result.value == []
        repos.activities.find_by_board_id.assert_called_once_with("b1", 5)
