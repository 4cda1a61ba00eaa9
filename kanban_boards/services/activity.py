"""Activity recording and reads"""

import logging
import threading
from typing import Any, Dict, List, Optional

from kanban_boards.models.activity import Activity, ActivityType
from kanban_boards.repositories.activity_repository import ActivityRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.execution import attempt, best_effort
from kanban_boards.services.permissions import BoardPermissionService, denied_by
from kanban_boards.services.validation import MessageResolver, message_resolver

logger = logging.getLogger(__name__)


class NameLookup:
    """Display names for activity payloads, cached per process"""

    def __init__(self, user_repository: UserRepository, board_repository: BoardRepository):
        self.user_repository = user_repository
        self.board_repository = board_repository
        self._user_names: Dict[str, str] = {}
        self._board_names: Dict[str, str] = {}
        self._lock = threading.Lock()

    def user_name(self, user_id: str) -> str:
        with self._lock:
            cached = self._user_names.get(user_id)
        if cached is not None:
            return cached
        user = self.user_repository.find_by_id(user_id)
        name = user.display_name if user else user_id
        with self._lock:
            self._user_names[user_id] = name
        return name

    def board_name(self, board_id: str) -> str:
        with self._lock:
            cached = self._board_names.get(board_id)
        if cached is not None:
            return cached
        board = self.board_repository.find_by_id(board_id)
        name = board.title if board else board_id
        with self._lock:
            self._board_names[board_id] = name
        return name

    def forget_user(self, user_id: str) -> None:
        """Drop a cached display name after the user's profile changes"""
        with self._lock:
            self._user_names.pop(user_id, None)

    def forget_board(self, board_id: str) -> None:
        """Drop a cached board title after a rename or delete"""
        with self._lock:
            self._board_names.pop(board_id, None)


class ActivityHelper:
    """Fire-and-forget activity logging

    Nothing raised while building or storing an entry reaches the caller.
    """

    def __init__(self, activity_repository: ActivityRepository, names: NameLookup):
        self.activity_repository = activity_repository
        self.names = names

    def log(
        self,
        type: ActivityType,
        actor_id: str,
        payload: Optional[Dict[str, Any]] = None,
        board_id: Optional[str] = None,
        list_id: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> Optional[Activity]:
        def record() -> Activity:
            data = {"actorName": self.names.user_name(actor_id)}
            if board_id:
                data["boardName"] = self.names.board_name(board_id)
            data.update(payload or {})
            activity = Activity.create(type, actor_id, data, board_id=board_id, list_id=list_id, card_id=card_id)
            return self.activity_repository.save(activity)

        return best_effort(record, f"log {type.value} activity")

    def user_name(self, user_id: str) -> str:
        name = best_effort(lambda: self.names.user_name(user_id), f"resolve name of user {user_id}")
        return name or user_id


class ActivityService:
    def __init__(
        self,
        activity_repository: ActivityRepository,
        permission_service: BoardPermissionService,
        messages: MessageResolver = message_resolver,
    ):
        self.activity_repository = activity_repository
        self.permission_service = permission_service
        self.messages = messages

    def get_board_activity(self, board_id: str, user_id: str, limit: int = 50) -> Result[List[Activity]]:
        failure = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if failure:
            return Result.fail(failure)
        return attempt(lambda: self.activity_repository.find_by_board_id(board_id, limit), "ACTIVITY_LOOKUP_ERROR")
