"""Lookups shared by the application services"""

import logging
from typing import Callable, Optional, TypeVar

from kanban_boards.failures import conflict, not_found
from kanban_boards.models.board import Board
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.execution import attempt
from kanban_boards.services.validation import CommandValidator, MessageResolver, command_validator, message_resolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoardServiceBase:
    """Validation, lookups and the archived-board guard"""

    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        validator: CommandValidator = command_validator,
        messages: MessageResolver = message_resolver,
    ):
        self.board_repository = board_repository
        self.user_repository = user_repository
        self.validator = validator
        self.messages = messages

    def _validate(self, command) -> Optional[Result]:
        """Return a failed result for an invalid command, None otherwise"""
        result = self.validator.validate(command)
        if result.is_invalid:
            logger.warning(f"Rejected {type(command).__name__}: {[v.field for v in result.violations]}")
            return Result.fail(self.validator.to_failure(result))
        return None

    def _find(
        self, lookup: Callable[[], Optional[T]], message_key: str, error_code: str, context: dict
    ) -> Result[T]:
        found = attempt(lookup, f"{error_code}_LOOKUP_ERROR", context)
        if found.is_failure:
            return found
        if found.value is None:
            return Result.fail(not_found(self.messages.get_message(message_key), error_code, context))
        return found

    def _require_user(self, user_id: Optional[str]) -> Result:
        return self._find(
            lambda: self.user_repository.find_by_id(user_id) if user_id else None,
            "validation.user.not.found",
            "USER_NOT_FOUND",
            {"userId": user_id},
        )

    def _find_board(self, board_id: str) -> Result[Board]:
        return self._find(
            lambda: self.board_repository.find_by_id(board_id),
            "validation.board.not.found",
            "BOARD_NOT_FOUND",
            {"boardId": board_id},
        )

    def _reject_archived(self, board: Board) -> Optional[Result]:
        if board.is_archived:
            logger.warning(f"Rejected change to archived board {board.board_id}")
            return Result.fail(conflict(
                self.messages.get_message("validation.board.archived.modification.denied"),
                "BOARD_ARCHIVED",
                {"boardId": board.board_id},
            ))
        return None
