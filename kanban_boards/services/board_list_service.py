"""Board list service"""

import logging
from typing import List

from kanban_boards.models.activity import ActivityType
from kanban_boards.models.board import Board
from kanban_boards.models.board_list import BoardList
from kanban_boards.models.commands import (
    CreateBoardListCommand,
    DeleteBoardListCommand,
    UpdateBoardListCommand,
    UpdateBoardListPositionCommand,
)
from kanban_boards.repositories.board_list_repository import BoardListRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.card_repository import CardRepository
from kanban_boards.repositories.comment_repository import CommentRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.activity import ActivityHelper
from kanban_boards.services.base import BoardServiceBase
from kanban_boards.services.execution import attempt, best_effort
from kanban_boards.services.permissions import BoardPermissionService, denied_by
from kanban_boards.services.policies import BoardListPolicy
from kanban_boards.services.positions import ListPositionManager, board_lock

logger = logging.getLogger(__name__)


class BoardListService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        board_list_repository: BoardListRepository,
        card_repository: CardRepository,
        comment_repository: CommentRepository,
        permission_service: BoardPermissionService,
        position_manager: ListPositionManager,
        policy: BoardListPolicy,
        activity: ActivityHelper,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.board_list_repository = board_list_repository
        self.card_repository = card_repository
        self.comment_repository = comment_repository
        self.permission_service = permission_service
        self.position_manager = position_manager
        self.policy = policy
        self.activity = activity

    def _find_list(self, list_id: str) -> Result[BoardList]:
        return self._find(
            lambda: self.board_list_repository.find_by_id(list_id),
            "validation.boardlist.not.found",
            "LIST_NOT_FOUND",
            {"listId": list_id},
        )

    def _writable_board(self, board_id: str, user_id: str, denied_key: str, denied_code: str) -> Result[Board]:
        found = self._find_board(board_id)
        if found.is_failure:
            return found
        board = found.value

        denied = denied_by(
            self.permission_service.can_write(board_id, user_id),
            self.messages.get_message(denied_key),
            denied_code,
            {"boardId": board_id},
        )
        if denied:
            logger.warning(f"User {user_id} may not change lists of board {board_id}")
            return Result.fail(denied)

        archived = self._reject_archived(board)
        if archived:
            return archived
        return Result.ok(board)

    def _list_and_board(self, list_id: str, user_id: str, denied_key: str, denied_code: str) -> Result[tuple]:
        found = self._find_list(list_id)
        if found.is_failure:
            return found
        board_list = found.value
        board = self._writable_board(board_list.board_id, user_id, denied_key, denied_code)
        if board.is_failure:
            return board
        return Result.ok((board_list, board.value))

    # =========================================================================
    # Commands
    # =========================================================================

    def create_board_list(self, command: CreateBoardListCommand) -> Result[BoardList]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        board = self._writable_board(
            command.board_id, command.user_id, "validation.board.modification.access.denied", "UNAUTHORIZED_ACCESS"
        )
        if board.is_failure:
            return board

        title = command.title.strip()
        with board_lock(command.board_id):
            count = attempt(lambda: self.board_list_repository.count_by_board_id(command.board_id), "LIST_LOOKUP_ERROR")
            if count.is_failure:
                return count

            violation = self.policy.check_creation(count.value) or self.policy.check_title(title)
            if violation:
                logger.warning(f"List creation on board {command.board_id} rejected: {violation.error_code}")
                return Result.fail(violation)

            position = attempt(lambda: self.position_manager.next_position(command.board_id), "LIST_LOOKUP_ERROR")
            if position.is_failure:
                return position

            board_list = BoardList.create(
                command.board_id, title, position.value, description=command.description, color=command.color
            )
            saved = attempt(lambda: self.board_list_repository.save(board_list), "LIST_SAVE_ERROR")
            if saved.is_failure:
                return saved

        logger.info(f"List created: {board_list.list_id} on board {command.board_id} at {board_list.position}")
        self.activity.log(
            ActivityType.LIST_CREATE,
            command.user_id,
            {"listTitle": board_list.title, "position": board_list.position},
            board_id=command.board_id,
            list_id=board_list.list_id,
        )
        return Result.ok(saved.value)

    def update_board_list(self, command: UpdateBoardListCommand) -> Result[BoardList]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._list_and_board(
            command.list_id, command.user_id, "validation.board.modification.access.denied", "UNAUTHORIZED_ACCESS"
        )
        if found.is_failure:
            return found
        board = found.value[1]

        new_title = command.title.strip() if command.title is not None else None
        if new_title is not None:
            violation = self.policy.check_title(new_title)
            if violation:
                return Result.fail(violation)

        with board_lock(board.board_id):
            # A move may have renumbered the list since it was first read
            current = self._find_list(command.list_id)
            if current.is_failure:
                return current
            board_list = current.value

            old_title = board_list.title
            if new_title is not None and new_title != board_list.title:
                board_list.update_title(new_title)
            if command.description is not None:
                board_list.update_description(command.description)
            if command.color is not None:
                board_list.update_color(command.color)

            saved = attempt(lambda: self.board_list_repository.save(board_list), "LIST_SAVE_ERROR")
            if saved.is_failure:
                return saved

        logger.info(f"List updated: {board_list.list_id}")
        if board_list.title != old_title:
            self.activity.log(
                ActivityType.LIST_RENAME,
                command.user_id,
                {"oldTitle": old_title, "newTitle": board_list.title},
                board_id=board.board_id,
                list_id=board_list.list_id,
            )
        return Result.ok(saved.value)

    def delete_board_list(self, command: DeleteBoardListCommand) -> Result[None]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._list_and_board(
            command.list_id, command.user_id, "validation.boardlist.delete.access.denied", "LIST_DELETE_ACCESS_DENIED"
        )
        if found.is_failure:
            return found
        board = found.value[1]

        with board_lock(board.board_id):
            current = self._find_list(command.list_id)
            if current.is_failure:
                return current
            board_list = current.value

            card_count = attempt(lambda: self.card_repository.count_by_list_id(board_list.list_id), "CARD_LOOKUP_ERROR")
            if card_count.is_failure:
                return card_count
            card_ids = attempt(
                lambda: [card.card_id for card in self.card_repository.find_by_list_id_order_by_position(board_list.list_id)],
                "CARD_LOOKUP_ERROR",
            )
            if card_ids.is_failure:
                return card_ids

            deleted = attempt(lambda: self.card_repository.delete_by_list_id(board_list.list_id), "CARD_DELETE_ERROR")
            if deleted.is_failure:
                return deleted

            deleted = attempt(lambda: self.board_list_repository.delete_by_id(board_list.list_id), "LIST_DELETE_ERROR")
            if deleted.is_failure:
                return deleted

            self.position_manager.close_gap(board.board_id, board_list.position)

        best_effort(
            lambda: self.comment_repository.delete_by_card_ids(card_ids.value),
            f"remove comments of list {board_list.list_id}",
        )
        logger.info(f"List deleted: {board_list.list_id} with {card_count.value} cards")
        self.activity.log(
            ActivityType.LIST_DELETE,
            command.user_id,
            {"listTitle": board_list.title, "cardCount": card_count.value},
            board_id=board.board_id,
            list_id=board_list.list_id,
        )
        return Result.ok()

    def update_board_list_position(self, command: UpdateBoardListPositionCommand) -> Result[List[BoardList]]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._list_and_board(
            command.list_id, command.user_id, "validation.board.modification.access.denied", "UNAUTHORIZED_ACCESS"
        )
        if found.is_failure:
            return found
        board = found.value[1]

        with board_lock(board.board_id):
            current = self._find_list(command.list_id)
            if current.is_failure:
                return current
            board_list = current.value

            old_position = board_list.position
            moved = self.position_manager.move(board_list, command.new_position)
            if moved.is_failure:
                logger.warning(f"List move rejected: {moved.failure.error_code}")
                return moved

        if old_position != command.new_position:
            logger.info(f"List {board_list.list_id} moved {old_position} -> {command.new_position}")
            self.activity.log(
                ActivityType.LIST_MOVE,
                command.user_id,
                {"listTitle": board_list.title, "oldPosition": old_position, "newPosition": command.new_position},
                board_id=board.board_id,
                list_id=board_list.list_id,
            )
        return moved

    # =========================================================================
    # Queries
    # =========================================================================

    def get_board_lists(self, board_id: str, user_id: str) -> Result[List[BoardList]]:
        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)
        return attempt(
            lambda: self.board_list_repository.find_by_board_id_order_by_position(board_id), "LIST_LOOKUP_ERROR"
        )

    def get_list_policy_status(self, board_id: str, user_id: str) -> Result[dict]:
        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)
        count = attempt(lambda: self.board_list_repository.count_by_board_id(board_id), "LIST_LOOKUP_ERROR")
        return count.map(self.policy.status_report)
