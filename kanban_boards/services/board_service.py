"""Board aggregate service

Boards move between Active and Archived and end in Deleted. Deleting a board
removes its cards, comments, lists, members and labels first, stopping at
the first step that fails.
"""

import logging
from typing import List

from kanban_boards.failures import internal_error
from kanban_boards.models.activity import ActivityType
from kanban_boards.models.board import Board
from kanban_boards.models.board_detail import BoardDetail
from kanban_boards.models.commands import (
    ArchiveBoardCommand,
    CreateBoardCommand,
    DeleteBoardCommand,
    ToggleStarBoardCommand,
    UpdateBoardCommand,
)
from kanban_boards.repositories.board_list_repository import BoardListRepository
from kanban_boards.repositories.board_member_repository import BoardMemberRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.card_repository import CardRepository
from kanban_boards.repositories.comment_repository import CommentRepository
from kanban_boards.repositories.label_repository import LabelRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.activity import ActivityHelper
from kanban_boards.services.base import BoardServiceBase
from kanban_boards.services.execution import CascadeStep, attempt, run_cascade
from kanban_boards.services.permissions import BoardPermissionService, denied_by
from kanban_boards.services.positions import board_lock, release_board_lock

logger = logging.getLogger(__name__)


class BoardService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        board_member_repository: BoardMemberRepository,
        board_list_repository: BoardListRepository,
        card_repository: CardRepository,
        label_repository: LabelRepository,
        comment_repository: CommentRepository,
        permission_service: BoardPermissionService,
        activity: ActivityHelper,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.board_member_repository = board_member_repository
        self.board_list_repository = board_list_repository
        self.card_repository = card_repository
        self.label_repository = label_repository
        self.comment_repository = comment_repository
        self.permission_service = permission_service
        self.activity = activity

    # =========================================================================
    # Create / update
    # =========================================================================

    def create_board(self, command: CreateBoardCommand) -> Result[Board]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        user = self._require_user(command.owner_id)
        if user.is_failure:
            return user

        board = Board.create(command.title.strip(), command.description, command.owner_id)
        saved = attempt(lambda: self.board_repository.save(board), "BOARD_SAVE_ERROR")
        if saved.is_failure:
            return saved

        logger.info(f"Board created: {board.board_id} by {command.owner_id}")
        self.activity.log(
            ActivityType.BOARD_CREATE, command.owner_id, {"boardTitle": board.title}, board_id=board.board_id
        )
        return Result.ok(saved.value)

    def update_board(self, command: UpdateBoardCommand) -> Result[Board]:
        user = self._require_user(command.requested_by)
        if user.is_failure:
            return user

        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._find_board(command.board_id)
        if found.is_failure:
            return found
        board = found.value

        denied = denied_by(
            self.permission_service.can_write(board.board_id, command.requested_by),
            self.messages.get_message("validation.board.modification.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board.board_id},
        )
        if denied:
            logger.warning(f"User {command.requested_by} may not modify board {board.board_id}")
            return Result.fail(denied)

        archived = self._reject_archived(board)
        if archived:
            return archived

        new_title = command.title.strip() if command.title is not None else None
        title_changed = new_title is not None and new_title != board.title
        description_changed = command.description is not None and command.description != board.description
        if not title_changed and not description_changed:
            return Result.ok(board)

        old_title, old_description = board.title, board.description
        try:
            if title_changed:
                board.update_title(new_title)
            if description_changed:
                board.update_description(command.description)
        except Exception as e:
            logger.error(f"Failed to apply changes to board {board.board_id}: {e}", exc_info=True)
            return Result.fail(internal_error(str(e), "BOARD_MODIFICATION_ERROR", {"boardId": board.board_id}))

        saved = attempt(lambda: self.board_repository.save(board), "BOARD_UPDATE_ERROR", {"boardId": board.board_id})
        if saved.is_failure:
            return saved

        logger.info(f"Board updated: {board.board_id}")
        if title_changed:
            self.activity.names.forget_board(board.board_id)
            self.activity.log(
                ActivityType.BOARD_RENAME, command.requested_by,
                {"oldTitle": old_title, "newTitle": board.title}, board_id=board.board_id,
            )
        if description_changed:
            self.activity.log(
                ActivityType.BOARD_UPDATE_DESCRIPTION, command.requested_by,
                {"oldDescription": old_description, "newDescription": board.description}, board_id=board.board_id,
            )
        return Result.ok(saved.value)

    # =========================================================================
    # Archive / star
    # =========================================================================

    def archive_board(self, command: ArchiveBoardCommand) -> Result[Board]:
        return self._set_archived(command, archived=True)

    def unarchive_board(self, command: ArchiveBoardCommand) -> Result[Board]:
        return self._set_archived(command, archived=False)

    def _set_archived(self, command: ArchiveBoardCommand, archived: bool) -> Result[Board]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        user = self._require_user(command.requested_by)
        if user.is_failure:
            return user

        found = self._find_board(command.board_id)
        if found.is_failure:
            return found
        board = found.value

        denied = denied_by(
            self.permission_service.can_archive(board.board_id, command.requested_by),
            self.messages.get_message("validation.board.archive.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board.board_id},
        )
        if denied:
            logger.warning(f"User {command.requested_by} may not archive board {board.board_id}")
            return Result.fail(denied)

        if board.is_archived == archived:
            return Result.ok(board)

        try:
            if archived:
                board.archive()
            else:
                board.unarchive()
        except Exception as e:
            logger.error(f"Failed to change archive state of board {board.board_id}: {e}", exc_info=True)
            return Result.fail(internal_error(str(e), "BOARD_ARCHIVE_ERROR", {"boardId": board.board_id}))

        saved = attempt(lambda: self.board_repository.save(board), "BOARD_SAVE_ERROR", {"boardId": board.board_id})
        if saved.is_failure:
            return saved

        logger.info(f"Board {'archived' if archived else 'unarchived'}: {board.board_id}")
        self.activity.log(
            ActivityType.BOARD_ARCHIVE if archived else ActivityType.BOARD_UNARCHIVE,
            command.requested_by,
            {"boardTitle": board.title},
            board_id=board.board_id,
        )
        return Result.ok(saved.value)

    def toggle_star_board(self, command: ToggleStarBoardCommand) -> Result[Board]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._find_board(command.board_id)
        if found.is_failure:
            return found
        board = found.value

        denied = denied_by(
            self.permission_service.can_toggle_star(board.board_id, command.requested_by),
            self.messages.get_message("validation.board.star.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board.board_id},
        )
        if denied:
            return Result.fail(denied)

        archived = self._reject_archived(board)
        if archived:
            return archived

        board.toggle_star()
        saved = attempt(lambda: self.board_repository.save(board), "BOARD_SAVE_ERROR", {"boardId": board.board_id})
        if saved.is_failure:
            return saved
        logger.info(f"Board {board.board_id} starred={board.is_starred}")
        return Result.ok(saved.value)

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_board(self, command: DeleteBoardCommand) -> Result[None]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        user = self._require_user(command.requested_by)
        if user.is_failure:
            return user

        found = self._find_board(command.board_id)
        if found.is_failure:
            return found
        board = found.value
        board_id = board.board_id

        denied = denied_by(
            self.permission_service.can_delete(board_id, command.requested_by),
            self.messages.get_message("validation.board.delete.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            logger.warning(f"User {command.requested_by} may not delete board {board_id}")
            return Result.fail(denied)

        with board_lock(board_id):
            counts = attempt(
                lambda: (
                    self.board_list_repository.count_by_board_id(board_id),
                    self.card_repository.count_by_board_id(board_id),
                ),
                "BOARD_DELETE_ERROR",
                {"boardId": board_id},
            )
            if counts.is_failure:
                return counts
            list_count, card_count = counts.value

            deleted = run_cascade([
                CascadeStep("cards", lambda: self.card_repository.delete_by_board_id(board_id), "CARD_DELETE_ERROR"),
                CascadeStep(
                    "comments", lambda: self.comment_repository.delete_by_board_id(board_id), "COMMENT_DELETE_ERROR"
                ),
                CascadeStep("lists", lambda: self.board_list_repository.delete_by_board_id(board_id), "LIST_DELETE_ERROR"),
                CascadeStep(
                    "members", lambda: self.board_member_repository.delete_by_board_id(board_id), "MEMBER_DELETE_ERROR"
                ),
                CascadeStep("labels", lambda: self.label_repository.delete_by_board_id(board_id), "LABEL_DELETE_ERROR"),
                CascadeStep("board", lambda: self.board_repository.delete_by_id(board_id), "BOARD_DELETE_ERROR"),
            ])
            if deleted.is_failure:
                return deleted

        release_board_lock(board_id)
        logger.info(f"Board deleted: {board_id} ({list_count} lists, {card_count} cards)")
        self.activity.log(
            ActivityType.BOARD_DELETE,
            command.requested_by,
            {"boardTitle": board.title, "listCount": list_count, "cardCount": card_count},
            board_id=board_id,
        )
        self.activity.names.forget_board(board_id)
        return Result.ok()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_board(self, board_id: str, user_id: str) -> Result[Board]:
        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)
        return self._find_board(board_id)

    def get_board_detail(self, board_id: str, user_id: str) -> Result[BoardDetail]:
        """The board with its lists, cards, labels, members and their users"""
        board = self.get_board(board_id, user_id)
        if board.is_failure:
            return board

        def collect() -> BoardDetail:
            lists = self.board_list_repository.find_by_board_id_order_by_position(board_id)
            list_order = {board_list.list_id: board_list.position for board_list in lists}
            cards = sorted(
                (card for card in self.card_repository.find_by_board_id(board_id) if card.list_id in list_order),
                key=lambda card: (list_order[card.list_id], card.position),
            )
            members = self.board_member_repository.find_active_by_board_id(board_id)
            user_ids = [board.value.owner_id] + [m.user_id for m in members if m.user_id != board.value.owner_id]
            return BoardDetail(
                board=board.value,
                lists=lists,
                cards=cards,
                labels=self.label_repository.find_by_board_id(board_id),
                members=members,
                users=self.user_repository.find_by_ids(user_ids),
                comment_counts=self.comment_repository.count_by_card_ids(card.card_id for card in cards),
            )

        # One consistent snapshot: no list or card moves while it is read
        with board_lock(board_id):
            return attempt(collect, "BOARD_LOOKUP_ERROR", {"boardId": board_id})

    def get_user_boards(self, user_id: str, include_archived: bool = False) -> Result[List[Board]]:
        """Owned boards plus boards with an active membership, newest first"""

        def collect() -> List[Board]:
            boards = {board.board_id: board for board in self.board_repository.find_by_owner_id(user_id)}
            member_board_ids = [
                m.board_id for m in self.board_member_repository.find_active_by_user_id(user_id)
                if m.board_id not in boards
            ]
            for board in self.board_repository.find_by_ids(member_board_ids):
                boards[board.board_id] = board
            result = [b for b in boards.values() if include_archived or not b.is_archived]
            return sorted(result, key=lambda b: b.created_at, reverse=True)

        return attempt(collect, "BOARD_LOOKUP_ERROR", {"userId": user_id})
