"""Card comment service

Anyone who can read a board can comment on its cards. Only the author can
edit or delete a comment, and comments on archived boards are frozen.
"""

import logging
from typing import List

from kanban_boards.models.activity import ActivityType
from kanban_boards.models.board import Board
from kanban_boards.models.card import Card
from kanban_boards.models.comment import Comment
from kanban_boards.models.commands import CreateCommentCommand, DeleteCommentCommand, UpdateCommentCommand
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.card_repository import CardRepository
from kanban_boards.repositories.comment_repository import CommentRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.activity import ActivityHelper
from kanban_boards.services.base import BoardServiceBase
from kanban_boards.services.execution import attempt
from kanban_boards.services.permissions import BoardPermissionService, denied_by

logger = logging.getLogger(__name__)


class CommentService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        card_repository: CardRepository,
        comment_repository: CommentRepository,
        permission_service: BoardPermissionService,
        activity: ActivityHelper,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.card_repository = card_repository
        self.comment_repository = comment_repository
        self.permission_service = permission_service
        self.activity = activity

    def _find_card(self, card_id: str) -> Result[Card]:
        return self._find(
            lambda: self.card_repository.find_by_id(card_id),
            "validation.card.not.found",
            "CARD_NOT_FOUND",
            {"cardId": card_id},
        )

    def _find_comment(self, comment_id: str) -> Result[Comment]:
        return self._find(
            lambda: self.comment_repository.find_by_id(comment_id),
            "validation.comment.not.found",
            "COMMENT_NOT_FOUND",
            {"commentId": comment_id},
        )

    def _readable_board(self, board_id: str, user_id: str) -> Result[Board]:
        found = self._find_board(board_id)
        if found.is_failure:
            return found

        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            logger.warning(f"User {user_id} denied comment access on board {board_id}")
            return Result.fail(denied)
        return found

    def _authored_comment(self, comment_id: str, user_id: str, denied_key: str, denied_code: str) -> Result[Comment]:
        """The comment, when the requester can read its board and wrote it"""
        found = self._find_comment(comment_id)
        if found.is_failure:
            return found
        comment = found.value

        board = self._readable_board(comment.board_id, user_id)
        if board.is_failure:
            return board

        denied = denied_by(
            Result.ok(comment.is_author(user_id)),
            self.messages.get_message(denied_key),
            denied_code,
            {"commentId": comment_id},
        )
        if denied:
            return Result.fail(denied)

        archived = self._reject_archived(board.value)
        if archived:
            return archived
        return found

    def create_comment(self, command: CreateCommentCommand) -> Result[Comment]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        card = self._find_card(command.card_id)
        if card.is_failure:
            return card

        board = self._readable_board(card.value.board_id, command.author_id)
        if board.is_failure:
            return board
        archived = self._reject_archived(board.value)
        if archived:
            return archived

        comment = Comment.create(card.value.card_id, board.value.board_id, command.author_id, command.content)
        saved = attempt(lambda: self.comment_repository.save(comment), "COMMENT_SAVE_ERROR")
        if saved.is_failure:
            return saved

        logger.debug(f"Comment created: {comment.comment_id} on card {comment.card_id}")
        self.activity.log(
            ActivityType.CARD_ADD_COMMENT,
            command.author_id,
            {"commentId": comment.comment_id, "content": comment.content, "cardTitle": card.value.title},
            board_id=board.value.board_id,
            list_id=card.value.list_id,
            card_id=comment.card_id,
        )
        return saved

    def update_comment(self, command: UpdateCommentCommand) -> Result[Comment]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._authored_comment(
            command.comment_id,
            command.requester_id,
            "validation.comment.update.access.denied",
            "COMMENT_UPDATE_ACCESS_DENIED",
        )
        if found.is_failure:
            return found
        comment = found.value

        comment.update_content(command.content)
        return attempt(lambda: self.comment_repository.save(comment), "COMMENT_SAVE_ERROR")

    def delete_comment(self, command: DeleteCommentCommand) -> Result[None]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._authored_comment(
            command.comment_id,
            command.requester_id,
            "validation.comment.delete.access.denied",
            "COMMENT_DELETE_ACCESS_DENIED",
        )
        if found.is_failure:
            return found

        deleted = attempt(lambda: self.comment_repository.delete_by_id(command.comment_id), "COMMENT_DELETE_ERROR")
        if deleted.is_success:
            logger.debug(f"Comment deleted: {command.comment_id}")
        return deleted

    def get_comment(self, comment_id: str, user_id: str) -> Result[Comment]:
        found = self._find_comment(comment_id)
        if found.is_failure:
            return found
        board = self._readable_board(found.value.board_id, user_id)
        if board.is_failure:
            return board
        return found

    def get_card_comments(self, card_id: str, user_id: str) -> Result[List[Comment]]:
        card = self._find_card(card_id)
        if card.is_failure:
            return card
        board = self._readable_board(card.value.board_id, user_id)
        if board.is_failure:
            return board
        return attempt(lambda: self.comment_repository.find_by_card_id(card_id), "COMMENT_LOOKUP_ERROR")
