"""Board label service"""

import logging
from typing import List

from kanban_boards.models.commands import CreateLabelCommand, UpdateLabelCommand
from kanban_boards.models.label import Label
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.card_repository import CardRepository
from kanban_boards.repositories.label_repository import LabelRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.base import BoardServiceBase
from kanban_boards.services.execution import attempt, best_effort
from kanban_boards.services.permissions import BoardPermissionService, denied_by
from kanban_boards.services.positions import board_lock

logger = logging.getLogger(__name__)


class LabelService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        label_repository: LabelRepository,
        card_repository: CardRepository,
        permission_service: BoardPermissionService,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.label_repository = label_repository
        self.card_repository = card_repository
        self.permission_service = permission_service

    def _writable_board(self, board_id: str, user_id: str) -> Result:
        found = self._find_board(board_id)
        if found.is_failure:
            return found

        denied = denied_by(
            self.permission_service.can_write(board_id, user_id),
            self.messages.get_message("validation.board.modification.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)

        archived = self._reject_archived(found.value)
        if archived:
            return archived
        return found

    def _find_label(self, label_id: str) -> Result[Label]:
        return self._find(
            lambda: self.label_repository.find_by_id(label_id),
            "validation.label.not.found",
            "LABEL_NOT_FOUND",
            {"labelId": label_id},
        )

    def create_label(self, command: CreateLabelCommand) -> Result[Label]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        board = self._writable_board(command.board_id, command.user_id)
        if board.is_failure:
            return board

        label = Label.create(command.board_id, command.name.strip(), command.color.strip().upper())
        saved = attempt(lambda: self.label_repository.save(label), "LABEL_SAVE_ERROR")
        if saved.is_success:
            logger.info(f"Label created: {label.label_id} on board {command.board_id}")
        return saved

    def update_label(self, command: UpdateLabelCommand) -> Result[Label]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._find_label(command.label_id)
        if found.is_failure:
            return found
        label = found.value

        board = self._writable_board(label.board_id, command.user_id)
        if board.is_failure:
            return board

        if command.name is not None:
            label.rename(command.name.strip())
        if command.color is not None:
            label.recolor(command.color.strip().upper())
        return attempt(lambda: self.label_repository.save(label), "LABEL_SAVE_ERROR")

    def delete_label(self, label_id: str, user_id: str) -> Result[None]:
        found = self._find_label(label_id)
        if found.is_failure:
            return found
        label = found.value

        board = self._writable_board(label.board_id, user_id)
        if board.is_failure:
            return board

        def strip_from_cards() -> int:
            cards = [card for card in self.card_repository.find_by_label_id(label_id) if card.remove_label(label_id)]
            if cards:
                self.card_repository.save_all(cards)
            return len(cards)

        # Card saves rewrite whole documents, so they share the board lock with moves
        with board_lock(label.board_id):
            deleted = attempt(lambda: self.label_repository.delete_by_id(label_id), "LABEL_DELETE_ERROR")
            if deleted.is_failure:
                return deleted
            stripped = best_effort(strip_from_cards, f"remove label {label_id} from cards")
        logger.info(f"Label deleted: {label_id} (removed from {stripped or 0} cards)")
        return Result.ok()

    def get_board_labels(self, board_id: str, user_id: str) -> Result[List[Label]]:
        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)
        return attempt(lambda: self.label_repository.find_by_board_id(board_id), "LABEL_LOOKUP_ERROR")
