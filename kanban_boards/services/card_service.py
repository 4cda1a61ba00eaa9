"""Card service

Every operation walks card, list and board, checks the board permission and
rejects archived boards. Card positions are dense within a list and follow
the same reorder and compaction rules as lists on a board.
"""

import logging
from typing import Callable, List, Optional

from kanban_boards.failures import conflict
from kanban_boards.models.activity import ActivityType
from kanban_boards.models.board import Board
from kanban_boards.models.board_list import BoardList
from kanban_boards.models.card import Card
from kanban_boards.models.commands import (
    CloneCardCommand,
    CreateCardCommand,
    DeleteCardCommand,
    MoveCardCommand,
    UpdateCardCommand,
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
from kanban_boards.services.execution import attempt, best_effort
from kanban_boards.services.permissions import BoardPermissionService, denied_by
from kanban_boards.services.policies import CardPolicy
from kanban_boards.services.positions import (
    board_lock,
    invalid_position,
    next_position_after,
    reorder,
    shift_left,
    shift_right,
)

logger = logging.getLogger(__name__)

POSITION_MESSAGE_KEY = "validation.card.position.invalid"


class CardService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        board_list_repository: BoardListRepository,
        card_repository: CardRepository,
        board_member_repository: BoardMemberRepository,
        label_repository: LabelRepository,
        comment_repository: CommentRepository,
        permission_service: BoardPermissionService,
        policy: CardPolicy,
        activity: ActivityHelper,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.board_list_repository = board_list_repository
        self.card_repository = card_repository
        self.board_member_repository = board_member_repository
        self.label_repository = label_repository
        self.comment_repository = comment_repository
        self.permission_service = permission_service
        self.policy = policy
        self.activity = activity

    # =========================================================================
    # Lookups
    # =========================================================================

    def _find_card(self, card_id: str) -> Result[Card]:
        return self._find(
            lambda: self.card_repository.find_by_id(card_id),
            "validation.card.not.found",
            "CARD_NOT_FOUND",
            {"cardId": card_id},
        )

    def _find_list(self, list_id: str) -> Result[BoardList]:
        return self._find(
            lambda: self.board_list_repository.find_by_id(list_id),
            "validation.boardlist.not.found",
            "LIST_NOT_FOUND",
            {"listId": list_id},
        )

    def _check_access(self, board_id: str, user_id: str, write: bool) -> Result[Board]:
        found = self._find_board(board_id)
        if found.is_failure:
            return found
        board = found.value

        check = (
            self.permission_service.can_write(board_id, user_id)
            if write else self.permission_service.can_read(board_id, user_id)
        )
        denied = denied_by(
            check,
            self.messages.get_message(
                "validation.board.modification.access.denied" if write else "validation.board.access.denied"
            ),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            logger.warning(f"User {user_id} denied {'write' if write else 'read'} access to board {board_id}")
            return Result.fail(denied)

        if write:
            archived = self._reject_archived(board)
            if archived:
                return archived
        return Result.ok(board)

    def _list_scope(self, list_id: str, user_id: str, write: bool = True) -> Result[tuple]:
        """Resolve (list, board) with the required access"""
        found = self._find_list(list_id)
        if found.is_failure:
            return found
        board_list = found.value
        board = self._check_access(board_list.board_id, user_id, write)
        if board.is_failure:
            return board
        return Result.ok((board_list, board.value))

    def _card_scope(self, card_id: str, user_id: str, write: bool = True) -> Result[tuple]:
        """Resolve (card, list, board) with the required access"""
        found = self._find_card(card_id)
        if found.is_failure:
            return found
        card = found.value
        scope = self._list_scope(card.list_id, user_id, write)
        if scope.is_failure:
            return scope
        board_list, board = scope.value
        return Result.ok((card, board_list, board))

    def _target_list(self, list_id: Optional[str], source: BoardList) -> Result[BoardList]:
        if not list_id or list_id == source.list_id:
            return Result.ok(source)
        found = self._find_list(list_id)
        if found.is_failure:
            return found
        if found.value.board_id != source.board_id:
            return Result.fail(conflict(
                self.messages.get_message("validation.card.move.other.board"),
                "CARD_MOVE_OTHER_BOARD",
                {"sourceBoardId": source.board_id, "targetBoardId": found.value.board_id},
            ))
        return found

    def _check_room(self, list_id: str) -> Result[int]:
        """Current card count of a list, failing when the list is full"""
        count = attempt(lambda: self.card_repository.count_by_list_id(list_id), "CARD_LOOKUP_ERROR")
        if count.is_failure:
            return count
        violation = self.policy.check_creation(count.value)
        if violation:
            logger.warning(f"List {list_id} is full ({count.value} cards)")
            return Result.fail(violation)
        return count

    # =========================================================================
    # Commands
    # =========================================================================

    def create_card(self, command: CreateCardCommand) -> Result[Card]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        scope = self._list_scope(command.list_id, command.user_id)
        if scope.is_failure:
            return scope
        board_list, board = scope.value

        title = command.title.strip()
        violation = self.policy.check_content(title, command.description)
        if violation:
            return Result.fail(violation)

        with board_lock(board.board_id):
            room = self._check_room(board_list.list_id)
            if room.is_failure:
                return room

            position = attempt(
                lambda: next_position_after(self.card_repository.find_max_position_by_list_id(board_list.list_id)),
                "CARD_LOOKUP_ERROR",
            )
            if position.is_failure:
                return position

            card = Card.create(board_list.list_id, board.board_id, title, position.value, command.description)
            saved = attempt(lambda: self.card_repository.save(card), "CARD_SAVE_ERROR")
            if saved.is_failure:
                return saved

        logger.info(f"Card created: {card.card_id} in list {board_list.list_id}")
        self.activity.log(
            ActivityType.CARD_CREATE,
            command.user_id,
            {"cardTitle": card.title, "listTitle": board_list.title},
            board_id=board.board_id,
            list_id=board_list.list_id,
            card_id=card.card_id,
        )
        return Result.ok(saved.value)

    def update_card(self, command: UpdateCardCommand) -> Result[Card]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        scope = self._card_scope(command.card_id, command.user_id)
        if scope.is_failure:
            return scope
        board = scope.value[2]

        new_title = command.title.strip() if command.title is not None else None
        violation = self.policy.check_content(new_title, command.description)
        if violation:
            return Result.fail(violation)

        with board_lock(board.board_id):
            # Position and list may have changed since the scope lookup
            current = self._find_card(command.card_id)
            if current.is_failure:
                return current
            card = current.value

            old_title = card.title
            if new_title is not None and new_title != card.title:
                card.update_title(new_title)
            if command.description is not None and command.description != card.description:
                card.update_description(command.description)

            saved = attempt(lambda: self.card_repository.save(card), "CARD_SAVE_ERROR")
            if saved.is_failure:
                return saved

        if card.title != old_title:
            self.activity.log(
                ActivityType.CARD_RENAME,
                command.user_id,
                {"oldTitle": old_title, "newTitle": card.title},
                board_id=board.board_id,
                list_id=card.list_id,
                card_id=card.card_id,
            )
        return Result.ok(saved.value)

    def move_card(self, command: MoveCardCommand) -> Result[Card]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        scope = self._card_scope(command.card_id, command.user_id)
        if scope.is_failure:
            return scope
        card, source, board = scope.value

        target = self._target_list(command.target_list_id, source)
        if target.is_failure:
            return target

        with board_lock(board.board_id):
            current = self._find_card(command.card_id)
            if current.is_failure:
                return current
            card = current.value
            from_list_id = card.list_id

            if not command.target_list_id or target.value.list_id == from_list_id:
                to_list_id = from_list_id
                moved = self._move_within_list(card, command.new_position)
            else:
                target_list = self._find_list(target.value.list_id)
                if target_list.is_failure:
                    return target_list
                to_list_id = target_list.value.list_id
                moved = self._move_to_list(card, target_list.value, command.new_position)
            if moved.is_failure:
                logger.warning(f"Card move rejected: {moved.failure.error_code}")
                return moved

        if moved.value:
            logger.info(f"Card {card.card_id} moved to {to_list_id}:{command.new_position}")
            self.activity.log(
                ActivityType.CARD_MOVE,
                command.user_id,
                {
                    "cardTitle": card.title,
                    "fromListId": from_list_id,
                    "toListId": to_list_id,
                    "newPosition": command.new_position,
                },
                board_id=board.board_id,
                list_id=to_list_id,
                card_id=card.card_id,
            )
        return Result.ok(card)

    def _move_within_list(self, card: Card, new_position: int) -> Result[bool]:
        """Reorder inside one list; the value says whether anything changed"""
        found = attempt(lambda: self.card_repository.find_by_list_id_order_by_position(card.list_id), "CARD_LOOKUP_ERROR")
        if found.is_failure:
            return found
        ordered = found.value

        failure = invalid_position(new_position, len(ordered), self.messages, POSITION_MESSAGE_KEY)
        if failure:
            return Result.fail(failure)

        current_index = next((i for i, c in enumerate(ordered) if c.card_id == card.card_id), None)
        if current_index is None:
            return Result.fail(conflict(
                self.messages.get_message(POSITION_MESSAGE_KEY), "POSITION_INVALID", {"cardId": card.card_id}
            ))
        if current_index == new_position:
            return Result.ok(False)

        reordered = reorder(ordered, current_index, new_position)
        saved = attempt(lambda: self.card_repository.save_all(reordered), "CARD_POSITION_SAVE_ERROR")
        if saved.is_failure:
            return saved
        card.update_position(new_position)
        return Result.ok(True)

    def _move_to_list(self, card: Card, target_list: BoardList, new_position: int) -> Result[bool]:
        """Compact the source list and open a slot in the target list"""
        room = self._check_room(target_list.list_id)
        if room.is_failure:
            return room

        failure = invalid_position(new_position, room.value + 1, self.messages, POSITION_MESSAGE_KEY)
        if failure:
            return Result.fail(failure)

        def lookups():
            source_following = self.card_repository.find_by_list_id_and_position_greater_than(
                card.list_id, card.position
            )
            target_following = self.card_repository.find_by_list_id_and_position_greater_than(
                target_list.list_id, new_position - 1
            )
            return source_following, target_following

        found = attempt(lookups, "CARD_LOOKUP_ERROR")
        if found.is_failure:
            return found
        source_following, target_following = found.value

        changed = shift_left(source_following) + shift_right(target_following)
        card.move_to_list(target_list.list_id, new_position)
        saved = attempt(lambda: self.card_repository.save_all(changed + [card]), "CARD_POSITION_SAVE_ERROR")
        if saved.is_failure:
            return saved
        return Result.ok(True)

    def clone_card(self, command: CloneCardCommand) -> Result[Card]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        scope = self._card_scope(command.card_id, command.user_id)
        if scope.is_failure:
            return scope
        card, source, board = scope.value

        target = self._target_list(command.target_list_id, source)
        if target.is_failure:
            return target
        target_list = target.value

        new_title = command.new_title.strip() if command.new_title is not None else None
        violation = self.policy.check_content(new_title, None)
        if violation:
            return Result.fail(violation)

        with board_lock(board.board_id):
            room = self._check_room(target_list.list_id)
            if room.is_failure:
                return room

            position = attempt(
                lambda: next_position_after(self.card_repository.find_max_position_by_list_id(target_list.list_id)),
                "CARD_LOOKUP_ERROR",
            )
            if position.is_failure:
                return position

            copy = card.clone(new_title, target_list.list_id, position.value)
            saved = attempt(lambda: self.card_repository.save(copy), "CARD_SAVE_ERROR")
            if saved.is_failure:
                return saved

        logger.info(f"Card {card.card_id} cloned as {copy.card_id}")
        self.activity.log(
            ActivityType.CARD_DUPLICATE,
            command.user_id,
            {"sourceCardId": card.card_id, "cardTitle": copy.title},
            board_id=board.board_id,
            list_id=target_list.list_id,
            card_id=copy.card_id,
        )
        return Result.ok(saved.value)

    def delete_card(self, command: DeleteCardCommand) -> Result[None]:
        invalid = self._validate(command)
        if invalid:
            return invalid

        scope = self._card_scope(command.card_id, command.user_id)
        if scope.is_failure:
            return scope
        board_list, board = scope.value[1], scope.value[2]

        with board_lock(board.board_id):
            current = self._find_card(command.card_id)
            if current.is_failure:
                return current
            card = current.value

            deleted = attempt(lambda: self.card_repository.delete_by_id(card.card_id), "CARD_DELETE_ERROR")
            if deleted.is_failure:
                return deleted

            def compact() -> int:
                following = self.card_repository.find_by_list_id_and_position_greater_than(
                    card.list_id, card.position
                )
                if following:
                    self.card_repository.save_all(shift_left(following))
                return len(following)

            best_effort(compact, f"close card position gap {card.position} in list {card.list_id}")

        best_effort(
            lambda: self.comment_repository.delete_by_card_ids([card.card_id]),
            f"remove comments of card {card.card_id}",
        )
        logger.info(f"Card deleted: {card.card_id}")
        self.activity.log(
            ActivityType.CARD_DELETE,
            command.user_id,
            {"cardTitle": card.title, "listTitle": board_list.title},
            board_id=board.board_id,
            list_id=card.list_id,
            card_id=card.card_id,
        )
        return Result.ok()

    # =========================================================================
    # Members and labels
    # =========================================================================

    def assign_member(self, card_id: str, user_id: str, member_user_id: str) -> Result[Card]:
        scope = self._card_scope(card_id, user_id)
        if scope.is_failure:
            return scope
        board = scope.value[2]

        if not board.is_owned_by(member_user_id):
            member = attempt(
                lambda: self.board_member_repository.find_by_board_id_and_user_id(board.board_id, member_user_id),
                "BOARD_MEMBER_LOOKUP_ERROR",
            )
            if member.is_failure:
                return member
            if member.value is None or not member.value.is_active:
                return Result.fail(conflict(
                    self.messages.get_message("validation.card.member.not.board.member"),
                    "CARD_MEMBER_NOT_BOARD_MEMBER",
                    {"boardId": board.board_id, "userId": member_user_id},
                ))

        return self._change_card(
            card_id, board, user_id, lambda card: card.assign_member(member_user_id),
            ActivityType.CARD_ASSIGN_MEMBER, {"memberId": member_user_id},
        )

    def unassign_member(self, card_id: str, user_id: str, member_user_id: str) -> Result[Card]:
        scope = self._card_scope(card_id, user_id)
        if scope.is_failure:
            return scope
        return self._change_card(
            card_id, scope.value[2], user_id, lambda card: card.unassign_member(member_user_id),
            ActivityType.CARD_UNASSIGN_MEMBER, {"memberId": member_user_id},
        )

    def add_label(self, card_id: str, user_id: str, label_id: str) -> Result[Card]:
        scope = self._card_scope(card_id, user_id)
        if scope.is_failure:
            return scope
        board = scope.value[2]

        label = self._find(
            lambda: self.label_repository.find_by_id(label_id),
            "validation.label.not.found",
            "LABEL_NOT_FOUND",
            {"labelId": label_id},
        )
        if label.is_failure:
            return label
        if label.value.board_id != board.board_id:
            return Result.fail(conflict(
                self.messages.get_message("validation.label.other.board"),
                "LABEL_OTHER_BOARD",
                {"labelId": label_id, "boardId": board.board_id},
            ))

        return self._change_card(
            card_id, board, user_id, lambda card: card.add_label(label_id),
            ActivityType.CARD_ADD_LABEL, {"labelId": label_id, "labelName": label.value.name},
        )

    def remove_label(self, card_id: str, user_id: str, label_id: str) -> Result[Card]:
        scope = self._card_scope(card_id, user_id)
        if scope.is_failure:
            return scope
        return self._change_card(
            card_id, scope.value[2], user_id, lambda card: card.remove_label(label_id),
            ActivityType.CARD_REMOVE_LABEL, {"labelId": label_id},
        )

    def _change_card(
        self,
        card_id: str,
        board: Board,
        user_id: str,
        change: Callable[[Card], bool],
        activity_type: ActivityType,
        payload: dict,
    ) -> Result[Card]:
        """Apply a change to the stored card under the board lock; unchanged cards are not saved"""
        with board_lock(board.board_id):
            current = self._find_card(card_id)
            if current.is_failure:
                return current
            card = current.value
            if not change(card):
                return Result.ok(card)
            saved = attempt(lambda: self.card_repository.save(card), "CARD_SAVE_ERROR")
            if saved.is_failure:
                return saved

        self.activity.log(
            activity_type, user_id, dict(payload, cardTitle=card.title),
            board_id=board.board_id, list_id=card.list_id, card_id=card.card_id,
        )
        return Result.ok(saved.value)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_card(self, card_id: str, user_id: str) -> Result[Card]:
        scope = self._card_scope(card_id, user_id, write=False)
        return scope.map(lambda found: found[0])

    def get_list_cards(self, list_id: str, user_id: str) -> Result[List[Card]]:
        scope = self._list_scope(list_id, user_id, write=False)
        if scope.is_failure:
            return scope
        return attempt(lambda: self.card_repository.find_by_list_id_order_by_position(list_id), "CARD_LOOKUP_ERROR")
