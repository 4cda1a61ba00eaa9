"""Dense position bookkeeping for board lists and cards

Lists of a board (and cards of a list) always occupy positions 0..N-1. The
helpers here keep that true across create, delete and move, and the per-board
lock registry serialises those read-modify-write sequences in-process.
"""

import logging
import threading
from typing import Dict, List, Optional, Protocol, TypeVar

from kanban_boards.failures import conflict
from kanban_boards.models.board_list import BoardList
from kanban_boards.repositories.board_list_repository import BoardListRepository
from kanban_boards.result import Result
from kanban_boards.services.execution import attempt, best_effort
from kanban_boards.services.validation import MessageResolver, message_resolver

logger = logging.getLogger(__name__)


class Positioned(Protocol):
    position: int

    def update_position(self, position: int) -> None:
        ...


P = TypeVar("P", bound=Positioned)


# =============================================================================
# Per-board locks
# =============================================================================

_board_locks: Dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


def board_lock(board_id: str) -> threading.RLock:
    """Re-entrant lock guarding position changes on one board"""
    with _registry_lock:
        lock = _board_locks.get(board_id)
        if lock is None:
            lock = threading.RLock()
            _board_locks[board_id] = lock
        return lock


def release_board_lock(board_id: str) -> None:
    """Forget the lock of a deleted board"""
    with _registry_lock:
        _board_locks.pop(board_id, None)


# =============================================================================
# Generic helpers
# =============================================================================

def next_position_after(max_position: Optional[int]) -> int:
    return 0 if max_position is None else max_position + 1


def invalid_position(
    new_position: int, count: int, messages: MessageResolver = message_resolver, key: str = "validation.boardlist.position.invalid"
):
    """Return the ResourceConflict for a target outside [0, count), or None"""
    if new_position < 0:
        return conflict(messages.get_message(key), "POSITION_INVALID", {"position": new_position})
    if new_position >= count:
        return conflict(
            messages.get_message(key), "POSITION_OUT_OF_RANGE", {"position": new_position, "count": count}
        )
    return None


def reorder(ordered: List[P], current_index: int, new_index: int) -> List[P]:
    """Move one element and renumber every element to its index"""
    items = list(ordered)
    moving = items.pop(current_index)
    items.insert(new_index, moving)
    for index, item in enumerate(items):
        if item.position != index:
            item.update_position(index)
    return items


def shift_left(items: List[P]) -> List[P]:
    """Close the gap left behind by a removed element"""
    for item in items:
        item.update_position(item.position - 1)
    return items


def shift_right(items: List[P]) -> List[P]:
    """Open a slot for an inserted element"""
    for item in items:
        item.update_position(item.position + 1)
    return items


# =============================================================================
# Board lists
# =============================================================================

class ListPositionManager:
    def __init__(self, board_list_repository: BoardListRepository, messages: MessageResolver = message_resolver):
        self.board_list_repository = board_list_repository
        self.messages = messages

    def next_position(self, board_id: str) -> int:
        return next_position_after(self.board_list_repository.find_max_position_by_board_id(board_id))

    def close_gap(self, board_id: str, deleted_position: int) -> Optional[int]:
        """Renumber the lists after a deleted one; failures are only logged"""

        def shift() -> int:
            following = self.board_list_repository.find_by_board_id_and_position_greater_than(
                board_id, deleted_position
            )
            if not following:
                return 0
            self.board_list_repository.save_all(shift_left(following))
            return len(following)

        return best_effort(shift, f"close position gap {deleted_position} on board {board_id}")

    def validate_move(self, new_position: int, count: int) -> Result[None]:
        failure = invalid_position(new_position, count, self.messages)
        if failure is not None:
            return Result.fail(failure)
        return Result.ok()

    def move(self, board_list: BoardList, new_position: int) -> Result[List[BoardList]]:
        """Move a list within its board; a same-position move writes nothing"""
        with board_lock(board_list.board_id):
            found = attempt(
                lambda: self.board_list_repository.find_by_board_id_order_by_position(board_list.board_id),
                "LIST_LOOKUP_ERROR",
            )
            if found.is_failure:
                return Result.fail(found.failure)
            ordered = found.value

            checked = self.validate_move(new_position, len(ordered))
            if checked.is_failure:
                return Result.fail(checked.failure)

            current_index = next(
                (i for i, item in enumerate(ordered) if item.list_id == board_list.list_id), None
            )
            if current_index is None:
                return Result.fail(conflict(
                    self.messages.get_message("validation.boardlist.position.invalid"), "POSITION_INVALID",
                    {"listId": board_list.list_id},
                ))
            if current_index == new_position:
                logger.debug(f"List {board_list.list_id} already at position {new_position}")
                return Result.ok(ordered)

            reordered = reorder(ordered, current_index, new_position)
            saved = attempt(lambda: self.board_list_repository.save_all(reordered), "LIST_POSITION_SAVE_ERROR")
            if saved.is_failure:
                return Result.fail(saved.failure)
            return Result.ok(reordered)
