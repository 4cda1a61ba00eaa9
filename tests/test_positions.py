"""List position manager tests"""

import threading

import pytest

from kanban_boards.failures import ResourceConflict
from kanban_boards.services.positions import (
    ListPositionManager,
    board_lock,
    invalid_position,
    next_position_after,
    reorder,
    shift_left,
    shift_right,
)
from tests.factories import create_lists


@pytest.fixture
def manager(repos):
    return ListPositionManager(repos.lists)


class TestHelpers:
    """Test the generic position helpers"""

    def test_next_position_after(self):
        assert next_position_after(None) == 0
        assert next_position_after(4) == 5

    def test_reorder_forward(self):
        lists = create_lists("b1", 3)

        reordered = reorder(lists, 0, 2)

        assert [x.list_id for x in reordered] == ["L2", "L3", "L1"]
        assert [x.position for x in reordered] == [0, 1, 2]

    def test_reorder_backward(self):
        lists = create_lists("b1", 4)

        reordered = reorder(lists, 3, 1)

        assert [x.list_id for x in reordered] == ["L1", "L4", "L2", "L3"]
        assert [x.position for x in reordered] == [0, 1, 2, 3]

    def test_shifts(self):
        lists = create_lists("b1", 3)

        assert [x.position for x in shift_left(lists[1:])] == [0, 1]
        assert [x.position for x in shift_right(lists)] == [1, 1, 2]

    @pytest.mark.parametrize("position,count,code", [
        (-1, 3, "POSITION_INVALID"),
        (3, 3, "POSITION_OUT_OF_RANGE"),
        (0, 0, "POSITION_OUT_OF_RANGE"),
    ])
    def test_invalid_position(self, position, count, code):
        failure = invalid_position(position, count)

        assert isinstance(failure, ResourceConflict)
        assert failure.error_code == code
        assert failure.message == "invalid position"

    def test_valid_position(self):
        assert invalid_position(2, 3) is None


class TestNextPosition:
    """Test list creation positions"""

    def test_empty_board_starts_at_zero(self, manager, repos):
        assert manager.next_position("b1") == 0

    def test_appends_after_max(self, manager, repos):
        repos.lists.find_max_position_by_board_id.return_value = 2

        assert manager.next_position("b1") == 3
        repos.lists.save_all.assert_not_called()


class TestCloseGap:
    """Test compaction after a list is deleted"""

    def test_delete_first_of_three(self, manager, repos):
        """Deleting L1 saves [L2, L3] at positions 0 and 1 in one call"""
        lists = create_lists("b1", 3)
        repos.lists.find_by_board_id_and_position_greater_than.return_value = lists[1:]

        shifted = manager.close_gap("b1", 0)

        assert shifted == 2
        repos.lists.find_by_board_id_and_position_greater_than.assert_called_once_with("b1", 0)
        repos.lists.save_all.assert_called_once()
        saved = repos.lists.save_all.call_args[0][0]
        assert [(x.list_id, x.position) for x in saved] == [("L2", 0), ("L3", 1)]

    def test_delete_last_saves_nothing(self, manager, repos):
        assert manager.close_gap("b1", 2) == 0
        repos.lists.save_all.assert_not_called()

    def test_failures_are_swallowed(self, manager, repos):
        repos.lists.find_by_board_id_and_position_greater_than.side_effect = RuntimeError("io")

        assert manager.close_gap("b1", 0) is None


class TestMove:
    """Test moving a list within its board"""

    def test_move_first_to_last(self, manager, repos):
        """Moving L1 from 0 to 2 yields L2, L3, L1 saved in one call"""
        lists = create_lists("b1", 3)
        repos.lists.find_by_board_id_order_by_position.return_value = lists

        result = manager.move(lists[0], 2)

        assert [(x.list_id, x.position) for x in result.value] == [("L2", 0), ("L3", 1), ("L1", 2)]
        repos.lists.save_all.assert_called_once()
        assert len(repos.lists.save_all.call_args[0][0]) == 3

    def test_same_position_is_noop(self, manager, repos):
        lists = create_lists("b1", 3)
        repos.lists.find_by_board_id_order_by_position.return_value = lists

        result = manager.move(lists[1], 1)

        assert [x.list_id for x in result.value] == ["L1", "L2", "L3"]
        repos.lists.save_all.assert_not_called()
        repos.lists.save.assert_not_called()

    @pytest.mark.parametrize("position,code", [(-1, "POSITION_INVALID"), (3, "POSITION_OUT_OF_RANGE")])
    def test_out_of_bounds(self, manager, repos, position, code):
        lists = create_lists("b1", 3)
        repos.lists.find_by_board_id_order_by_position.return_value = lists

        result = manager.move(lists[0], position)

        assert isinstance(result.failure, ResourceConflict)
        assert result.failure.error_code == code
        repos.lists.save_all.assert_not_called()

    def test_save_failure(self, manager, repos):
        lists = create_lists("b1", 2)
        repos.lists.find_by_board_id_order_by_position.return_value = lists
        repos.lists.save_all.side_effect = RuntimeError("write failed")

        result = manager.move(lists[0], 1)

        assert result.failure.error_code == "LIST_POSITION_SAVE_ERROR"


class TestBoardLock:
    """Test the per-board lock registry"""

    def test_same_board_same_lock(self):
        assert board_lock("b-lock") is board_lock("b-lock")
        assert board_lock("b-lock") is not board_lock("b-other")

    def test_reentrant(self):
        lock = board_lock("b-reentrant")
        with lock:
            with board_lock("b-reentrant"):
                acquired = True
        assert acquired

    def test_blocks_other_threads(self):
        lock = board_lock("b-threads")
        results = []

        with lock:
            worker = threading.Thread(target=lambda: results.append(lock.acquire(timeout=0.05)))
            worker.start()
            worker.join()

        assert results == [False]
