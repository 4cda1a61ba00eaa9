"""End-to-end service scenarios on an in-memory database"""

import random
import threading

import pytest

from kanban_boards.models import BoardRole
from kanban_boards.models.activity import ActivityType
from kanban_boards.models.commands import (
    AddBoardMemberCommand,
    CreateBoardCommand,
    CreateBoardListCommand,
    CreateCardCommand,
    DeleteBoardCommand,
    DeleteBoardListCommand,
    UpdateBoardListPositionCommand,
)


@pytest.fixture
def board(container, owner):
    return container.board_service.create_board(CreateBoardCommand(title="Roadmap", owner_id=owner.user_id)).value


def create_list(container, board_id, user_id, title):
    return container.board_list_service.create_board_list(
        CreateBoardListCommand(board_id=board_id, user_id=user_id, title=title)
    ).value


def positions(container, board_id):
    return [x.position for x in container.lists.find_by_board_id_order_by_position(board_id)]


def titles(container, board_id):
    return [x.title for x in container.lists.find_by_board_id_order_by_position(board_id)]


class TestListPositionDensity:
    """List positions stay 0..n-1 through any sequence of operations"""

    def test_create_delete_move_sequence(self, container, owner, board):
        service = container.board_list_service
        lists = [create_list(container, board.board_id, owner.user_id, t) for t in "ABCDE"]

        service.delete_board_list(DeleteBoardListCommand(list_id=lists[1].list_id, user_id=owner.user_id))
        assert titles(container, board.board_id) == ["A", "C", "D", "E"]
        assert positions(container, board.board_id) == [0, 1, 2, 3]

        service.update_board_list_position(
            UpdateBoardListPositionCommand(list_id=lists[4].list_id, user_id=owner.user_id, new_position=0)
        )
        assert titles(container, board.board_id) == ["E", "A", "C", "D"]

        create_list(container, board.board_id, owner.user_id, "F")
        assert titles(container, board.board_id) == ["E", "A", "C", "D", "F"]
        assert positions(container, board.board_id) == [0, 1, 2, 3, 4]

    def test_random_operations(self, container, owner, board):
        rng = random.Random(7)
        service = container.board_list_service
        for i in range(6):
            create_list(container, board.board_id, owner.user_id, f"list {i}")

        for step in range(40):
            current = container.lists.find_by_board_id_order_by_position(board.board_id)
            action = rng.choice(["create", "delete", "move"]) if current else "create"
            if action == "create":
                create_list(container, board.board_id, owner.user_id, f"step {step}")
            elif action == "delete":
                target = rng.choice(current)
                service.delete_board_list(DeleteBoardListCommand(list_id=target.list_id, user_id=owner.user_id))
            else:
                target = rng.choice(current)
                service.update_board_list_position(UpdateBoardListPositionCommand(
                    list_id=target.list_id, user_id=owner.user_id, new_position=rng.randrange(len(current))
                ))

            found = positions(container, board.board_id)
            assert found == list(range(len(found)))

    def test_concurrent_moves(self, container, owner, board):
        service = container.board_list_service
        lists = [create_list(container, board.board_id, owner.user_id, f"list {i}") for i in range(5)]
        errors = []

        def worker(seed):
            rng = random.Random(seed)
            for _ in range(20):
                target = rng.choice(lists)
                result = service.update_board_list_position(UpdateBoardListPositionCommand(
                    list_id=target.list_id, user_id=owner.user_id, new_position=rng.randrange(len(lists))
                ))
                if result.is_failure:
                    errors.append(result.failure)

        threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sorted(positions(container, board.board_id)) == [0, 1, 2, 3, 4]


class TestBoardLifecycle:
    """A board shared with members and then deleted"""

    def test_shared_board_is_visible_to_members(self, container, owner, editor, board):
        container.board_member_service.add_board_member(AddBoardMemberCommand(
            board_id=board.board_id, user_id=editor.user_id, role=BoardRole.EDITOR, requested_by=owner.user_id
        ))

        boards = container.board_service.get_user_boards(editor.user_id).value

        assert [b.board_id for b in boards] == [board.board_id]

    def test_delete_removes_everything(self, container, owner, editor, board):
        container.board_member_service.add_board_member(AddBoardMemberCommand(
            board_id=board.board_id, user_id=editor.user_id, role=BoardRole.EDITOR, requested_by=owner.user_id
        ))
        todo = create_list(container, board.board_id, owner.user_id, "To Do")
        for title in ("a", "b"):
            container.card_service.create_card(CreateCardCommand(list_id=todo.list_id, user_id=editor.user_id, title=title))

        result = container.board_service.delete_board(
            DeleteBoardCommand(board_id=board.board_id, requested_by=owner.user_id)
        )

        assert result.is_success
        assert container.boards.find_by_id(board.board_id) is None
        assert container.lists.count_by_board_id(board.board_id) == 0
        assert container.cards.count_by_board_id(board.board_id) == 0
        assert container.board_members.find_active_by_board_id(board.board_id) == []
        assert container.board_service.get_user_boards(editor.user_id).value == []

        deleted = [a for a in container.activities.find_by_board_id(board.board_id) if a.type == ActivityType.BOARD_DELETE]
        assert deleted[0].payload["listCount"] == 1
        assert deleted[0].payload["cardCount"] == 2
        assert deleted[0].payload["boardTitle"] == "Roadmap"
