"""Operations that overlap with another change to the same board

Each test lets a second operation land between the first read of a list or
card and the locked section that writes it, the window two requests racing
in the thread pool would hit. Positions must stay dense 0..n-1 regardless.
"""

import pytest

from kanban_boards.failures import NotFound
from kanban_boards.models.commands import (
    CreateBoardCommand,
    CreateBoardListCommand,
    CreateCardCommand,
    DeleteBoardListCommand,
    DeleteCardCommand,
    MoveCardCommand,
    UpdateBoardListCommand,
    UpdateBoardListPositionCommand,
    UpdateCardCommand,
)


@pytest.fixture
def board(container, owner):
    return container.board_service.create_board(CreateBoardCommand(title="Roadmap", owner_id=owner.user_id)).value


@pytest.fixture
def lists(container, owner, board):
    return [
        container.board_list_service.create_board_list(
            CreateBoardListCommand(board_id=board.board_id, user_id=owner.user_id, title=title)
        ).value
        for title in ("A", "B", "C")
    ]


@pytest.fixture
def cards(container, owner, lists):
    return [
        container.card_service.create_card(
            CreateCardCommand(list_id=lists[0].list_id, user_id=owner.user_id, title=title)
        ).value
        for title in ("a", "b", "c")
    ]


def run_after_first_read(monkeypatch, repository, action):
    """Run ``action`` once, right after the first ``find_by_id`` has read its document"""
    read = repository.find_by_id
    done = []

    def find_by_id(entity_id):
        found = read(entity_id)
        if not done:
            done.append(entity_id)
            action()
        return found

    monkeypatch.setattr(repository, "find_by_id", find_by_id)


def list_order(container, board_id):
    return [(x.title, x.position) for x in container.lists.find_by_board_id_order_by_position(board_id)]


def card_order(container, list_id):
    return [(c.title, c.position) for c in container.cards.find_by_list_id_order_by_position(list_id)]


class TestOverlappingListChanges:
    def test_rename_during_move(self, monkeypatch, container, owner, board, lists):
        a, b, _ = lists
        run_after_first_read(monkeypatch, container.lists, lambda: container.board_list_service.update_board_list_position(
            UpdateBoardListPositionCommand(list_id=a.list_id, user_id=owner.user_id, new_position=2)
        ))

        result = container.board_list_service.update_board_list(
            UpdateBoardListCommand(list_id=b.list_id, user_id=owner.user_id, title="Backlog")
        )

        assert result.value.position == 0
        assert list_order(container, board.board_id) == [("Backlog", 0), ("C", 1), ("A", 2)]

    def test_delete_during_delete(self, monkeypatch, container, owner, board, lists):
        a, b, _ = lists
        run_after_first_read(monkeypatch, container.lists, lambda: container.board_list_service.delete_board_list(
            DeleteBoardListCommand(list_id=a.list_id, user_id=owner.user_id)
        ))

        result = container.board_list_service.delete_board_list(
            DeleteBoardListCommand(list_id=b.list_id, user_id=owner.user_id)
        )

        assert result.is_success
        assert list_order(container, board.board_id) == [("C", 0)]

    def test_move_during_delete(self, monkeypatch, container, owner, board, lists):
        a, _, c = lists
        run_after_first_read(monkeypatch, container.lists, lambda: container.board_list_service.delete_board_list(
            DeleteBoardListCommand(list_id=a.list_id, user_id=owner.user_id)
        ))

        result = container.board_list_service.update_board_list_position(
            UpdateBoardListPositionCommand(list_id=c.list_id, user_id=owner.user_id, new_position=0)
        )

        assert result.is_success
        assert list_order(container, board.board_id) == [("C", 0), ("B", 1)]

    def test_delete_of_already_deleted_list(self, monkeypatch, container, owner, board, lists):
        _, b, _ = lists
        run_after_first_read(monkeypatch, container.lists, lambda: container.board_list_service.delete_board_list(
            DeleteBoardListCommand(list_id=b.list_id, user_id=owner.user_id)
        ))

        result = container.board_list_service.delete_board_list(
            DeleteBoardListCommand(list_id=b.list_id, user_id=owner.user_id)
        )

        assert isinstance(result.failure, NotFound)
        assert list_order(container, board.board_id) == [("A", 0), ("C", 1)]


class TestOverlappingCardChanges:
    def test_rename_during_move(self, monkeypatch, container, owner, lists, cards):
        a, b, _ = cards
        run_after_first_read(monkeypatch, container.cards, lambda: container.card_service.move_card(
            MoveCardCommand(card_id=a.card_id, user_id=owner.user_id, new_position=2)
        ))

        result = container.card_service.update_card(
            UpdateCardCommand(card_id=b.card_id, user_id=owner.user_id, title="b2")
        )

        assert result.value.position == 0
        assert card_order(container, lists[0].list_id) == [("b2", 0), ("c", 1), ("a", 2)]

    def test_delete_during_delete(self, monkeypatch, container, owner, lists, cards):
        a, b, _ = cards
        run_after_first_read(monkeypatch, container.cards, lambda: container.card_service.delete_card(
            DeleteCardCommand(card_id=a.card_id, user_id=owner.user_id)
        ))

        result = container.card_service.delete_card(DeleteCardCommand(card_id=b.card_id, user_id=owner.user_id))

        assert result.is_success
        assert card_order(container, lists[0].list_id) == [("c", 0)]

    def test_move_to_other_list_during_delete(self, monkeypatch, container, owner, lists, cards):
        a, b, _ = cards
        todo, done = lists[0], lists[1]
        run_after_first_read(monkeypatch, container.cards, lambda: container.card_service.delete_card(
            DeleteCardCommand(card_id=a.card_id, user_id=owner.user_id)
        ))

        result = container.card_service.move_card(
            MoveCardCommand(card_id=b.card_id, user_id=owner.user_id, target_list_id=done.list_id, new_position=0)
        )

        assert result.is_success
        assert card_order(container, todo.list_id) == [("c", 0)]
        assert card_order(container, done.list_id) == [("b", 0)]

    def test_assign_during_move(self, monkeypatch, container, owner, lists, cards):
        a = cards[0]
        run_after_first_read(monkeypatch, container.cards, lambda: container.card_service.move_card(
            MoveCardCommand(card_id=a.card_id, user_id=owner.user_id, new_position=2)
        ))

        result = container.card_service.assign_member(a.card_id, owner.user_id, owner.user_id)

        assert result.value.member_ids == [owner.user_id]
        assert result.value.position == 2
        assert card_order(container, lists[0].list_id) == [("b", 0), ("c", 1), ("a", 2)]

    def test_label_on_card_deleted_meanwhile(self, monkeypatch, container, owner, lists, cards):
        a = cards[0]
        run_after_first_read(monkeypatch, container.cards, lambda: container.card_service.delete_card(
            DeleteCardCommand(card_id=a.card_id, user_id=owner.user_id)
        ))

        result = container.card_service.remove_label(a.card_id, owner.user_id, "any-label")

        assert isinstance(result.failure, NotFound)
        assert not container.cards.exists(a.card_id)
        assert card_order(container, lists[0].list_id) == [("b", 0), ("c", 1)]
