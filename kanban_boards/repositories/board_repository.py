"""Board repository"""

from typing import List

from kanban_boards.models.board import Board
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class BoardRepository(TinyDBRepository[Board]):
    table_name = "boards"
    id_field = "board_id"
    model = Board

    def find_by_owner_id(self, owner_id: str) -> List[Board]:
        return self._to_entities(self.table.search(Q.owner_id == owner_id))

    def find_by_ids(self, board_ids: List[str]) -> List[Board]:
        if not board_ids:
            return []
        return self._to_entities(self.table.search(Q.board_id.one_of(list(board_ids))))
