"""Board list repository"""

from typing import List, Optional

from kanban_boards.models.board_list import BoardList
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class BoardListRepository(TinyDBRepository[BoardList]):
    table_name = "lists"
    id_field = "list_id"
    model = BoardList

    def find_by_board_id_order_by_position(self, board_id: str) -> List[BoardList]:
        lists = self._to_entities(self.table.search(Q.board_id == board_id))
        return sorted(lists, key=lambda x: x.position)

    def find_max_position_by_board_id(self, board_id: str) -> Optional[int]:
        positions = [doc["position"] for doc in self.table.search(Q.board_id == board_id)]
        return max(positions) if positions else None

    def find_by_board_id_and_position_greater_than(self, board_id: str, position: int) -> List[BoardList]:
        lists = self._to_entities(
            self.table.search((Q.board_id == board_id) & (Q.position > position))
        )
        return sorted(lists, key=lambda x: x.position)

    def count_by_board_id(self, board_id: str) -> int:
        return self.table.count(Q.board_id == board_id)
