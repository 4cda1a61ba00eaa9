"""Card repository"""

from typing import List, Optional

from kanban_boards.models.card import Card
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class CardRepository(TinyDBRepository[Card]):
    table_name = "cards"
    id_field = "card_id"
    model = Card

    def find_by_list_id_order_by_position(self, list_id: str) -> List[Card]:
        cards = self._to_entities(self.table.search(Q.list_id == list_id))
        return sorted(cards, key=lambda c: c.position)

    def find_max_position_by_list_id(self, list_id: str) -> Optional[int]:
        positions = [doc["position"] for doc in self.table.search(Q.list_id == list_id)]
        return max(positions) if positions else None

    def find_by_list_id_and_position_greater_than(self, list_id: str, position: int) -> List[Card]:
        cards = self._to_entities(
            self.table.search((Q.list_id == list_id) & (Q.position > position))
        )
        return sorted(cards, key=lambda c: c.position)

    def find_by_board_id(self, board_id: str) -> List[Card]:
        return self._to_entities(self.table.search(Q.board_id == board_id))

    def find_by_label_id(self, label_id: str) -> List[Card]:
        return self._to_entities(self.table.search(Q.label_ids.any([label_id])))

    def count_by_list_id(self, list_id: str) -> int:
        return self.table.count(Q.list_id == list_id)

    def count_by_board_id(self, board_id: str) -> int:
        return self.table.count(Q.board_id == board_id)

    def delete_by_list_id(self, list_id: str) -> int:
        return len(self.table.remove(Q.list_id == list_id))
