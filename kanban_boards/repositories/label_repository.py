"""Label repository"""

from typing import List

from kanban_boards.models.label import Label
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class LabelRepository(TinyDBRepository[Label]):
    table_name = "labels"
    id_field = "label_id"
    model = Label

    def find_by_board_id(self, board_id: str) -> List[Label]:
        labels = self._to_entities(self.table.search(Q.board_id == board_id))
        return sorted(labels, key=lambda label: label.name.lower())
