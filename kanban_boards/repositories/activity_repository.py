"""Activity repository"""

from typing import List

from kanban_boards.models.activity import Activity
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class ActivityRepository(TinyDBRepository[Activity]):
    table_name = "activity"
    id_field = "activity_id"
    model = Activity

    def find_by_board_id(self, board_id: str, limit: int = 50) -> List[Activity]:
        """Most recent activity first"""
        activities = self._to_entities(self.table.search(Q.board_id == board_id))
        activities.sort(key=lambda a: a.created_at, reverse=True)
        return activities[:limit]
