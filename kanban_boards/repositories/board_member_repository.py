"""Board member repository"""

from typing import List, Optional

from kanban_boards.models.board import BoardMember
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class BoardMemberRepository(TinyDBRepository[BoardMember]):
    table_name = "board_members"
    id_field = "member_id"
    model = BoardMember

    def find_by_board_id_and_user_id(self, board_id: str, user_id: str) -> Optional[BoardMember]:
        """Return the membership row, preferring an active one"""
        members = self._to_entities(
            self.table.search((Q.board_id == board_id) & (Q.user_id == user_id))
        )
        if not members:
            return None
        active = [m for m in members if m.is_active]
        return active[0] if active else members[0]

    def find_active_by_board_id(self, board_id: str) -> List[BoardMember]:
        members = self._to_entities(
            self.table.search((Q.board_id == board_id) & (Q.is_active == True))  # noqa: E712
        )
        return sorted(members, key=lambda m: m.created_at)

    def find_active_by_user_id(self, user_id: str) -> List[BoardMember]:
        return self._to_entities(
            self.table.search((Q.user_id == user_id) & (Q.is_active == True))  # noqa: E712
        )

    def count_active_by_board_id(self, board_id: str) -> int:
        return self.table.count((Q.board_id == board_id) & (Q.is_active == True))  # noqa: E712
