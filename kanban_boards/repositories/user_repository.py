"""User repository"""

from typing import List

from kanban_boards.models.user import User
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class UserRepository(TinyDBRepository[User]):
    table_name = "users"
    id_field = "user_id"
    model = User

    def find_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        return self._to_entities(self.table.search(Q.user_id.one_of(list(user_ids))))
