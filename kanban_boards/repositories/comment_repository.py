"""Comment repository"""

from collections import Counter
from typing import Dict, Iterable, List

from kanban_boards.models.comment import Comment
from kanban_boards.repositories.base import TinyDBRepository
from kanban_boards.services.database import Q


class CommentRepository(TinyDBRepository[Comment]):
    table_name = "comments"
    id_field = "comment_id"
    model = Comment

    def find_by_card_id(self, card_id: str) -> List[Comment]:
        """Oldest comment first"""
        comments = self._to_entities(self.table.search(Q.card_id == card_id))
        return sorted(comments, key=lambda c: c.created_at)

    def delete_by_card_ids(self, card_ids: Iterable[str]) -> int:
        card_ids = list(card_ids)
        if not card_ids:
            return 0
        return len(self.table.remove(Q.card_id.one_of(card_ids)))

    def count_by_card_ids(self, card_ids: Iterable[str]) -> Dict[str, int]:
        """Comment count per card; cards without comments are left out"""
        card_ids = list(card_ids)
        if not card_ids:
            return {}
        counts = Counter(doc["card_id"] for doc in self.table.search(Q.card_id.one_of(card_ids)))
        return dict(counts)
