"""Card model"""

from typing import List, Optional

from pydantic import Field

from kanban_boards.models.base import Entity, new_id, now_utc


class Card(Entity):
    card_id: str
    list_id: str
    board_id: str
    title: str
    description: str = ""
    position: int
    member_ids: List[str] = Field(default_factory=list)
    label_ids: List[str] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        list_id: str,
        board_id: str,
        title: str,
        position: int,
        description: Optional[str] = None,
    ) -> "Card":
        now = now_utc()
        return cls(
            card_id=new_id(),
            list_id=list_id,
            board_id=board_id,
            title=title,
            description=description or "",
            position=position,
            created_at=now,
            updated_at=now,
        )

    def clone(self, title: Optional[str], list_id: str, position: int) -> "Card":
        """Copy content and labels; members are not carried over"""
        copy = Card.create(
            list_id=list_id,
            board_id=self.board_id,
            title=title or self.title,
            position=position,
            description=self.description,
        )
        copy.label_ids = list(self.label_ids)
        return copy

    def update_title(self, title: str) -> None:
        self.title = title
        self.mark_updated()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description or ""
        self.mark_updated()

    def update_position(self, position: int) -> None:
        self.position = position
        self.mark_updated()

    def move_to_list(self, list_id: str, position: int) -> None:
        self.list_id = list_id
        self.position = position
        self.mark_updated()

    def assign_member(self, user_id: str) -> bool:
        if user_id in self.member_ids:
            return False
        self.member_ids.append(user_id)
        self.mark_updated()
        return True

    def unassign_member(self, user_id: str) -> bool:
        if user_id not in self.member_ids:
            return False
        self.member_ids.remove(user_id)
        self.mark_updated()
        return True

    def add_label(self, label_id: str) -> bool:
        if label_id in self.label_ids:
            return False
        self.label_ids.append(label_id)
        self.mark_updated()
        return True

    def remove_label(self, label_id: str) -> bool:
        if label_id not in self.label_ids:
            return False
        self.label_ids.remove(label_id)
        self.mark_updated()
        return True
