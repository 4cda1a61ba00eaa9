"""Board and board member models"""

from enum import Enum
from typing import Optional

from kanban_boards.models.base import Entity, new_id, now_utc


class BoardRole(str, Enum):
    OWNER = "OWNER"      # Everything, including delete and archive
    ADMIN = "ADMIN"      # Settings, lists and members
    EDITOR = "EDITOR"    # Lists and cards
    MEMBER = "MEMBER"    # Read only
    VIEWER = "VIEWER"    # Read only


class Board(Entity):
    board_id: str
    title: str
    description: str = ""
    is_archived: bool = False
    is_starred: bool = False
    owner_id: str

    @classmethod
    def create(cls, title: str, description: Optional[str], owner_id: str) -> "Board":
        """New boards always start active and unstarred"""
        now = now_utc()
        return cls(
            board_id=new_id(),
            title=title,
            description=description or "",
            is_archived=False,
            is_starred=False,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )

    def update_title(self, title: str) -> None:
        self.title = title
        self.mark_updated()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description or ""
        self.mark_updated()

    def archive(self) -> None:
        self.is_archived = True
        self.mark_updated()

    def unarchive(self) -> None:
        self.is_archived = False
        self.mark_updated()

    def toggle_star(self) -> None:
        self.is_starred = not self.is_starred
        self.mark_updated()

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id


class BoardMember(Entity):
    member_id: str
    board_id: str
    user_id: str
    role: BoardRole
    is_active: bool = True

    @classmethod
    def create(cls, board_id: str, user_id: str, role: BoardRole) -> "BoardMember":
        now = now_utc()
        return cls(
            member_id=new_id(),
            board_id=board_id,
            user_id=user_id,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def change_role(self, role: BoardRole) -> None:
        self.role = role
        self.mark_updated()

    def deactivate(self) -> None:
        self.is_active = False
        self.mark_updated()

    def activate(self) -> None:
        self.is_active = True
        self.mark_updated()

    @property
    def is_owner(self) -> bool:
        return self.role == BoardRole.OWNER
