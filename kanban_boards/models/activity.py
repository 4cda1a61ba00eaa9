"""Activity log models"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from kanban_boards.models.base import new_id, now_utc


class ActivityType(str, Enum):
    BOARD_CREATE = "BOARD_CREATE"
    BOARD_RENAME = "BOARD_RENAME"
    BOARD_UPDATE_DESCRIPTION = "BOARD_UPDATE_DESCRIPTION"
    BOARD_ARCHIVE = "BOARD_ARCHIVE"
    BOARD_UNARCHIVE = "BOARD_UNARCHIVE"
    BOARD_DELETE = "BOARD_DELETE"
    BOARD_ADD_MEMBER = "BOARD_ADD_MEMBER"
    BOARD_REMOVE_MEMBER = "BOARD_REMOVE_MEMBER"
    BOARD_UPDATE_MEMBER_ROLE = "BOARD_UPDATE_MEMBER_ROLE"
    LIST_CREATE = "LIST_CREATE"
    LIST_RENAME = "LIST_RENAME"
    LIST_MOVE = "LIST_MOVE"
    LIST_DELETE = "LIST_DELETE"
    CARD_CREATE = "CARD_CREATE"
    CARD_RENAME = "CARD_RENAME"
    CARD_MOVE = "CARD_MOVE"
    CARD_DUPLICATE = "CARD_DUPLICATE"
    CARD_DELETE = "CARD_DELETE"
    CARD_ASSIGN_MEMBER = "CARD_ASSIGN_MEMBER"
    CARD_UNASSIGN_MEMBER = "CARD_UNASSIGN_MEMBER"
    CARD_ADD_LABEL = "CARD_ADD_LABEL"
    CARD_REMOVE_LABEL = "CARD_REMOVE_LABEL"
    CARD_ADD_COMMENT = "CARD_ADD_COMMENT"


class Activity(BaseModel):
    activity_id: str
    type: ActivityType
    actor_id: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    board_id: Optional[str] = None
    list_id: Optional[str] = None
    card_id: Optional[str] = None
    created_at: datetime = Field(default_factory=now_utc)

    @classmethod
    def create(
        cls,
        type: ActivityType,
        actor_id: str,
        payload: Dict[str, Any],
        board_id: Optional[str] = None,
        list_id: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> "Activity":
        return cls(
            activity_id=new_id(),
            type=type,
            actor_id=actor_id,
            payload=dict(payload),
            board_id=board_id,
            list_id=list_id,
            card_id=card_id,
        )
