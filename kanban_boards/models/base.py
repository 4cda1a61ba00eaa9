"""Shared helpers for domain models"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Entity(BaseModel):
    """Base for persisted aggregates: timestamps plus an update hook"""

    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    def mark_updated(self) -> None:
        self.updated_at = now_utc()
