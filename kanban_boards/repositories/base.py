"""Shared TinyDB repository behaviour"""

import logging
from typing import Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from kanban_boards.services.database import Database, Q

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class TinyDBRepository(Generic[M]):
    """Stores one pydantic model per document, keyed by its id field

    Reads return None or empty lists on a miss. Writes return the persisted
    entity and let storage exceptions propagate to the calling service.
    """

    table_name: str = ""
    id_field: str = ""
    model: Type[M]

    def __init__(self, db: Database):
        self.db = db

    @property
    def table(self):
        return getattr(self.db, self.table_name)

    def _to_doc(self, entity: M) -> dict:
        return entity.model_dump(mode="json")

    def _to_entity(self, doc: Optional[dict]) -> Optional[M]:
        if doc is None:
            return None
        return self.model.model_validate(dict(doc))

    def _to_entities(self, docs: Iterable[dict]) -> List[M]:
        return [self._to_entity(doc) for doc in docs]

    def find_by_id(self, entity_id: str) -> Optional[M]:
        return self._to_entity(self.table.get(Q[self.id_field] == entity_id))

    def exists(self, entity_id: str) -> bool:
        return self.table.contains(Q[self.id_field] == entity_id)

    def find_all(self) -> List[M]:
        return self._to_entities(self.table.all())

    def save(self, entity: M) -> M:
        entity_id = getattr(entity, self.id_field)
        self.table.upsert(self._to_doc(entity), Q[self.id_field] == entity_id)
        return entity

    def save_all(self, entities: List[M]) -> List[M]:
        for entity in entities:
            self.save(entity)
        return list(entities)

    def delete_by_id(self, entity_id: str) -> None:
        self.table.remove(Q[self.id_field] == entity_id)

    def delete_by_board_id(self, board_id: str) -> int:
        removed = self.table.remove(Q.board_id == board_id)
        logger.debug(f"Removed {len(removed)} {self.table_name} documents of board {board_id}")
        return len(removed)
