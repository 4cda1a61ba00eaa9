"""TinyDB database service for board data"""

import logging
import threading
from pathlib import Path
from typing import Optional

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage
from tinydb.table import Table

logger = logging.getLogger(__name__)


class SerializedTable(Table):
    """Table whose operations run one at a time across threads

    TinyDB tables share a query cache that is not thread safe, and the API
    serves requests from a thread pool.
    """

    _lock = threading.RLock()

    def insert(self, document):
        with self._lock:
            return super().insert(document)

    def all(self):
        with self._lock:
            return super().all()

    def search(self, cond):
        with self._lock:
            return super().search(cond)

    def get(self, *args, **kwargs):
        with self._lock:
            return super().get(*args, **kwargs)

    def contains(self, *args, **kwargs):
        with self._lock:
            return super().contains(*args, **kwargs)

    def count(self, cond):
        with self._lock:
            return super().count(cond)

    def update(self, *args, **kwargs):
        with self._lock:
            return super().update(*args, **kwargs)

    def upsert(self, document, cond=None):
        with self._lock:
            return super().upsert(document, cond)

    def remove(self, *args, **kwargs):
        with self._lock:
            return super().remove(*args, **kwargs)


class BoardsDB(TinyDB):
    table_class = SerializedTable


class Database:
    """Database service using TinyDB

    An empty path keeps everything in memory, which is what tests and local
    experiments use.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = Path(db_path) if db_path else None
        self.db: Optional[TinyDB] = None

    def initialize(self):
        """Initialize database connection"""
        if self.db is not None:
            return
        if self.db_path is None:
            self.db = BoardsDB(storage=MemoryStorage)
            logger.info("Database connected: in-memory storage")
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.db = BoardsDB(str(self.db_path))
            logger.info(f"Database connected: {self.db_path}")

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None

    def _table(self, name: str):
        self.initialize()
        return self.db.table(name)

    @property
    def users(self):
        return self._table("users")

    @property
    def boards(self):
        return self._table("boards")

    @property
    def board_members(self):
        return self._table("board_members")

    @property
    def lists(self):
        return self._table("lists")

    @property
    def cards(self):
        return self._table("cards")

    @property
    def labels(self):
        return self._table("labels")

    @property
    def comments(self):
        return self._table("comments")

    @property
    def activity(self):
        return self._table("activity")


# Query helper
Q = Query()
