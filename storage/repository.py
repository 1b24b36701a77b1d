import datetime as dt
import logging
import sqlite3
from typing import Optional, Protocol

from core import ProgressState
from core.config import STORAGE_KEY
from storage import codec

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Durable home of the serialized ProgressState blob."""

    def load(self) -> Optional[ProgressState]:
        """Return the last saved state, or None if absent or unreadable."""
        ...

    def save(self, state: ProgressState) -> bool:
        """Overwrite the saved state. Returns False if the write failed."""
        ...


class SQLiteProgressStore:
    """Keeps the progress blob under one key of the kv_store table."""

    def __init__(self, conn: sqlite3.Connection, key: str = STORAGE_KEY):
        self.conn = conn
        self.key = key

    def load(self) -> Optional[ProgressState]:
        try:
            row = self.conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (self.key,)
            ).fetchone()
        except sqlite3.Error:
            logger.warning("Failed to read progress %r, starting empty", self.key, exc_info=True)
            return None
        if row is None:
            return None
        try:
            return codec.loads(row["value"])
        except codec.MalformedStateError as e:
            logger.warning("Discarding malformed progress %r: %s", self.key, e)
            return None

    def save(self, state: ProgressState) -> bool:
        now = dt.datetime.now().isoformat(timespec="seconds")
        try:
            with self.conn:
                self.conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, codec.dumps(state), now),
                )
        except sqlite3.Error:
            logger.exception("Failed to save progress %r", self.key)
            return False
        return True


class MemoryProgressStore:
    """In-process store holding the serialized blob; nothing touches disk."""

    def __init__(self, initial: Optional[str] = None):
        self.blob = initial
        self.saves = 0

    def load(self) -> Optional[ProgressState]:
        if self.blob is None:
            return None
        try:
            return codec.loads(self.blob)
        except codec.MalformedStateError as e:
            logger.warning("Discarding malformed in-memory progress: %s", e)
            return None

    def save(self, state: ProgressState) -> bool:
        self.blob = codec.dumps(state)
        self.saves += 1
        return True
