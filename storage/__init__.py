# Storage layer
from .db import connect, SCHEMA_SQL
from .codec import MalformedStateError
from .repository import ProgressStore, SQLiteProgressStore, MemoryProgressStore

__all__ = [
    "connect",
    "SCHEMA_SQL",
    "MalformedStateError",
    "ProgressStore",
    "SQLiteProgressStore",
    "MemoryProgressStore",
]
