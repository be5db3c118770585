"""tabrelay local persistence layer."""

from tabrelay.db.connection import Database
from tabrelay.db.migrations import MIGRATIONS, run_migrations
from tabrelay.db.repository import KeyValueRepository

__all__ = [
    "Database",
    "KeyValueRepository",
    "run_migrations",
    "MIGRATIONS",
]
