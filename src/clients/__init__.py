"""Client modules for external services."""

from src.clients.sqlite_client import SqliteClient

__all__ = [
    "SqliteClient",
]
