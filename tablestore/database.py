"""
Top-level facade.

A Database owns exactly one storage backend, built from explicit Settings
(or supplied directly), and hands out repositories bound to it. There is no
process-wide instance; create as many databases as needed.

Usage:
    from tablestore import Database, Settings, schema as s

    with Database(Settings(storage_backend="session")) as db:
        users = db.create_repository(s.table("users", {"id": s.number().primary_key()}))
        users.create({})
"""

from __future__ import annotations

from types import TracebackType
from typing import List, Optional, Type

from tablestore.config import Settings, get_settings
from tablestore.domain.models import SystemRecord
from tablestore.errors import ReservedTableNameError
from tablestore.repository import Repository
from tablestore.schema import TableSchema
from tablestore.storage.abstract import SYSTEM_TABLE, RepositoryStorage
from tablestore.storage.factory import build_storage
from tablestore.utils.logging import get_logger

log = get_logger(__name__)


class Database:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[RepositoryStorage] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage if storage is not None else build_storage(self.settings)
        log.debug(
            "Database opened",
            extra={"backend": type(self.storage).__name__},
        )

    def create_repository(self, schema: TableSchema) -> Repository:
        return Repository(schema, self.storage, id_length=self.settings.id_length)

    def tables(self) -> List[SystemRecord]:
        """Bookkeeping entries for every registered table."""
        return [SystemRecord.model_validate(entry) for entry in self.storage.get_item(SYSTEM_TABLE)]

    def drop_table(self, table_name: str) -> bool:
        """
        Remove a table's collection and its bookkeeping entry.

        Returns True if anything was removed.
        """
        if table_name == SYSTEM_TABLE:
            raise ReservedTableNameError(table_name)
        system = self.storage.get_item(SYSTEM_TABLE)
        remaining = [entry for entry in system if entry.get("table") != table_name]
        existed = self.storage.has_item(table_name) or len(remaining) != len(system)
        self.storage.delete_item(table_name)
        self.storage.set_item(SYSTEM_TABLE, remaining)
        if existed:
            log.info("Table dropped", extra={"table": table_name})
        return existed

    def close(self) -> None:
        close = getattr(self.storage, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


__all__ = ["Database"]
