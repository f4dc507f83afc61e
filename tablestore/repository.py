"""
Repository engine: schema-checked CRUD over a key-value storage backend.

A Repository binds one TableSchema to one storage instance. It keeps no state
between calls; every operation re-reads the full table collection, applies
its change and writes the full collection back. Two repositories over the
same storage and table therefore see each other's writes immediately, but
concurrent writers can lose updates (last full write wins).

Usage:
    from tablestore import MemoryStorage, Repository, schema as s

    users = s.table("users", {"id": s.number().primary_key(), "name": s.string()})
    repo = Repository(users, MemoryStorage())
    repo.create({"name": "John"})            # {"id": 1, "name": "John", "createdAt": ...}
    repo.find_many({"name": {"contains": "Jo"}})
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, Hashable, Iterable, List, Literal, Optional, Set, Tuple, Union

from tablestore.domain.models import SystemRecord
from tablestore.errors import (
    BooleanTypeError,
    DateTypeError,
    EnumTypeError,
    FieldValidationError,
    NotFoundError,
    NotFoundFieldsError,
    NotFoundPrimaryKeyError,
    NumberTypeError,
    ReservedTableNameError,
    StringTypeError,
    UniqueConstraintError,
)
from tablestore.query import WhereQuery, compile_where, filter_records, matches, strict_equals
from tablestore.schema import FieldDescriptor, FieldType, PrimaryKeyType, TableSchema
from tablestore.storage.abstract import SYSTEM_TABLE, RepositoryStorage
from tablestore.utils.ids import random_token, utc_timestamp
from tablestore.utils.logging import get_logger

log = get_logger(__name__)

Record = Dict[str, Any]
RecordId = Union[str, int]
SystemAction = Literal["create", "update"]

# Seen values per unique field.
UniqueIndex = Dict[str, Set[Tuple[bool, Hashable]]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value)
        except ValueError:
            return False
        return True
    return False


def _is_missing(value: Any) -> bool:
    """Absent for the required check: None or any falsy value (0, False, "", [])."""
    return value is None or not value


def _index_key(value: Any) -> Optional[Tuple[bool, Hashable]]:
    """Hashable key consistent with strict_equals, or None if unhashable."""
    try:
        hash(value)
    except TypeError:
        return None
    return isinstance(value, bool), value


def _check_type(name: str, field: FieldDescriptor, value: Any) -> None:
    if field.type is FieldType.STRING:
        if not isinstance(value, str):
            raise StringTypeError(name)
    elif field.type is FieldType.NUMBER:
        if not _is_number(value):
            raise NumberTypeError(name)
    elif field.type is FieldType.BOOLEAN:
        if not isinstance(value, bool):
            raise BooleanTypeError(name)
    elif field.type is FieldType.DATE:
        if not _is_date(value):
            raise DateTypeError(name)
    elif field.type is FieldType.ENUM:
        allowed = field.enum_values
        if allowed and not any(strict_equals(value, member) for member in allowed):
            raise EnumTypeError(name, allowed)


def _to_stored_date(value: Any) -> Any:
    # Same text the JSON backends write, so every backend stores one form.
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class Repository:
    """
    Typed access to one table.

    Parameters
    ----------
    schema : TableSchema
        Field declarations; read-only and shared.
    storage : RepositoryStorage
        Backend holding the table collection and the `system` collection.
    id_length : int
        Length of random (cuid) ids.

    Raises
    ------
    ReservedTableNameError
        If the schema is named after the reserved `system` collection.
    NotFoundFieldsError
        If the schema declares no fields.
    """

    def __init__(self, schema: TableSchema, storage: RepositoryStorage, id_length: int = 7) -> None:
        self.schema = schema
        self.storage = storage
        self.table_name = schema.table_name
        self._id_length = id_length

        if self.table_name == SYSTEM_TABLE:
            raise ReservedTableNameError(self.table_name)
        if not schema.fields:
            raise NotFoundFieldsError(self.table_name)

        self._ensure_table()

    def _ensure_table(self) -> None:
        """Create the system entry and table collection if missing. Idempotent."""
        system = self.storage.get_item(SYSTEM_TABLE)
        if self._system_index(system) is None:
            entry = SystemRecord(
                id=random_token(self._id_length),
                table=self.table_name,
                table_last_id=0,
                table_created_date=utc_timestamp(),
            )
            system.append(entry.to_storage())
            self.storage.set_item(SYSTEM_TABLE, system)
            log.info("Table registered", extra={"table": self.table_name})

        if not self.storage.has_item(self.table_name):
            self.storage.set_item(self.table_name, [])

    def _system_index(self, system: List[Record]) -> Optional[int]:
        for index, entry in enumerate(system):
            if entry.get("table") == self.table_name:
                return index
        return None

    def system_record(self) -> Optional[SystemRecord]:
        """Current bookkeeping entry for this table, if one exists."""
        system = self.storage.get_item(SYSTEM_TABLE)
        index = self._system_index(system)
        if index is None:
            return None
        return SystemRecord.model_validate(system[index])

    def _update_system_table(self, action: SystemAction, last_id: Optional[RecordId] = None) -> None:
        system = self.storage.get_item(SYSTEM_TABLE)
        index = self._system_index(system)
        now = utc_timestamp()

        if index is None:
            entry = SystemRecord(
                id=random_token(self._id_length),
                table=self.table_name,
                table_last_id=last_id if last_id is not None else 0,
                table_created_date=now,
                table_updated_date=now,
            )
            system.append(entry.to_storage())
        else:
            current = SystemRecord.model_validate(system[index])
            changes: Dict[str, Any] = {"table_updated_date": now}
            if last_id is not None:
                changes["table_last_id"] = last_id
            system[index] = current.model_copy(update=changes).to_storage()

        self.storage.set_item(SYSTEM_TABLE, system)
        log.debug(
            "System table updated",
            extra={"table": self.table_name, "action": action, "last_id": last_id},
        )

    def _last_item_id(self) -> Any:
        entry = self.system_record()
        if entry is None or entry.table_last_id is None:
            return 0
        return entry.table_last_id

    def _items(self) -> List[Record]:
        return list(self.storage.get_item(self.table_name))

    def _save_items(self, items: List[Record]) -> None:
        self.storage.set_item(self.table_name, items)

    def _unique_index(self, items: Iterable[Record]) -> UniqueIndex:
        """Collect existing values of every unique field in one pass."""
        unique_fields = [name for name, field in self.schema.fields.items() if field.is_unique]
        index: UniqueIndex = {name: set() for name in unique_fields}
        for item in items:
            for name in unique_fields:
                value = item.get(name)
                key = _index_key(value)
                if value is not None and key is not None:
                    index[name].add(key)
        return index

    def _validate_row(self, data: Mapping[str, Any], unique_index: UniqueIndex) -> None:
        for name, field in self.schema.fields.items():
            value = data.get(name)

            if field.required and _is_missing(value) and not field.has_default:
                raise FieldValidationError(name)
            if value is None:
                continue
            if field.is_unique:
                key = _index_key(value)
                if key is not None and key in unique_index.get(name, ()):
                    raise UniqueConstraintError(name, value)
            _check_type(name, field, value)

    def _remember_unique(self, data: Mapping[str, Any], unique_index: UniqueIndex) -> None:
        for name, seen in unique_index.items():
            value = data.get(name)
            key = _index_key(value)
            if value is not None and key is not None:
                seen.add(key)

    def _normalize(self, data: Mapping[str, Any]) -> Record:
        """Copy `data` with date field values rendered as ISO-8601 strings."""
        record: Record = dict(data)
        for name, field in self.schema.fields.items():
            if field.type is FieldType.DATE and name in record:
                record[name] = _to_stored_date(record[name])
        return record

    def _check_types(self, data: Mapping[str, Any]) -> None:
        """Type-check only the declared fields present in `data`."""
        for name, field in self.schema.fields.items():
            value = data.get(name)
            if value is not None:
                _check_type(name, field, value)

    def validate_data(self, data: Mapping[str, Any]) -> None:
        """
        Check a candidate record against the schema.

        Fields are checked in declaration order; within a field the checks run
        required, then unique, then type. The first failure is raised.

        Raises
        ------
        FieldValidationError
            A required field is missing or falsy with no default.
        UniqueConstraintError
            A unique field's value already exists in the table.
        FieldTypeError
            A value does not match its declared type or enum domain.
        """
        self._validate_row(self._normalize(data), self._unique_index(self._items()))

    def _primary_key(self) -> FieldDescriptor:
        primary = self.schema.primary_key()
        if primary is None:
            raise NotFoundPrimaryKeyError(self.table_name)
        return primary[1]

    @staticmethod
    def _is_serial(field: FieldDescriptor) -> bool:
        return field.primary_key_type is not PrimaryKeyType.CUID

    def generate_id(self) -> RecordId:
        """
        Produce the next id for this table.

        Random (cuid) ids are short base-36 tokens that are never checked
        against existing ids. Serial ids are the System Record's
        `tableLastId + 1`, or 1 when that value is not numeric.
        """
        field = self._primary_key()
        if not self._is_serial(field):
            return random_token(self._id_length)
        last_id = self._last_item_id()
        return last_id + 1 if _is_number(last_id) else 1

    def create(self, data: Mapping[str, Any]) -> Record:
        """Validate, assign an id if absent, stamp `createdAt` and store one record."""
        record = self._normalize(data)
        items = self._items()
        self._validate_row(record, self._unique_index(items))
        primary = self._primary_key()

        generated: Optional[RecordId] = None
        if record.get("id") is None:
            generated = self.generate_id()
            record["id"] = generated
        record["createdAt"] = utc_timestamp()

        items.append(record)
        self._save_items(items)
        self._update_system_table(
            "create", generated if generated is not None and self._is_serial(primary) else None
        )
        log.debug("Record created", extra={"table": self.table_name, "id": record["id"]})
        return dict(record)

    def create_many(self, rows: Iterable[Mapping[str, Any]]) -> List[Record]:
        """
        Validate and store a batch of records with one write.

        The whole batch is validated (against existing data and against
        earlier rows of the same batch) before anything is written. Serial ids
        are assigned as `start + i + 1` for row `i`, and all rows share one
        `createdAt` timestamp.
        """
        batch = [self._normalize(row) for row in rows]
        if not batch:
            return []

        items = self._items()
        unique_index = self._unique_index(items)
        for row in batch:
            self._validate_row(row, unique_index)
            self._remember_unique(row, unique_index)

        primary = self._primary_key()
        serial = self._is_serial(primary)
        start = self._last_item_id() if serial else 0
        if not _is_number(start):
            start = 0
        now = utc_timestamp()

        last_id: Optional[RecordId] = None
        created: List[Record] = []
        for i, row in enumerate(batch):
            if row.get("id") is None:
                if serial:
                    row["id"] = last_id = start + i + 1
                else:
                    row["id"] = random_token(self._id_length)
            row["createdAt"] = now
            created.append(row)

        items.extend(created)
        self._save_items(items)
        self._update_system_table("create", last_id)
        log.debug("Records created", extra={"table": self.table_name, "rows": len(created)})
        return [dict(record) for record in created]

    def find_many(self, where: Optional[WhereQuery] = None) -> List[Record]:
        """All records matching `where` in insertion order; the full table if omitted."""
        items = self._items()
        if not where:
            return items
        return filter_records(items, where)

    def find_unique(self, where: Mapping[str, Any]) -> Optional[Record]:
        """
        First record whose fields strictly equal every key/value in `where`.

        `where` is a flat equality map, not operator syntax. Returns None when
        nothing matches.
        """
        for item in self._items():
            if all(strict_equals(item.get(key), value) for key, value in where.items()):
                return item
        return None

    def find_unique_or_raise(self, where: Mapping[str, Any]) -> Record:
        """Like find_unique, but raise NotFoundError when nothing matches."""
        record = self.find_unique(where)
        if record is None:
            raise NotFoundError(f"No record in '{self.table_name}' matches {dict(where)!r}")
        return record

    def update(self, where: WhereQuery, data: Mapping[str, Any]) -> List[Record]:
        """
        Merge `data` into every record matching `where` and stamp `updatedAt`.

        The System Record is touched even when nothing matched. Returns the
        updated records.
        """
        patch = self._normalize(data)
        self._check_types(patch)
        clauses = compile_where(where)
        now = utc_timestamp()

        rewritten: List[Record] = []
        updated: List[Record] = []
        for item in self._items():
            if matches(item, clauses):
                item = {**item, **patch, "updatedAt": now}
                updated.append(item)
            rewritten.append(item)

        self._save_items(rewritten)
        self._update_system_table("update")
        log.debug("Records updated", extra={"table": self.table_name, "matched": len(updated)})
        return [dict(record) for record in updated]

    def upsert(self, data: Mapping[str, Any]) -> Record:
        """
        Replace the record with the same `id`, or append `data` if none exists.

        Replacement swaps the whole stored record (no field merge). A missing
        `id` is generated, which always results in an insert.
        """
        record = self._normalize(data)
        self._check_types(record)
        primary = self._primary_key()
        generated: Optional[RecordId] = None
        if record.get("id") is None:
            generated = self.generate_id()
            record["id"] = generated
        record["updatedAt"] = utc_timestamp()

        items = self._items()
        position = next(
            (i for i, item in enumerate(items) if strict_equals(item.get("id"), record["id"])),
            None,
        )
        action: SystemAction
        if position is None:
            items.append(record)
            action = "create"
        else:
            items[position] = record
            action = "update"

        self._save_items(items)
        self._update_system_table(
            action, generated if generated is not None and self._is_serial(primary) else None
        )
        log.debug(
            "Record upserted", extra={"table": self.table_name, "id": record["id"], "action": action}
        )
        return dict(record)

    def delete(self, where: WhereQuery) -> List[Record]:
        """Remove every record matching `where` and return the removed records."""
        clauses = compile_where(where)
        kept: List[Record] = []
        deleted: List[Record] = []
        for item in self._items():
            (deleted if matches(item, clauses) else kept).append(item)

        self._save_items(kept)
        self._update_system_table("update")
        log.debug("Records deleted", extra={"table": self.table_name, "deleted": len(deleted)})
        return deleted

    def count(self, where: Optional[WhereQuery] = None) -> int:
        """Number of records matching `where`, or the table size if omitted."""
        return len(self.find_many(where))


__all__ = ["Record", "RecordId", "Repository"]
