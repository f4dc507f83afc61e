"""
Exception hierarchy for tablestore.

All validation errors are raised synchronously before any storage write, so a
failed call never leaves a table partially modified.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class TableStoreError(Exception):
    """Base class for every error raised by tablestore."""


class FieldValidationError(TableStoreError):
    """A required field is missing and has no default value."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"Field '{field}' is required.")


class UniqueConstraintError(TableStoreError):
    """A value for a unique field already exists in the table."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Field '{field}' must be unique; value {value!r} already exists.")


class FieldTypeError(TableStoreError):
    """Base class for per-type mismatches."""

    expected: str = "unknown"

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"Field '{field}' must be of type {self.expected}.")


class StringTypeError(FieldTypeError):
    expected = "string"


class NumberTypeError(FieldTypeError):
    expected = "number"


class BooleanTypeError(FieldTypeError):
    expected = "boolean"


class DateTypeError(FieldTypeError):
    expected = "date"


class EnumTypeError(FieldTypeError):
    expected = "enum"

    def __init__(self, field: str, enum_values: Iterable[Any]) -> None:
        self.enum_values = tuple(enum_values)
        allowed = ", ".join(str(value) for value in self.enum_values)
        super().__init__(field, f"Field '{field}' must be one of: {allowed}.")


class NotFoundPrimaryKeyError(TableStoreError):
    """The schema declares no primary key, so ids cannot be generated."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table '{table}' has no primary key.")


class NotFoundFieldsError(TableStoreError):
    """The schema declares no fields at all."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table '{table}' has no fields defined.")


class NotFoundError(TableStoreError):
    """A lookup the caller required to succeed found nothing."""


class InvalidQueryError(TableStoreError):
    """A where-clause could not be interpreted."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid condition for field '{field}': {message}")


class StorageError(TableStoreError):
    """A storage backend could not read or write a collection."""


class ReservedTableNameError(TableStoreError):
    """The table name collides with a key owned by the engine."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table name '{table}' is reserved.")


__all__ = [
    "TableStoreError",
    "FieldValidationError",
    "UniqueConstraintError",
    "FieldTypeError",
    "StringTypeError",
    "NumberTypeError",
    "BooleanTypeError",
    "DateTypeError",
    "EnumTypeError",
    "NotFoundPrimaryKeyError",
    "NotFoundFieldsError",
    "NotFoundError",
    "InvalidQueryError",
    "ReservedTableNameError",
    "StorageError",
]
