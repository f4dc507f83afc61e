"""
Declarative table schemas.

A schema is a table name plus an ordered mapping of field name to a frozen
`FieldDescriptor`. Descriptors are built with small factory functions and
refined with chainable modifiers; every modifier returns a new descriptor and
leaves the receiver untouched, so one base descriptor can be shared safely:

    from tablestore import schema as s

    users = s.table(
        "users",
        {
            "id": s.number().primary_key(),
            "email": s.string().unique(),
            "age": s.number().optional(),
            "role": s.enum_type(["admin", "user"]).default("user"),
            "joined": s.date().created_at(),
        },
    )

No semantic validation happens here; the repository checks records against
the descriptors when data is written.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, Literal, Optional, Self, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict

from tablestore.utils.ids import utc_timestamp


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"


class PrimaryKeyType(str, Enum):
    """How a primary key value is produced when the caller omits it."""

    CUID = "cuid"  # short random base-36 token
    SERIAL = "serial"  # tableLastId + 1


class FieldDescriptor(BaseModel):
    """
    Type and constraint metadata for one schema attribute.
    """

    model_config = ConfigDict(frozen=True)

    type: FieldType
    required: bool = True
    is_unique: bool = False
    default_value: Any = None
    is_primary_key: bool = False
    primary_key_type: Optional[PrimaryKeyType] = None
    enum_values: Optional[Tuple[Any, ...]] = None
    is_created_field: bool = False
    is_updated_field: bool = False

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    def _evolve(self, **changes: Any) -> Self:
        return self.model_copy(update=changes)

    def unique(self) -> Self:
        return self._evolve(is_unique=True)

    def optional(self) -> Self:
        return self._evolve(required=False)

    def default(self, value: Any) -> Self:
        return self._evolve(default_value=value)


class StringField(FieldDescriptor):
    type: Literal[FieldType.STRING] = FieldType.STRING

    def primary_key(self, kind: Union[PrimaryKeyType, str] = PrimaryKeyType.CUID) -> Self:
        return self._evolve(
            required=False,
            is_primary_key=True,
            is_unique=True,
            primary_key_type=PrimaryKeyType(kind),
        )


class NumberField(FieldDescriptor):
    type: Literal[FieldType.NUMBER] = FieldType.NUMBER

    def primary_key(self, kind: Union[PrimaryKeyType, str] = PrimaryKeyType.SERIAL) -> Self:
        return self._evolve(
            required=False,
            is_primary_key=True,
            is_unique=True,
            primary_key_type=PrimaryKeyType(kind),
        )


class BooleanField(FieldDescriptor):
    type: Literal[FieldType.BOOLEAN] = FieldType.BOOLEAN


class DateField(FieldDescriptor):
    type: Literal[FieldType.DATE] = FieldType.DATE

    # The flags are metadata for callers; the repository stamps its own
    # createdAt/updatedAt keys. The default is the time the schema was built.
    def created_at(self) -> Self:
        return self._evolve(required=False, is_created_field=True, default_value=utc_timestamp())

    def updated_at(self) -> Self:
        return self._evolve(required=False, is_updated_field=True, default_value=utc_timestamp())


class EnumField(FieldDescriptor):
    type: Literal[FieldType.ENUM] = FieldType.ENUM


class TableSchema(BaseModel):
    """
    A table name and its field descriptors, in declaration order.
    """

    model_config = ConfigDict(frozen=True)

    table_name: str
    fields: Dict[str, FieldDescriptor]

    def primary_key(self) -> Optional[Tuple[str, FieldDescriptor]]:
        """Return the first `(name, descriptor)` marked as primary key, if any."""
        for name, descriptor in self.fields.items():
            if descriptor.is_primary_key:
                return name, descriptor
        return None


def string(default: Optional[str] = None) -> StringField:
    return StringField(default_value=default)


def number(default: Optional[Union[int, float]] = None) -> NumberField:
    return NumberField(default_value=default)


def boolean(default: Optional[bool] = None) -> BooleanField:
    return BooleanField(default_value=default)


def date(default: Any = None) -> DateField:
    return DateField(default_value=default)


def enum_type(values: Union[Type[Enum], Iterable[Any]], default: Any = None) -> EnumField:
    """
    Build an enum descriptor from an `Enum` subclass or any iterable of values.
    """
    if isinstance(values, type) and issubclass(values, Enum):
        members = tuple(member.value for member in values)
    else:
        members = tuple(values)
    return EnumField(enum_values=members, default_value=default)


def table(table_name: str, fields: Dict[str, FieldDescriptor]) -> TableSchema:
    return TableSchema(table_name=table_name, fields=dict(fields))


__all__ = [
    "FieldType",
    "PrimaryKeyType",
    "FieldDescriptor",
    "StringField",
    "NumberField",
    "BooleanField",
    "DateField",
    "EnumField",
    "TableSchema",
    "string",
    "number",
    "boolean",
    "date",
    "enum_type",
    "table",
]
