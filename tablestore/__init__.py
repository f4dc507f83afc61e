"""
tablestore - a minimal embedded record store.

Persists lists of records into a pluggable key-value backend, enforces a
declared schema (types, required/unique/default, primary-key generation) and
answers structured queries by linear scan:

- Schemas built from immutable field descriptors
- A shared where-clause matcher (equals, greaterThan, lessThan, contains, in)
- Per-table bookkeeping in a reserved `system` collection
- Memory, JSON file and session storage backends
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from tablestore import schema
from tablestore.config import Settings, get_settings
from tablestore.database import Database
from tablestore.domain.models import SystemRecord
from tablestore.errors import (
    BooleanTypeError,
    DateTypeError,
    EnumTypeError,
    FieldTypeError,
    FieldValidationError,
    InvalidQueryError,
    NotFoundError,
    NotFoundFieldsError,
    NotFoundPrimaryKeyError,
    NumberTypeError,
    ReservedTableNameError,
    StorageError,
    StringTypeError,
    TableStoreError,
    UniqueConstraintError,
)
from tablestore.query import QueryOperators
from tablestore.repository import Repository
from tablestore.schema import TableSchema
from tablestore.storage import (
    AbstractStorage,
    JsonFileStorage,
    MemoryStorage,
    RepositoryStorage,
    SessionStorage,
    build_storage,
)
from tablestore.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Engine
    "Database",
    "Repository",
    "QueryOperators",
    "SystemRecord",
    # Schema
    "schema",
    "TableSchema",
    # Storage
    "AbstractStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "RepositoryStorage",
    "SessionStorage",
    "build_storage",
    # Errors
    "TableStoreError",
    "FieldValidationError",
    "FieldTypeError",
    "StringTypeError",
    "NumberTypeError",
    "BooleanTypeError",
    "DateTypeError",
    "EnumTypeError",
    "UniqueConstraintError",
    "NotFoundPrimaryKeyError",
    "NotFoundFieldsError",
    "NotFoundError",
    "InvalidQueryError",
    "ReservedTableNameError",
    "StorageError",
    # Logging
    "configure_logging",
    "get_logger",
]
