"""
Storage package for tablestore.

Re-exports the storage port and the concrete backends so downstream code can
import from `tablestore.storage` directly.
"""

from tablestore.storage.abstract import (
    SYSTEM_TABLE,
    AbstractStorage,
    RepositoryStorage,
    StoredRecord,
)
from tablestore.storage.factory import available_backends, build_storage
from tablestore.storage.file import JsonFileStorage
from tablestore.storage.memory import MemoryStorage
from tablestore.storage.session import SessionStorage

__all__ = [
    # Port
    "AbstractStorage",
    "RepositoryStorage",
    "StoredRecord",
    "SYSTEM_TABLE",
    # Backends
    "JsonFileStorage",
    "MemoryStorage",
    "SessionStorage",
    # Factory
    "available_backends",
    "build_storage",
]
