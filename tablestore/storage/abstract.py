"""
Storage port for tablestore.

The repository engine only needs a key -> list-of-records store. Concrete
backends (memory, JSON files, session) implement the RepositoryStorage
protocol; class-based implementations may inherit AbstractStorage instead.

Every write is a full replace of the collection stored under a key. The key
"system" is reserved for per-table bookkeeping owned by the engine.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Protocol, runtime_checkable

StoredRecord = Dict[str, Any]

SYSTEM_TABLE = "system"


@runtime_checkable
class RepositoryStorage(Protocol):
    """
    Common interface all storage backends must implement.
    """

    def get_item(self, key: str) -> List[StoredRecord]:
        """
        Return the collection stored under `key`.

        Returns
        -------
        list of dict
            The stored records in insertion order, or an empty list if the key
            is absent.
        """
        ...

    def set_item(self, key: str, value: List[StoredRecord]) -> None:
        """Replace the whole collection stored under `key`."""
        ...

    def delete_item(self, key: str) -> None:
        ...

    def has_item(self, key: str) -> bool:
        ...

    def get_all_items(self) -> List[List[StoredRecord]]:
        """Every stored collection, one list per key."""
        ...

    def clear(self) -> None:
        ...

    def size(self) -> int:
        """Number of keys currently stored."""
        ...


class AbstractStorage(abc.ABC):
    """
    Optional ABC helper for class-based backends.

    Subclasses implement the raw key operations; `keys()` and `close()` have
    sensible defaults for backends without extra resources.
    """

    @abc.abstractmethod
    def get_item(self, key: str) -> List[StoredRecord]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def set_item(self, key: str, value: List[StoredRecord]) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def delete_item(self, key: str) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def has_item(self, key: str) -> bool:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def keys(self) -> List[str]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def clear(self) -> None:  # pragma: no cover
        raise NotImplementedError

    def get_all_items(self) -> List[List[StoredRecord]]:
        return [self.get_item(key) for key in self.keys()]

    def size(self) -> int:
        return len(self.keys())

    def close(self) -> None:
        """Release backend resources. No-op by default."""


__all__ = [
    "AbstractStorage",
    "RepositoryStorage",
    "StoredRecord",
    "SYSTEM_TABLE",
]
