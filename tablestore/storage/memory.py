"""
Ephemeral in-process storage backend.
"""

from __future__ import annotations

import copy
from typing import Dict, List

from tablestore.storage.abstract import AbstractStorage, StoredRecord


class MemoryStorage(AbstractStorage):
    """
    Dict-backed storage. Collections are copied on the way in and out, so
    callers never hold references into the stored state.
    """

    def __init__(self) -> None:
        self._data: Dict[str, List[StoredRecord]] = {}

    def get_item(self, key: str) -> List[StoredRecord]:
        return copy.deepcopy(self._data.get(key, []))

    def set_item(self, key: str, value: List[StoredRecord]) -> None:
        self._data[key] = copy.deepcopy(list(value))

    def delete_item(self, key: str) -> None:
        self._data.pop(key, None)

    def has_item(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data = {}


__all__ = ["MemoryStorage"]
