"""
Storage backend factory.

Selects a backend from Settings so the facade and the CLI build storage the
same way.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, get_args

from tablestore.config import Settings, StorageBackend, get_settings
from tablestore.storage.abstract import AbstractStorage
from tablestore.storage.file import JsonFileStorage
from tablestore.storage.memory import MemoryStorage
from tablestore.storage.session import SessionStorage


def _backend_factories(settings: Settings) -> Dict[str, Callable[[], AbstractStorage]]:
    """Registry of available backends."""
    return {
        "memory": lambda: MemoryStorage(),
        "file": lambda: JsonFileStorage(settings.data_dir),
        "session": lambda: SessionStorage(),
    }


def available_backends() -> List[str]:
    return sorted(get_args(StorageBackend))


def build_storage(settings: Optional[Settings] = None) -> AbstractStorage:
    """
    Create the storage backend named by `settings.storage_backend`.

    Raises
    ------
    ValueError
        If the backend name is unknown.
    """
    settings = settings or get_settings()
    factories = _backend_factories(settings)
    if settings.storage_backend not in factories:
        raise ValueError(
            f"Unknown storage backend '{settings.storage_backend}'. "
            f"Available: {', '.join(factories)}"
        )
    return factories[settings.storage_backend]()


__all__ = ["available_backends", "build_storage"]
