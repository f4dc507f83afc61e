"""
Session-scoped storage backend.

Behaves like JsonFileStorage, but lives in a private temporary directory that
is removed when the storage is closed or garbage collected.
"""

from __future__ import annotations

import shutil
import tempfile
import weakref
from typing import Optional

from tablestore.storage.file import JsonFileStorage
from tablestore.utils.logging import get_logger

log = get_logger(__name__)


class SessionStorage(JsonFileStorage):
    def __init__(self, prefix: str = "tablestore-session-", base_dir: Optional[str] = None) -> None:
        super().__init__(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
        self._finalizer = weakref.finalize(
            self, shutil.rmtree, str(self.directory), ignore_errors=True
        )
        log.debug("Session storage opened", extra={"path": str(self.directory)})

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Remove the session directory and everything in it."""
        if self._finalizer.alive:
            self._finalizer()
            log.debug("Session storage closed", extra={"path": str(self.directory)})


__all__ = ["SessionStorage"]
