"""
Persistent JSON file storage backend.

Each key is stored as one JSON document (`<quoted-key>.json`) inside a data
directory. Writes go to a temporary file that is atomically moved into place,
so readers never observe a half-written collection. The move is retried on
PermissionError, which some platforms raise while another process briefly
holds the target open.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Union
from urllib.parse import quote, unquote

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tablestore.errors import StorageError
from tablestore.storage.abstract import AbstractStorage, StoredRecord
from tablestore.utils.logging import get_logger

log = get_logger(__name__)

_SUFFIX = ".json"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
    retry=retry_if_exception_type(PermissionError),
    reraise=True,
)
def _replace(source: Path, target: Path) -> None:
    os.replace(source, target)


class JsonFileStorage(AbstractStorage):
    """
    Directory of JSON documents, one per key.

    Parameters
    ----------
    directory : str or Path
        Where documents are kept. Created (with parents) if missing.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{_SUFFIX}"

    def get_item(self, key: str) -> List[StoredRecord]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Collection '{key}' at {path} is not valid JSON") from exc
        if not isinstance(data, list):
            raise StorageError(f"Collection '{key}' at {path} is not a JSON array")
        return data

    def set_item(self, key: str, value: List[StoredRecord]) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=_SUFFIX)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(value), f, default=_json_default)
            _replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        log.debug("Collection written", extra={"key": key, "rows": len(value), "path": str(path)})

    def delete_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def has_item(self, key: str) -> bool:
        return self._path(key).exists()

    def keys(self) -> List[str]:
        return sorted(
            unquote(path.name[: -len(_SUFFIX)])
            for path in self.directory.glob(f"*{_SUFFIX}")
            if not path.name.startswith(".tmp-")
        )

    def clear(self) -> None:
        for key in self.keys():
            self.delete_item(key)


__all__ = ["JsonFileStorage"]
