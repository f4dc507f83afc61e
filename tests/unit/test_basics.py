from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts import seed_data
from tablestore import config
from tablestore.config import Settings
from tablestore.storage import JsonFileStorage, MemoryStorage, SessionStorage, build_storage
from tablestore.storage.factory import available_backends
from tablestore.utils.ids import random_token, utc_timestamp


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TABLESTORE_STORAGE", raising=False)
    monkeypatch.delenv("TABLESTORE_ID_LENGTH", raising=False)
    config.get_settings.cache_clear()
    try:
        settings = config.get_settings()
        assert settings.storage_backend == "memory"
        assert settings.id_length == 7
        assert settings.log_level
    finally:
        config.get_settings.cache_clear()


def test_settings_read_environment_aliases(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TABLESTORE_STORAGE", "file")
    monkeypatch.setenv("TABLESTORE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TABLESTORE_ID_LENGTH", "12")
    settings = Settings()
    assert settings.storage_backend == "file"
    assert settings.data_dir == tmp_path
    assert settings.id_length == 12


def test_settings_reject_unknown_backend() -> None:
    with pytest.raises(ValueError):
        Settings(storage_backend="redis")


def test_available_backends() -> None:
    assert available_backends() == ["file", "memory", "session"]


def test_build_storage_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_storage(Settings(storage_backend="memory")), MemoryStorage)

    file_store = build_storage(Settings(storage_backend="file", data_dir=tmp_path / "d"))
    assert isinstance(file_store, JsonFileStorage)
    assert file_store.directory == tmp_path / "d"

    session_store = build_storage(Settings(storage_backend="session"))
    assert isinstance(session_store, SessionStorage)
    session_store.close()


def test_random_token_is_short_base36() -> None:
    token = random_token()
    assert len(token) == 7
    assert token.isalnum() and token == token.lower()
    assert len(random_token(12)) == 12


def test_utc_timestamp_is_iso_with_z_suffix() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp and "." in stamp


def test_seed_script_generates_deterministic_unique_users() -> None:
    first = seed_data._generate_users(5, seed=123)
    second = seed_data._generate_users(5, seed=123)
    assert first == second
    assert len({user["email"] for user in first}) == 5
    assert json.dumps(first)


def test_seed_script_loads_batches(tmp_path: Path) -> None:
    total = seed_data._load_into_store(tmp_path, rows=7, batch_size=3, seed=1)
    assert total == 7
    users = JsonFileStorage(tmp_path).get_item("users")
    assert [user["id"] for user in users] == list(range(1, 8))

    # reseeding appends without unique-email collisions
    assert seed_data._load_into_store(tmp_path, rows=2, batch_size=5, seed=1) == 9
