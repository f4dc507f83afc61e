"""
Pytest configuration for tablestore.

Provides fixtures for:
- In-memory storage
- Reusable table schemas
- Repositories bound to fresh storage
- Settings pointing at a temporary data directory
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tablestore import schema as s
from tablestore.config import Settings
from tablestore.repository import Repository
from tablestore.schema import TableSchema
from tablestore.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def people_schema() -> TableSchema:
    """
    Serial primary key, one required string, one optional number.
    """
    return s.table(
        "people",
        {
            "id": s.number().primary_key("serial"),
            "name": s.string(),
            "age": s.number().optional(),
        },
    )


@pytest.fixture
def members_schema() -> TableSchema:
    """
    Random (cuid) primary key and every field type.
    """
    return s.table(
        "members",
        {
            "id": s.string().primary_key("cuid"),
            "name": s.string(),
            "age": s.number(),
            "email": s.string().unique().optional(),
            "is_active": s.boolean(True),
            "role": s.enum_type(["admin", "user"]).optional(),
            "birthday": s.date().optional(),
        },
    )


@pytest.fixture
def people(people_schema: TableSchema, storage: MemoryStorage) -> Repository:
    return Repository(people_schema, storage)


@pytest.fixture
def members(members_schema: TableSchema, storage: MemoryStorage) -> Repository:
    return Repository(members_schema, storage)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings for a file store under the test's temp directory.
    """
    return Settings(
        storage_backend="file",
        data_dir=tmp_path / "data",
        log_level="DEBUG",
    )
