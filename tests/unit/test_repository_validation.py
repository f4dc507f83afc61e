from __future__ import annotations

from datetime import datetime

import pytest

from tablestore import schema as s
from tablestore.errors import (
    BooleanTypeError,
    DateTypeError,
    EnumTypeError,
    FieldValidationError,
    NotFoundFieldsError,
    NotFoundPrimaryKeyError,
    NumberTypeError,
    ReservedTableNameError,
    StringTypeError,
    UniqueConstraintError,
)
from tablestore.repository import Repository
from tablestore.storage import MemoryStorage


def test_missing_required_field_names_the_field(members: Repository) -> None:
    with pytest.raises(FieldValidationError) as exc_info:
        members.create({"age": 25})
    assert exc_info.value.field == "name"


def test_empty_string_counts_as_missing(members: Repository) -> None:
    with pytest.raises(FieldValidationError):
        members.create({"name": "", "age": 25})


@pytest.mark.parametrize("falsy", [0, 0.0, False, [], None])
def test_falsy_required_value_counts_as_missing(storage: MemoryStorage, falsy) -> None:
    strict = s.table(
        "strict",
        {"id": s.number().primary_key(), "age": s.number(), "ok": s.boolean()},
    )
    repo = Repository(strict, storage)
    with pytest.raises(FieldValidationError) as exc_info:
        repo.create({"age": falsy, "ok": True})
    assert exc_info.value.field == "age"
    assert repo.count() == 0


def test_false_required_boolean_counts_as_missing(storage: MemoryStorage) -> None:
    flags = s.table("flags", {"id": s.number().primary_key(), "ok": s.boolean()})
    repo = Repository(flags, storage)
    with pytest.raises(FieldValidationError) as exc_info:
        repo.create({"ok": False})
    assert exc_info.value.field == "ok"


def test_falsy_values_are_kept_for_optional_and_defaulted_fields(
    members: Repository, people: Repository
) -> None:
    assert members.create({"name": "Zero", "age": 1, "is_active": False})["is_active"] is False
    assert people.create({"name": "Baby", "age": 0})["age"] == 0


def test_falsy_required_value_in_a_batch_names_the_field(storage: MemoryStorage) -> None:
    strict = s.table("strict", {"id": s.number().primary_key(), "age": s.number()})
    repo = Repository(strict, storage)
    with pytest.raises(FieldValidationError) as exc_info:
        repo.create_many([{"age": 5}, {"age": 0}])
    assert exc_info.value.field == "age"
    assert repo.count() == 0
    assert repo.system_record().table_last_id == 0


def test_default_value_satisfies_required(members: Repository) -> None:
    # is_active is required but has a default of True
    created = members.create({"name": "John", "age": 25})
    assert "is_active" not in created


@pytest.mark.parametrize(
    ("data", "error"),
    [
        ({"name": 123, "age": 25}, StringTypeError),
        ({"name": "John", "age": "25"}, NumberTypeError),
        ({"name": "John", "age": True}, NumberTypeError),
        ({"name": "John", "age": 25, "is_active": "yes"}, BooleanTypeError),
        ({"name": "John", "age": 25, "role": "root"}, EnumTypeError),
        ({"name": "John", "age": 25, "birthday": "not a date"}, DateTypeError),
    ],
)
def test_type_mismatches_raise_the_matching_error(
    members: Repository, data: dict, error: type
) -> None:
    with pytest.raises(error) as exc_info:
        members.create(data)
    assert exc_info.value.field in data


def test_enum_error_lists_allowed_values(members: Repository) -> None:
    with pytest.raises(EnumTypeError) as exc_info:
        members.create({"name": "John", "age": 25, "role": "root"})
    assert exc_info.value.enum_values == ("admin", "user")
    assert "admin, user" in str(exc_info.value)


def test_dates_accept_datetimes_and_iso_strings(members: Repository) -> None:
    members.create({"name": "A", "age": 1, "birthday": datetime(1990, 5, 17)})
    members.create({"name": "B", "age": 2, "birthday": "1990-05-17"})
    members.create({"name": "C", "age": 3, "birthday": "1990-05-17T10:00:00Z"})
    assert members.count() == 3


def test_date_objects_are_stored_as_iso_strings(members: Repository) -> None:
    created = members.create({"name": "A", "age": 1, "birthday": datetime(1990, 5, 17)})
    assert created["birthday"] == "1990-05-17T00:00:00"
    assert members.find_unique({"id": created["id"]}) == created

    members.update({"id": created["id"]}, {"birthday": datetime(1991, 1, 2, 3, 4)})
    assert members.find_unique({"id": created["id"]})["birthday"] == "1991-01-02T03:04:00"


def test_enum_without_values_accepts_anything(storage: MemoryStorage) -> None:
    open_enum = s.table(
        "open_enum",
        {"id": s.number().primary_key(), "kind": s.enum_type([])},
    )
    repo = Repository(open_enum, storage)
    assert repo.create({"kind": "anything"})["kind"] == "anything"


def test_first_failing_field_in_declaration_order_wins(members: Repository) -> None:
    # name is declared before age, so its error is raised first
    with pytest.raises(StringTypeError):
        members.create({"name": 123, "age": "invalid"})


def test_unique_violation_on_single_insert(members: Repository) -> None:
    members.create({"name": "John", "age": 25, "email": "j@example.com"})
    with pytest.raises(UniqueConstraintError) as exc_info:
        members.create({"name": "Jane", "age": 30, "email": "j@example.com"})
    assert exc_info.value.field == "email"
    assert members.count() == 1


def test_unique_violation_within_a_batch(members: Repository) -> None:
    with pytest.raises(UniqueConstraintError):
        members.create_many(
            [
                {"name": "A", "age": 1, "email": "same@example.com"},
                {"name": "B", "age": 2, "email": "same@example.com"},
            ]
        )
    assert members.count() == 0


def test_unique_violation_against_existing_data_in_a_batch(members: Repository) -> None:
    members.create({"name": "A", "age": 1, "email": "taken@example.com"})
    with pytest.raises(UniqueConstraintError):
        members.create_many(
            [
                {"name": "B", "age": 2, "email": "free@example.com"},
                {"name": "C", "age": 3, "email": "taken@example.com"},
            ]
        )
    assert members.count() == 1


def test_batch_is_validated_before_anything_is_written(people: Repository) -> None:
    with pytest.raises(FieldValidationError):
        people.create_many([{"name": "A"}, {"age": 3}])
    assert people.count() == 0
    assert people.system_record().table_last_id == 0


def test_supplied_primary_key_must_be_unique(people: Repository) -> None:
    people.create({"id": 10, "name": "A"})
    with pytest.raises(UniqueConstraintError):
        people.create({"id": 10, "name": "B"})


def test_validate_data_is_public_and_does_not_write(people: Repository) -> None:
    people.validate_data({"name": "John"})
    with pytest.raises(FieldValidationError):
        people.validate_data({"age": 3})
    assert people.count() == 0


def test_schema_without_primary_key_cannot_create(storage: MemoryStorage) -> None:
    plain = s.table("plain", {"name": s.string()})
    repo = Repository(plain, storage)
    with pytest.raises(NotFoundPrimaryKeyError):
        repo.create({"name": "John"})
    with pytest.raises(NotFoundPrimaryKeyError):
        repo.create({"id": "given", "name": "John"})
    with pytest.raises(NotFoundPrimaryKeyError):
        repo.create_many([{"name": "John"}])
    with pytest.raises(NotFoundPrimaryKeyError):
        repo.generate_id()


def test_validation_runs_before_the_primary_key_lookup(storage: MemoryStorage) -> None:
    plain = s.table("plain", {"name": s.string()})
    repo = Repository(plain, storage)
    with pytest.raises(FieldValidationError) as exc_info:
        repo.create({})
    assert exc_info.value.field == "name"
    with pytest.raises(FieldValidationError) as exc_info:
        repo.create_many([{"name": "John"}, {"name": ""}])
    assert exc_info.value.field == "name"
    with pytest.raises(StringTypeError):
        repo.upsert({"name": 42})
    assert repo.count() == 0


def test_schema_without_fields_is_rejected(storage: MemoryStorage) -> None:
    with pytest.raises(NotFoundFieldsError):
        Repository(s.table("empty", {}), storage)


def test_system_table_name_is_reserved(storage: MemoryStorage) -> None:
    with pytest.raises(ReservedTableNameError):
        Repository(s.table("system", {"id": s.number().primary_key()}), storage)


def test_update_checks_patch_types(people: Repository) -> None:
    people.create({"name": "John", "age": 25})
    with pytest.raises(NumberTypeError):
        people.update({"name": "John"}, {"age": "old"})
    assert people.find_unique({"name": "John"})["age"] == 25
