"""
Where-clause evaluation shared by find_many, update, delete and count.

A where-clause maps field names to either a literal (strict equality) or an
operator set. Operators inside one field are AND-ed, and so are fields:

    {"age": {"greaterThan": 27, "lessThan": 65}, "name": {"contains": "an"}}
    {"role": {"in": ["admin", "owner"]}, "active": True}

Only operators actually present are evaluated, so `{"equals": None}` matches a
missing or null field while `{"age": None}` places no constraint at all.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from tablestore.errors import InvalidQueryError

Number = Union[StrictInt, StrictFloat]
Record = Dict[str, Any]
WhereQuery = Mapping[str, Any]


class QueryOperators(BaseModel):
    """
    Operator set for a single field. Unknown operator names are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    equals: Any = None
    greater_than: Optional[Number] = Field(None, alias="greaterThan")
    less_than: Optional[Number] = Field(None, alias="lessThan")
    contains: Optional[StrictStr] = None
    in_: Optional[List[Any]] = Field(None, alias="in")

    def has(self, name: str) -> bool:
        return name in self.model_fields_set


# Compiled clause: (field, operators or None for literal equality, literal)
Clause = Tuple[str, Optional[QueryOperators], Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never treats booleans as the integers 0 and 1."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def compile_where(where: Optional[WhereQuery]) -> List[Clause]:
    """
    Parse a where-clause once so it can be applied to many records.

    Raises
    ------
    InvalidQueryError
        If an operator set contains unknown operators or badly typed bounds.
    """
    clauses: List[Clause] = []
    if not where:
        return clauses
    for field, condition in where.items():
        if condition is None:
            continue
        if isinstance(condition, QueryOperators):
            clauses.append((field, condition, None))
        elif isinstance(condition, Mapping):
            try:
                operators = QueryOperators.model_validate(dict(condition))
            except ValidationError as exc:
                raise InvalidQueryError(field, str(exc)) from exc
            clauses.append((field, operators, None))
        else:
            clauses.append((field, None, condition))
    return clauses


def _clause_matches(record: Mapping[str, Any], clause: Clause) -> bool:
    field, operators, literal = clause
    value = record.get(field)

    if operators is None:
        return strict_equals(value, literal)

    if operators.has("equals") and not strict_equals(value, operators.equals):
        return False
    if operators.has("greater_than") and operators.greater_than is not None:
        if not _is_number(value) or value <= operators.greater_than:
            return False
    if operators.has("less_than") and operators.less_than is not None:
        if not _is_number(value) or value >= operators.less_than:
            return False
    if operators.has("contains") and operators.contains is not None:
        if not isinstance(value, str) or operators.contains not in value:
            return False
    if operators.has("in_") and operators.in_ is not None:
        if not any(strict_equals(value, member) for member in operators.in_):
            return False
    return True


def matches(record: Mapping[str, Any], where: Union[WhereQuery, List[Clause], None]) -> bool:
    """Return True when the record satisfies every condition in `where`."""
    clauses = where if isinstance(where, list) else compile_where(where)
    return all(_clause_matches(record, clause) for clause in clauses)


def filter_records(records: Iterable[Record], where: Optional[WhereQuery]) -> List[Record]:
    """Records satisfying `where`, in their original order."""
    clauses = compile_where(where)
    return [record for record in records if matches(record, clauses)]


__all__ = [
    "QueryOperators",
    "WhereQuery",
    "compile_where",
    "filter_records",
    "matches",
    "strict_equals",
]
