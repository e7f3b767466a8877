"""
Helpers for building parameterized SQL without an ORM.

Values never go into statement text. Only column names do, and those come
from a resource's static `ColumnMap`.

Example:

    >>> columns = ColumnMap(("handle", "numEmployees"), {"numEmployees": "num_employees"})
    >>> clause = sql_for_partial_update({"numEmployees": 32}, columns)
    >>> clause.text, clause.values
    ('"num_employees"=$1', [32])
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import EmptyUpdateError, UnknownFieldError


@dataclass(frozen=True)
class ColumnMap:
    """
    API field names for one resource and how they map to storage columns.

    `fields` are returned by reads, in order. Names missing from `renames` are
    used as-is. `read_only` fields can be selected but never updated;
    `write_only` fields (e.g. password) can be written but are never selected.
    """

    fields: tuple[str, ...]
    renames: Mapping[str, str] = field(default_factory=dict)
    read_only: frozenset[str] = frozenset()
    write_only: frozenset[str] = frozenset()

    def column(self, name: str) -> str:
        return self.renames.get(name, name)

    def is_writable(self, name: str) -> bool:
        if name in self.read_only:
            return False
        return name in self.fields or name in self.write_only

    def select_list(self, *, only: tuple[str, ...] | None = None) -> str:
        names = self.fields if only is None else only
        parts: list[str] = []
        for name in names:
            col = self.column(name)
            parts.append(col if col == name else f'{col} AS "{name}"')
        return ", ".join(parts)


@dataclass
class CompiledClause:
    text: str = ""
    values: list[Any] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.text)

    def where(self) -> str:
        return f" WHERE {self.text}" if self.text else ""

    def next_placeholder(self) -> str:
        return f"${len(self.values) + 1}"


def sql_for_partial_update(data: Mapping[str, Any], columns: ColumnMap) -> CompiledClause:
    """
    Compile a sparse update into a `SET` clause body and its parameters.

    {"firstName": "Aliya", "age": 32} => '"first_name"=$1, "age"=$2', ["Aliya", 32]

    Placeholder $i is always bound to values[i - 1]. A `None` value sets the
    column to NULL. Keys that are not writable fields raise UnknownFieldError.
    """
    if not data:
        raise EmptyUpdateError()

    fragments: list[str] = []
    values: list[Any] = []
    for key, value in data.items():
        if not columns.is_writable(key):
            raise UnknownFieldError(key)
        values.append(value)
        fragments.append(f'"{columns.column(key)}"=${len(values)}')

    return CompiledClause(text=", ".join(fragments), values=values)
