"""
Optional search predicates -> parameterized WHERE clause.

Each resource kind declares a `FilterSet`: the predicates it accepts, in the
order they are checked, and which pairs are lower/upper bounds.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidFilterRangeError, UnknownFieldError
from .sql import CompiledClause

CONTAINS = "contains"
VALUE = "value"
FLAG = "flag"


@dataclass(frozen=True)
class Predicate:
    # `template` holds one "{}" for the placeholder unless kind is FLAG.
    name: str
    template: str
    kind: str = VALUE


@dataclass(frozen=True)
class FilterSet:
    predicates: tuple[Predicate, ...] = ()
    ranges: tuple[tuple[str, str], ...] = ()

    def names(self) -> set[str]:
        return {p.name for p in self.predicates}


FILTER_SETS: dict[str, FilterSet] = {
    "organization": FilterSet(
        predicates=(
            Predicate("name", "name ILIKE {}", CONTAINS),
            Predicate("minEmployees", "num_employees >= {}"),
            Predicate("maxEmployees", "num_employees <= {}"),
        ),
        ranges=(("minEmployees", "maxEmployees"),),
    ),
    "posting": FilterSet(
        predicates=(
            Predicate("title", "title ILIKE {}", CONTAINS),
            Predicate("minSalary", "salary >= {}"),
            Predicate("hasEquity", "equity > 0", FLAG),
        ),
    ),
    "account": FilterSet(),
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _check_ranges(filters: Mapping[str, Any], filter_set: FilterSet) -> None:
    for low_name, high_name in filter_set.ranges:
        low = filters.get(low_name)
        high = filters.get(high_name)
        if low is None or high is None:
            continue
        if low > high:
            raise InvalidFilterRangeError(f"{low_name} cannot be greater than {high_name}.")


def compile_filters(filters: Mapping[str, Any] | None, kind: str) -> CompiledClause:
    """
    Build the WHERE body for `kind` from the active (non-None) filters.

    A fragment's placeholder number is the count of values pushed so far, so
    numbering stays contiguous when predicates are skipped. Flag predicates
    push nothing. No active predicate gives an empty clause.
    """
    try:
        filter_set = FILTER_SETS[kind]
    except KeyError:
        raise ValueError(f"Unknown resource kind: {kind}") from None

    filters = filters or {}
    known = filter_set.names()
    for name in filters:
        if name not in known:
            raise UnknownFieldError(name)

    _check_ranges(filters, filter_set)

    fragments: list[str] = []
    values: list[Any] = []
    for predicate in filter_set.predicates:
        value = filters.get(predicate.name)
        if value is None:
            continue

        if predicate.kind == FLAG:
            if value is True:
                fragments.append(predicate.template)
            continue

        values.append(_like_pattern(str(value)) if predicate.kind == CONTAINS else value)
        fragments.append(predicate.template.format(f"${len(values)}"))

    return CompiledClause(text=" AND ".join(fragments), values=values)
