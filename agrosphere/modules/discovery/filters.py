"""
Predicate builder for discovery queries.

A query is described as an ordered list of ``FilterSpec``. Each spec holds an
optional input value and a function turning that value into a SQL clause;
specs whose input is missing or blank contribute nothing.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.sql.elements import ColumnElement

from agrosphere.modules.users.models import User


@dataclass(frozen=True)
class FilterSpec:
    name: str
    value: Any
    build: Callable[[Any], ColumnElement]

    @property
    def present(self) -> bool:
        if self.value is None:
            return False
        if isinstance(self.value, str):
            return bool(self.value.strip())
        return True


def build_clauses(specs: Iterable[FilterSpec]) -> List[ColumnElement]:
    return [spec.build(spec.value) for spec in specs if spec.present]


def any_of(specs: Iterable[FilterSpec]) -> Optional[ColumnElement]:
    """OR of the present specs, or None when nothing is present."""
    clauses = build_clauses(specs)
    if not clauses:
        return None
    return or_(*clauses)


def _equals_ci(column):
    return lambda value: func.lower(column) == value.strip().lower()


def _contains_ci(column):
    return lambda pattern: column.ilike(pattern, escape="\\")


def contains_pattern(term: str) -> str:
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def location_match_specs(area: Optional[str], city: Optional[str]) -> List[FilterSpec]:
    return [
        FilterSpec("area", area, _equals_ci(User.area)),
        FilterSpec("city", city, _equals_ci(User.city)),
    ]


def text_search_specs(term: str, include_name: bool = False) -> List[FilterSpec]:
    pattern = contains_pattern(term) if term and term.strip() else None
    return [
        FilterSpec("city", pattern, _contains_ci(User.city)),
        FilterSpec("area", pattern, _contains_ci(User.area)),
        FilterSpec("country", pattern, _contains_ci(User.country)),
        FilterSpec("name", pattern if include_name else None, _contains_ci(User.name)),
    ]
