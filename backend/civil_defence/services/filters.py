"""
Query filter helpers shared by the list endpoints.
"""

from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query


def apply_search(query: Query, term: Optional[str], *columns: Any) -> Query:
    """
    Case-insensitive substring match of ``term`` against any of ``columns``.

    Blank terms leave the query unchanged.
    """
    if not term or not term.strip():
        return query

    pattern = f"%{term.strip()}%"
    return query.filter(or_(*(column.ilike(pattern) for column in columns)))


def apply_equals(query: Query, column: Any, value: Optional[Any]) -> Query:
    """Filter on ``column == value`` unless value is None."""
    if value is None:
        return query
    return query.filter(column == getattr(value, "value", value))
