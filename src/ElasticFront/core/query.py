from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

DEFAULT_LIMIT = 10


def _default_sort() -> dict[str, dict[str, str]]:
    return {"id": {"order": "desc"}}


@dataclass(slots=True)
class QueryState:
    """Mutable accumulation of everything a builder has been told.

    One instance belongs to exactly one builder. Clause lists only ever grow
    while building; compiling a request copies them instead of handing them
    out.

    Attributes:
        must: Clauses every hit must match.
        must_not: Clauses no hit may match.
        should: Optional clauses that raise relevance.
        offset: Number of hits to skip (``from`` on the wire).
        limit: Page size (``size`` on the wire).
        sort: Field to ``{"order": direction}`` mapping. Empty means engine order.
        fields: Source fields to return. Empty means all fields.
        highlight_fields: Field to highlight options mapping.
        skip_scopes: Lowercased global scope names to leave out.
    """

    must: list[Any] = field(default_factory=list)
    must_not: list[Any] = field(default_factory=list)
    should: list[Any] = field(default_factory=list)
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    sort: dict[str, dict[str, str]] = field(default_factory=_default_sort)
    fields: list[str] = field(default_factory=list)
    highlight_fields: dict[str, Any] = field(default_factory=dict)
    skip_scopes: set[str] = field(default_factory=set)


@dataclass(frozen=True, slots=True)
class QueryDefinition:
    """A named query described in configuration rather than code.

    Attributes:
        name: Optional display name.
        index: Index to search.
        where: Field to value(s) exact matches.
        where_not: Field to value(s) exclusions.
        between: Field to inclusive ``(low, high)`` ranges.
        dates: Field to exact date matches.
        must: Raw engine clauses for ``must``.
        must_not: Raw engine clauses for ``must_not``.
        should: Raw engine clauses for ``should``.
        select: Source fields to return; empty means all.
        highlight: Fields to highlight, list or field to options mapping.
        order_by: ``(field, direction)`` or None for the default sort.
        limit: Page size.
        page: 1-based page number.
        without_scopes: Global scope names to skip.
    """

    name: str | None
    index: str
    where: Mapping[str, Any] = field(default_factory=dict)
    where_not: Mapping[str, Any] = field(default_factory=dict)
    between: Mapping[str, tuple[Any, Any]] = field(default_factory=dict)
    dates: Mapping[str, Any] = field(default_factory=dict)
    must: tuple[Any, ...] = ()
    must_not: tuple[Any, ...] = ()
    should: tuple[Any, ...] = ()
    select: tuple[str, ...] = ()
    highlight: Sequence[str] | Mapping[str, Any] = ()
    order_by: tuple[str, str] | None = None
    limit: int = DEFAULT_LIMIT
    page: int = 1
    without_scopes: tuple[str, ...] = ()
