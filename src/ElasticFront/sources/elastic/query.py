"""Elasticsearch request compiler.

Turns accumulated builder state into request bodies and builds the individual
clause shapes the builder appends.
"""

from __future__ import annotations

import copy
from datetime import date
from typing import Any, Iterable, Mapping

from ElasticFront.core.query import QueryState

KEYWORD_SUFFIX = ".keyword"


def resolve_term_key(field: str, values: Iterable[Any]) -> str:
    """Pick the field name an exact-match filter should target.

    String values are matched against the non-analyzed ``.keyword`` sub-field;
    a single non-string value makes the raw field the target.

    Args:
        field: Field name as the caller wrote it.
        values: Values the filter matches.

    Returns:
        ``field`` or ``field.keyword``.
    """
    for value in values:
        if not isinstance(value, str):
            return field
    return f"{field}{KEYWORD_SUFFIX}"


def wrap_values(value: Any) -> list[Any]:
    """Normalize a scalar or collection filter value into a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def terms_clause(field: str, values: Iterable[Any]) -> dict[str, Any]:
    return {"terms": {field: list(values)}}


def range_clause(field: str, low: Any, high: Any) -> dict[str, Any]:
    return {"range": {field: {"gte": low, "lte": high}}}


def normalize_date(value: Any) -> Any:
    """Render ``date``/``datetime`` values the way the engine stores them."""
    if isinstance(value, date):
        return value.isoformat()
    return value


def normalize_highlight_fields(fields: Iterable[str] | Mapping[str, Any]) -> dict[str, Any]:
    """Turn a list of field names into a field to options mapping.

    Mappings pass through unchanged.
    """
    if isinstance(fields, Mapping):
        return dict(fields)
    return {field: {} for field in fields}


def compile_bool_query(state: QueryState) -> dict[str, Any]:
    """Compile the boolean part shared by search and count requests."""
    return {
        "bool": {
            "must": copy.deepcopy(state.must),
            "must_not": copy.deepcopy(state.must_not),
            "should": copy.deepcopy(state.should),
        }
    }


def compile_search_body(state: QueryState) -> dict[str, Any]:
    """Compile a ``_search`` request body from builder state.

    ``sort``, ``_source`` and ``highlight`` only appear when set.
    """
    body: dict[str, Any] = {
        "size": state.limit,
        "from": state.offset,
        "query": compile_bool_query(state),
    }

    if state.highlight_fields:
        body["highlight"] = {"fields": copy.deepcopy(state.highlight_fields)}

    if state.fields:
        body["_source"] = list(state.fields)

    if state.sort:
        body["sort"] = copy.deepcopy(state.sort)

    return body


def compile_count_body(state: QueryState) -> dict[str, Any]:
    """Compile a ``_count`` request body: the boolean query and nothing else."""
    return {"query": compile_bool_query(state)}
