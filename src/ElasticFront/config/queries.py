"""Query domain configuration: named queries described in YAML."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ElasticFront.config.common import (
    expect_int,
    expect_list,
    expect_mapping,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_required_value,
)
from ElasticFront.core.query import DEFAULT_LIMIT, QueryDefinition

_ALLOWED_KEYS = {
    "NAME",
    "index",
    "where",
    "where_not",
    "between",
    "date",
    "must",
    "must_not",
    "should",
    "select",
    "highlight",
    "order_by",
    "limit",
    "page",
    "without_scopes",
}
_ALLOWED_DIRECTIONS = {"asc", "desc"}


@dataclass(frozen=True, slots=True)
class QueriesConfig:
    """Store validated query definitions."""

    queries: tuple[QueryDefinition, ...]


def load_queries(raw: Mapping[str, Any]) -> QueriesConfig:
    """Load the ``queries`` list.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed query definitions in configured order.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If keys are unknown or required keys are missing.
    """
    value = raw.get("queries")
    if value is None:
        return QueriesConfig(queries=())
    items = expect_list(value, "queries")
    return QueriesConfig(
        queries=tuple(parse_query_definition(item, f"queries[{idx}]") for idx, item in enumerate(items))
    )


def check_queries(config: QueriesConfig) -> None:
    """Validate query domain constraints.

    Raises:
        ValueError: If values violate query constraints.
    """
    for idx, query in enumerate(config.queries):
        config_key = f"queries[{idx}]"
        if not query.index.strip():
            raise ValueError(f"{config_key}.index must not be empty")
        if query.limit <= 0:
            raise ValueError(f"{config_key}.limit must be positive")
        if query.page <= 0:
            raise ValueError(f"{config_key}.page must be positive")
        if query.order_by is not None and query.order_by[1] not in _ALLOWED_DIRECTIONS:
            raise ValueError(f"{config_key}.order_by.direction must be one of {sorted(_ALLOWED_DIRECTIONS)}")


def parse_query_definition(value: Any, config_key: str) -> QueryDefinition:
    """Parse one query mapping into ``QueryDefinition``.

    Args:
        value: Query mapping value.
        config_key: Full key path used in error messages.

    Returns:
        Parsed query definition.

    Raises:
        TypeError: If query shape/types are invalid.
        ValueError: If query keys are invalid.
    """
    section = expect_mapping(value, config_key)
    unknown = set(section.keys()) - _ALLOWED_KEYS
    if unknown:
        raise ValueError(f"{config_key} has unknown keys: {sorted(unknown)}")

    name = None
    if "NAME" in section:
        name = expect_str(section["NAME"], f"{config_key}.NAME").strip() or None

    highlight: Any = get_optional_value(section, "highlight", [])
    if isinstance(highlight, Mapping):
        highlight = dict(expect_mapping(highlight, f"{config_key}.highlight"))
    else:
        highlight = tuple(expect_str_list(highlight, f"{config_key}.highlight"))

    return QueryDefinition(
        name=name,
        index=expect_str(get_required_value(section, "index", f"{config_key}.index"), f"{config_key}.index").strip(),
        where=dict(expect_mapping(get_optional_value(section, "where", {}), f"{config_key}.where")),
        where_not=dict(expect_mapping(get_optional_value(section, "where_not", {}), f"{config_key}.where_not")),
        between=_parse_ranges(get_optional_value(section, "between", {}), f"{config_key}.between"),
        dates=dict(expect_mapping(get_optional_value(section, "date", {}), f"{config_key}.date")),
        must=tuple(expect_list(get_optional_value(section, "must", []), f"{config_key}.must")),
        must_not=tuple(expect_list(get_optional_value(section, "must_not", []), f"{config_key}.must_not")),
        should=tuple(expect_list(get_optional_value(section, "should", []), f"{config_key}.should")),
        select=tuple(expect_str_list(get_optional_value(section, "select", []), f"{config_key}.select")),
        highlight=highlight,
        order_by=_parse_order_by(section.get("order_by"), f"{config_key}.order_by"),
        limit=expect_int(get_optional_value(section, "limit", DEFAULT_LIMIT), f"{config_key}.limit"),
        page=expect_int(get_optional_value(section, "page", 1), f"{config_key}.page"),
        without_scopes=tuple(
            expect_str_list(get_optional_value(section, "without_scopes", []), f"{config_key}.without_scopes")
        ),
    )


def _parse_ranges(value: Any, config_key: str) -> dict[str, tuple[Any, Any]]:
    """Parse ``field: [low, high]`` pairs."""
    ranges: dict[str, tuple[Any, Any]] = {}
    for field, bounds in expect_mapping(value, config_key).items():
        items = expect_list(bounds, f"{config_key}.{field}")
        if len(items) != 2:
            raise ValueError(f"{config_key}.{field} must be a [low, high] pair")
        ranges[field] = (items[0], items[1])
    return ranges


def _parse_order_by(value: Any, config_key: str) -> tuple[str, str] | None:
    """Parse ``{field, direction}`` or a bare field name."""
    if value is None:
        return None
    if isinstance(value, str):
        return (value.strip(), "desc")
    section = expect_mapping(value, config_key)
    field = expect_str(get_required_value(section, "field", f"{config_key}.field"), f"{config_key}.field").strip()
    direction = expect_str(get_optional_value(section, "direction", "desc"), f"{config_key}.direction")
    return (field, direction.strip().lower())
