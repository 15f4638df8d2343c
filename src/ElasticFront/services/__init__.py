"""Query service layer for ElasticFront.

Provides the fluent query builder and factory functions that wire it to a
transport built from configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ElasticFront.core.models import ElasticRecord
from ElasticFront.core.query import QueryDefinition
from ElasticFront.services.query import MAX_WINDOW, ElasticQuery
from ElasticFront.sources.elastic.client import ElasticApiClient, SearchClient

if TYPE_CHECKING:
    from ElasticFront.config import ElasticConfig

_RECORD_TYPES: dict[str, type[ElasticRecord]] = {}


def create_client(
    config: ElasticConfig,
    record_type: type[ElasticRecord] | None = None,
    pem_path: str | None = None,
) -> ElasticApiClient:
    """Create an HTTP transport for a record type.

    Hosts declared on the record type win over configured hosts. The CA bundle
    is taken from ``pem_path``, then the record type, then configuration.

    Args:
        config: Engine connection configuration.
        record_type: Record class the client is created for, if any.
        pem_path: Explicit CA bundle path.

    Returns:
        Configured ElasticApiClient instance.
    """
    hosts = config.hosts
    resolved_pem = pem_path or config.pem_path
    if record_type is not None:
        if record_type.hosts:
            hosts = tuple(record_type.hosts)
        if not pem_path and record_type.pem_path:
            resolved_pem = record_type.pem_path

    return ElasticApiClient(hosts, pem_path=resolved_pem, timeout=config.timeout)


def record_type_for(index: str) -> type[ElasticRecord]:
    """Return a plain record class bound to ``index``.

    Used when documents are read without an application-defined record type.
    The same class is returned for repeated calls with one index.
    """
    record_type = _RECORD_TYPES.get(index)
    if record_type is None:
        class_name = "".join(part.capitalize() for part in index.replace("-", "_").split("_") if part)
        record_type = type(f"{class_name or 'Index'}Document", (ElasticRecord,), {"index": index})
        _RECORD_TYPES[index] = record_type
    return record_type


def build_query(
    definition: QueryDefinition,
    client: SearchClient,
    record_type: type[ElasticRecord] | None = None,
) -> ElasticQuery:
    """Translate a configured query definition into a builder.

    Args:
        definition: Parsed query definition.
        client: Transport used to reach the engine.
        record_type: Record class to map hits into; defaults to a plain class
            for ``definition.index``.

    Returns:
        Builder with every configured filter applied, not yet executed.
    """
    query = ElasticQuery(record_type or record_type_for(definition.index), client)

    for name in definition.without_scopes:
        query.without_scope(name)
    for field, value in definition.where.items():
        query.where(field, value)
    for field, value in definition.where_not.items():
        query.where_not(field, value)
    for field, bounds in definition.between.items():
        query.where_between(field, bounds)
    for field, value in definition.dates.items():
        query.where_date(field, value)
    for clause in definition.must:
        query.must(clause)
    for clause in definition.must_not:
        query.must_not(clause)
    for clause in definition.should:
        query.should(clause)

    if definition.select:
        query.select(definition.select)
    if definition.highlight:
        query.highlight_fields(definition.highlight)
    if definition.order_by is not None:
        query.order_by(*definition.order_by)
    query.limit(definition.limit)
    return query


__all__ = [
    "MAX_WINDOW",
    "ElasticQuery",
    "build_query",
    "create_client",
    "record_type_for",
]
