"""Elasticsearch response parser.

Maps raw hits and stored documents onto record types, resolving declared
relations on the way.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ElasticFront.core.models import ElasticRecord, HitMeta


def parse_hits(response: Mapping[str, Any], record_type: type[ElasticRecord]) -> list[ElasticRecord]:
    """Map every hit of a ``_search`` response, keeping hit order."""
    return [parse_hit(hit, record_type) for hit in _hits(response)]


def parse_hit(hit: Mapping[str, Any], record_type: type[ElasticRecord]) -> ElasticRecord:
    """Map one raw hit into a record carrying its score and highlight."""
    meta = HitMeta(
        score=hit.get("_score", 0),
        highlight=hit.get("highlight"),
    )
    source = hit.get("_source") or {}
    key = hit.get("_id")
    return parse_source(source, record_type, meta=meta, key=str(key) if key is not None else None)


def parse_source(
    source: Mapping[str, Any],
    record_type: type[ElasticRecord],
    *,
    meta: HitMeta | None = None,
    key: str | None = None,
) -> ElasticRecord:
    """Build a record from a stored document.

    Args:
        source: Stored document fields.
        record_type: Record class to build.
        meta: Search metadata, None for documents fetched by id.
        key: Document ``_id`` if known.

    Returns:
        A record built through ``record_type.from_storage``.
    """
    fields = load_relations(source, record_type)
    return record_type.from_storage(fields, meta=meta, key=key)


def parse_total(response: Mapping[str, Any]) -> int:
    """Read the total hit count, accepting both object and legacy integer forms."""
    hits = response.get("hits")
    if not isinstance(hits, Mapping):
        return 0
    total = hits.get("total")
    if isinstance(total, Mapping):
        total = total.get("value", 0)
    if isinstance(total, bool) or not isinstance(total, int):
        return 0
    return total


def parse_count(response: Mapping[str, Any]) -> int:
    return int(response.get("count", 0) or 0)


def load_relations(source: Mapping[str, Any], record_type: type[ElasticRecord]) -> dict[str, Any]:
    """Replace stored relation values with resolved related records.

    For every relation declared on ``record_type`` whose marker key is present,
    the marker key is dropped and the resolved value is stored under the
    relation name. Other keys are copied unchanged.

    Args:
        source: Stored document fields.
        record_type: Record class declaring the relations.

    Returns:
        A new field mapping; ``source`` is not modified.
    """
    fields = dict(source)
    for name, relation in record_type.relations.items():
        stored_key = relation.key_for(name)
        if stored_key not in fields:
            continue
        value = fields.pop(stored_key)
        fields[name] = relation.related_model(value)
    return fields


def _hits(response: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
    hits = response.get("hits")
    if not isinstance(hits, Mapping):
        return []
    items = hits.get("hits", [])
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, Mapping)]
