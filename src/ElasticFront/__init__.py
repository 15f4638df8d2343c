"""ElasticFront: fluent Elasticsearch queries that return typed records."""

from __future__ import annotations

from ElasticFront.core.errors import RecordNotFoundError
from ElasticFront.core.models import ElasticRecord, HitMeta
from ElasticFront.core.pagination import Paginator, RequestContext
from ElasticFront.core.relations import HasMany, HasOne, Related, Relation
from ElasticFront.core.scopes import GlobalScope, global_scope
from ElasticFront.services.query import ElasticQuery
from ElasticFront.sources.elastic.client import ElasticApiClient, SearchClient

__version__ = "0.1.0"

__all__ = [
    "ElasticApiClient",
    "ElasticQuery",
    "ElasticRecord",
    "GlobalScope",
    "HasMany",
    "HasOne",
    "HitMeta",
    "Paginator",
    "RecordNotFoundError",
    "Related",
    "Relation",
    "RequestContext",
    "SearchClient",
    "global_scope",
]
