"""Relation resolvers for embedded related documents.

Documents keep related data under a marker key (``_author``); the resolver
declared for the relation turns that stored value into records when a hit is
mapped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from ElasticFront.core.models import ElasticRecord

RELATION_MARKER = "_"


class Relation(ABC):
    """Resolver for one relation field of a record type."""

    stored_key: Optional[str] = None

    def key_for(self, name: str) -> str:
        """Return the document key the relation value is stored under."""
        return self.stored_key or f"{RELATION_MARKER}{name}"

    @abstractmethod
    def related_model(self, value: Any) -> Any:
        """Turn the stored relation value into the related representation."""


@dataclass(frozen=True, slots=True)
class HasOne(Relation):
    """A single embedded related document."""

    record_type: type[ElasticRecord]
    stored_key: Optional[str] = None

    def related_model(self, value: Any) -> ElasticRecord | None:
        if value is None:
            return None
        return _hydrate(value, self.record_type)


@dataclass(frozen=True, slots=True)
class HasMany(Relation):
    """A list of embedded related documents."""

    record_type: type[ElasticRecord]
    stored_key: Optional[str] = None

    def related_model(self, value: Any) -> list[ElasticRecord]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [_hydrate(item, self.record_type) for item in value]


@dataclass(frozen=True, slots=True)
class Related(Relation):
    """Relation resolved by an arbitrary callable."""

    resolver: Callable[[Any], Any]
    stored_key: Optional[str] = None

    def related_model(self, value: Any) -> Any:
        return self.resolver(value)


def _hydrate(value: Any, record_type: type[ElasticRecord]) -> ElasticRecord:
    from ElasticFront.core.models import ElasticRecord
    from ElasticFront.sources.elastic.parser import parse_source

    if isinstance(value, ElasticRecord):
        return value
    if not isinstance(value, dict):
        raise TypeError(
            f"Related {record_type.__name__} must be stored as an object, got {type(value).__name__}"
        )
    return parse_source(value, record_type)
