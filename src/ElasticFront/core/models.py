from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Iterator, Mapping, Optional, Sequence

from dateutil import parser as dt_parser

from ElasticFront.core.relations import Relation
from ElasticFront.core.scopes import GlobalScope

if TYPE_CHECKING:
    from ElasticFront.services.query import ElasticQuery
    from ElasticFront.sources.elastic.client import SearchClient

META_KEY = "__meta"


@dataclass(frozen=True, slots=True)
class HitMeta:
    """Search metadata the engine reported for one hit.

    Attributes:
        score: Relevance score, None when the engine did not score the hit.
        highlight: Field to highlighted fragments mapping, if requested.
    """

    score: Optional[float] = None
    highlight: Optional[Mapping[str, Sequence[str]]] = None

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "highlight": self.highlight}


class ElasticRecord:
    """Base class for records stored in one search index.

    Subclasses describe where their documents live and how they are read::

        class Article(ElasticRecord):
            index = "articles"
            scopes = (GlobalScope("published", lambda q: q.where("status", "published")),)
            relations = {"author": HasOne(Author)}

    Stored fields are reachable as attributes (``article.title``) and as items
    (``article["title"]``).

    Attributes:
        index: Name of the index holding the documents.
        hosts: Engine base URLs overriding the configured ones.
        pem_path: CA bundle used to verify the engine's TLS certificate.
        scopes: Global scopes applied to every query, in order.
        relations: Relation name to resolver. The stored document keeps the
            related value under the resolver's marker key (``_<name>`` unless
            configured otherwise).
    """

    index: ClassVar[str] = ""
    hosts: ClassVar[tuple[str, ...]] = ()
    pem_path: ClassVar[Optional[str]] = None
    scopes: ClassVar[tuple[GlobalScope, ...]] = ()
    relations: ClassVar[Mapping[str, Relation]] = {}

    def __init__(self, **attributes: Any) -> None:
        object.__setattr__(self, "_attributes", {})
        object.__setattr__(self, "_meta", None)
        object.__setattr__(self, "_key", None)
        for name, value in attributes.items():
            self.set_attribute(name, value)

    @classmethod
    def from_storage(
        cls,
        fields: Mapping[str, Any],
        *,
        meta: HitMeta | None = None,
        key: str | None = None,
    ) -> ElasticRecord:
        """Build a record from a stored document without running mutators.

        Args:
            fields: Document fields with relations already resolved.
            meta: Search metadata for the hit, None for direct fetches.
            key: Document ``_id``.

        Returns:
            A new instance of ``cls``.
        """
        record = cls.__new__(cls)
        object.__setattr__(record, "_attributes", dict(fields))
        object.__setattr__(record, "_meta", meta)
        object.__setattr__(record, "_key", key)
        return record

    @classmethod
    def query(cls, client: SearchClient) -> ElasticQuery:
        """Start a new query for this record type."""
        from ElasticFront.services.query import ElasticQuery

        return ElasticQuery(cls, client)

    @classmethod
    def resource_name(cls) -> str:
        return cls.index or cls.__name__

    @property
    def meta(self) -> HitMeta | None:
        return self._meta

    def get_key(self) -> str | None:
        """Return the document ``_id`` the record was loaded from."""
        return self._key

    def set_attribute(self, name: str, value: Any) -> None:
        """Assign one field. Subclasses override this to validate or cast."""
        self._attributes[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def get_datetime(self, name: str) -> datetime | None:
        """Parse a stored ISO-8601 field into a timezone-aware datetime.

        Naive values are taken as UTC. Missing or unparseable values give None.
        """
        value = self._attributes.get(name)
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str) and value.strip():
            try:
                parsed = dt_parser.isoparse(value.strip())
            except (TypeError, ValueError):
                return None
        else:
            return None

        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def to_dict(self, *, include_meta: bool = False) -> dict[str, Any]:
        """Return stored fields, related records converted recursively."""
        out = {name: _plain(value) for name, value in self._attributes.items()}
        if include_meta:
            out[META_KEY] = self._meta.to_dict() if self._meta is not None else None
        return out

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no field {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self.set_attribute(name, value)

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._attributes == other._attributes
            and self._meta == other._meta
            and self._key == other._key
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self._key!r}, fields={self._attributes!r})"


def _plain(value: Any) -> Any:
    if isinstance(value, ElasticRecord):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value
