"""Length-aware pagination values."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar
from urllib.parse import urlencode

T = TypeVar("T")

PAGE_PARAM = "page"


@dataclass(frozen=True, slots=True)
class RequestContext:
    """The incoming request a page is rendered for.

    Attributes:
        path: Request path used as the base of page links.
        query: Query-string parameters of the request.
    """

    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Paginator(Generic[T]):
    """One page of records plus what is needed to link to the others.

    Attributes:
        items: Records on this page, in hit order.
        total: Total number of matching documents.
        per_page: Page size the page was requested with.
        current_page: 1-based page number.
        path: Base path for page links.
        query: Query-string parameters carried into page links.
    """

    items: Sequence[T]
    total: int
    per_page: int
    current_page: int
    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))

    @property
    def last_page(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def on_first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    @property
    def next_page_url(self) -> str | None:
        if not self.has_more_pages:
            return None
        return self.url(self.current_page + 1)

    @property
    def previous_page_url(self) -> str | None:
        if self.current_page <= 1:
            return None
        return self.url(self.current_page - 1)

    def url(self, page: int) -> str:
        """Build the link to ``page``, keeping the carried query parameters."""
        page = max(page, 1)
        parameters = {key: value for key, value in self.query.items() if key != PAGE_PARAM}
        parameters[PAGE_PARAM] = page
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{urlencode(parameters, doseq=True)}"

    def with_query_string(self, query: Mapping[str, Any]) -> Paginator[T]:
        """Return a copy whose links carry ``query``."""
        return replace(self, query=dict(query))

    def map(self, fn: Callable[[T], Any]) -> Paginator[Any]:
        """Return a copy with every item transformed by ``fn``."""
        return replace(self, items=[fn(item) for item in self.items], query=dict(self.query))

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the usual paginated JSON response shape."""
        return {
            "current_page": self.current_page,
            "data": [_item_payload(item) for item in self.items],
            "first_page_url": self.url(1),
            "from": self.first_item,
            "last_page": self.last_page,
            "last_page_url": self.url(self.last_page),
            "next_page_url": self.next_page_url,
            "path": self.path,
            "per_page": self.per_page,
            "prev_page_url": self.previous_page_url,
            "to": self.last_item,
            "total": self.total,
        }


def _item_payload(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return item
