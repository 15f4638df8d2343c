"""Fluent query builder and executor for one record type."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ElasticFront.core.errors import RecordNotFoundError
from ElasticFront.core.models import ElasticRecord
from ElasticFront.core.pagination import PAGE_PARAM, Paginator, RequestContext
from ElasticFront.core.query import QueryState
from ElasticFront.core.scopes import apply_scopes, normalize_scope_name
from ElasticFront.sources.elastic.client import SearchClient
from ElasticFront.sources.elastic.parser import parse_count, parse_hits, parse_source, parse_total
from ElasticFront.sources.elastic.query import (
    compile_count_body,
    compile_search_body,
    normalize_date,
    normalize_highlight_fields,
    range_clause,
    resolve_term_key,
    terms_clause,
    wrap_values,
)
from ElasticFront.utils.log import log

MAX_WINDOW = 10000


class ElasticQuery:
    """Chainable query against the index of one record type.

    Filter methods return the builder itself::

        articles = (
            Article.query(client)
            .where("status", "published")
            .where_between("views", (10, 100))
            .order_by("published_at")
            .limit(20)
            .get()
        )

    A builder accumulates state for a single logical query. Reusing it for an
    unrelated query merges the filters of both.

    Global scopes declared on the record type run once, right before the first
    request this builder compiles.
    """

    def __init__(self, record_type: type[ElasticRecord], client: SearchClient) -> None:
        """Initialize a builder.

        Args:
            record_type: Record class whose index is searched and whose
                instances are returned.
            client: Transport used to reach the engine.
        """
        self.record_type = record_type
        self.client = client
        self.state = QueryState()
        self._scopes_applied = False

    @property
    def index(self) -> str:
        if not self.record_type.index:
            raise ValueError(f"{self.record_type.__name__}.index is not set")
        return self.record_type.index

    # Clauses

    def must(self, clause: Any) -> ElasticQuery:
        self.state.must.append(clause)
        return self

    def must_not(self, clause: Any) -> ElasticQuery:
        self.state.must_not.append(clause)
        return self

    def should(self, clause: Any) -> ElasticQuery:
        self.state.should.append(clause)
        return self

    def where(self, field: str, value: Any, preserve_key: bool = False) -> ElasticQuery:
        """Match documents whose ``field`` equals ``value`` (or any of its items)."""
        return self.where_in(field, wrap_values(value), preserve_key)

    def where_in(self, field: str, values: Iterable[Any], preserve_key: bool = False) -> ElasticQuery:
        """Match documents whose ``field`` equals any of ``values``.

        Args:
            field: Field name.
            values: Accepted values.
            preserve_key: Use ``field`` as written instead of resolving the
                ``.keyword`` sub-field for string values.
        """
        values = list(values)
        if not preserve_key:
            field = resolve_term_key(field, values)
        return self.must(terms_clause(field, values))

    def where_not_in(self, field: str, values: Iterable[Any], preserve_key: bool = False) -> ElasticQuery:
        """Exclude documents whose ``field`` equals any of ``values``."""
        values = list(values)
        if not preserve_key:
            field = resolve_term_key(field, values)
        return self.must_not(terms_clause(field, values))

    def where_not(self, field: str, value: Any, preserve_key: bool = False) -> ElasticQuery:
        return self.where_not_in(field, wrap_values(value), preserve_key)

    def where_between(self, field: str, values: Sequence[Any]) -> ElasticQuery:
        """Match documents whose ``field`` lies in the inclusive ``(low, high)`` range."""
        low, high = values[0], values[1]
        return self.must(range_clause(field, low, high))

    def where_date(self, field: str, value: Any) -> ElasticQuery:
        """Match an exact date. Date fields have no ``.keyword`` sub-field."""
        return self.where(field, normalize_date(value), True)

    # Shape of the response

    def select(self, fields: Iterable[str]) -> ElasticQuery:
        self.state.fields = list(fields)
        return self

    def highlight_fields(self, fields: Iterable[str] | Mapping[str, Any]) -> ElasticQuery:
        """Request highlights for a list of fields or a field to options mapping."""
        self.state.highlight_fields = normalize_highlight_fields(fields)
        return self

    def offset(self, offset: int) -> ElasticQuery:
        self.state.offset = offset
        return self

    def limit(self, limit: int) -> ElasticQuery:
        self.state.limit = limit
        return self

    def take(self, limit: int) -> ElasticQuery:
        return self.limit(limit)

    def order_by(self, field: str, direction: str = "desc") -> ElasticQuery:
        """Sort by a single field, replacing any previous sort."""
        self.state.sort = {field: {"order": direction}}
        return self

    def without_scope(self, name: str) -> ElasticQuery:
        """Leave the named global scope out of this query."""
        normalized = normalize_scope_name(name)
        if self._scopes_applied:
            log.warning("Global scopes already applied; without_scope(%s) has no effect", normalized)
        self.state.skip_scopes.add(normalized)
        return self

    def get_search_body(self) -> dict[str, Any]:
        """Apply global scopes and compile the ``_search`` request body."""
        self._apply_scopes()
        return compile_search_body(self.state)

    # Execution

    def get(self, fields: Iterable[str] = ()) -> list[ElasticRecord]:
        """Run the search and return the mapped records of the current page.

        Args:
            fields: Projection overriding ``select`` when non-empty.
        """
        self._apply_scopes()
        fields = list(fields)
        if fields:
            self.state.fields = fields

        response = self.client.search(self.index, self.get_search_body())
        return parse_hits(response, self.record_type)

    def count(self) -> int:
        """Count matching documents. Paging, sorting and projection are ignored."""
        self._apply_scopes()
        response = self.client.count(self.index, compile_count_body(self.state))
        return parse_count(response)

    def all(self) -> list[ElasticRecord]:
        """Return up to ``MAX_WINDOW`` matching records."""
        return self.limit(MAX_WINDOW).get()

    def find(self, document_id: Any) -> ElasticRecord | None:
        """Fetch one document by id, or None when the index has no such document."""
        source = self.client.get_source(self.index, str(document_id), ignore_not_found=True)
        if source is None:
            return None
        return parse_source(source, self.record_type, key=str(document_id))

    def find_or_fail(self, document_id: Any) -> ElasticRecord:
        """Fetch one document by id.

        Raises:
            RecordNotFoundError: If the document does not exist.
        """
        record = self.find(document_id)
        if record is None:
            raise RecordNotFoundError(self.record_type.resource_name(), document_id)
        return record

    def first(self) -> ElasticRecord | None:
        records = self.get()
        return records[0] if records else None

    def first_or_fail(self) -> ElasticRecord:
        """Return the first matching record.

        Raises:
            RecordNotFoundError: If nothing matches.
        """
        record = self.first()
        if record is None:
            raise RecordNotFoundError(self.record_type.resource_name())
        return record

    def paginate(
        self,
        page: int | None = None,
        limit: int | None = None,
        *,
        request: RequestContext | None = None,
    ) -> Paginator[ElasticRecord]:
        """Fetch one page of records together with the total hit count.

        Args:
            page: 1-based page number. Falls back to the ``page`` query
                parameter of ``request``, then to 1.
            limit: Page size overriding the current limit.
            request: Request the page is rendered for; supplies the link path
                and the query string carried into page links.

        Returns:
            Paginator over the mapped records.

        Raises:
            ValueError: If an explicit ``page`` or ``limit`` is not a positive
                integer.
        """
        self._apply_scopes()
        request = request or RequestContext()

        if page is None:
            page = _page_from_query(request.query)
        else:
            page = _positive_int(page, "page")

        if limit is not None:
            self.limit(_positive_int(limit, "limit"))

        self.offset((page - 1) * self.state.limit)

        response = self.client.search(self.index, self.get_search_body())
        total = parse_total(response)
        items = parse_hits(response, self.record_type)
        log.debug(
            "Paginated search: index=%s page=%d per_page=%d total=%d",
            self.index,
            page,
            self.state.limit,
            total,
        )

        return Paginator(
            items=items,
            total=total,
            per_page=self.state.limit,
            current_page=page,
            path=request.path,
        ).with_query_string(request.query)

    def _apply_scopes(self) -> None:
        """Run the record type's global scopes once per builder."""
        if self._scopes_applied:
            return
        self._scopes_applied = True
        applied = apply_scopes(self, self.record_type.scopes, self.state.skip_scopes)
        if applied:
            log.debug("Global scopes applied: index=%s scopes=%s", self.record_type.index, applied)


def _positive_int(value: Any, name: str) -> int:
    """Coerce ``value`` to an int of at least 1."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a positive integer, got {value!r}") from None
    if number < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return number


def _page_from_query(query: Mapping[str, Any]) -> int:
    """Read the current page from request parameters, defaulting to 1."""
    raw = query.get(PAGE_PARAM)
    try:
        return _positive_int(raw, PAGE_PARAM)
    except ValueError:
        return 1
