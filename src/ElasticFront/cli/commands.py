"""Command implementations for ElasticFront CLI.

Encapsulates the work behind each command, separated from CLI parameter
handling and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass

from ElasticFront.config import AppConfig
from ElasticFront.core.errors import RecordNotFoundError
from ElasticFront.core.models import ElasticRecord
from ElasticFront.renderers import OutputWriter
from ElasticFront.renderers.console import render_text
from ElasticFront.services import build_query, record_type_for
from ElasticFront.sources.elastic.client import SearchClient
from ElasticFront.utils.log import log


@dataclass(slots=True)
class SearchCommand:
    """Run every configured query and hand each page to the output writer."""

    config: AppConfig
    client: SearchClient
    output_writer: OutputWriter

    def execute(self) -> None:
        """Execute all configured queries in order."""
        queries = self.config.queries.queries
        if not queries:
            log.warning("No queries configured")
            return

        multiple = len(queries) > 1
        for idx, definition in enumerate(queries, start=1):
            if multiple:
                log.info("=== Query %d/%d ===", idx, len(queries))
            if definition.name:
                log.info("name=%s", definition.name)

            query = build_query(definition, self.client)
            log.debug("Search body: %s", query.get_search_body())
            page = query.paginate(definition.page)
            log.info("Fetched %d of %d documents from %s", len(page), page.total, definition.index)

            self.output_writer.write_query_result(page, definition)


@dataclass(slots=True)
class CountCommand:
    """Count matches of every configured query."""

    config: AppConfig
    client: SearchClient

    def execute(self) -> dict[str, int]:
        """Return counts keyed by query name (or index when unnamed)."""
        counts: dict[str, int] = {}
        for definition in self.config.queries.queries:
            label = definition.name or definition.index
            counts[label] = build_query(definition, self.client).count()
            log.info("%s: %d", label, counts[label])
        return counts


@dataclass(slots=True)
class FindCommand:
    """Fetch one document by id and log it."""

    client: SearchClient
    index: str
    document_id: str

    def execute(self) -> ElasticRecord:
        """Fetch and log the document.

        Raises:
            RecordNotFoundError: If the index has no such document.
        """
        record_type = record_type_for(self.index)
        record = record_type.query(self.client).find(self.document_id)
        if record is None:
            raise RecordNotFoundError(self.index, self.document_id)
        for line in render_text([record]).splitlines():
            log.info(line)
        return record
