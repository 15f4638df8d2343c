"""Base classes for output writers.

Provides abstraction for writing query results to console or files.
Separates control flow from output logic for better testability.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from ElasticFront.core.models import ElasticRecord
from ElasticFront.core.pagination import Paginator
from ElasticFront.core.query import QueryDefinition


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_query_result(
        self,
        page: Paginator[ElasticRecord],
        query: QueryDefinition,
    ) -> None:
        """Write results from a single query.

        Args:
            page: Page of records the query produced.
            query: The configured query that produced them.
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Finalize output (e.g., write accumulated results to file).

        Args:
            action: The CLI command name (e.g., 'search').
        """


@dataclass(slots=True)
class MultiOutputWriter(OutputWriter):
    """Delegate output to multiple writers."""

    writers: Sequence[OutputWriter]

    def write_query_result(
        self,
        page: Paginator[ElasticRecord],
        query: QueryDefinition,
    ) -> None:
        """Send query results to all writers."""
        for writer in self.writers:
            writer.write_query_result(page, query)

    def finalize(self, action: str) -> None:
        """Finalize all writers."""
        for writer in self.writers:
            writer.finalize(action)
