"""JSON output renderers.

Renders pages of records into JSON-serializable objects and writes them to a
timestamped file.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable

from ElasticFront.core.models import ElasticRecord
from ElasticFront.core.pagination import Paginator
from ElasticFront.core.query import QueryDefinition
from ElasticFront.renderers.base import OutputWriter
from ElasticFront.utils.log import log


def render_json(records: Iterable[ElasticRecord]) -> list[dict]:
    """Render records into JSON-serializable Python objects.

    Each object carries the document fields, its ``_id`` under ``__key`` and
    the hit metadata under ``__meta``.
    """
    out: list[dict] = []
    for record in records:
        payload = record.to_dict(include_meta=True)
        payload["__key"] = record.get_key()
        out.append(payload)
    return out


class JsonFileWriter(OutputWriter):
    """Accumulate results and write to JSON file on finalize."""

    def __init__(self, base_dir: str) -> None:
        """Initialize JSON writer.

        Args:
            base_dir: Base output directory.
        """
        self.output_dir = Path(base_dir) / "json"
        self.all_results: list[dict] = []

    def write_query_result(
        self,
        page: Paginator[ElasticRecord],
        query: QueryDefinition,
    ) -> None:
        """Accumulate query result for later writing."""
        payload = page.to_dict()
        payload["data"] = render_json(page.items)
        self.all_results.append(
            {
                "name": query.name,
                "index": query.index,
                "page": payload,
            }
        )

    def finalize(self, action: str) -> None:
        """Write accumulated results to JSON file.

        Args:
            action: The CLI command name (used in filename).
        """
        payload = json.dumps(self.all_results, ensure_ascii=False, indent=2, default=str)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.json"
        output_path.write_text(payload, encoding="utf-8")
        log.info("JSON saved to %s", output_path)
