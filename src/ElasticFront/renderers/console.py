"""Console text output renderers.

Renders mapped records into human-friendly text and logs it.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from ElasticFront.core.models import ElasticRecord
from ElasticFront.core.pagination import Paginator
from ElasticFront.core.query import QueryDefinition
from ElasticFront.renderers.base import OutputWriter
from ElasticFront.utils.log import log

_MAX_VALUE_WIDTH = 120


def _fmt_value(value: Any) -> str:
    """Format one field value on a single line, truncated for display."""
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, ensure_ascii=False, default=str)
    text = " ".join(text.split())
    if len(text) > _MAX_VALUE_WIDTH:
        return text[: _MAX_VALUE_WIDTH - 3] + "..."
    return text


def render_text(records: Iterable[ElasticRecord], *, start: int = 1) -> str:
    """Render records into a human-readable text block.

    Args:
        records: Iterable of records.
        start: Number of the first record in the listing.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, record in enumerate(records, start=start):
        header = f"{idx}. [{record.get_key() or '-'}]"
        if record.meta is not None and record.meta.score is not None:
            header += f" score={record.meta.score}"
        lines.append(header)
        for name, value in record.to_dict().items():
            lines.append(f"   {name}: {_fmt_value(value)}")
        if record.meta is not None and record.meta.highlight:
            for name, fragments in record.meta.highlight.items():
                lines.append(f"   ~{name}: {_fmt_value(' ... '.join(fragments))}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_query_result(
        self,
        page: Paginator[ElasticRecord],
        query: QueryDefinition,
    ) -> None:
        """Write one page to the console."""
        log.info(
            "index=%s page=%d/%d total=%d",
            query.index,
            page.current_page,
            page.last_page,
            page.total,
        )
        for line in render_text(page.items, start=page.first_item or 1).splitlines():
            log.info(line)

    def finalize(self, action: str) -> None:
        """No-op for console output."""
