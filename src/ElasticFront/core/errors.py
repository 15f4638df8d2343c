"""Errors raised by the query layer.

Transport failures are not wrapped here: whatever the search client raises
reaches the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class RecordNotFoundError(LookupError):
    """The requested document or record does not exist.

    Attributes:
        resource: Name of the record type or index that was searched.
        identifier: Document id when the lookup was by id, else None.
    """

    status_code = 404

    def __init__(self, resource: str, identifier: Any = None) -> None:
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier
