"""Global scopes declared on record types.

A record type lists its scopes in order; the builder runs each one before the
first request is compiled unless the caller opted out by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ElasticFront.utils.log import log

if TYPE_CHECKING:
    from ElasticFront.services.query import ElasticQuery


@dataclass(frozen=True, slots=True)
class GlobalScope:
    """Named filter hook applied to every query of a record type.

    Attributes:
        name: Logical scope name, compared case-insensitively.
        apply: Callable receiving the builder; adds its clauses through the
            builder's public methods. Its return value is ignored.
    """

    name: str
    apply: Callable[[ElasticQuery], Any]

    def __post_init__(self) -> None:
        normalized = normalize_scope_name(self.name)
        if not normalized:
            raise ValueError("Global scope name must not be empty")
        object.__setattr__(self, "name", normalized)


def global_scope(name: str) -> Callable[[Callable[[ElasticQuery], Any]], GlobalScope]:
    """Decorator turning a plain function into a ``GlobalScope``.

    Example::

        @global_scope("active")
        def _active(query):
            query.where("active", True)
    """

    def decorator(func: Callable[[ElasticQuery], Any]) -> GlobalScope:
        return GlobalScope(name=name, apply=func)

    return decorator


def normalize_scope_name(name: str) -> str:
    return str(name).strip().lower()


def apply_scopes(query: ElasticQuery, scopes: Iterable[GlobalScope], skip: set[str]) -> list[str]:
    """Run every scope not named in ``skip`` against ``query``.

    Args:
        query: Builder handed to each scope.
        scopes: Scopes in declaration order.
        skip: Normalized names of scopes to leave out.

    Returns:
        Names of the scopes that ran, in order.
    """
    applied: list[str] = []
    for scope in scopes:
        if scope.name in skip:
            log.debug("Global scope skipped: name=%s", scope.name)
            continue
        scope.apply(query)
        applied.append(scope.name)
    return applied
