"""CLI package for ElasticFront command orchestration.

Holds the click interface, the command runner and the command
implementations, factored into separate modules for testability.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from ElasticFront.cli.runner import CommandRunner
from ElasticFront.cli.ui import cli


def main() -> None:
    """Run ElasticFront CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
