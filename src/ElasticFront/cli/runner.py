"""Command runner for coordinating CLI execution.

Manages component lifecycle, logging configuration, and error handling for
command execution.
"""

from __future__ import annotations

from typing import Callable, TypeVar

import click

from ElasticFront.cli.commands import CountCommand, FindCommand, SearchCommand
from ElasticFront.config import AppConfig
from ElasticFront.renderers import create_output_writer
from ElasticFront.services import create_client
from ElasticFront.sources.elastic.client import ElasticApiClient
from ElasticFront.utils.log import configure_logging, log

T = TypeVar("T")


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Configures logging, creates the transport, runs the command and turns any
    failure into ``click.Abort`` at the CLI boundary.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_search(self, action: str) -> None:
        """Run every configured query and write the results."""

        def _run(client: ElasticApiClient) -> None:
            output_writer = create_output_writer(self.config)
            SearchCommand(config=self.config, client=client, output_writer=output_writer).execute()
            output_writer.finalize(action)

        self._run(action, _run)

    def run_count(self, action: str) -> dict[str, int]:
        """Count matches of every configured query."""
        return self._run(action, lambda client: CountCommand(config=self.config, client=client).execute())

    def run_find(self, action: str, index: str, document_id: str) -> None:
        """Fetch one document by id."""
        self._run(action, lambda client: FindCommand(client=client, index=index, document_id=document_id).execute())

    def _run(self, action: str, body: Callable[[ElasticApiClient], T]) -> T:
        """Run ``body`` with a fresh client.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            with create_client(self.config.elastic) as client:
                return body(client)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
