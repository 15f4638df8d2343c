"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from ElasticFront.cli.runner import CommandRunner
from ElasticFront.config import load_config


@click.group(help="ElasticFront: run configured Elasticsearch queries from the terminal.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config, so
    hosts can come from the environment.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()

    cfg = load_config(config_path)
    ctx.obj = cfg


@cli.command("search")
@click.pass_context
def search_cmd(ctx: click.Context) -> None:
    """Run every configured query and write one page of results each."""
    CommandRunner(ctx.obj).run_search(action=ctx.command.name)


@cli.command("count")
@click.pass_context
def count_cmd(ctx: click.Context) -> None:
    """Count documents matching every configured query."""
    CommandRunner(ctx.obj).run_count(action=ctx.command.name)


@cli.command("find")
@click.argument("index")
@click.argument("document_id")
@click.pass_context
def find_cmd(ctx: click.Context, index: str, document_id: str) -> None:
    """Fetch one document of INDEX by DOCUMENT_ID."""
    CommandRunner(ctx.obj).run_find(action=ctx.command.name, index=index, document_id=document_id)
