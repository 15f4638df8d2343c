"""Output renderers for command results.

Provides the OutputWriter abstraction, console and JSON implementations, and
a factory that instantiates writers based on configuration.
"""

from __future__ import annotations

from ElasticFront.config import AppConfig
from ElasticFront.renderers.base import MultiOutputWriter, OutputWriter
from ElasticFront.renderers.console import ConsoleOutputWriter, render_text
from ElasticFront.renderers.json import JsonFileWriter, render_json


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Args:
        config: Application configuration.

    Returns:
        Writer delegating to every configured format.
    """
    writers: list[OutputWriter] = []
    if "console" in config.output.formats:
        writers.append(ConsoleOutputWriter())
    if "json" in config.output.formats:
        writers.append(JsonFileWriter(config.output.base_dir))

    if not writers:
        raise ValueError("No output writers configured")
    return MultiOutputWriter(writers)


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonFileWriter",
    "MultiOutputWriter",
    "render_json",
    "render_text",
    "create_output_writer",
]
