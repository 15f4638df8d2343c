"""Public configuration API for ElasticFront."""

from __future__ import annotations

from ElasticFront.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from ElasticFront.config.elastic import ElasticConfig
from ElasticFront.config.output import OutputConfig
from ElasticFront.config.queries import QueriesConfig
from ElasticFront.config.runtime import RuntimeConfig

__all__ = [
    "AppConfig",
    "ElasticConfig",
    "OutputConfig",
    "QueriesConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
