"""Engine connection configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from ElasticFront.config.common import (
    expect_float,
    expect_optional_str,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_section,
)

DEFAULT_HOSTS_ENV = "ELASTIC_FRONT_HOSTS"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ElasticConfig:
    """Store validated engine connection settings.

    Attributes:
        hosts: Engine base URLs; the environment variable named by
            ``hosts_env`` replaces them when set.
        hosts_env: Environment variable holding comma-separated hosts.
        pem_path: CA bundle for TLS verification, None for system defaults.
        timeout: Request timeout in seconds.
    """

    hosts: tuple[str, ...]
    hosts_env: str
    pem_path: str | None
    timeout: float


def load_elastic(raw: Mapping[str, Any]) -> ElasticConfig:
    """Load engine connection config from the ``elastic`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed connection configuration.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "elastic", required=False)
    hosts_env = expect_str(get_optional_value(section, "hosts_env", DEFAULT_HOSTS_ENV), "elastic.hosts_env")

    hosts = _hosts_from_env(hosts_env)
    if not hosts:
        hosts = tuple(
            host.strip()
            for host in expect_str_list(get_optional_value(section, "hosts", []), "elastic.hosts")
            if host.strip()
        )

    return ElasticConfig(
        hosts=hosts,
        hosts_env=hosts_env,
        pem_path=expect_optional_str(get_optional_value(section, "pem_path", None), "elastic.pem_path"),
        timeout=expect_float(get_optional_value(section, "timeout", DEFAULT_TIMEOUT), "elastic.timeout"),
    )


def check_elastic(config: ElasticConfig) -> None:
    """Validate connection constraints.

    Raises:
        ValueError: If no host is configured or the timeout is not positive.
    """
    if not config.hosts:
        raise ValueError(f"elastic.hosts must include at least one host (or set {config.hosts_env})")
    for host in config.hosts:
        if not host.startswith(("http://", "https://")):
            raise ValueError(f"elastic.hosts entries must start with http:// or https://: {host}")
    if config.timeout <= 0:
        raise ValueError("elastic.timeout must be positive")


def _hosts_from_env(name: str) -> tuple[str, ...]:
    """Read comma-separated hosts from an environment variable."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return ()
    return tuple(host.strip() for host in raw.split(",") if host.strip())
