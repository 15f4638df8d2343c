"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from copy import deepcopy
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticFront.config import load_config, load_config_with_defaults, parse_config_dict


def _base_raw_config() -> dict:
    return {
        "log": {"level": "INFO", "to_file": False, "dir": "log"},
        "elastic": {"hosts": ["http://localhost:9200"], "timeout": 10},
        "output": {"base_dir": "output", "formats": ["console"]},
        "queries": [
            {
                "NAME": "recent",
                "index": "articles",
                "where": {"status": "published"},
                "where_not": {"category": ["draft"]},
                "between": {"views": [1, 9]},
                "date": {"published_at": "2024-01-01"},
                "select": ["title"],
                "highlight": ["title"],
                "order_by": {"field": "published_at", "direction": "ASC"},
                "limit": 5,
                "page": 2,
                "without_scopes": ["active"],
            }
        ],
    }


_ENV_WITHOUT_HOSTS = {key: value for key, value in os.environ.items() if key != "ELASTIC_FRONT_HOSTS"}


@patch.dict(os.environ, _ENV_WITHOUT_HOSTS, clear=True)
class TestConfigLayering(unittest.TestCase):
    def test_full_config_parses(self) -> None:
        cfg = parse_config_dict(_base_raw_config())

        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.elastic.hosts, ("http://localhost:9200",))
        self.assertEqual(cfg.elastic.timeout, 10.0)
        self.assertIsNone(cfg.elastic.pem_path)
        self.assertEqual(cfg.output.formats, ("console",))

        query = cfg.queries.queries[0]
        self.assertEqual(query.name, "recent")
        self.assertEqual(query.index, "articles")
        self.assertEqual(query.where, {"status": "published"})
        self.assertEqual(query.where_not, {"category": ["draft"]})
        self.assertEqual(query.between, {"views": (1, 9)})
        self.assertEqual(query.dates, {"published_at": "2024-01-01"})
        self.assertEqual(query.select, ("title",))
        self.assertEqual(query.highlight, ("title",))
        self.assertEqual(query.order_by, ("published_at", "asc"))
        self.assertEqual(query.limit, 5)
        self.assertEqual(query.page, 2)
        self.assertEqual(query.without_scopes, ("active",))

    def test_hosts_from_environment_win(self) -> None:
        with patch.dict(os.environ, {"ELASTIC_FRONT_HOSTS": "http://a:9200, http://b:9200"}):
            cfg = parse_config_dict(_base_raw_config())

        self.assertEqual(cfg.elastic.hosts, ("http://a:9200", "http://b:9200"))

    def test_missing_hosts_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["elastic"]["hosts"] = []

        with self.assertRaisesRegex(ValueError, "elastic.hosts"):
            parse_config_dict(raw)

    def test_host_scheme_required(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["elastic"]["hosts"] = ["localhost:9200"]

        with self.assertRaisesRegex(ValueError, "http://"):
            parse_config_dict(raw)

    def test_missing_log_section_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        del raw["log"]

        with self.assertRaisesRegex(ValueError, "Missing required config: log"):
            parse_config_dict(raw)

    def test_unknown_query_key_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["queries"][0]["wher"] = {}

        with self.assertRaisesRegex(ValueError, r"queries\[0\] has unknown keys"):
            parse_config_dict(raw)

    def test_query_index_required(self) -> None:
        raw = deepcopy(_base_raw_config())
        del raw["queries"][0]["index"]

        with self.assertRaisesRegex(ValueError, r"queries\[0\]\.index"):
            parse_config_dict(raw)

    def test_between_must_be_pair(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["queries"][0]["between"] = {"views": [1]}

        with self.assertRaisesRegex(ValueError, "low, high"):
            parse_config_dict(raw)

    def test_bad_direction_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["queries"][0]["order_by"] = {"field": "a", "direction": "sideways"}

        with self.assertRaisesRegex(ValueError, "direction"):
            parse_config_dict(raw)

    def test_limit_type_checked(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["queries"][0]["limit"] = "10"

        with self.assertRaisesRegex(TypeError, "limit must be an integer"):
            parse_config_dict(raw)

    def test_unknown_output_format_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["output"]["formats"] = ["markdown"]

        with self.assertRaisesRegex(ValueError, "unknown formats"):
            parse_config_dict(raw)

    def test_highlight_mapping_kept(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["queries"][0]["highlight"] = {"title": {"fragment_size": 50}}

        cfg = parse_config_dict(raw)

        self.assertEqual(cfg.queries.queries[0].highlight, {"title": {"fragment_size": 50}})


_BASE_YAML = """
log:
  level: INFO
  to_file: false
  dir: log

elastic:
  hosts: [http://localhost:9200]

output:
  base_dir: output
  formats: [console]

queries:
  - NAME: base
    index: articles
"""


@patch.dict(os.environ, _ENV_WITHOUT_HOSTS, clear=True)
class TestConfigOverride(unittest.TestCase):
    def test_override_merges_with_defaults(self) -> None:
        override_yaml = """
log:
  level: DEBUG

elastic:
  timeout: 5

queries:
  - NAME: override
    index: users
"""
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "default.yml"
            default_path.write_text(_BASE_YAML, encoding="utf-8")
            override_path = Path(tmp) / "override.yml"
            override_path.write_text(override_yaml, encoding="utf-8")

            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertEqual(cfg.elastic.hosts, ("http://localhost:9200",))
        self.assertEqual(cfg.elastic.timeout, 5.0)
        self.assertEqual(len(cfg.queries.queries), 1)
        self.assertEqual(cfg.queries.queries[0].name, "override")

    def test_load_config_reads_single_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yml"
            path.write_text(_BASE_YAML, encoding="utf-8")

            cfg = load_config(path)

        self.assertEqual(cfg.queries.queries[0].index, "articles")
        self.assertEqual(cfg.queries.queries[0].limit, 10)

    def test_shipped_default_config_parses(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")

        self.assertEqual(cfg.queries.queries[0].name, "recent-articles")
        self.assertEqual(cfg.queries.queries[0].between, {"views": (10, 10000)})


if __name__ == "__main__":
    unittest.main()
