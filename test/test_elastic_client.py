"""Tests for the Elasticsearch HTTP client."""

import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticFront.sources.elastic.client import DEFAULT_TIMEOUT, ElasticApiClient


def _response(status_code: int, payload=None) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}", response=response)
    else:
        response.raise_for_status.return_value = None
    return response


class TestElasticApiClient(unittest.TestCase):
    def setUp(self) -> None:
        patcher = patch("ElasticFront.sources.elastic.client.requests.Session")
        self.session_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.session = self.session_cls.return_value

    def test_search_posts_body_to_index(self) -> None:
        self.session.request.return_value = _response(200, {"hits": {"hits": []}})
        client = ElasticApiClient(["http://es:9200/"])

        result = client.search("articles", {"size": 1})

        self.assertEqual(result, {"hits": {"hits": []}})
        self.session.request.assert_called_once_with(
            "POST",
            "http://es:9200/articles/_search",
            json={"size": 1},
            timeout=DEFAULT_TIMEOUT,
        )

    def test_count_posts_to_count_endpoint(self) -> None:
        self.session.request.return_value = _response(200, {"count": 3})
        client = ElasticApiClient(["http://es:9200"], timeout=5)

        self.assertEqual(client.count("a,b", {"query": {}}), {"count": 3})
        self.session.request.assert_called_once_with(
            "POST",
            "http://es:9200/a,b/_count",
            json={"query": {}},
            timeout=5,
        )

    def test_get_source_quotes_document_id(self) -> None:
        self.session.request.return_value = _response(200, {"title": "x"})
        client = ElasticApiClient(["http://es:9200"])

        self.assertEqual(client.get_source("articles", "a/b"), {"title": "x"})
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("GET", "http://es:9200/articles/_source/a%2Fb"))
        self.assertIsNone(kwargs["json"])

    def test_get_source_tolerates_not_found(self) -> None:
        self.session.request.return_value = _response(404, {"error": "not_found"})
        client = ElasticApiClient(["http://es:9200"])

        self.assertIsNone(client.get_source("articles", "1", ignore_not_found=True))

    def test_get_source_raises_not_found_by_default(self) -> None:
        self.session.request.return_value = _response(404)
        client = ElasticApiClient(["http://es:9200"])

        with self.assertRaises(requests.HTTPError):
            client.get_source("articles", "1")

    def test_server_errors_propagate_without_retry(self) -> None:
        self.session.request.return_value = _response(503)
        client = ElasticApiClient(["http://es:9200"])

        with self.assertRaises(requests.HTTPError):
            client.search("articles", {})
        self.assertEqual(self.session.request.call_count, 1)

    def test_connection_errors_propagate(self) -> None:
        self.session.request.side_effect = requests.ConnectionError("refused")
        client = ElasticApiClient(["http://es:9200"])

        with self.assertRaises(requests.ConnectionError):
            client.count("articles", {})

    def test_hosts_rotate(self) -> None:
        self.session.request.return_value = _response(200, {"count": 0})
        client = ElasticApiClient(["http://one:9200", "http://two:9200"])

        for _ in range(3):
            client.count("i", {})

        urls = [call.args[1] for call in self.session.request.call_args_list]
        self.assertEqual(urls, ["http://one:9200/i/_count", "http://two:9200/i/_count", "http://one:9200/i/_count"])

    def test_pem_path_enables_verification(self) -> None:
        ElasticApiClient(["https://es:9200"], pem_path="/certs/ca.pem")
        self.assertEqual(self.session.verify, "/certs/ca.pem")

    def test_requires_host(self) -> None:
        with self.assertRaises(ValueError):
            ElasticApiClient(["", "  "])

    def test_context_manager_closes_session(self) -> None:
        with ElasticApiClient(["http://es:9200"]):
            pass
        self.session.close.assert_called_once()

    def test_non_object_response_is_rejected(self) -> None:
        self.session.request.return_value = _response(200, ["unexpected"])
        client = ElasticApiClient(["http://es:9200"])

        with self.assertRaises(ValueError):
            client.search("articles", {})


if __name__ == "__main__":
    unittest.main()
