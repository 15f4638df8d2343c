"""Tests for mapping raw hits into records."""

import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticFront.core.models import META_KEY, ElasticRecord, HitMeta
from ElasticFront.core.relations import HasMany, HasOne, Related
from ElasticFront.sources.elastic.parser import (
    load_relations,
    parse_count,
    parse_hit,
    parse_hits,
    parse_source,
    parse_total,
)


class _Tag(ElasticRecord):
    index = "tags"


class _Author(ElasticRecord):
    index = "authors"
    relations = {"tags": HasMany(_Tag)}


class _Article(ElasticRecord):
    index = "articles"
    relations = {
        "author": HasOne(_Author),
        "tags": HasMany(_Tag),
        "editor": HasOne(_Author, stored_key="editor_doc"),
        "rating": Related(lambda value: value * 2),
    }


class _Plain(ElasticRecord):
    index = "plain"


class TestParseHit(unittest.TestCase):
    def test_round_trip_of_simple_hit(self) -> None:
        record = parse_hit({"_id": "1", "_score": 2.5, "_source": {"name": "x"}}, _Plain)

        self.assertIsInstance(record, _Plain)
        self.assertEqual(record.name, "x")
        self.assertEqual(record["name"], "x")
        self.assertEqual(record.meta, HitMeta(score=2.5, highlight=None))
        self.assertEqual(record.meta.to_dict(), {"score": 2.5, "highlight": None})

    def test_highlight_is_attached(self) -> None:
        highlight = {"title": ["<em>quick</em> fox"]}
        record = parse_hit({"_id": "1", "_score": 1.0, "_source": {}, "highlight": highlight}, _Plain)

        self.assertEqual(record.meta.highlight, highlight)

    def test_missing_score_defaults_to_zero(self) -> None:
        record = parse_hit({"_id": "1", "_source": {"a": 1}}, _Plain)
        self.assertEqual(record.meta.score, 0)

    def test_null_score_is_kept(self) -> None:
        record = parse_hit({"_id": "1", "_score": None, "_source": {"a": 1}}, _Plain)
        self.assertIsNone(record.meta.score)

    def test_parse_hits_keeps_order_and_skips_garbage(self) -> None:
        response = {
            "hits": {
                "hits": [
                    {"_id": "b", "_score": 1.0, "_source": {"n": 2}},
                    "not-a-hit",
                    {"_id": "a", "_score": 3.0, "_source": {"n": 1}},
                ]
            }
        }

        records = parse_hits(response, _Plain)

        self.assertEqual([record.n for record in records], [2, 1])

    def test_parse_hits_without_hits(self) -> None:
        self.assertEqual(parse_hits({}, _Plain), [])


class TestLoadRelations(unittest.TestCase):
    def test_marker_keys_are_resolved_and_removed(self) -> None:
        source = {
            "title": "t",
            "_author": {"name": "Ann", "_tags": [{"label": "ml"}]},
            "_tags": [{"label": "a"}, {"label": "b"}],
            "editor_doc": {"name": "Ed"},
            "_rating": 2,
            "_internal": "kept",
        }

        fields = load_relations(source, _Article)

        self.assertNotIn("_author", fields)
        self.assertNotIn("_tags", fields)
        self.assertNotIn("editor_doc", fields)
        self.assertNotIn("_rating", fields)
        self.assertEqual(fields["_internal"], "kept")
        self.assertEqual(fields["title"], "t")
        self.assertEqual(fields["rating"], 4)
        self.assertIsInstance(fields["author"], _Author)
        self.assertEqual(fields["author"].name, "Ann")
        self.assertEqual([tag.label for tag in fields["author"].tags], ["ml"])
        self.assertEqual([tag.label for tag in fields["tags"]], ["a", "b"])
        self.assertEqual(fields["editor"].name, "Ed")
        self.assertIn("_author", source)

    def test_undeclared_relation_keys_pass_through(self) -> None:
        fields = load_relations({"_author": {"name": "Ann"}}, _Plain)
        self.assertEqual(fields, {"_author": {"name": "Ann"}})

    def test_null_relations(self) -> None:
        fields = load_relations({"_author": None, "_tags": None}, _Article)

        self.assertIsNone(fields["author"])
        self.assertEqual(fields["tags"], [])

    def test_single_object_for_has_many_is_wrapped(self) -> None:
        fields = load_relations({"_tags": {"label": "solo"}}, _Article)
        self.assertEqual([tag.label for tag in fields["tags"]], ["solo"])

    def test_non_object_for_has_one_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            load_relations({"_author": "Ann"}, _Article)

    def test_parse_source_to_dict_flattens_relations(self) -> None:
        record = parse_source({"title": "t", "_author": {"name": "Ann"}}, _Article, key="9")

        self.assertEqual(record.get_key(), "9")
        self.assertEqual(record.to_dict(), {"title": "t", "author": {"name": "Ann"}})
        self.assertEqual(record.to_dict(include_meta=True)[META_KEY], None)


class TestResponseCounters(unittest.TestCase):
    def test_parse_total_object(self) -> None:
        self.assertEqual(parse_total({"hits": {"total": {"value": 5, "relation": "eq"}}}), 5)

    def test_parse_total_missing(self) -> None:
        self.assertEqual(parse_total({"hits": {}}), 0)
        self.assertEqual(parse_total({}), 0)

    def test_parse_count(self) -> None:
        self.assertEqual(parse_count({"count": 3}), 3)
        self.assertEqual(parse_count({}), 0)


class TestElasticRecord(unittest.TestCase):
    def test_constructor_goes_through_set_attribute(self) -> None:
        class _Upper(ElasticRecord):
            def set_attribute(self, name, value):
                super().set_attribute(name, value.upper() if isinstance(value, str) else value)

        self.assertEqual(_Upper(name="x").name, "X")
        self.assertEqual(_Upper.from_storage({"name": "x"}).name, "x")

    def test_missing_attribute_raises(self) -> None:
        with self.assertRaises(AttributeError):
            _Plain.from_storage({}).missing

    def test_get_datetime(self) -> None:
        record = _Plain.from_storage(
            {"naive": "2024-01-02T03:04:05", "aware": "2024-01-02T03:04:05+02:00", "bad": "soon"}
        )

        self.assertEqual(record.get_datetime("naive"), datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        self.assertEqual(record.get_datetime("aware").utcoffset().total_seconds(), 7200)
        self.assertIsNone(record.get_datetime("bad"))
        self.assertIsNone(record.get_datetime("missing"))

    def test_equality(self) -> None:
        left = _Plain.from_storage({"a": 1}, meta=HitMeta(score=1.0), key="1")
        right = _Plain.from_storage({"a": 1}, meta=HitMeta(score=1.0), key="1")

        self.assertEqual(left, right)
        self.assertNotEqual(left, _Plain.from_storage({"a": 1}, meta=HitMeta(score=2.0), key="1"))


if __name__ == "__main__":
    unittest.main()
