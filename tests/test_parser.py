"""
Tests for JSON / NDJSON / Extended JSON document sources.
"""

import datetime
import random

import pytest
from bson import Int64, ObjectId

from mongoschema.errors import ConfigurationError, SourceUnavailableError
from mongoschema.parser import (
    DocumentListSource,
    JsonFileSource,
    parse_documents,
    reservoir_sample,
    try_parse_json,
)


class TestParseDocuments:
    def test_array(self):
        assert parse_documents('[{"a": 1}, {"b": 2}]') == [{"a": 1}, {"b": 2}]

    def test_single_object(self):
        assert parse_documents('{"a": 1}') == [{"a": 1}]

    def test_ndjson(self):
        assert parse_documents('{"a": 1}\n\n{"a": 2}\n') == [{"a": 1}, {"a": 2}]

    def test_empty_text(self):
        assert parse_documents("  \n") == []

    def test_non_documents_are_dropped(self):
        assert parse_documents('[1, "x", {"a": 1}]') == [{"a": 1}]

    def test_trailing_commas_are_repaired(self):
        assert parse_documents('[{"a": 1,},]') == [{"a": 1}]

    def test_bad_line(self):
        with pytest.raises(SourceUnavailableError, match="line 2"):
            parse_documents('{"a": 1}\nnot json\n')

    def test_extended_json(self):
        [doc] = parse_documents(
            '{"_id": {"$oid": "507f1f77bcf86cd799439011"},'
            ' "n": {"$numberLong": "5"},'
            ' "d": {"$date": "2020-01-01T00:00:00Z"}}'
        )
        assert doc["_id"] == ObjectId("507f1f77bcf86cd799439011")
        assert isinstance(doc["n"], Int64)
        assert isinstance(doc["d"], datetime.datetime)

    def test_try_parse_json_returns_none(self):
        assert try_parse_json("{nope") is None
        assert try_parse_json(None) is None


class TestReservoirSample:
    def test_small_input_is_returned_whole(self):
        assert reservoir_sample([1, 2, 3], 10) == [1, 2, 3]

    def test_sample_size(self):
        sample = reservoir_sample(range(100), 5, random.Random(7))
        assert len(sample) == 5
        assert len(set(sample)) == 5
        assert all(0 <= x < 100 for x in sample)

    def test_seeded_sample_is_repeatable(self):
        assert reservoir_sample(range(50), 4, random.Random(1)) == reservoir_sample(range(50), 4, random.Random(1))


class TestSources:
    def test_list_source(self):
        source = DocumentListSource([{"a": 1}, {"a": 2}, 3])
        assert source.has_documents()
        assert list(source.documents()) == [{"a": 1}, {"a": 2}]

    def test_empty_list_source(self):
        assert not DocumentListSource([]).has_documents()

    def test_sampled_list_source(self):
        source = DocumentListSource([{"n": i} for i in range(20)], sample_size=3, seed=42)
        assert len(list(source.documents())) == 3

    def test_bad_sample_size(self):
        with pytest.raises(ConfigurationError):
            DocumentListSource([{"a": 1}], sample_size=0)

    def test_file_source(self, tmp_path):
        path = tmp_path / "people.json"
        path.write_text('{"name": "Ann"}\n{"name": "Bo"}\n', encoding="utf-8")
        source = JsonFileSource(str(path))
        assert source.has_documents()
        assert [d["name"] for d in source.documents()] == ["Ann", "Bo"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailableError):
            JsonFileSource(str(tmp_path / "missing.json"))

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(SourceUnavailableError, match="bad.json"):
            JsonFileSource(str(path))
