"""
Tests for the mongoschema command line.
"""

import json

import pytest

from mongoschema import cli
from mongoschema.mongo_utils import MongoDocumentSource


@pytest.fixture
def people_file(tmp_path):
    path = tmp_path / "people.json"
    path.write_text(json.dumps([{"name": "Ann", "age": 30}, {"name": "Bo", "age": 25}]), encoding="utf-8")
    return str(path)


class TestArguments:
    def test_no_source_is_an_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main([])
        assert exc.value.code == 2
        assert "--collection" in capsys.readouterr().err

    def test_url_without_collection(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--url", "mongodb://localhost"])
        assert exc.value.code == 2

    def test_sample_size_must_be_positive(self, people_file):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--file", people_file, "--sample-size", "0"])
        assert exc.value.code == 2


class TestRun:
    def test_file(self, people_file, capsys):
        assert cli.main(["--file", people_file]) == 0
        assert capsys.readouterr().out == "{\n  name: String,\n  age: Number\n}\n"

    def test_output_side_channel(self, people_file, tmp_path, capsys):
        out = tmp_path / "schema.js"
        assert cli.main(["-f", people_file, "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == capsys.readouterr().out

    def test_type_key_and_indent(self, people_file, capsys):
        assert cli.main(["-f", people_file, "-t", "$type", "--indent", "4"]) == 0
        assert capsys.readouterr().out.startswith("{\n    name: {\n        $type: String\n    },")

    def test_union_policy(self, tmp_path, capsys):
        path = tmp_path / "x.json"
        path.write_text('{"x": 1}\n{"x": "hello"}\n', encoding="utf-8")
        assert cli.main(["-f", str(path), "--union-policy", "mixed"]) == 0
        assert capsys.readouterr().out == "{\n  x: Schema.Types.Mixed\n}\n"

    def test_empty_source(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        assert cli.main(["-f", str(path)]) == 0
        assert capsys.readouterr().out == "Collection is empty. No schema generated.\n"

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main(["-f", str(tmp_path / "nope.json")]) == 1
        assert capsys.readouterr().err.startswith("Error: cannot read")

    def test_mongo(self, monkeypatch, capsys, make_collection):
        calls = {}

        def fake_connect(uri, collection, db_name=None, sample_size=None):
            calls.update(uri=uri, collection=collection, db_name=db_name, sample_size=sample_size)
            return MongoDocumentSource(make_collection([{"_id": 1, "title": "hello"}]))

        monkeypatch.setattr(cli.MongoDocumentSource, "connect", staticmethod(fake_connect))
        code = cli.main(["-u", "mongodb://localhost", "-c", "posts", "-d", "blog", "-s", "5"])
        assert code == 0
        assert calls == {"uri": "mongodb://localhost", "collection": "posts", "db_name": "blog", "sample_size": 5}
        assert capsys.readouterr().out == "{\n  _id: Number,\n  title: String\n}\n"

    def test_invalid_collection_name(self, fake_client, capsys):
        assert cli.main(["-u", "mongodb://localhost/shop", "-c", "a$b"]) == 1
        assert capsys.readouterr().err.startswith("Error: invalid database or collection name")
        assert fake_client.instances[0].closed
