"""
Shared fixtures: in-memory stand-ins for pymongo client, database and collection objects.
"""

import pytest
from pymongo import errors

from mongoschema import mongo_utils


class FakeCollection:
    def __init__(self, docs, name="people", fail_with=None):
        self.docs = docs
        self.name = name
        self.fail_with = fail_with
        self.calls = []

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def find_one(self, filter=None, projection=None):
        self.calls.append("find_one")
        self._check()
        return self.docs[0] if self.docs else None

    def find(self):
        self.calls.append("find")
        self._check()
        return iter(self.docs)

    def aggregate(self, pipeline):
        self.calls.append(("aggregate", pipeline))
        self._check()
        return iter(self.docs[: pipeline[0]["$sample"]["size"]])


class FakeDatabase:
    def __init__(self, name, collections):
        self.name = name
        self.collections = collections

    def __getitem__(self, name):
        # same checks as pymongo.collection.Collection
        if not name or "$" in name or name.startswith(".") or name.endswith("."):
            raise errors.InvalidName(f"invalid collection name: {name!r}")
        return self.collections.setdefault(name, FakeCollection([], name=name))


class FakeClient:
    instances = []

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.databases = {}
        FakeClient.instances.append(self)

    def __getitem__(self, name):
        return self.databases.setdefault(name, FakeDatabase(name, {}))

    def get_default_database(self, default=None):
        name = self.uri.rsplit("/", 1)[-1] or default
        return self[name]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    FakeClient.instances = []
    monkeypatch.setattr(mongo_utils, "MongoClient", FakeClient)
    return FakeClient


@pytest.fixture
def make_collection():
    return FakeCollection
