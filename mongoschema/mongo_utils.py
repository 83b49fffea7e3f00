# mongoschema/mongo_utils.py
from pymongo import MongoClient, errors
from typing import Any, Dict, Iterator, Optional

from mongoschema.config import validate_sample_size
from mongoschema.errors import ConfigurationError, SourceUnavailableError
from mongoschema.logger import log_event

DEFAULT_DB_NAME = "test"
SERVER_SELECTION_TIMEOUT_MS = 10000


def _close_client(client):
    if client is not None:
        client.close()


class MongoDocumentSource:
    """
    Documents of one MongoDB collection: a full scan, or a `$sample` of
    `sample_size` documents when a size is given.
    """
    def __init__(self, collection, sample_size: Optional[int] = None, client: Optional[MongoClient] = None):
        self.collection = collection
        self.sample_size = validate_sample_size(sample_size)
        self.client = client

    @classmethod
    def connect(cls, uri: str, collection_name: str, db_name: Optional[str] = None,
                sample_size: Optional[int] = None) -> "MongoDocumentSource":
        """
        uri: mongodb connection string, e.g. "mongodb://localhost:27017/shop"
        The database is db_name, else the one named in the uri, else "test".
        """
        validate_sample_size(sample_size)
        client = None
        try:
            client = MongoClient(uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)
            db = client[db_name] if db_name else client.get_default_database(default=DEFAULT_DB_NAME)
            collection = db[collection_name]
        except errors.InvalidName as exc:
            _close_client(client)
            raise ConfigurationError(f"invalid database or collection name: {exc}") from exc
        except errors.PyMongoError as exc:
            _close_client(client)
            raise SourceUnavailableError(f"cannot connect to MongoDB: {exc}") from exc
        log_event("SOURCE_OPENED", {"database": db.name, "collection": collection_name, "sample_size": sample_size})
        return cls(collection, sample_size=sample_size, client=client)

    def has_documents(self) -> bool:
        try:
            return self.collection.find_one({}, {"_id": 1}) is not None
        except errors.PyMongoError as exc:
            raise SourceUnavailableError(f"cannot read collection {self.collection.name}: {exc}") from exc

    def _cursor(self):
        if self.sample_size:
            return self.collection.aggregate([{"$sample": {"size": self.sample_size}}])
        return self.collection.find()

    def documents(self) -> Iterator[Dict[str, Any]]:
        try:
            for doc in self._cursor():
                yield doc
        except errors.PyMongoError as exc:
            raise SourceUnavailableError(f"cannot read collection {self.collection.name}: {exc}") from exc

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
