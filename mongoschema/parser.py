# mongoschema/parser.py
import re, random, logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional
from bson import json_util

from mongoschema.config import validate_sample_size
from mongoschema.errors import SourceUnavailableError
from mongoschema.logger import log_event


def _repair_json_fragment(s: str) -> str:
    # only conservative fixes: trailing commas before closing braces/brackets
    return re.sub(r',\s*([\]}])', r'\1', s)


def try_parse_json(text: str):
    """
    Parse JSON / MongoDB Extended JSON ($oid, $date, $numberLong, ...) into
    native BSON values. Returns None when the text does not parse.
    """
    if not isinstance(text, str):
        return None
    s = text.strip()
    try:
        return json_util.loads(s)
    except (ValueError, TypeError):
        pass
    try:
        return json_util.loads(_repair_json_fragment(s))
    except (ValueError, TypeError):
        return None


def _only_documents(items: Iterable[Any]) -> List[Dict[str, Any]]:
    docs = []
    for i, item in enumerate(items):
        if isinstance(item, Mapping):
            docs.append(item)
        else:
            log_event("NON_DOCUMENT_SKIPPED", {"index": i, "found": type(item).__name__}, level=logging.DEBUG)
    return docs


def parse_documents(text: str) -> List[Dict[str, Any]]:
    """
    Documents from a JSON array, a single JSON object, or newline-delimited
    JSON (mongoexport output). Raises SourceUnavailableError on bad input.
    """
    if not text.strip():
        return []
    whole = try_parse_json(text)
    if isinstance(whole, list):
        return _only_documents(whole)
    if isinstance(whole, Mapping):
        return [whole]

    docs = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        obj = try_parse_json(line)
        if obj is None:
            raise SourceUnavailableError(f"invalid JSON on line {lineno}")
        docs.extend(_only_documents(obj if isinstance(obj, list) else [obj]))
    return docs


def reservoir_sample(items: Iterable[Any], size: int, rng: Optional[random.Random] = None) -> List[Any]:
    """Uniform sample of up to `size` items in one pass."""
    rng = rng or random.Random()
    sample = []
    for i, item in enumerate(items):
        if i < size:
            sample.append(item)
        else:
            j = rng.randint(0, i)
            if j < size:
                sample[j] = item
    return sample


class DocumentListSource:
    """In-memory documents, optionally sampled."""
    def __init__(self, documents: Iterable[Any], sample_size: Optional[int] = None, seed: Optional[int] = None):
        self.sample_size = validate_sample_size(sample_size)
        self._rng = random.Random(seed)
        self._documents = _only_documents(documents)

    def has_documents(self) -> bool:
        return bool(self._documents)

    def documents(self) -> Iterator[Dict[str, Any]]:
        docs = self._documents
        if self.sample_size:
            docs = reservoir_sample(docs, self.sample_size, self._rng)
        return iter(docs)


class JsonFileSource(DocumentListSource):
    """Documents read from a JSON, NDJSON or Extended JSON file."""
    def __init__(self, path: str, sample_size: Optional[int] = None, seed: Optional[int] = None):
        self.path = path
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise SourceUnavailableError(f"cannot read {path}: {exc}") from exc
        try:
            documents = parse_documents(text)
        except SourceUnavailableError as exc:
            raise SourceUnavailableError(f"{path}: {exc}") from exc
        log_event("SOURCE_OPENED", {"file": path, "documents": len(documents), "sample_size": sample_size})
        super().__init__(documents, sample_size=sample_size, seed=seed)
