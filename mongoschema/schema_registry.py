# mongoschema/schema_registry.py
import logging
from typing import Dict, Union

from mongoschema.config import CFG, InferenceConfig
from mongoschema.flattener import apply_type_key, as_mapping, flatten_document
from mongoschema.logger import log_event
from mongoschema.type_classifier import classify
from mongoschema.types import TypeTag, UnionType, describe

Entry = Union[TypeTag, UnionType]


def merge_types(existing, new: TypeTag, policy: str = "union") -> Entry:
    """
    Combine the entry recorded at a path with a newly observed tag.

    Entries only widen: tag -> union (first conflict) -> Mixed. Mixed absorbs
    everything. Union members keep first-seen order. With policy "mixed" any
    conflict goes straight to Mixed.
    """
    if existing is None:
        return new
    if existing is TypeTag.MIXED:
        return existing
    if new is TypeTag.MIXED:
        return TypeTag.MIXED
    if isinstance(existing, UnionType):
        return existing.with_member(new)
    if existing is new:
        return existing
    if policy == "mixed":
        return TypeTag.MIXED
    return UnionType((existing, new))


class SchemaRegistry:
    """
    Accumulates path -> type facts over every document of one run.

    The registry is owned by the run loop; nothing here is shared between
    runs. Paths keep first-seen order, which becomes field order in the
    rendered schema.
    """
    def __init__(self, cfg: InferenceConfig = CFG):
        self.cfg = cfg
        self.fields: Dict[str, Entry] = {}
        self.skipped = []
        self.documents_seen = 0

    def __len__(self):
        return len(self.fields)

    def __contains__(self, path):
        return path in self.fields

    def __getitem__(self, path) -> Entry:
        return self.fields[path]

    def get(self, path, default=None):
        return self.fields.get(path, default)

    def merge(self, path: str, tag: TypeTag) -> Entry:
        key = apply_type_key(path, self.cfg.type_key)
        merged = merge_types(self.fields.get(key), tag, self.cfg.union_policy)
        self.fields[key] = merged
        return merged

    def observe(self, path: str, value):
        """Classify one flattened value and merge it. Unsupported values are skipped."""
        if isinstance(value, TypeTag):
            self.merge(path, value)
            return

        result = classify(value, self.cfg)
        if result.ok:
            self.merge(path, result.tag)
            return

        mapping = as_mapping(value)
        if mapping is not None:
            # a container the walk did not descend into
            if not mapping:
                self.merge(path, TypeTag.MIXED)
            for sub_path, sub_value in flatten_document(mapping, prefix=path):
                self.observe(sub_path, sub_value)
            return

        self.skipped.append(path)
        log_event("UNSUPPORTED_TYPE", {
            "path": path,
            "value_type": result.failure.value_type,
            "message": str(result.failure),
        }, level=logging.WARNING)

    def update(self, doc):
        """Merge every field of one document."""
        for path, value in flatten_document(doc):
            self.observe(path, value)
        self.documents_seen += 1
        return self

    def describe(self):
        return {path: describe(entry) for path, entry in self.fields.items()}
