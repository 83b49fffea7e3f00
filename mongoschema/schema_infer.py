# mongoschema/schema_infer.py
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from mongoschema.config import CFG, InferenceConfig
from mongoschema.errors import EmptySourceError
from mongoschema.logger import log_event
from mongoschema.schema_builder import build_schema_tree
from mongoschema.schema_generator import render_schema
from mongoschema.schema_registry import SchemaRegistry


@dataclass
class SchemaResult:
    schema: str
    tree: Dict[str, Any]
    registry: SchemaRegistry
    skipped: List[str] = field(default_factory=list)

    @property
    def documents(self) -> int:
        return self.registry.documents_seen


def infer_schema(docs: Iterable[Dict[str, Any]], cfg: InferenceConfig = CFG) -> SchemaRegistry:
    # docs: iterable of dicts, consumed once
    registry = SchemaRegistry(cfg)
    for d in docs:
        registry.update(d)
    return registry


def generate_schema(source, cfg: InferenceConfig = CFG) -> SchemaResult:
    """
    Run the whole pipeline over a document source and return the rendered schema.

    source: anything with has_documents() and documents().
    Raises EmptySourceError when there is nothing to read.
    """
    cfg.validate()
    if not source.has_documents():
        log_event("SOURCE_EMPTY", {})
        raise EmptySourceError()

    started = time.time()
    log_event("INFERENCE_STARTED", {"type_key": cfg.type_key, "union_policy": cfg.union_policy})
    registry = infer_schema(source.documents(), cfg)
    if registry.documents_seen == 0:
        log_event("SOURCE_EMPTY", {})
        raise EmptySourceError()

    tree = build_schema_tree(registry.fields)
    text = render_schema(tree, cfg=cfg)
    log_event("INFERENCE_COMPLETED", {
        "documents": registry.documents_seen,
        "paths": len(registry),
        "skipped": len(registry.skipped),
        "duration_s": round(time.time() - started, 4),
    })
    return SchemaResult(schema=text, tree=tree, registry=registry, skipped=list(registry.skipped))
