# mongoschema/schema_builder.py
import logging
from typing import Any, Dict, Mapping

from mongoschema.flattener import ARRAY_INDEX, PATH_SEPARATOR
from mongoschema.logger import log_event
from mongoschema.types import TypeTag, UnionType


def _is_leaf(node) -> bool:
    return isinstance(node, (TypeTag, UnionType))


def _get(container, slot):
    if isinstance(container, list):
        return container[slot]
    return container.get(slot)


def _set(container, slot, value):
    container[slot] = value


def _conflict(path: str, kept: str, dropped: str):
    log_event("SCHEMA_PATH_CONFLICT", {"path": path, "kept": kept, "dropped": dropped}, level=logging.WARNING)


def _insert(root: Dict[str, Any], path: str, entry) -> None:
    segments = path.split(PATH_SEPARATOR)
    parent, slot = root, segments[0]
    for seg in segments[1:]:
        want_list = seg == ARRAY_INDEX
        node = _get(parent, slot)
        if (want_list and isinstance(node, list)) or (not want_list and isinstance(node, dict)):
            pass
        elif node is None or _is_leaf(node):
            if node is not None:
                _conflict(path, "nested structure", f"leaf {node}")
            node = [None] if want_list else {}
            _set(parent, slot, node)
        else:
            # object vs array at the same place: first structure stays
            _conflict(path, type(node).__name__, "list" if want_list else "dict")
            return
        parent, slot = node, (0 if want_list else seg)

    existing = _get(parent, slot)
    if existing is None or _is_leaf(existing):
        _set(parent, slot, entry)
    else:
        _conflict(path, "nested structure", f"leaf {entry}")


def build_schema_tree(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rebuild a nested schema from path -> type facts.

    `a.b` becomes {"a": {"b": tag}}; an index segment turns its parent into a
    one-element list, so `a.0.b` becomes {"a": [{"b": tag}]}. Unions stay
    UnionType leaves. When a leaf and a deeper path share a prefix the nested
    structure wins; an object and an array at one prefix keep whichever came
    first. Both cases are logged.
    """
    schema: Dict[str, Any] = {}
    for path, entry in fields.items():
        _insert(schema, path, entry)
    return schema
