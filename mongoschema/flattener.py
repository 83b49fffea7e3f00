# mongoschema/flattener.py
import logging
from collections.abc import Mapping
from typing import Any, List, Tuple

from bson import DBRef

from mongoschema.logger import log_event
from mongoschema.types import TypeTag

PATH_SEPARATOR = "."
# every array element collapses onto this one segment
ARRAY_INDEX = "0"


def join_path(prev: str, key) -> str:
    return f"{prev}{PATH_SEPARATOR}{key}" if prev else str(key)


def apply_type_key(path: str, type_key: str = "type") -> str:
    """
    Keep field names from colliding with Mongoose's type key.

    A segment equal to the type key is followed by one more type-key segment,
    so `type` becomes `type: { type: ... }`. A custom key additionally wraps
    every leaf: `a` becomes `a: { <key>: ... }`.
    """
    segments = []
    for seg in path.split(PATH_SEPARATOR):
        segments.append(seg)
        if seg == type_key:
            segments.append(type_key)
    if type_key != "type" and segments[-1] != type_key:
        segments.append(type_key)
    return PATH_SEPARATOR.join(segments)


def _is_plain_object(v) -> bool:
    # SON and OrderedDict are dicts; DBRef and other mappings go to the classifier
    return isinstance(v, dict)


def _is_array(v) -> bool:
    return isinstance(v, (list, tuple))


def as_mapping(value):
    """Mapping view of a container the walk does not descend into, or None."""
    if isinstance(value, DBRef):
        return value.as_doc()
    if isinstance(value, Mapping):
        return value
    return None


def _array_elements(path: str, arr) -> List[Any]:
    """
    Element values to visit for a non-empty array.
    The first element decides whether the array holds objects, arrays or scalars.
    """
    first = arr[0]
    if _is_plain_object(first) or _is_array(first):
        shape = dict if _is_plain_object(first) else list
        kept = []
        for i, elem in enumerate(arr):
            if (shape is dict and _is_plain_object(elem)) or (shape is list and _is_array(elem)):
                kept.append(elem)
            else:
                log_event("ARRAY_ELEMENT_SKIPPED", {
                    "path": path, "index": i, "expected": shape.__name__, "found": type(elem).__name__,
                }, level=logging.DEBUG)
        return kept
    # scalar array: a nested container here has no single type
    return [TypeTag.MIXED if (_is_plain_object(e) or _is_array(e)) else e for e in arr]


def flatten_document(doc: Mapping, prefix: str = "") -> List[Tuple[str, Any]]:
    """
    Walk one document depth-first and return (path, value) observations.

    Values are terminal: scalars, opaque BSON values, or a pre-classified
    TypeTag (empty containers, containers inside scalar arrays). Array
    elements share one path ending in ARRAY_INDEX, so a path can repeat.
    """
    out = []
    stack = [(join_path(prefix, k), v) for k, v in reversed(list(doc.items()))]
    while stack:
        path, value = stack.pop()
        if _is_plain_object(value):
            if not value:
                out.append((path, TypeTag.MIXED))
                continue
            stack.extend((join_path(path, k), v) for k, v in reversed(list(value.items())))
        elif _is_array(value):
            if not value:
                out.append((path, TypeTag.MIXED))
                continue
            elem_path = join_path(path, ARRAY_INDEX)
            stack.extend((elem_path, e) for e in reversed(_array_elements(path, value)))
        else:
            out.append((path, value))
    return out
