# mongoschema/schema_generator.py
import re, json
from typing import Any

from mongoschema.config import CFG, InferenceConfig
from mongoschema.types import TypeTag, UnionType, UNION_TYPE_NAME

# keys that can appear unquoted in a JS object literal
_RE_VALID_KEY = re.compile(r'^[a-zA-Z_$][a-zA-Z0-9_$]*$')


def _format_key(key: str) -> str:
    return key if _RE_VALID_KEY.match(key) else json.dumps(key)


class _Node:
    """A value still to be rendered at a given indent."""
    __slots__ = ("value", "current")

    def __init__(self, value, current: str):
        self.value = value
        self.current = current


def render_schema(tree: Any, indent: str = None, type_key: str = None, cfg: InferenceConfig = CFG) -> str:
    """
    Render a schema tree as Mongoose schema source.

    Objects become brace blocks with one `key: value` per line, lists become
    bracket blocks, tags render as their Mongoose name and unions as
    `{ <type_key>: Schema.Types.Union, of: [...] }`. No trailing newline.
    Works over an explicit stack, so tree depth is unbounded.
    """
    indent = cfg.indent if indent is None else indent
    type_key = cfg.type_key if type_key is None else type_key

    def _pieces(value, current: str) -> list:
        # text fragments and _Node placeholders, in output order
        if isinstance(value, UnionType):
            value = {type_key: UNION_TYPE_NAME, "of": list(value.members)}
        if isinstance(value, TypeTag):
            return [value.value]
        if isinstance(value, list):
            if not value:
                return ["[]"]
            nxt = current + indent
            out = ["[\n"]
            for i, item in enumerate(value):
                if i:
                    out.append(",\n")
                out += [nxt, _Node(item, nxt)]
            out.append(f"\n{current}]")
            return out
        if isinstance(value, dict):
            if not value:
                return ["{}"]
            # `field: { type: <union> }` is already the union's own declaration
            if len(value) == 1 and isinstance(value.get(type_key), UnionType):
                return [_Node(value[type_key], current)]
            nxt = current + indent
            out = ["{\n"]
            for i, (k, v) in enumerate(value.items()):
                if i:
                    out.append(",\n")
                out += [f"{nxt}{_format_key(str(k))}: ", _Node(v, nxt)]
            out.append(f"\n{current}}}")
            return out
        return [str(value)]

    parts = []
    stack = [_Node(tree, "")]
    while stack:
        item = stack.pop()
        if isinstance(item, _Node):
            stack.extend(reversed(_pieces(item.value, item.current)))
        else:
            parts.append(item)
    return "".join(parts)
