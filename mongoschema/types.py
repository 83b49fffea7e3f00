# mongoschema/types.py
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple


class TypeTag(Enum):
    """Semantic type of an observed value. The value is the Mongoose spelling."""
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    DATE = "Date"
    STRING = "String"
    IDENTIFIER = "Schema.Types.ObjectId"
    BINARY = "Buffer"
    DECIMAL = "Schema.Types.Decimal128"
    BIG_INTEGER = "BigInt"
    MIXED = "Schema.Types.Mixed"

    def __str__(self):
        return self.value


UNION_TYPE_NAME = "Schema.Types.Union"


@dataclass(frozen=True)
class UnionType:
    """Two or more distinct, non-Mixed tags seen at one path, in first-seen order."""
    members: Tuple[TypeTag, ...]

    def __post_init__(self):
        if len(self.members) < 2:
            raise ValueError("a union needs at least two members")
        if len(set(self.members)) != len(self.members):
            raise ValueError("union members must be distinct")
        if TypeTag.MIXED in self.members:
            raise ValueError("Mixed cannot be a union member")

    def __contains__(self, tag):
        return tag in self.members

    def with_member(self, tag: TypeTag) -> "UnionType":
        if tag in self.members:
            return self
        return UnionType(self.members + (tag,))

    def names(self):
        return [m.value for m in self.members]


@dataclass(frozen=True)
class UnsupportedType:
    """Why a value could not be classified."""
    value_type: str
    value_repr: str

    def __str__(self):
        return f"Unsupported BSON type: {self.value_type} ({self.value_repr})"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one value: exactly one of tag / failure is set."""
    tag: Optional[TypeTag] = None
    failure: Optional[UnsupportedType] = None

    @property
    def ok(self) -> bool:
        return self.tag is not None


def describe(entry) -> object:
    """Plain-data view of an accumulator entry (tag name or list of member names)."""
    if isinstance(entry, UnionType):
        return entry.names()
    return entry.value
