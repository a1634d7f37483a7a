"""
Destination Shapes
Closed set of shapes a declared destination type can take, discovered from type hints
"""
from __future__ import annotations

import asyncio
import collections.abc as abc
import enum
import queue
import types
import typing
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from objmapper.mapping import records


class Kind(enum.Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STR = "str"
    BYTES = "bytes"
    ARRAY = "array"
    SEQUENCE = "sequence"
    SET = "set"
    MAPPING = "mapping"
    OPTIONAL = "optional"
    INTERFACE = "interface"
    RECORD = "record"
    OPAQUE = "opaque"
    UNSUPPORTED = "unsupported"


SCALAR_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.COMPLEX, Kind.STR, Kind.BYTES})

# bool before int: True is not an int kind
_SCALARS: Tuple[Tuple[type, Kind], ...] = (
    (bool, Kind.BOOL),
    (int, Kind.INT),
    (float, Kind.FLOAT),
    (complex, Kind.COMPLEX),
    (str, Kind.STR),
    (bytes, Kind.BYTES),
)

# channel, function and raw-memory analogues; mapping skips them
_UNSUPPORTED: Tuple[type, ...] = (
    abc.Callable,
    abc.Iterator,
    abc.AsyncIterator,
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    memoryview,
)

_ABSTRACT_SEQUENCES = (abc.Sequence, abc.MutableSequence)
_ABSTRACT_SETS = (abc.Set, abc.MutableSet)
_ABSTRACT_MAPPINGS = (abc.Mapping, abc.MutableMapping)


@dataclass(frozen=True)
class Shape:
    """
    Tagged description of a declared destination type.

    Attributes:
        kind: Which recursion applies
        cls: Runtime class to build or compare against (None when there is none)
        args: Per-kind type arguments: per-index types for ARRAY, ``(element,)``
            for SEQUENCE/SET, ``(key, value)`` for MAPPING, ``(inner,)`` for
            OPTIONAL, union members for INTERFACE (empty means anything)
    """

    kind: Kind
    cls: Optional[type] = None
    args: Tuple[Any, ...] = ()

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    def container(self, items: Any) -> Any:
        """Build the concrete container for SEQUENCE/SET results."""
        if self.kind is Kind.SEQUENCE:
            if self.cls is None or self.cls in _ABSTRACT_SEQUENCES or self.cls is list:
                return list(items)
        elif self.kind is Kind.SET:
            if self.cls is None or self.cls in _ABSTRACT_SETS:
                return set(items)
        return self.cls(items)

    def empty_mapping(self) -> Any:
        if self.cls is None or self.cls in _ABSTRACT_MAPPINGS:
            return {}
        return self.cls()


def unwrap(declared: Any) -> Any:
    """Strip Annotated[...] and NewType wrappers."""
    while True:
        if typing.get_origin(declared) is typing.Annotated:
            declared = typing.get_args(declared)[0]
        elif isinstance(declared, typing.NewType):
            declared = declared.__supertype__
        else:
            return declared


def scalar_kind(value: Any) -> Optional[Kind]:
    """Kind of a runtime value, or None when it is not a scalar."""
    for cls, kind in _SCALARS:
        if isinstance(value, cls):
            return kind
    return None


def is_union(declared: Any) -> bool:
    origin = typing.get_origin(declared)
    return origin is typing.Union or origin is types.UnionType


def runtime_class(declared: Any) -> Optional[type]:
    declared = unwrap(declared)
    origin = typing.get_origin(declared)
    if isinstance(origin, type):
        return origin
    if isinstance(declared, type):
        return declared
    return None


def shape_of(declared: Any, mutator_prefix: str = "set_") -> Shape:
    """
    Discover the shape of a declared destination type.

    Args:
        declared: A class or typing construct (``list[int]``, ``int | None`` ...)
        mutator_prefix: Prefix that makes a plain class with setters a record

    Returns:
        The Shape; unrecognised constructs come back as OPAQUE with no class
    """
    declared = unwrap(declared)
    if declared is Any or declared is object or isinstance(declared, typing.TypeVar):
        return Shape(Kind.INTERFACE)

    if is_union(declared):
        args = typing.get_args(declared)
        members = tuple(a for a in args if a is not type(None))
        if len(members) == len(args):
            return Shape(Kind.INTERFACE, args=members)
        inner = members[0] if len(members) == 1 else typing.Union[members]
        return Shape(Kind.OPTIONAL, args=(inner,))

    origin = typing.get_origin(declared)
    if origin is not None:
        if not isinstance(origin, type):
            return Shape(Kind.OPAQUE)
        return _class_shape(origin, typing.get_args(declared), mutator_prefix)
    if isinstance(declared, type):
        return _class_shape(declared, None, mutator_prefix)
    return Shape(Kind.OPAQUE)


def _class_shape(cls: type, args: Optional[Tuple[Any, ...]], mutator_prefix: str) -> Shape:
    """`args` is None for a bare class, a possibly empty tuple for a parametrized one."""
    if issubclass(cls, enum.Enum):
        return Shape(Kind.OPAQUE, cls)
    for scalar, kind in _SCALARS:
        if issubclass(cls, scalar):
            return Shape(kind, cls)
    # NamedTuples are tuples too; records win
    if records.is_record_type(cls, mutator_prefix):
        return Shape(Kind.RECORD, cls)
    # memoryview registers as a Sequence
    if issubclass(cls, _UNSUPPORTED):
        return Shape(Kind.UNSUPPORTED, cls)
    if issubclass(cls, tuple):
        if args is None:
            return Shape(Kind.SEQUENCE, cls, (Any,))
        if len(args) == 2 and args[1] is Ellipsis:
            return Shape(Kind.SEQUENCE, cls, (args[0],))
        if args == ((),):
            args = ()
        return Shape(Kind.ARRAY, cls, args)
    if issubclass(cls, abc.Mapping):
        return Shape(Kind.MAPPING, cls, args or (Any, Any))
    if issubclass(cls, abc.Set):
        return Shape(Kind.SET, cls, args or (Any,))
    if issubclass(cls, abc.Sequence) and not issubclass(cls, bytearray):
        return Shape(Kind.SEQUENCE, cls, args or (Any,))
    return Shape(Kind.OPAQUE, cls)


def is_sequence_value(value: Any) -> bool:
    """Array/slice analogue on the source side: ordered, indexable, not text."""
    return isinstance(value, abc.Sequence) and not isinstance(value, (str, bytes, bytearray))


def matches_exactly(value: Any, declared: Any) -> bool:
    """True when `value`'s concrete type equals the runtime class of `declared`."""
    declared = unwrap(declared)
    if declared is Any or declared is object or isinstance(declared, typing.TypeVar):
        return True
    if is_union(declared):
        return any(
            value is None if member is type(None) else matches_exactly(value, member)
            for member in typing.get_args(declared)
        )
    cls = runtime_class(declared)
    return cls is not None and type(value) is cls


__all__ = [
    "Kind",
    "SCALAR_KINDS",
    "Shape",
    "unwrap",
    "scalar_kind",
    "is_union",
    "runtime_class",
    "shape_of",
    "is_sequence_value",
    "matches_exactly",
]
