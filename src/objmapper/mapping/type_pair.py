"""
Type-Pair Key
Identity of a (source type, destination type) pair used to index converters
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TypePairKey:
    """
    Immutable lookup key for per-type-pair configuration.

    Equality is structural on both members. `destination` is the declared
    type of the destination slot, so it may be a typing construct such as
    ``list[int]`` or ``int | None``; those compare and hash by value.
    """

    source: Any
    destination: Any

    def __repr__(self) -> str:
        return f"TypePairKey({_type_name(self.source)} -> {_type_name(self.destination)})"


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


__all__ = ["TypePairKey"]
