"""
Converter Registry
Explicit per-type-pair conversion functions, consulted before structural mapping
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional

from objmapper.mapping.type_pair import TypePairKey
from objmapper.observability import get_logger

logger = get_logger(__name__)

Converter = Callable[[Any], Any]


class ConverterRegistry:
    """
    Mapping from TypePairKey to a user-supplied converter.

    At most one converter per key; registering again for the same pair
    replaces the previous one. Registration is not synchronized: finish
    registering before sharing the owning Mapper between threads.
    """

    def __init__(self) -> None:
        self._converters: Dict[TypePairKey, Converter] = {}

    def add(self, source_type: Any, destination_type: Any, fn: Converter) -> None:
        if not callable(fn):
            raise TypeError(f"converter must be callable, got {type(fn).__name__}")
        key = TypePairKey(source_type, destination_type)
        replaced = key in self._converters
        self._converters[key] = fn
        logger.debug("Type converter registered", key=repr(key), replaced=replaced)

    def get(self, source_type: Any, destination_type: Any) -> Optional[Converter]:
        try:
            return self._converters.get(TypePairKey(source_type, destination_type))
        except TypeError:
            # unhashable declared type (e.g. Annotated with unhashable metadata)
            return None

    def __contains__(self, key: object) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)

    def __iter__(self) -> Iterator[TypePairKey]:
        return iter(self._converters)


__all__ = ["Converter", "ConverterRegistry"]
