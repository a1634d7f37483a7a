"""
Mapper
Facade owning the converter registry and launching the value mapper
"""
from __future__ import annotations

import collections.abc as abc
from typing import Any, Optional, Type, TypeVar

from objmapper.config import MapperSettings, get_settings
from objmapper.exceptions import MappingError, NotAddressableError
from objmapper.mapping import records
from objmapper.mapping.accessors import AccessorResolver, MutatorDispatcher
from objmapper.mapping.converters import Converter, ConverterRegistry
from objmapper.mapping.engine import NOTHING, ValueMapper
from objmapper.observability import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_IMMUTABLE_ROOTS = (str, bytes, int, float, complex, bool, tuple, frozenset)


class Mapper:
    """
    Copies values between differently shaped types by field name.

    Usage:
        mapper = Mapper()
        mapper.add_type_converter(str, int, int)
        user = User()
        mapper.map(dto, user)

    A Mapper is reusable across many map() calls. Register converters before
    sharing it between threads; map() itself only reads the registry.
    """

    def __init__(self, settings: Optional[MapperSettings] = None) -> None:
        self._settings = settings or get_settings()
        self._converters = ConverterRegistry()
        resolver = AccessorResolver(self._settings.ACCESSOR_PREFIX)
        self._engine = ValueMapper(
            self._converters,
            resolver,
            MutatorDispatcher(resolver, self._settings.MUTATOR_PREFIX),
            mutator_prefix=self._settings.MUTATOR_PREFIX,
        )

    @property
    def settings(self) -> MapperSettings:
        return self._settings

    @property
    def converters(self) -> ConverterRegistry:
        return self._converters

    def add_type_converter(self, source_type: Any, destination_type: Any, fn: Converter) -> None:
        """
        Register (or replace) the converter for an exact type pair.

        Args:
            source_type: Concrete runtime type of source values
            destination_type: Declared type of destination slots (may be ``list[int]``, ``int | None`` ...)
            fn: Called with the source value. Return a value whose type is
                exactly `destination_type`, return None for the zero value, or raise.
        """
        self._converters.add(source_type, destination_type, fn)

    def has_type_converter(self, source_type: Any, destination_type: Any) -> bool:
        return self._converters.get(source_type, destination_type) is not None

    def map(self, src: Any, dst: Any, *, dst_type: Any = None) -> None:
        """
        Copy `src` into `dst` in place.

        Args:
            src: Any value; never modified
            dst: Mutable record, list, dict or set to write into
            dst_type: Declared type of `dst` when ``type(dst)`` is not
                precise enough (e.g. ``list[User]``)

        Raises:
            NotAddressableError: `dst` cannot be updated in place
            TypeMismatchError / InsufficientCapacityError / FieldNotFoundError:
                structural failures; `dst` may be partially written
            Exception: converter errors, unwrapped
        """
        if not self._addressable(dst):
            raise NotAddressableError(
                f"{type(dst).__name__} destination cannot be updated in place; pass a mutable object",
                details={"path": "", "destination_type": type(dst).__qualname__},
            )
        declared = dst_type if dst_type is not None else type(dst)
        try:
            result = self._engine.map_value(src, declared, dst)
        except MappingError as exc:
            logger.debug("Mapping aborted", code=exc.code, path=exc.path)
            raise
        if result is NOTHING or result is dst:
            return
        if isinstance(dst, abc.MutableSequence):
            dst.clear()
            dst.extend(result)
        elif isinstance(dst, abc.MutableSet):
            dst.clear()
            dst |= result
        elif isinstance(dst, abc.MutableMapping):
            dst.clear()
            dst.update(result)
        else:
            raise NotAddressableError(
                f"{type(dst).__name__} destination would have to be replaced, not updated",
                details={"path": "", "destination_type": type(dst).__qualname__},
            )

    def map_to(self, src: Any, dst_type: Type[T]) -> T:
        """Map `src` into a newly allocated zero value of `dst_type` and return it."""
        try:
            return self._engine.map_fresh(src, dst_type)
        except MappingError as exc:
            logger.debug("Mapping aborted", code=exc.code, path=exc.path)
            raise

    def _addressable(self, dst: Any) -> bool:
        if dst is None or isinstance(dst, _IMMUTABLE_ROOTS):
            return False
        if isinstance(dst, (abc.MutableSequence, abc.MutableMapping, abc.MutableSet)):
            return True
        if isinstance(dst, (type, abc.Mapping, abc.Set, abc.Sequence)):
            return False
        return records.is_record(dst) and records.is_writable(dst)


def add_type_converter(mapper: Mapper, source_type: Any, destination_type: Any, fn: Converter) -> None:
    """Register `fn` on `mapper` for (`source_type`, `destination_type`); the last registration wins."""
    mapper.add_type_converter(source_type, destination_type, fn)


__all__ = ["Mapper", "add_type_converter"]
