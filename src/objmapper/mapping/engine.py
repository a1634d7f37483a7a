"""
Value Mapper
Recursive engine copying a source value into a destination slot of a declared type

Decision order at every node:
1. absent source (missing field, None)      -> leave the slot untouched
2. source indirection (weakref.ref)         -> dereference and retry
3. registered converter for the type pair   -> use its result
4. identical scalar type, opaque instance  -> assign as-is
5. structural recursion by destination shape
"""
from __future__ import annotations

import collections.abc as abc
import weakref
from typing import Any, Callable, Dict, Optional

from objmapper.exceptions import InsufficientCapacityError, NotAddressableError, TypeMismatchError
from objmapper.mapping import records
from objmapper.mapping.accessors import ABSENT, AccessorResolver, MutatorDispatcher
from objmapper.mapping.converters import Converter, ConverterRegistry
from objmapper.mapping.shapes import (
    Kind,
    Shape,
    is_sequence_value,
    matches_exactly,
    runtime_class,
    scalar_kind,
    shape_of,
)


class _Nothing:
    def __repr__(self) -> str:
        return "<nothing>"


# returned when the destination slot must be left as it is
NOTHING = _Nothing()


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def _child(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _index(path: str, index: Any) -> str:
    return f"{path}[{index!r}]"


class ValueMapper:
    """
    The recursive mapping core.

    Every method returns the value to store in the destination slot (or
    NOTHING); the caller does the store. Mutable records, lists-in-place
    and dicts are updated in place and returned as-is.
    """

    def __init__(
        self,
        registry: ConverterRegistry,
        resolver: AccessorResolver,
        dispatcher: MutatorDispatcher,
        mutator_prefix: str = "set_",
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._mutator_prefix = mutator_prefix
        self._handlers: Dict[Kind, Callable[[Any, Shape, Any, str], Any]] = {
            Kind.BOOL: self._map_scalar,
            Kind.INT: self._map_scalar,
            Kind.FLOAT: self._map_scalar,
            Kind.COMPLEX: self._map_scalar,
            Kind.STR: self._map_scalar,
            Kind.BYTES: self._map_scalar,
            Kind.ARRAY: self._map_array,
            Kind.SEQUENCE: self._map_sequence,
            Kind.SET: self._map_set,
            Kind.MAPPING: self._map_mapping,
            Kind.OPTIONAL: self._map_optional,
            Kind.INTERFACE: self._map_interface,
            Kind.RECORD: self._map_record,
            Kind.OPAQUE: self._map_opaque,
            Kind.UNSUPPORTED: self._map_unsupported,
        }

    def shape(self, declared: Any) -> Shape:
        return shape_of(declared, self._mutator_prefix)

    def map_value(self, src: Any, declared: Any, current: Any = None, path: str = "") -> Any:
        """
        Map `src` into a slot declared as `declared` that currently holds `current`.

        Args:
            src: Source value (read only)
            declared: Declared type of the destination slot
            current: Value the slot holds now (None when empty)
            path: Location of the slot, used in error details

        Returns:
            The value to store, or NOTHING to leave the slot untouched

        Raises:
            MappingError: On the first structural failure
            Exception: Whatever a registered converter raises, unwrapped
        """
        if src is ABSENT or src is None:
            return NOTHING
        if isinstance(src, weakref.ref):
            return self.map_value(src(), declared, current, path)

        converter = self._registry.get(type(src), declared)
        if converter is not None:
            return self._convert(converter, src, declared, path)

        shape = self.shape(declared)
        if self._assignable(src, shape):
            return src
        return self._handlers[shape.kind](src, shape, current, path)

    def map_fresh(self, src: Any, declared: Any, path: str = "") -> Any:
        """Map into a newly allocated slot; an untouched slot yields the zero value."""
        value = self.map_value(src, declared, None, path)
        return self.zero_value(declared) if value is NOTHING else value

    def zero_value(self, declared: Any) -> Any:
        shape = self.shape(declared)
        if shape.is_scalar:
            return shape.cls()
        if shape.kind is Kind.ARRAY:
            items = [self.zero_value(arg) for arg in shape.args]
            return tuple(items) if shape.cls is tuple else shape.cls(items)
        if shape.kind in (Kind.SEQUENCE, Kind.SET):
            return shape.container(())
        if shape.kind is Kind.MAPPING:
            return shape.empty_mapping()
        if shape.kind is Kind.RECORD:
            return records.allocate(shape.cls, self.zero_value)
        return None

    # ------------------------------------------------------------------
    # Converters
    # ------------------------------------------------------------------

    def _convert(self, converter: Converter, src: Any, declared: Any, path: str) -> Any:
        result = converter(src)
        if result is None:
            return self.zero_value(declared)
        if not matches_exactly(result, declared):
            raise TypeMismatchError(
                f"converter returned {type(result).__name__}, expected {_type_name(declared)}",
                details={
                    "path": path,
                    "source_type": _type_name(type(src)),
                    "destination_type": _type_name(declared),
                    "converter_result_type": _type_name(type(result)),
                },
            )
        return result

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def _map_scalar(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if scalar_kind(src) is not shape.kind:
            raise self._mismatch(src, shape, path)
        return src if type(src) is shape.cls else shape.cls(src)

    def _map_array(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if not is_sequence_value(src):
            raise self._mismatch(src, shape, path)
        capacity = len(shape.args)
        if len(src) > capacity:
            raise InsufficientCapacityError(
                f"destination holds {capacity} items, source has {len(src)}",
                details={"path": path, "capacity": capacity, "length": len(src)},
            )
        if isinstance(current, tuple) and len(current) == capacity:
            items = list(current)
        else:
            items = [self.zero_value(arg) for arg in shape.args]
        for i, item in enumerate(src):
            value = self.map_value(item, shape.args[i], items[i], _index(path, i))
            if value is not NOTHING:
                items[i] = value
        return tuple(items) if shape.cls is tuple else shape.cls(items)

    def _map_sequence(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if not is_sequence_value(src):
            raise self._mismatch(src, shape, path)
        [element] = shape.args
        return shape.container([
            self.map_fresh(item, element, _index(path, i)) for i, item in enumerate(src)
        ])

    def _map_set(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if not (isinstance(src, abc.Set) or is_sequence_value(src)):
            raise self._mismatch(src, shape, path)
        [element] = shape.args
        return shape.container([
            self.map_fresh(item, element, _index(path, i)) for i, item in enumerate(src)
        ])

    def _map_mapping(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if not isinstance(src, abc.Mapping):
            raise self._mismatch(src, shape, path)
        target = current if isinstance(current, abc.MutableMapping) else shape.empty_mapping()
        key_type, value_type = shape.args
        for key, value in src.items():
            location = _index(path, key)
            target[self.map_fresh(key, key_type, location)] = self.map_fresh(value, value_type, location)
        return target

    def _map_optional(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        [inner] = shape.args
        value = self.map_value(src, inner, current, path)
        if value is NOTHING and current is None:
            return self.zero_value(inner)
        return value

    def _map_interface(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if shape.args:
            member = self._union_member(src, shape.args)
            if member is None:
                raise self._mismatch(src, shape, path)
            cls = runtime_class(member)
            keep = current if cls is not None and isinstance(current, cls) else None
            return self.map_value(src, member, keep, path)
        if current is not None:
            if not self._writable_in_place(current):
                raise NotAddressableError(
                    f"{type(current).__name__} held by the destination cannot be updated in place",
                    details={"path": path, "destination_type": _type_name(type(current))},
                )
            return self.map_value(src, type(current), current, path)
        value = self.map_value(src, type(src), None, path)
        return self.zero_value(type(src)) if value is NOTHING else value

    def _map_record(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        if not records.is_record(src):
            raise self._mismatch(src, shape, path)
        if isinstance(current, shape.cls):
            target = current
        else:
            target = records.allocate(shape.cls, self.zero_value)

        if records.is_writable(target):
            self._map_fields(src, target, path, lambda name, value: self._assign(target, name, value, path))
            self._dispatcher.dispatch(src, target, self.map_fresh, path)
            return target

        changes: Dict[str, Any] = {}
        self._map_fields(src, target, path, changes.__setitem__)
        return records.rebuild(target, changes)

    def _map_opaque(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        raise self._mismatch(src, shape, path)

    def _map_unsupported(self, src: Any, shape: Shape, current: Any, path: str) -> Any:
        return NOTHING

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _map_fields(self, src: Any, target: Any, path: str, store: Callable[[str, Any], None]) -> None:
        for name, declared in records.fields(type(target)):
            candidate = self._resolver.resolve(src, name)
            if candidate is ABSENT:
                continue
            value = self.map_value(candidate, declared, records.own_value(target, name), _child(path, name))
            if value is not NOTHING:
                store(name, value)

    @staticmethod
    def _assignable(src: Any, shape: Shape) -> bool:
        if shape.is_scalar:
            return type(src) is shape.cls
        # Path annotations hold PosixPath values, date fields take datetimes
        return shape.kind is Kind.OPAQUE and shape.cls is not None and isinstance(src, shape.cls)

    @staticmethod
    def _assign(target: Any, name: str, value: Any, path: str) -> None:
        try:
            setattr(target, name, value)
        except AttributeError as exc:
            raise NotAddressableError(
                f"cannot set {type(target).__name__}.{name}",
                details={"path": _child(path, name), "destination_type": _type_name(type(target))},
            ) from exc

    def _writable_in_place(self, value: Any) -> bool:
        if isinstance(value, (abc.MutableSequence, abc.MutableMapping, abc.MutableSet)):
            return True
        return records.is_record_type(type(value), self._mutator_prefix) and records.is_writable(value)

    @staticmethod
    def _union_member(src: Any, members: tuple) -> Optional[Any]:
        classes = [(member, runtime_class(member)) for member in members]
        for member, cls in classes:
            if type(src) is cls:
                return member
        for member, cls in classes:
            if cls is not None and isinstance(src, cls):
                return member
        return None

    @staticmethod
    def _mismatch(src: Any, shape: Shape, path: str) -> TypeMismatchError:
        expected = shape.cls.__qualname__ if shape.cls is not None else shape.kind.value
        return TypeMismatchError(
            f"cannot map {type(src).__name__} into {expected}",
            details={
                "path": path,
                "source_type": _type_name(type(src)),
                "destination_type": expected,
                "destination_kind": shape.kind.value,
            },
        )


__all__ = ["NOTHING", "ValueMapper"]
