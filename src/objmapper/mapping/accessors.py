"""
Accessor Resolver / Mutator Dispatcher
Name-convention lookup on the read side and setter dispatch on the write side
"""
from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from objmapper.exceptions import FieldNotFoundError
from objmapper.mapping import records


class _Absent:
    def __repr__(self) -> str:
        return "<absent>"


ABSENT = _Absent()


def _hints(fn: Callable[..., Any]) -> Dict[str, Any]:
    """
    Resolved annotations of `fn`.

    Names imported only under TYPE_CHECKING cannot be resolved at runtime;
    such annotations come back as Any (a string "None" still means None).
    """
    fn = getattr(fn, "__func__", fn)
    try:
        return typing.get_type_hints(fn)
    except NameError:
        return {
            name: _unresolved(annotation) if isinstance(annotation, str) else annotation
            for name, annotation in inspect.get_annotations(fn).items()
        }


def _unresolved(annotation: str) -> Any:
    return type(None) if annotation == "None" else Any


def _returns_nothing(fn: Callable[..., Any]) -> bool:
    hints = _hints(fn)
    return "return" in hints and hints["return"] in (None, type(None))


def _positional(parameter: inspect.Parameter) -> bool:
    return parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class AccessorResolver:
    """
    Finds the source value for a destination field name.

    A same-named field wins; otherwise a zero-argument accessor named
    ``<prefix><name>`` is called. Missing both yields ABSENT.
    """

    def __init__(self, accessor_prefix: str = "get_") -> None:
        self._prefix = accessor_prefix

    def resolve(self, src: Any, name: str) -> Any:
        if records.has_field(src, name):
            return getattr(src, name)
        accessor = self.accessor(src, name)
        if accessor is None:
            return ABSENT
        return accessor()

    def accessor(self, src: Any, name: str) -> Callable[[], Any] | None:
        method_name = self._prefix + name
        if not inspect.isroutine(inspect.getattr_static(type(src), method_name, None)):
            return None
        method = getattr(src, method_name)
        if inspect.signature(method).parameters or _returns_nothing(method):
            return None
        return method


@dataclass(frozen=True)
class Mutator:
    """A bound single-argument setter and the declared type of its parameter."""

    method_name: str
    field_name: str
    param_type: Any
    invoke: Callable[[Any], Any]


class MutatorDispatcher:
    """
    Invokes ``<prefix><Field>(value)`` setters on a destination record.

    Runs after the field pass. Each setter gets a fresh value mapped from the
    source field (or accessor) of the same name.
    """

    def __init__(self, resolver: AccessorResolver, mutator_prefix: str = "set_") -> None:
        self._resolver = resolver
        self._prefix = mutator_prefix

    def mutators(self, dst: Any) -> List[Mutator]:
        """Setters exposed by `dst`, in name order."""
        found: List[Mutator] = []
        cls = type(dst)
        for method_name in dir(cls):
            field_name = records.mutator_field(method_name, self._prefix)
            if field_name is None:
                continue
            fn = inspect.getattr_static(cls, method_name)
            if not inspect.isfunction(fn):
                continue
            params = list(inspect.signature(fn).parameters.values())
            if len(params) != 2 or not all(_positional(p) for p in params):
                continue
            hints = _hints(fn)
            if hints.get("return", type(None)) not in (None, type(None)):
                continue
            param_type = hints.get(params[1].name, Any)
            found.append(Mutator(
                method_name=method_name,
                field_name=field_name,
                param_type=param_type,
                invoke=getattr(dst, method_name),
            ))
        return found

    def dispatch(self, src: Any, dst: Any, map_fresh: Callable[[Any, Any, str], Any], path: str) -> None:
        """
        Map and apply every setter of `dst`.

        Args:
            src: Source record
            dst: Destination record (writable)
            map_fresh: Maps a source value into a fresh value of a declared type
            path: Location of `dst` for error details

        Raises:
            FieldNotFoundError: A setter has no matching source field or accessor
        """
        for mutator in self.mutators(dst):
            value = self._resolver.resolve(src, mutator.field_name)
            location = f"{path}.{mutator.method_name}()" if path else f"{mutator.method_name}()"
            if value is ABSENT:
                raise FieldNotFoundError(
                    f"no source field or accessor for {mutator.field_name!r}",
                    details={"path": location, "field": mutator.field_name},
                )
            mutator.invoke(map_fresh(value, mutator.param_type, location))


__all__ = ["ABSENT", "AccessorResolver", "Mutator", "MutatorDispatcher"]
