"""
Record Introspection
Uniform field access over dataclasses, pydantic models, NamedTuples and annotated classes
"""
from __future__ import annotations

import dataclasses
import enum
import inspect
import types
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

ZeroFactory = Callable[[Any], Any]

_NOT_RECORDS = (type, types.FunctionType, types.MethodType, types.BuiltinFunctionType, types.ModuleType)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _is_namedtuple_type(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _public_annotations(cls: type) -> bool:
    for klass in cls.__mro__[:-1]:
        for name, annotation in inspect.get_annotations(klass).items():
            if _is_public(name) and not _is_classvar(annotation):
                return True
    return False


def mutator_field(method_name: str, mutator_prefix: str) -> Optional[str]:
    """Field a mutator method name stands for, or None when the name does not follow the convention."""
    if len(method_name) > len(mutator_prefix) and method_name.startswith(mutator_prefix):
        return method_name[len(mutator_prefix):]
    return None


def _has_mutators(cls: type, mutator_prefix: str) -> bool:
    return any(
        mutator_field(name, mutator_prefix) is not None
        and inspect.isfunction(inspect.getattr_static(cls, name))
        for name in dir(cls)
    )


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def is_record_type(cls: type, mutator_prefix: str = "set_") -> bool:
    """
    Whether instances of `cls` are mapped field by field.

    Dataclasses, pydantic models and NamedTuples always are. A plain class is
    when it annotates public attributes or exposes mutator methods.
    """
    if issubclass(cls, enum.Enum) or cls.__module__ == "builtins":
        return False
    if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel) or _is_namedtuple_type(cls):
        return True
    return _public_annotations(cls) or _has_mutators(cls, mutator_prefix)


def is_record(value: Any) -> bool:
    """Source-side check: can fields be read off `value` by name."""
    if value is None or isinstance(value, (_NOT_RECORDS, enum.Enum)):
        return False
    cls = type(value)
    if dataclasses.is_dataclass(cls) or isinstance(value, BaseModel) or _is_namedtuple_type(cls):
        return True
    if cls.__module__ == "builtins":
        return False
    return hasattr(value, "__dict__") or _public_annotations(cls)


def fields(cls: type) -> List[Tuple[str, Any]]:
    """Public fields of a record class with their declared types, in declaration order."""
    if issubclass(cls, BaseModel):
        return [(name, info.annotation) for name, info in cls.model_fields.items() if _is_public(name)]
    hints = typing.get_type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return [(f.name, hints.get(f.name, Any)) for f in dataclasses.fields(cls) if _is_public(f.name)]
    if _is_namedtuple_type(cls):
        return [(name, hints.get(name, Any)) for name in cls._fields if _is_public(name)]
    return [
        (name, hint) for name, hint in hints.items()
        if _is_public(name) and not _is_classvar(hint)
    ]


def has_field(value: Any, name: str) -> bool:
    """Whether `name` is a readable data field of `value` (declared, instance attribute or property)."""
    cls = type(value)
    if isinstance(value, BaseModel):
        if name in cls.model_fields:
            return True
    elif dataclasses.is_dataclass(cls):
        if any(f.name == name for f in dataclasses.fields(cls)):
            return True
    elif _is_namedtuple_type(cls):
        if name in cls._fields:
            return True
    if name in getattr(value, "__dict__", ()):
        return True
    attr = inspect.getattr_static(cls, name, None)
    if isinstance(attr, (property, types.MemberDescriptorType)):
        return True
    if attr is None:
        return False
    # class-level default of an annotated attribute
    return name in typing.get_type_hints(cls) and not callable(attr)


def own_value(value: Any, name: str) -> Any:
    """
    What `name` holds on the instance itself, or None.

    Class-level defaults of plain classes are shared by every instance and
    must never be updated in place.
    """
    state = getattr(value, "__dict__", None)
    if state is not None and name in state:
        return state[name]
    if _is_namedtuple_type(type(value)):
        return getattr(value, name, None)
    if isinstance(inspect.getattr_static(type(value), name, None), types.MemberDescriptorType):
        return getattr(value, name, None)
    return None


def is_writable(value: Any) -> bool:
    """Whether a record instance accepts attribute assignment."""
    cls = type(value)
    if _is_namedtuple_type(cls):
        return False
    if isinstance(value, BaseModel):
        return not value.model_config.get("frozen", False)
    if dataclasses.is_dataclass(cls):
        return not cls.__dataclass_params__.frozen
    return True


def _accepts_no_arguments(cls: type) -> bool:
    try:
        inspect.signature(cls).bind()
    except (TypeError, ValueError):
        return False
    return True


def allocate(cls: type, zero: ZeroFactory) -> Any:
    """
    Create the zero value of a record class.

    Required fields get the zero value of their declared type. Constructors
    that need arguments are bypassed for plain classes; dataclasses and
    NamedTuples are built through their generated constructor.

    Args:
        cls: Record class
        zero: Factory returning the zero value for a declared type

    Returns:
        New instance of `cls`
    """
    if issubclass(cls, BaseModel):
        required = {
            name: zero(info.annotation)
            for name, info in cls.model_fields.items()
            if info.is_required()
        }
        return cls.model_construct(**required)

    hints = typing.get_type_hints(cls)
    if dataclasses.is_dataclass(cls):
        required = {
            f.name: zero(hints.get(f.name, Any))
            for f in dataclasses.fields(cls)
            if f.init and f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        }
        return cls(**required)
    if _is_namedtuple_type(cls):
        required = {
            name: zero(hints.get(name, Any))
            for name in cls._fields
            if name not in cls._field_defaults
        }
        return cls(**required)

    obj = cls() if _accepts_no_arguments(cls) else cls.__new__(cls)
    for name, declared in fields(cls):
        if not hasattr(obj, name):
            setattr(obj, name, zero(declared))
    return obj


def rebuild(value: Any, changes: Dict[str, Any]) -> Any:
    """Copy of an immutable record with `changes` applied."""
    if not changes:
        return value
    if isinstance(value, BaseModel):
        return value.model_copy(update=changes)
    if _is_namedtuple_type(type(value)):
        return value._replace(**changes)
    if dataclasses.is_dataclass(value):
        init_names = {f.name for f in dataclasses.fields(value) if f.init}
        return dataclasses.replace(value, **{k: v for k, v in changes.items() if k in init_names})
    raise TypeError(f"{type(value).__name__} is not an immutable record")


__all__ = [
    "ZeroFactory",
    "mutator_field",
    "is_record_type",
    "is_record",
    "fields",
    "has_field",
    "own_value",
    "is_writable",
    "allocate",
    "rebuild",
]
