"""
Mapping Exceptions
Errors raised by the value-copying engine
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class MappingError(Exception):
    """Base class for structural mapping errors. Converter errors are never wrapped in it."""
    code: str = "mapping_error"
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code
        self.message = message or self.__class__.__name__
        self.details = details

    @property
    def path(self) -> str:
        return (self.details or {}).get("path", "")


class TypeMismatchError(MappingError):
    code = "type_mismatch"


class InsufficientCapacityError(MappingError):
    code = "insufficient_capacity"


class NotAddressableError(MappingError):
    code = "not_addressable"


class FieldNotFoundError(MappingError):
    code = "field_not_found"


__all__ = [
    "MappingError",
    "TypeMismatchError",
    "InsufficientCapacityError",
    "NotAddressableError",
    "FieldNotFoundError",
]
