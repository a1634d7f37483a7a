"""
objmapper - Generic Value Copying
Field-by-field mapping between DTOs and domain objects of matching-but-not-identical shape
"""

from objmapper.config import MapperSettings, get_settings
from objmapper.exceptions import (
    FieldNotFoundError,
    InsufficientCapacityError,
    MappingError,
    NotAddressableError,
    TypeMismatchError,
)
from objmapper.mapping import (
    ConverterRegistry,
    Mapper,
    TypePairKey,
    add_type_converter,
)
from objmapper.observability import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Mapping
    "Mapper",
    "add_type_converter",
    "ConverterRegistry",
    "TypePairKey",
    # Errors
    "MappingError",
    "TypeMismatchError",
    "InsufficientCapacityError",
    "NotAddressableError",
    "FieldNotFoundError",
    # Config
    "MapperSettings",
    "get_settings",
    # Observability
    "configure_logging",
    "get_logger",
]
