"""
Mapping
Recursive value mapper, converter registry and name-convention lookup
"""
from objmapper.mapping.accessors import ABSENT, AccessorResolver, Mutator, MutatorDispatcher
from objmapper.mapping.converters import Converter, ConverterRegistry
from objmapper.mapping.engine import NOTHING, ValueMapper
from objmapper.mapping.mapper import Mapper, add_type_converter
from objmapper.mapping.shapes import Kind, Shape, shape_of
from objmapper.mapping.type_pair import TypePairKey

__all__ = [
    # Facade
    "Mapper",
    "add_type_converter",
    # Converters
    "Converter",
    "ConverterRegistry",
    "TypePairKey",
    # Engine
    "ValueMapper",
    "NOTHING",
    "Kind",
    "Shape",
    "shape_of",
    # Name conventions
    "ABSENT",
    "AccessorResolver",
    "Mutator",
    "MutatorDispatcher",
]
