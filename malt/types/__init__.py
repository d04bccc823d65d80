from malt.types.nil import Nil, NilType
from malt.types.symbol import Symbol
from malt.types.values import Boolean, Keyword, List, Map, Number, String, Value, Vector

__all__ = [
    "Boolean", "Keyword", "List", "Map", "Nil", "NilType",
    "Number", "String", "Symbol", "Value", "Vector",
]
