"""Primitive type tables shared by the parameter and schema resolvers."""

from __future__ import annotations

from typing import Optional

TYPES_MAP: dict[str, str] = {
    "int": "integer",
    "int8": "integer",
    "int16": "integer",
    "int32": "integer",
    "int64": "integer",
    "uint": "integer",
    "uint8": "integer",
    "uint16": "integer",
    "uint32": "integer",
    "uint64": "integer",
    "float": "number",
    "float32": "number",
    "float64": "number",
    "bool": "boolean",
    "string": "string",
    "[]byte": "string",
}

FORMATS_MAP: dict[str, str] = {
    "float": "float",
    "float32": "float",
    "float64": "double",
    "[]byte": "binary",
}

# Type keywords that already belong to the output vocabulary.
OUTPUT_TYPES = frozenset({"string", "integer", "number", "boolean", "array", "object"})

TIME_TYPES = frozenset({"time.Time"})

ARRAY_PREFIX = "[]"
POINTER_PREFIX = "*"


def is_primitive(type_name: str) -> bool:
    return type_name in TYPES_MAP


def is_time(type_name: str) -> bool:
    return type_name in TIME_TYPES


def primitive_format(type_name: str) -> Optional[str]:
    return FORMATS_MAP.get(type_name)
