"""Resolve ``@openapiParam`` payloads into :class:`~annospec.models.Parameter` models.

Grammar::

    <name> <key>=<value>[, <key>=<value>...]

Recognised keys are ``in``, ``type``, ``required``, ``default``, ``example``,
``format``, and ``description``. Unknown keys are accepted and ignored.
Values are kept as strings; ``type`` is mapped through the primitive table
and ``format`` is derived from it when not given explicitly.
"""

from __future__ import annotations

from typing import Optional

from annospec.exceptions import MalformedDirectiveError
from annospec.models import Parameter, ParameterLocation, PropertySchema
from annospec.parser.primitives import OUTPUT_TYPES, TYPES_MAP, primitive_format
from annospec.parser.validators import validate_location, validate_param


def parse_key_values(text: str) -> dict[str, str]:
    """Parse ``key=value, key=value`` into an ordered mapping.

    Later duplicate keys overwrite earlier ones. Values may contain ``=``;
    only the first one separates key from value.

    Raises:
        MalformedDirectiveError: If a non-empty pair has no ``=`` or an
            empty key.
    """
    pairs: dict[str, str] = {}
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, sep, value = chunk.partition("=")
        key = key.strip()
        if not sep or not key:
            raise MalformedDirectiveError(f"Malformed parameter option: '{chunk}'")
        pairs[key] = value.strip()
    return pairs


def resolve_param_type(declared: str) -> Optional[str]:
    """Map a declared parameter type to an output type keyword.

    Output keywords are kept verbatim, primitive names go through the
    table, and anything else passes through unchanged.
    """
    if not declared:
        return None
    if declared in OUTPUT_TYPES:
        return declared
    return TYPES_MAP.get(declared, declared)


def parse_param(payload: str) -> Parameter:
    """Build and validate a parameter from an ``@openapiParam`` payload.

    Args:
        payload: Text following the ``@openapiParam`` prefix.

    Returns:
        The validated :class:`~annospec.models.Parameter`.

    Raises:
        MalformedDirectiveError: If the name is missing or an option is
            not ``key=value``.
        ValidationFailureError: If the location is missing or unknown, or
            a path parameter is explicitly marked not required.
    """
    name, _, tail = payload.strip().partition(" ")
    name = name.strip()
    if not name:
        raise MalformedDirectiveError("Missing parameter name")

    options = parse_key_values(tail)
    location = validate_location(options.get("in", ""))

    declared_type = options.get("type", "")
    fmt = options.get("format") or primitive_format(declared_type)

    required_flag = options.get("required", "")
    if required_flag:
        required = required_flag == "true"
    else:
        required = location == ParameterLocation.PATH

    param = Parameter(
        name=name,
        location=location,
        required=required,
        schema=PropertySchema(
            type=resolve_param_type(declared_type),
            format=fmt,
            example=options.get("example"),
            default=options.get("default"),
            description=options.get("description"),
        ),
    )
    validate_param(param)
    return param
