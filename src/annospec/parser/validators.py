"""Structural checks run right after each directive is parsed.

Validators only inspect their input. Each raises
:class:`~annospec.exceptions.ValidationFailureError` (or
:class:`~annospec.exceptions.MalformedDirectiveError` for missing mandatory
pieces) and the accumulator attaches the offending line.
"""

from __future__ import annotations

import re

from annospec.exceptions import MalformedDirectiveError, ValidationFailureError
from annospec.models import Body, Content, HTTPMethod, Parameter, ParameterLocation

OCTET_STREAM = "application/octet-stream"

_METHODS = frozenset(m.value for m in HTTPMethod)
_STATUS_RE = re.compile(r"^(default|[1-5]\d\d|[1-5]XX)$")


def validate_path(method: str, path: str) -> None:
    """Check a ``@openapi`` declaration."""
    if not method:
        raise MalformedDirectiveError("Missing method")
    if not path:
        raise MalformedDirectiveError("Missing path")
    if method not in _METHODS:
        raise ValidationFailureError(
            f"Invalid method '{method}', expected one of: {', '.join(m.value for m in HTTPMethod)}"
        )
    if not path.startswith("/"):
        raise ValidationFailureError(f"Path must start with '/': {path}")


def validate_param(param: Parameter) -> None:
    """Check a parameter built from ``@openapiParam``."""
    if not param.name:
        raise MalformedDirectiveError("Missing parameter name")
    if param.location == ParameterLocation.PATH and not param.required:
        raise ValidationFailureError(f"Path parameter '{param.name}' must be required")


def validate_location(value: str) -> ParameterLocation:
    """Return the :class:`ParameterLocation` for *value* or fail naming the field."""
    if not value:
        raise ValidationFailureError("Missing parameter field 'in'")
    try:
        return ParameterLocation(value)
    except ValueError:
        allowed = ", ".join(loc.value for loc in ParameterLocation)
        raise ValidationFailureError(
            f"Invalid parameter field 'in': {value} (expected one of: {allowed})"
        ) from None


def validate_content(content_type: str, content: Content) -> None:
    """Check that *content* is consistent with its content type."""
    if not content_type:
        raise MalformedDirectiveError("Missing content type")
    has_example = content.example is not None
    has_schema = content.schema_ is not None and content.schema_.type != ""
    if has_example == has_schema:
        raise ValidationFailureError(
            f"Content for {content_type} must hold exactly one of example or schema"
        )
    if content_type == OCTET_STREAM and (
        has_example or content.schema_.type != "string" or content.schema_.format != "binary"
    ):
        raise ValidationFailureError(f"{OCTET_STREAM} content must be a binary string")


def validate_request(body: Body) -> None:
    """Check a request body built from ``@openapiRequest``."""
    if not body.content:
        raise ValidationFailureError("Request body has no content")
    for content_type, content in body.content.items():
        validate_content(content_type, content)


def validate_response(status: str, body: Body) -> None:
    """Check a response built from ``@openapiResponse``."""
    if not status:
        raise MalformedDirectiveError("Missing response status")
    if not _STATUS_RE.match(status):
        raise ValidationFailureError(f"Invalid response status: {status}")
    for content_type, content in body.content.items():
        validate_content(content_type, content)
