"""Serialize a :class:`~annospec.models.Document` as an OpenAPI 3.0 mapping.

:func:`to_openapi` produces plain dicts and lists with OpenAPI key names
(``in``, ``requestBody``); unset and empty optional fields are left out.
Literal examples, stored verbatim by the parser, are decoded so they appear
as structured values. Every response receives the ``description`` OpenAPI
requires, taken from the HTTP reason phrase of its status code.

:func:`dump_document` renders the mapping as indented JSON or as YAML with
key order preserved.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

import yaml

from annospec.exceptions import InvalidUsageError
from annospec.models import Body, Content, Document, Operation, Parameter, PropertySchema, Schema

FORMATS = ("yaml", "json")


def to_openapi(document: Document, openapi_version: str = "3.0.3") -> dict[str, Any]:
    """Convert *document* to an OpenAPI mapping ready for ``json``/``yaml`` dumping."""
    paths: dict[str, Any] = {}
    for path, path_item in document.paths.items():
        paths[path] = {
            method: _operation(operation) for method, operation in path_item.items()
        }
    return {
        "openapi": openapi_version,
        "info": {"title": document.info.title, "version": document.info.version},
        "paths": paths,
    }


def dump_document(data: dict[str, Any], fmt: str = "yaml") -> str:
    """Render an OpenAPI mapping as ``yaml`` or ``json`` text.

    Raises:
        InvalidUsageError: If *fmt* is not a supported format.
    """
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise InvalidUsageError(f"Unsupported document format: {fmt} (expected one of: {', '.join(FORMATS)})")


def _operation(operation: Operation) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if operation.tags:
        out["tags"] = list(operation.tags)
    if operation.summary:
        out["summary"] = operation.summary
    if operation.description:
        out["description"] = operation.description
    if operation.deprecated:
        out["deprecated"] = True
    if operation.parameters:
        out["parameters"] = [_parameter(p) for p in operation.parameters]
    if operation.request_body is not None:
        out["requestBody"] = {"content": _content_map(operation.request_body)}
    out["responses"] = {
        status: _response(status, body) for status, body in operation.responses.items()
    }
    return out


def _parameter(param: Parameter) -> dict[str, Any]:
    return {
        "name": param.name,
        "in": param.location.value,
        "required": param.required,
        "schema": _property(param.schema_),
    }


def _response(status: str, body: Body) -> dict[str, Any]:
    out: dict[str, Any] = {"description": _reason_phrase(status)}
    if body.content:
        out["content"] = _content_map(body)
    return out


def _reason_phrase(status: str) -> str:
    try:
        return HTTPStatus(int(status)).phrase
    except ValueError:
        return ""


def _content_map(body: Body) -> dict[str, Any]:
    return {content_type: _content(content) for content_type, content in body.content.items()}


def _content(content: Content) -> dict[str, Any]:
    if content.example is not None:
        return {"example": json.loads(content.example)}
    if content.schema_ is not None:
        return {"schema": _schema(content.schema_)}
    return {}


def _schema(schema: Schema) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if schema.type:
        out["type"] = schema.type
    if schema.format:
        out["format"] = schema.format
    if schema.properties is not None:
        out["properties"] = {name: _property(p) for name, p in schema.properties.items()}
    if schema.items is not None:
        out["items"] = _schema(schema.items)
    return out


def _property(prop: PropertySchema) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in ("type", "format", "description", "default", "example"):
        value = getattr(prop, key)
        if value:
            out[key] = value
    if prop.properties is not None:
        out["properties"] = {name: _property(p) for name, p in prop.properties.items()}
    if prop.items is not None:
        out["items"] = _schema(prop.items)
    return out
