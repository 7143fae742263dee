"""Resolve directive payloads into :class:`~annospec.models.Content` and schema trees.

A request or response payload takes one of three shapes, told apart by
:func:`classify_payload`:

* **Literal example** -- starts with ``{`` and is valid JSON. Stored verbatim
  as the content's example; no schema is built and no type is looked up.
* **Inline field list** -- starts with ``{`` but is not JSON, e.g.
  ``{id: int, tags: []string}``. Becomes an ``object`` schema whose
  properties are resolved one by one.
* **Type reference** -- a bare type name, optionally ``[]``-prefixed, looked
  up in the :class:`~annospec.catalog.TypeCatalog`.

Resolution is recursive. Arrays wrap their element type, a leading ``*`` is
ignored, aliases are replaced by their target, ``time.Time`` becomes a
``date-time`` string, and struct references are expanded in place. Any name
that cannot be resolved aborts the whole payload with
:class:`~annospec.exceptions.UnknownTypeError`; there is no partial schema.

Types currently being expanded are tracked on a stack. Re-entering one
(``User.Friends -> []User``) raises
:class:`~annospec.exceptions.CyclicTypeError` instead of recursing forever.
Resolved schemas are not cached, so a type referenced from several places is
expanded each time.
"""

from __future__ import annotations

import enum
import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from annospec.catalog import TypeCatalog, namespace_of, parse_field_tag, qualify
from annospec.exceptions import (
    CyclicTypeError,
    InvalidLiteralError,
    MalformedDirectiveError,
    UnknownTypeError,
)
from annospec.models import Content, PropertySchema, Schema, TypeDescriptor
from annospec.parser.primitives import (
    ARRAY_PREFIX,
    POINTER_PREFIX,
    TYPES_MAP,
    is_primitive,
    is_time,
    primitive_format,
)
from annospec.parser.validators import OCTET_STREAM


class PayloadKind(str, enum.Enum):
    """The three payload shapes accepted by request and response directives."""

    LITERAL = "literal"
    FIELD_LIST = "field_list"
    TYPE_NAME = "type_name"


@dataclass(frozen=True)
class ClassifiedPayload:
    """A payload tagged with its shape.

    ``fields`` is only populated for :attr:`PayloadKind.FIELD_LIST`.
    """

    kind: PayloadKind
    text: str
    fields: tuple[tuple[str, str], ...] = ()


def _reject_constant(token: str) -> None:
    raise ValueError(f"Invalid JSON constant: {token}")


def _is_json(text: str) -> bool:
    try:
        json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


def parse_field_list(text: str) -> tuple[tuple[str, str], ...]:
    """Parse ``{name: type, "name": "type"}`` into ``(name, type)`` pairs.

    Raises:
        InvalidLiteralError: If the braces are unbalanced or an entry is not
            ``name: type``.
    """
    text = text.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise InvalidLiteralError(f"Invalid JSON or field list: {text}")

    fields: list[tuple[str, str]] = []
    inner = text[1:-1].strip()
    if not inner:
        return ()
    for entry in inner.split(","):
        name, sep, type_name = entry.partition(":")
        name = name.strip().strip("\"'").strip()
        type_name = type_name.strip().strip("\"'").strip()
        if not sep or not name or not type_name:
            raise InvalidLiteralError(f"Invalid JSON or field list: {text}")
        fields.append((name, type_name))
    return tuple(fields)


def classify_payload(text: str) -> ClassifiedPayload:
    """Decide whether *text* is a literal example, a field list, or a type name.

    Literal JSON is tried first, then the inline field list grammar; anything
    not starting with ``{`` is a type name.

    Raises:
        InvalidLiteralError: If *text* starts with ``{`` but matches neither
            of the brace forms.
    """
    text = text.strip()
    if text.startswith("{"):
        if _is_json(text):
            return ClassifiedPayload(PayloadKind.LITERAL, text)
        return ClassifiedPayload(PayloadKind.FIELD_LIST, text, parse_field_list(text))
    return ClassifiedPayload(PayloadKind.TYPE_NAME, text)


def _as_schema(prop: PropertySchema) -> Schema:
    """Drop the per-field metadata from a property, keeping its structure."""
    return Schema(
        type=prop.type or "",
        format=prop.format,
        properties=prop.properties,
        items=prop.items,
    )


class SchemaResolver:
    """Turns payload text and type names into schema trees.

    One resolver may be shared by every comment block of a run; it only
    reads the catalog and keeps no state between calls besides the
    in-progress stack used for cycle detection.

    Args:
        catalog: Type descriptors available for lookup.
    """

    def __init__(self, catalog: TypeCatalog) -> None:
        self._catalog = catalog
        self._resolving: list[str] = []

    def resolve_content(self, content_type: str, payload: str) -> Content:
        """Build the :class:`~annospec.models.Content` for one body entry.

        ``application/octet-stream`` always yields a binary string schema,
        whatever the payload says.

        Raises:
            MalformedDirectiveError: If the payload is empty.
            InvalidLiteralError: See :func:`classify_payload`.
            UnknownTypeError: If a referenced type cannot be resolved.
            CyclicTypeError: If a referenced type refers back to itself.
        """
        if content_type == OCTET_STREAM:
            return Content(schema=Schema(type="string", format="binary"))

        if not payload.strip():
            raise MalformedDirectiveError(f"Missing payload for {content_type}")

        classified = classify_payload(payload)
        if classified.kind == PayloadKind.LITERAL:
            return Content(example=classified.text)
        if classified.kind == PayloadKind.FIELD_LIST:
            return Content(schema=self.fields_to_schema(classified.fields))
        return Content(schema=self.struct_to_schema(classified.text))

    def fields_to_schema(self, fields: tuple[tuple[str, str], ...]) -> Schema:
        """Build an ``object`` schema from inline ``(name, type)`` pairs."""
        schema = Schema(type="object", properties={})
        for name, type_name in fields:
            schema.properties[name] = self.type_to_property(type_name)
        return schema

    def struct_to_schema(self, name: str) -> Schema:
        """Resolve a type reference into a top-level schema.

        ``[]T`` becomes an array of ``T``. A struct descriptor becomes an
        ``object`` whose properties follow the field order, honouring the
        ``json`` rename/omit tag and the ``openapi`` type/format/example
        overrides. Alias descriptors and bare primitives resolve to the
        schema of the type they denote.

        Raises:
            UnknownTypeError: If *name* (or anything it references) is not
                in the catalog or the primitive tables.
            CyclicTypeError: If the type refers back to itself.
        """
        if name.startswith(ARRAY_PREFIX) and not is_primitive(name):
            items = self.struct_to_schema(name[len(ARRAY_PREFIX):])
            return Schema(type="array", items=items)

        descriptor = self._catalog.get(name)
        if descriptor is None:
            if is_primitive(name) or is_time(name):
                return _as_schema(self.type_to_property(name))
            raise UnknownTypeError(name)

        if descriptor.is_alias:
            return _as_schema(self._expand_alias(descriptor))

        with self._guard(descriptor.name):
            return self._object_schema(descriptor)

    def type_to_property(self, type_name: str, namespace: str = "") -> PropertySchema:
        """Resolve a raw field type into a :class:`~annospec.models.PropertySchema`.

        Args:
            type_name: The raw type string (``*models.User``, ``[][]int``).
            namespace: Namespace of the referring type, used to qualify
                unqualified struct references.

        Raises:
            UnknownTypeError: If the type cannot be resolved.
            CyclicTypeError: If the type refers back to one being expanded.
        """
        if type_name.startswith(POINTER_PREFIX):
            type_name = type_name[len(POINTER_PREFIX):]

        if is_primitive(type_name):
            return PropertySchema(
                type=TYPES_MAP[type_name],
                format=primitive_format(type_name),
            )

        if is_time(type_name):
            return PropertySchema(type="string", format="date-time")

        if type_name.startswith(ARRAY_PREFIX):
            element = self.type_to_property(type_name[len(ARRAY_PREFIX):], namespace)
            items = Schema(type=element.type or "", format=element.format)
            if element.type == "object":
                items.properties = element.properties
            if element.type == "array":
                items.items = element.items
            return PropertySchema(type="array", items=items)

        descriptor = self._lookup(type_name, namespace)
        if descriptor is None:
            raise UnknownTypeError(qualify(namespace, type_name))
        if descriptor.is_alias:
            return self._expand_alias(descriptor)

        with self._guard(descriptor.name):
            schema = self._object_schema(descriptor)
        return PropertySchema(type="object", properties=schema.properties)

    def _lookup(self, type_name: str, namespace: str) -> Optional[TypeDescriptor]:
        """Find *type_name* as seen from *namespace*."""
        return self._catalog.get(qualify(namespace, type_name))

    def _expand_alias(self, descriptor: TypeDescriptor) -> PropertySchema:
        with self._guard(descriptor.name):
            return self.type_to_property(descriptor.alias_target, namespace_of(descriptor.name))

    def _object_schema(self, descriptor: TypeDescriptor) -> Schema:
        schema = Schema(type="object", properties={})
        namespace = namespace_of(descriptor.name)
        for field in descriptor.fields:
            tag = parse_field_tag(field.tag)
            if tag.omit:
                continue

            prop = self.type_to_property(field.type, namespace)
            if tag.type:
                prop.type = tag.type
            if tag.format:
                prop.format = tag.format
            if tag.example:
                prop.example = tag.example

            schema.properties[tag.rename or field.name] = prop
        return schema

    @contextmanager
    def _guard(self, name: str) -> Iterator[None]:
        """Mark *name* as in progress for the duration of the block."""
        if name in self._resolving:
            start = self._resolving.index(name)
            raise CyclicTypeError(self._resolving[start:] + [name])
        self._resolving.append(name)
        try:
            yield
        finally:
            self._resolving.pop()
