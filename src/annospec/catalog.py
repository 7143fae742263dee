"""Type catalog consulted by the schema resolver.

The catalog is the engine's only view of the source code: a read-only
collection of :class:`~annospec.models.TypeDescriptor` values produced by
an external type-extraction step and addressable by exact name. Names may be
qualified with a namespace (``models.User``); :func:`namespace_of` and
:func:`qualify` implement the lookup rule that an unqualified reference made
from inside ``models`` means ``models.<Name>``.

Field tags use struct-tag syntax::

    json:"user_id,omitempty" openapi:"type=string;format=uuid;example=42"

``json`` controls the output property name (``-`` omits the field) and
``openapi`` overrides the inferred ``type``, ``format``, and ``example``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Iterator, Optional

from annospec.exceptions import MalformedDirectiveError, SourceLoadError
from annospec.models import FieldTag, TypeDescriptor

logger = logging.getLogger(__name__)

_TAG_PAIR_RE = re.compile(r'([A-Za-z_][\w-]*):"((?:[^"\\]|\\.)*)"')
_OVERRIDE_KEYS = frozenset({"type", "format", "example"})


class TypeCatalog:
    """Read-only index of type descriptors keyed by exact name.

    When two descriptors share a name, the first one wins and the
    duplicate is logged.

    Args:
        descriptors: The descriptors to index, in extraction order.
    """

    def __init__(self, descriptors: Iterable[TypeDescriptor] = ()) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._types:
                logger.warning("Duplicate type '%s' in catalog, keeping the first", descriptor.name)
                continue
            self._types[descriptor.name] = descriptor

    @classmethod
    def from_data(cls, data: Any) -> TypeCatalog:
        """Build a catalog from a decoded JSON/YAML document.

        Accepts either a list of descriptor mappings or a mapping with a
        ``types`` list.

        Raises:
            SourceLoadError: If the document has the wrong shape or a
                descriptor fails validation.
        """
        if isinstance(data, dict):
            data = data.get("types", [])
        if not isinstance(data, list):
            raise SourceLoadError(
                f"Type catalog must be a list of types (got {type(data).__name__})"
            )
        try:
            descriptors = [TypeDescriptor.model_validate(item) for item in data]
        except ValueError as exc:
            raise SourceLoadError(f"Invalid type catalog: {exc}") from exc
        return cls(descriptors)

    def get(self, name: str) -> Optional[TypeDescriptor]:
        """Return the descriptor named exactly *name*, or ``None``."""
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


def namespace_of(name: str) -> str:
    """Return the namespace of a qualified type name (``models.User`` -> ``models``)."""
    namespace, _, _ = name.rpartition(".")
    return namespace


def qualify(namespace: str, name: str) -> str:
    """Qualify *name* with *namespace* unless it is already qualified."""
    if not namespace or "." in name:
        return name
    return f"{namespace}.{name}"


def lookup_tag(raw_tag: str, key: str) -> Optional[str]:
    """Return the value stored under *key* in a struct-tag string, or ``None``."""
    for tag_key, value in _TAG_PAIR_RE.findall(raw_tag or ""):
        if tag_key == key:
            return value.replace('\\"', '"')
    return None


def parse_field_tag(raw_tag: str) -> FieldTag:
    """Parse a field's raw tag into a :class:`~annospec.models.FieldTag`.

    Raises:
        MalformedDirectiveError: If an ``openapi`` segment is not ``key=value``
            or names an unsupported key.
    """
    tag = FieldTag()

    json_value = lookup_tag(raw_tag, "json")
    if json_value == "-":
        tag.omit = True
    elif json_value:
        name = json_value.split(",", 1)[0].strip()
        if name:
            tag.rename = name

    openapi_value = lookup_tag(raw_tag, "openapi")
    if openapi_value:
        for segment in openapi_value.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            key = key.strip()
            if not sep or key not in _OVERRIDE_KEYS:
                raise MalformedDirectiveError(
                    f"Malformed openapi tag segment '{segment}' in: {raw_tag}"
                )
            setattr(tag, key, value.strip())

    return tag
