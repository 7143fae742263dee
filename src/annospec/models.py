"""Canonical Pydantic models shared across all annospec modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or the project's ``annospec.json``:
    :class:`GeneratorConfig`.

**Catalog input models** -- supplied by the type-extraction collaborator and
read-only to the engine:
    :class:`TypeField`, :class:`TypeDescriptor`, and the parsed
    :class:`FieldTag`.

**Document models** -- built by the directive parser and consumed by the
serializer:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Schema`,
    :class:`PropertySchema`, :class:`Content`, :class:`Body`,
    :class:`Parameter`, :class:`Operation`, :class:`APIInfo`, and
    :class:`Document`.

All models use Pydantic v2. Fields whose natural name collides with a
``BaseModel`` attribute (``schema``) carry a trailing underscore and an alias.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Generator Config ---


class GeneratorConfig(BaseModel):
    """Effective settings for one ``annospec generate`` run.

    Loaded from the user config file, layered with the project-local
    ``annospec.json``, environment variables, and CLI flags by
    :func:`~annospec.config.resolve_config`.
    """

    title: str = Field(default="API", description="Document info.title")
    api_version: str = Field(default="1.0.0", description="Document info.version")
    openapi_version: str = Field(
        default="3.0.3", description="Value of the top-level 'openapi' field"
    )
    format: Literal["yaml", "json"] = Field(
        default="yaml", description="Document format: yaml, json"
    )
    keep_going: bool = Field(
        default=False,
        description="Skip comment blocks that fail to parse instead of aborting",
    )


# --- Catalog Input Models ---


class TypeField(BaseModel):
    """One field of a :class:`TypeDescriptor`, as extracted from source.

    ``type`` is the raw type string (``*User``, ``[]string``, ``time.Time``)
    and ``tag`` is the raw serialization tag (``json:"id" openapi:"format=uuid"``).
    """

    name: str
    type: str
    tag: str = ""


class TypeDescriptor(BaseModel):
    """A named data type known to the engine.

    A descriptor either declares its own ``fields`` or, when
    ``alias_target`` is non-empty, stands in for another type entirely.

    Example::

        TypeDescriptor(name="models.User", fields=[TypeField(name="ID", type="int")])
        TypeDescriptor(name="models.UserID", alias="int64")
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    fields: list[TypeField] = Field(default_factory=list)
    alias_target: str = Field(default="", alias="alias")

    @property
    def is_alias(self) -> bool:
        """Whether this descriptor is a pure alias of another type."""
        return self.alias_target != ""


class FieldTag(BaseModel):
    """Overrides parsed from a field's raw serialization tag."""

    rename: Optional[str] = None
    omit: bool = False
    type: Optional[str] = None
    format: Optional[str] = None
    example: Optional[str] = None


# --- Document Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods accepted in ``@openapi`` path declarations."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Schema(BaseModel):
    """A structural type description attached to a body or array.

    ``object`` schemas carry a (possibly empty) ``properties`` mapping;
    ``array`` schemas carry exactly one ``items`` schema and no properties.
    """

    type: str = ""
    format: Optional[str] = None
    properties: Optional[dict[str, PropertySchema]] = None
    items: Optional[Schema] = None


class PropertySchema(BaseModel):
    """A schema attached to a named field or parameter.

    Same shape as :class:`Schema` plus the ``default``, ``example``, and
    ``description`` metadata that only a named value carries.
    """

    type: Optional[str] = None
    format: Optional[str] = None
    example: Optional[str] = None
    default: Optional[str] = None
    description: Optional[str] = None
    items: Optional[Schema] = None
    properties: Optional[dict[str, PropertySchema]] = None


class Content(BaseModel):
    """The payload description for one content type.

    Holds either a literal JSON ``example`` (stored verbatim) or a
    ``schema``, never both.
    """

    model_config = ConfigDict(populate_by_name=True)

    example: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Body(BaseModel):
    """A request or response body keyed by content type."""

    content: dict[str, Content] = Field(default_factory=dict)


class Parameter(BaseModel):
    """A single parameter declared with ``@openapiParam``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    schema_: PropertySchema = Field(default_factory=PropertySchema, alias="schema")


class Operation(BaseModel):
    """The documented behaviour of one HTTP method on one path.

    One comment block produces one ``Operation``; when the block declares
    several paths the same value is attached to each of them.
    """

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[Body] = None
    responses: dict[str, Body] = Field(default_factory=dict)


PathItem = dict[str, Operation]
"""Mapping from lowercase HTTP method name to :class:`Operation`."""


class APIInfo(BaseModel):
    """API metadata written to the document's *Info Object*."""

    title: str = "API"
    version: str = "1.0.0"


class Document(BaseModel):
    """The API description assembled from every parsed comment block.

    Created empty by the caller and mutated only by
    :func:`~annospec.parser.accumulator.merge_operation`.
    """

    info: APIInfo = Field(default_factory=APIInfo)
    paths: dict[str, PathItem] = Field(default_factory=dict)


Schema.model_rebuild()
PropertySchema.model_rebuild()
