"""Classify the lines of a comment block into directives.

Each recognised line becomes one instance of a small closed family of frozen
dataclasses -- one class per directive kind -- carrying the raw line (for
error messages) and the payload text that follows the prefix. Lines that
match no prefix are dropped, so ordinary prose and annotations belonging to
other tools pass through untouched.

Prefixes are case-sensitive and, apart from ``@openapiDeprecated``, must be
followed by a single space::

    @openapi GET /users/{id}
    @openapiTags users, admin
    @openapiSummary Fetch a user
    @openapiDesc Returns the user identified by id.
    @openapiDeprecated
    @openapiParam id in=path, type=int
    @openapiRequest application/json models.UserInput
    @openapiResponse 200 application/json models.User
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

PATH_PREFIX = "@openapi "
PARAM_PREFIX = "@openapiParam "
TAGS_PREFIX = "@openapiTags "
SUMMARY_PREFIX = "@openapiSummary "
DESC_PREFIX = "@openapiDesc "
DEPRECATED_PREFIX = "@openapiDeprecated"
REQUEST_PREFIX = "@openapiRequest "
RESPONSE_PREFIX = "@openapiResponse "


@dataclass(frozen=True)
class PathDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class ParamDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class TagsDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class SummaryDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class DescriptionDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class DeprecatedDirective:
    line: str
    payload: str = ""


@dataclass(frozen=True)
class RequestDirective:
    line: str
    payload: str


@dataclass(frozen=True)
class ResponseDirective:
    line: str
    payload: str


Directive = Union[
    PathDirective,
    ParamDirective,
    TagsDirective,
    SummaryDirective,
    DescriptionDirective,
    DeprecatedDirective,
    RequestDirective,
    ResponseDirective,
]

_PREFIXES: tuple[tuple[str, type], ...] = (
    (PARAM_PREFIX, ParamDirective),
    (TAGS_PREFIX, TagsDirective),
    (SUMMARY_PREFIX, SummaryDirective),
    (DESC_PREFIX, DescriptionDirective),
    (DEPRECATED_PREFIX, DeprecatedDirective),
    (REQUEST_PREFIX, RequestDirective),
    (RESPONSE_PREFIX, ResponseDirective),
    (PATH_PREFIX, PathDirective),
)


def classify_line(line: str) -> Optional[Directive]:
    """Return the directive for a single line, or ``None`` if it is not one."""
    line = line.strip()
    for prefix, kind in _PREFIXES:
        if line.startswith(prefix):
            return kind(line=line, payload=line[len(prefix):].strip())
    return None


def classify_block(block: str) -> list[Directive]:
    """Split a comment block into lines and return its directives in order."""
    directives: list[Directive] = []
    for raw in block.splitlines():
        directive = classify_line(raw)
        if directive is not None:
            directives.append(directive)
    return directives
