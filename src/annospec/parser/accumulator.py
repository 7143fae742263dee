"""Fold comment blocks into operations and merge them into a document.

:class:`DirectiveParser` is the engine's entry point. Callers create an
empty :class:`~annospec.models.Document`, hand it to the parser together
with the type catalog, and feed it comment blocks one at a time::

    document = Document()
    parser = DirectiveParser(document, catalog)
    for block in blocks:
        parser.parse_block(block)

Each block is parsed to completion before anything is written. A block
without any ``@openapi`` path declaration is ordinary prose and is ignored.
A block that fails raises a :class:`~annospec.exceptions.DirectiveError`
carrying the offending line; the document keeps everything merged by earlier
blocks, and the caller decides whether to continue.

Within a block, tags/summary/description/deprecated are last-one-wins,
parameters accumulate in order, the last request body wins, and responses
are keyed by status. Every declared ``(path, method)`` pair receives the same
operation; an existing pair is overwritten and other methods on the same path
are left alone.
"""

from __future__ import annotations

import logging
from typing import Optional

from annospec.catalog import TypeCatalog
from annospec.exceptions import DirectiveError, MalformedDirectiveError, MissingResponseError
from annospec.models import Body, Document, Operation
from annospec.parser.directives import (
    RESPONSE_PREFIX,
    DeprecatedDirective,
    DescriptionDirective,
    Directive,
    ParamDirective,
    PathDirective,
    RequestDirective,
    ResponseDirective,
    SummaryDirective,
    TagsDirective,
    classify_block,
)
from annospec.parser.params import parse_param
from annospec.parser.schema import SchemaResolver
from annospec.parser.validators import validate_path, validate_request, validate_response

logger = logging.getLogger(__name__)


def parse_path(payload: str) -> tuple[str, str]:
    """Split ``<method> <path>`` into a lowercase method and a path."""
    parts = payload.split()
    method = parts[0].lower() if parts else ""
    path = parts[1] if len(parts) > 1 else ""
    validate_path(method, path)
    return method, path


def parse_tags(payload: str) -> list[str]:
    """Split a comma-separated tag list, dropping empty entries."""
    return [tag.strip() for tag in payload.split(",") if tag.strip()]


def merge_operation(
    document: Document, paths: dict[str, list[str]], operation: Operation
) -> None:
    """Attach *operation* to every declared ``(path, method)`` pair of *document*."""
    for path, methods in paths.items():
        path_item = document.paths.setdefault(path, {})
        for method in methods:
            path_item[method] = operation


class DirectiveParser:
    """Parses comment blocks into the operations of a :class:`~annospec.models.Document`.

    Args:
        document: The document to merge into. Owned by the caller.
        catalog: Type descriptors used to resolve request/response payloads.
    """

    def __init__(self, document: Document, catalog: TypeCatalog) -> None:
        self.document = document
        self._resolver = SchemaResolver(catalog)

    def parse_block(self, block: str) -> Optional[Operation]:
        """Parse one comment block and merge its operation into the document.

        Args:
            block: The full text of one contiguous comment.

        Returns:
            The merged :class:`~annospec.models.Operation`, or ``None`` if the
            block contains no path declaration.

        Raises:
            DirectiveError: If any directive is malformed, references an
                unknown or cyclic type, or fails validation, or if the block
                declares paths but no responses. Nothing is merged in that case.
        """
        paths: dict[str, list[str]] = {}
        first_declaration: Optional[tuple[str, str, str]] = None
        operation = Operation()

        for directive in classify_block(block):
            try:
                declared = self._apply(directive, operation)
            except DirectiveError as exc:
                exc.at_line(directive.line)
                raise
            if declared is not None:
                method, path = declared
                paths.setdefault(path, []).append(method)
                if first_declaration is None:
                    first_declaration = (method, path, directive.line)

        if first_declaration is None:
            logger.debug("Skipping comment block without path declarations")
            return None

        if not operation.responses:
            method, path, line = first_declaration
            raise MissingResponseError(
                f"No {RESPONSE_PREFIX.strip()} for: {method.upper()} {path}", line
            )

        merge_operation(self.document, paths, operation)
        logger.debug(
            "Merged operation for %s",
            ", ".join(f"{m.upper()} {p}" for p, ms in paths.items() for m in ms),
        )
        return operation

    def _apply(self, directive: Directive, operation: Operation) -> Optional[tuple[str, str]]:
        """Fold one directive into *operation*; return ``(method, path)`` for declarations."""
        if isinstance(directive, PathDirective):
            return parse_path(directive.payload)
        if isinstance(directive, TagsDirective):
            operation.tags = parse_tags(directive.payload)
        elif isinstance(directive, SummaryDirective):
            operation.summary = directive.payload
        elif isinstance(directive, DescriptionDirective):
            operation.description = directive.payload
        elif isinstance(directive, DeprecatedDirective):
            operation.deprecated = True
        elif isinstance(directive, ParamDirective):
            operation.parameters.append(parse_param(directive.payload))
        elif isinstance(directive, RequestDirective):
            operation.request_body = self.parse_request(directive.payload)
        elif isinstance(directive, ResponseDirective):
            status, body = self.parse_response(directive.payload)
            operation.responses[status] = body
        else:
            raise TypeError(f"Unhandled directive: {directive!r}")
        return None

    def parse_request(self, payload: str) -> Body:
        """Parse ``<content-type> <payload>`` into a request body."""
        content_type, _, rest = payload.partition(" ")
        if not content_type:
            raise MalformedDirectiveError("Missing request content type")
        body = Body(content={content_type: self._resolver.resolve_content(content_type, rest.strip())})
        validate_request(body)
        return body

    def parse_response(self, payload: str) -> tuple[str, Body]:
        """Parse ``<status> [<content-type> <payload>]`` into a response body.

        A bare status (``204``) declares a response without content.
        """
        parts = payload.split(None, 2)
        status = parts[0] if parts else ""
        body = Body()
        if len(parts) > 1:
            content_type = parts[1]
            rest = parts[2] if len(parts) > 2 else ""
            body.content[content_type] = self._resolver.resolve_content(content_type, rest)
        validate_response(status, body)
        return status, body
