"""Directive parser -- classify comment lines, resolve schemas, merge operations.

This sub-package is the engine of annospec: it turns ``@openapi``
annotations found in source comments into a
:class:`~annospec.models.Document`.

Typical usage::

    from annospec.models import Document
    from annospec.parser import DirectiveParser, load_blocks, load_catalog

    document = Document()
    parser = DirectiveParser(document, load_catalog("types.yaml"))
    for block in load_blocks("comments.yaml"):
        parser.parse_block(block)

Sub-modules:

* :mod:`~annospec.parser.directives` -- Line classification into directive kinds.
* :mod:`~annospec.parser.accumulator` -- Per-block accumulation and the
  document merge.
* :mod:`~annospec.parser.params` -- ``@openapiParam`` key/value parsing.
* :mod:`~annospec.parser.schema` -- Recursive type resolution with
  cycle detection.
* :mod:`~annospec.parser.validators` -- Structural checks per directive.
* :mod:`~annospec.parser.loader` -- I/O for catalogs and comment blocks.
"""

from annospec.parser.accumulator import DirectiveParser, merge_operation
from annospec.parser.loader import load_blocks, load_catalog, load_document
from annospec.parser.schema import SchemaResolver

__all__ = [
    "DirectiveParser",
    "SchemaResolver",
    "load_blocks",
    "load_catalog",
    "load_document",
    "merge_operation",
]
