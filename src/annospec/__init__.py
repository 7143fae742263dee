"""annospec -- Generate OpenAPI documents from ``@openapi`` comment annotations.

This package turns structured directives written in source comments into an
OpenAPI 3.0 document. Request and response payloads may name types from a
catalog of type descriptors, which are expanded into full schemas.

Typical workflow::

    annospec generate --catalog types.yaml --blocks comments.yaml -o openapi.yaml

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    catalog: Type catalog lookup and field-tag parsing.
    parser: Directive classification, schema resolution, and document merge.
    serializer: Conversion of the document model to OpenAPI mappings.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
