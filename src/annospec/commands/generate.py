"""Generate and check commands -- run the directive parser over comment blocks.

``annospec generate`` loads a type catalog and a comment-block document,
parses every block into a :class:`~annospec.models.Document`, and writes the
OpenAPI result to stdout or a file. ``annospec check`` runs the same parse
without writing anything and reports one row per directive block.

A block that fails aborts the run with the error's exit code, unless
``keep_going`` is enabled (``--keep-going``, ``ANNOSPEC_KEEP_GOING``, or the
config files), in which case the block is skipped with a warning and the
blocks merged before it are kept.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from annospec.exceptions import AnnospecError, DirectiveError
from annospec.output import debug, error, get_output, info, print_data, success, warning

if TYPE_CHECKING:
    from annospec.models import Document


def _build_document(
    catalog_source: str,
    blocks_source: str,
    title: str,
    version: str,
    keep_going: bool,
) -> tuple[Document, list[tuple[int, DirectiveError]]]:
    """Parse every block and return ``(document, failures)``.

    ``failures`` lists ``(block_index, error)`` pairs for skipped blocks.

    Raises:
        DirectiveError: On the first failing block unless *keep_going*.
    """
    from annospec.models import APIInfo, Document
    from annospec.parser import DirectiveParser, load_blocks, load_catalog

    catalog = load_catalog(catalog_source)
    blocks = load_blocks(blocks_source)
    debug(f"Loaded {len(catalog)} types and {len(blocks)} comment blocks")

    document = Document(info=APIInfo(title=title, version=version))
    parser = DirectiveParser(document, catalog)
    failures: list[tuple[int, DirectiveError]] = []

    for index, block in enumerate(blocks):
        try:
            parser.parse_block(block)
        except DirectiveError as exc:
            if not keep_going:
                raise
            warning(f"Skipping comment block #{index}: {exc}")
            failures.append((index, exc))

    return document, failures


def generate_command(
    catalog: str = typer.Option(
        ..., "--catalog", "-c", help="Type catalog (JSON/YAML file, URL, or '-')."
    ),
    blocks: str = typer.Option(
        ..., "--blocks", "-b", help="Comment blocks (JSON/YAML file, URL, or '-')."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the document here instead of stdout."
    ),
    doc_format: Optional[str] = typer.Option(
        None, "--format", help="Document format: yaml or json."
    ),
    title: Optional[str] = typer.Option(None, "--title", help="API title."),
    api_version: Optional[str] = typer.Option(None, "--api-version", help="API version."),
    keep_going: Optional[bool] = typer.Option(
        None,
        "--keep-going/--fail-fast",
        help="Skip comment blocks that fail to parse instead of aborting.",
    ),
) -> None:
    """Generate an OpenAPI document from annotated comment blocks.

    Example::

        annospec generate -c types.yaml -b comments.yaml -o openapi.yaml
        annospec generate -c types.json -b - --format json
    """
    from annospec.config import atomic_write, resolve_config
    from annospec.serializer import dump_document, to_openapi

    try:
        config = resolve_config(
            title=title,
            api_version=api_version,
            format=doc_format,
            keep_going=keep_going,
        )
        document, failures = _build_document(
            catalog, blocks, config.title, config.api_version, config.keep_going
        )
        text = dump_document(to_openapi(document, config.openapi_version), config.format)
    except AnnospecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if output is None:
        print_data(text.rstrip("\n"))
    else:
        atomic_write(output, text)
        info(f"Wrote {output}")

    summary = f"{len(document.paths)} paths generated"
    if failures:
        warning(f"{summary}, {len(failures)} comment blocks skipped")
    else:
        success(summary)


def check_command(
    catalog: str = typer.Option(
        ..., "--catalog", "-c", help="Type catalog (JSON/YAML file, URL, or '-')."
    ),
    blocks: str = typer.Option(
        ..., "--blocks", "-b", help="Comment blocks (JSON/YAML file, URL, or '-')."
    ),
) -> None:
    """Parse every comment block and report the ones that fail.

    Prints one row per block that declares an operation or fails. Exits
    with the directive error code when any block fails.

    Example::

        annospec check -c types.yaml -b comments.yaml
    """
    from annospec.models import Document
    from annospec.parser import DirectiveParser, load_blocks, load_catalog

    try:
        parser = DirectiveParser(Document(), load_catalog(catalog))
        block_texts = load_blocks(blocks)
    except AnnospecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows: list[list[str]] = []
    failed = 0

    for index, block in enumerate(block_texts):
        try:
            operation = parser.parse_block(block)
        except DirectiveError as exc:
            failed += 1
            rows.append([str(index), "error", str(exc)])
            continue
        if operation is not None:
            rows.append([str(index), "ok", operation.summary or "-"])

    get_output().print_table(["Block", "Status", "Detail"], rows, title="Comment blocks")

    if failed:
        error(f"{failed} comment blocks failed")
        raise typer.Exit(code=DirectiveError.exit_code)
    success(f"{len(rows)} operations parsed")
