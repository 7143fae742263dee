"""Load type catalogs and comment blocks from a URL, local file, or stdin.

This module handles all I/O for the engine's two inputs, both produced by
external collaborators:

* a **type catalog** -- a JSON/YAML list of type descriptors (or a mapping
  with a ``types`` list), see :class:`~annospec.catalog.TypeCatalog`;
* a **comment-block document** -- a JSON/YAML list of comment texts (or a
  mapping with a ``blocks`` list), one entry per contiguous comment.

Format detection follows the file extension or HTTP content type, falling
back to trying JSON and then YAML.

The public functions are:

* :func:`load_document` -- Load and decode any supported source.
* :func:`load_catalog` -- Load a source and build a :class:`~annospec.catalog.TypeCatalog`.
* :func:`load_blocks` -- Load a source and return its comment blocks.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from annospec.catalog import TypeCatalog
from annospec.exceptions import SourceLoadError


def load_document(source: str) -> Any:
    """Load a JSON/YAML document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The decoded document (a list or a dict).

    Raises:
        SourceLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def load_catalog(source: str) -> TypeCatalog:
    """Load a type catalog document.

    Raises:
        SourceLoadError: If the source cannot be loaded or is not a catalog.
    """
    return TypeCatalog.from_data(load_document(source))


def load_blocks(source: str) -> list[str]:
    """Load a comment-block document and return the blocks in order.

    Raises:
        SourceLoadError: If the source cannot be loaded or an entry is not
            a string.
    """
    data = load_document(source)
    if isinstance(data, dict):
        data = data.get("blocks", [])
    if not isinstance(data, list):
        raise SourceLoadError(
            f"Comment blocks must be a list of strings (got {type(data).__name__})"
        )
    for index, block in enumerate(data):
        if not isinstance(block, str):
            raise SourceLoadError(
                f"Comment block #{index} must be a string (got {type(block).__name__})"
            )
    return data


def _load_from_stdin() -> Any:
    """Read a document from stdin.

    Raises:
        SourceLoadError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SourceLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SourceLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> Any:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Raises:
        SourceLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceLoadError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceLoadError(f"Failed to fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> Any:
    """Load a document from a local file.

    Raises:
        SourceLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceLoadError(f"File not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceLoadError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise SourceLoadError(f"File is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> Any:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        SourceLoadError: If the content cannot be parsed as either format,
            or decodes to something other than a list or mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            return _check_container(json.loads(content))
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SourceLoadError(f"Invalid JSON: {exc}") from exc

    try:
        return _check_container(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse input as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SourceLoadError(msg)


def _check_container(result: Any) -> Any:
    if not isinstance(result, (dict, list)):
        raise SourceLoadError(
            "Input must be a JSON/YAML list or object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result
