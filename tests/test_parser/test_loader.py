"""Tests for annospec.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from annospec.exceptions import SourceLoadError
from annospec.parser.loader import (
    _load_from_file,
    _load_from_stdin,
    _load_from_url,
    _parse_content,
    load_blocks,
    load_catalog,
    load_document,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_document dispatch
# ---------------------------------------------------------------------------


class TestLoadDocument:
    """Test load_document dispatcher routes to the correct loader."""

    def test_loads_from_file_yaml(self) -> None:
        result = load_document(str(FIXTURES_DIR / "types.yaml"))
        assert result["types"][0]["name"] == "models.User"

    def test_loads_from_file_json(self, tmp_path: Path) -> None:
        source = tmp_path / "blocks.json"
        source.write_text(json.dumps(["@openapi GET /ping"]), encoding="utf-8")
        assert load_document(str(source)) == ["@openapi GET /ping"]

    def test_loads_from_stdin(self) -> None:
        with patch("annospec.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO('["a", "b"]')
            result = load_document("-")
        assert result == ["a", "b"]

    def test_loads_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            json={"types": []},
            request=httpx.Request("GET", "https://example.com/types.json"),
        )
        with patch("annospec.parser.loader.httpx.get", return_value=mock_response) as mock_get:
            result = load_document("https://example.com/types.json")
        assert result == {"types": []}
        mock_get.assert_called_once()


# ---------------------------------------------------------------------------
# load_catalog / load_blocks
# ---------------------------------------------------------------------------


class TestLoadCatalog:
    def test_fixture_catalog(self) -> None:
        catalog = load_catalog(str(FIXTURES_DIR / "types.yaml"))
        assert "models.User" in catalog
        assert catalog.get("models.UserID").alias_target == "int64"

    def test_bare_list_catalog(self, tmp_path: Path) -> None:
        source = tmp_path / "types.json"
        source.write_text(json.dumps([{"name": "Ping", "fields": []}]), encoding="utf-8")
        assert len(load_catalog(str(source))) == 1

    def test_invalid_descriptor_raises(self, tmp_path: Path) -> None:
        source = tmp_path / "types.json"
        source.write_text(json.dumps([{"fields": []}]), encoding="utf-8")
        with pytest.raises(SourceLoadError, match="Invalid type catalog"):
            load_catalog(str(source))

    def test_scalar_types_entry_raises(self, tmp_path: Path) -> None:
        source = tmp_path / "types.yaml"
        source.write_text("types: nope\n", encoding="utf-8")
        with pytest.raises(SourceLoadError, match="must be a list of types"):
            load_catalog(str(source))


class TestLoadBlocks:
    def test_fixture_blocks(self) -> None:
        blocks = load_blocks(str(FIXTURES_DIR / "blocks.yaml"))
        assert len(blocks) == 4
        assert blocks[0].startswith("@openapi GET /users/{id}")

    def test_mapping_without_blocks_is_empty(self, tmp_path: Path) -> None:
        source = tmp_path / "blocks.yaml"
        source.write_text("other: 1\n", encoding="utf-8")
        assert load_blocks(str(source)) == []

    def test_non_string_block_raises(self, tmp_path: Path) -> None:
        source = tmp_path / "blocks.json"
        source.write_text(json.dumps(["ok", 42]), encoding="utf-8")
        with pytest.raises(SourceLoadError, match="Comment block #1 must be a string"):
            load_blocks(str(source))


# ---------------------------------------------------------------------------
# _load_from_file
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    def test_file_not_found_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="File not found"):
            _load_from_file("/nonexistent/path/types.json")

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("", encoding="utf-8")
        with pytest.raises(SourceLoadError, match="File is empty"):
            _load_from_file(str(empty))

    def test_invalid_json_file_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not valid json", encoding="utf-8")
        with pytest.raises(SourceLoadError, match="Invalid JSON"):
            _load_from_file(str(bad))

    def test_unknown_extension_falls_back_to_yaml(self, tmp_path: Path) -> None:
        source = tmp_path / "blocks.txt"
        source.write_text("- one\n- two\n", encoding="utf-8")
        assert _load_from_file(str(source)) == ["one", "two"]


# ---------------------------------------------------------------------------
# _load_from_stdin
# ---------------------------------------------------------------------------


class TestLoadFromStdin:
    def test_reads_yaml_from_stdin(self) -> None:
        yaml_content = textwrap.dedent("""\
            blocks:
              - "@openapi GET /ping"
        """)
        with patch("annospec.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(yaml_content)
            result = _load_from_stdin()
        assert result == {"blocks": ["@openapi GET /ping"]}

    def test_empty_stdin_raises(self) -> None:
        with patch("annospec.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n\t\n  ")
            with pytest.raises(SourceLoadError, match="No input"):
                _load_from_stdin()


# ---------------------------------------------------------------------------
# _load_from_url
# ---------------------------------------------------------------------------


class TestLoadFromUrl:
    def test_loads_yaml_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text="- name: Ping\n",
            headers={"content-type": "application/x-yaml"},
            request=httpx.Request("GET", "https://example.com/types.yaml"),
        )
        with patch("annospec.parser.loader.httpx.get", return_value=mock_response):
            result = _load_from_url("https://example.com/types.yaml")
        assert result == [{"name": "Ping"}]

    def test_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("annospec.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(SourceLoadError, match="HTTP 404"):
                _load_from_url("https://example.com/missing.json")

    def test_connection_error_raises(self) -> None:
        with patch(
            "annospec.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            with pytest.raises(SourceLoadError, match="Failed to fetch"):
                _load_from_url("https://unreachable.example.com/types.json")


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    def test_parses_json(self) -> None:
        assert _parse_content('{"key": "value"}') == {"key": "value"}

    def test_parses_yaml(self) -> None:
        assert _parse_content("key: value\nnested:\n  a: 1") == {"key": "value", "nested": {"a": 1}}

    def test_json_hint_forces_json_only(self) -> None:
        with pytest.raises(SourceLoadError, match="Invalid JSON"):
            _parse_content("not: valid: json: {{{", hint="json")

    def test_invalid_content_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="Failed to parse"):
            _parse_content("}{not valid at all][", hint="")

    def test_scalar_content_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="must be a JSON/YAML list or object"):
            _parse_content('"just a string"')

    def test_null_yaml_raises(self) -> None:
        with pytest.raises(SourceLoadError, match="empty document"):
            _parse_content("---\n", hint="yaml")
