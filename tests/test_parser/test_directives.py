"""Tests for annospec.parser.directives -- line classification."""

from __future__ import annotations

import pytest

from annospec.parser.directives import (
    DeprecatedDirective,
    DescriptionDirective,
    ParamDirective,
    PathDirective,
    RequestDirective,
    ResponseDirective,
    SummaryDirective,
    TagsDirective,
    classify_block,
    classify_line,
)


class TestClassifyLine:
    @pytest.mark.parametrize(
        "line, kind, payload",
        [
            ("@openapi GET /users", PathDirective, "GET /users"),
            ("@openapiParam id in=path", ParamDirective, "id in=path"),
            ("@openapiTags users, admin", TagsDirective, "users, admin"),
            ("@openapiSummary Fetch a user", SummaryDirective, "Fetch a user"),
            ("@openapiDesc Long text", DescriptionDirective, "Long text"),
            ("@openapiDeprecated", DeprecatedDirective, ""),
            ("@openapiRequest application/json User", RequestDirective, "application/json User"),
            ("@openapiResponse 200 application/json User", ResponseDirective, "200 application/json User"),
        ],
    )
    def test_prefixes(self, line: str, kind: type, payload: str) -> None:
        directive = classify_line(line)
        assert isinstance(directive, kind)
        assert directive.payload == payload
        assert directive.line == line

    def test_surrounding_whitespace_is_stripped(self) -> None:
        directive = classify_line("   @openapiSummary  Padded   \t")
        assert isinstance(directive, SummaryDirective)
        assert directive.payload == "Padded"
        assert directive.line == "@openapiSummary  Padded"

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Fetches a user by id.",
            "@openapiSummary",  # no separating space
            "@OpenAPI GET /users",  # prefixes are case-sensitive
            "@openapiUnknown something",
            "@swagger GET /users",
        ],
    )
    def test_non_directives(self, line: str) -> None:
        assert classify_line(line) is None

    def test_deprecated_with_trailing_text(self) -> None:
        directive = classify_line("@openapiDeprecated use v2")
        assert isinstance(directive, DeprecatedDirective)

    def test_longer_prefixes_are_not_taken_as_paths(self) -> None:
        assert not isinstance(classify_line("@openapiTags a"), PathDirective)
        assert not isinstance(classify_line("@openapiResponse 200"), PathDirective)


class TestClassifyBlock:
    def test_keeps_order_and_drops_prose(self) -> None:
        block = "\n".join(
            [
                "GetUser returns one user.",
                "@openapi GET /users/{id}",
                "",
                "@openapiResponse 200 application/json User",
                "See also ListUsers.",
                "@openapiSummary Fetch",
            ]
        )
        directives = classify_block(block)
        assert [type(d) for d in directives] == [PathDirective, ResponseDirective, SummaryDirective]

    def test_empty_block(self) -> None:
        assert classify_block("") == []

    def test_windows_line_endings(self) -> None:
        directives = classify_block("@openapi GET /a\r\n@openapiResponse 204\r\n")
        assert [d.payload for d in directives] == ["GET /a", "204"]

    def test_indented_directives_are_recognised(self) -> None:
        directives = classify_block("Doc comment.\n  @openapi GET /y\n\t@openapiResponse 204")
        assert [type(d) for d in directives] == [PathDirective, ResponseDirective]
        assert directives[0].line == "@openapi GET /y"
