"""Tests for annospec.parser.params -- @openapiParam payloads."""

from __future__ import annotations

import pytest

from annospec.exceptions import MalformedDirectiveError, ValidationFailureError
from annospec.models import ParameterLocation
from annospec.parser.params import parse_key_values, parse_param, resolve_param_type


class TestParseKeyValues:
    def test_pairs_in_order(self) -> None:
        assert parse_key_values("in=query, type=int") == {"in": "query", "type": "int"}

    def test_value_may_contain_equals(self) -> None:
        assert parse_key_values("default=a=b") == {"default": "a=b"}

    def test_empty_chunks_are_skipped(self) -> None:
        assert parse_key_values("in=query,, ,") == {"in": "query"}

    def test_last_duplicate_wins(self) -> None:
        assert parse_key_values("in=query, in=header") == {"in": "header"}

    @pytest.mark.parametrize("text", ["in", "in=query, required", "=value"])
    def test_pair_without_key_or_equals_raises(self, text: str) -> None:
        with pytest.raises(MalformedDirectiveError, match="Malformed parameter option"):
            parse_key_values(text)


class TestResolveParamType:
    @pytest.mark.parametrize(
        "declared, expected",
        [
            ("int", "integer"),
            ("uint16", "integer"),
            ("float64", "number"),
            ("bool", "boolean"),
            ("string", "string"),
            ("integer", "integer"),
            ("array", "array"),
            ("uuid", "uuid"),
            ("", None),
        ],
    )
    def test_mapping(self, declared: str, expected) -> None:
        assert resolve_param_type(declared) == expected


class TestParseParam:
    def test_path_param_is_required_by_default(self) -> None:
        param = parse_param("id in=path, type=int")
        assert param.name == "id"
        assert param.location == ParameterLocation.PATH
        assert param.required is True
        assert param.schema_.type == "integer"
        assert param.schema_.format is None

    def test_query_param_is_optional_by_default(self) -> None:
        param = parse_param("limit in=query, type=int, default=20, example=10")
        assert param.required is False
        assert param.schema_.default == "20"
        assert param.schema_.example == "10"

    def test_required_true(self) -> None:
        assert parse_param("X-Trace in=header, required=true").required is True

    def test_required_other_values_mean_false(self) -> None:
        assert parse_param("q in=query, required=yes").required is False

    def test_format_from_primitive(self) -> None:
        param = parse_param("ratio in=query, type=float64")
        assert param.schema_.type == "number"
        assert param.schema_.format == "double"

    def test_explicit_format_wins(self) -> None:
        param = parse_param("ratio in=query, type=float32, format=decimal")
        assert param.schema_.format == "decimal"

    def test_description_and_unknown_keys(self) -> None:
        param = parse_param("sid in=cookie, description=Session id, color=blue")
        assert param.location == ParameterLocation.COOKIE
        assert param.schema_.description == "Session id"
        assert param.schema_.type is None

    def test_missing_name_raises(self) -> None:
        with pytest.raises(MalformedDirectiveError, match="Missing parameter name"):
            parse_param("   ")

    def test_missing_location_raises(self) -> None:
        with pytest.raises(ValidationFailureError, match="Missing parameter field 'in'"):
            parse_param("id type=int")

    def test_invalid_location_raises(self) -> None:
        with pytest.raises(ValidationFailureError, match="Invalid parameter field 'in': body"):
            parse_param("id in=body")

    def test_optional_path_param_raises(self) -> None:
        with pytest.raises(ValidationFailureError, match="Path parameter 'id' must be required"):
            parse_param("id in=path, required=false")
