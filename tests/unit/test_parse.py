"""
Tests for filter value parsing and column helpers.
"""

import pytest

from universe.domain.query.parse import (
    filter_allowed_fields,
    format_sql_columns,
    parse_bool,
    parse_field_list,
    parse_filters,
    parse_id,
    parse_number,
)
from universe.errors import ErrorCode, UniverseError, invalid_id


PARSERS = {
    "name": str,
    "mass_earth": parse_number,
    "has_rings": parse_bool,
}


class TestParseFilters:
    """Typed coercion of raw query-string filters."""

    def test_parses_known_fields(self):
        parsed = parse_filters({"name": "Io", "mass_earth": "0.015", "has_rings": "true"}, PARSERS)
        assert parsed == {"name": "Io", "mass_earth": 0.015, "has_rings": True}

    def test_drops_fields_without_parser(self):
        parsed = parse_filters({"name": "Io", "password": "x"}, PARSERS)
        assert parsed == {"name": "Io"}

    def test_skips_absent_values(self):
        assert parse_filters({"name": None}, PARSERS) == {}
        assert parse_filters({}, PARSERS) == {}

    def test_not_a_number_names_the_field(self):
        with pytest.raises(UniverseError) as exc_info:
            parse_filters({"mass_earth": "heavy"}, PARSERS)

        error = exc_info.value
        assert error.status_code == 400
        assert error.code == ErrorCode.ERR_INVALID_FILTER
        assert "mass_earth" in error.message
        assert error.details["field"] == "mass_earth"

    def test_nan_is_rejected_as_number(self):
        with pytest.raises(UniverseError) as exc_info:
            parse_filters({"mass_earth": "nan"}, PARSERS)
        assert exc_info.value.message == "Invalid value for filter 'mass_earth'. Must be a number."

    def test_parser_exception_is_rejected(self):
        def explode(value):
            raise ValueError("bad")

        with pytest.raises(UniverseError) as exc_info:
            parse_filters({"name": "Io"}, {"name": explode})
        assert exc_info.value.message == "Invalid value for filter 'name'."

    def test_any_parser_exception_is_rejected(self):
        kinds = {"rocky": "terrestrial"}

        with pytest.raises(UniverseError) as exc_info:
            parse_filters({"kind": "gaseous"}, {"kind": lambda value: kinds[value]})

        assert exc_info.value.code == ErrorCode.ERR_INVALID_FILTER
        assert exc_info.value.details["field"] == "kind"
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_parser_universe_error_passes_through(self):
        def reject(value):
            raise invalid_id(value)

        with pytest.raises(UniverseError) as exc_info:
            parse_filters({"planet_id": "x"}, {"planet_id": reject})
        assert exc_info.value.code == ErrorCode.ERR_INVALID_ID


class TestParseBool:
    @pytest.mark.parametrize("value", ["true", "1", True])
    def test_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "0", "yes", False, ""])
    def test_everything_else_is_false(self, value):
        assert parse_bool(value) is False


class TestParseId:
    def test_accepts_positive_integers(self):
        assert parse_id("42") == 42
        assert parse_id(7) == 7

    @pytest.mark.parametrize("value", ["abc", "", "0", "-3", "1.5", None])
    def test_rejects_everything_else(self, value):
        with pytest.raises(UniverseError) as exc_info:
            parse_id(value)
        assert exc_info.value.code == ErrorCode.ERR_INVALID_ID
        assert exc_info.value.message == "The provided ID is not valid."


class TestColumnHelpers:
    def test_filter_allowed_fields_keeps_request_order(self):
        assert filter_allowed_fields(["email", "username", "user_id"], {"user_id", "username"}) == [
            "username",
            "user_id",
        ]

    def test_format_sql_columns_backticks(self):
        assert format_sql_columns(["planet_id", "name"]) == "`planet_id`, `name`"
        assert format_sql_columns(None) == ""

    def test_parse_field_list(self):
        assert parse_field_list("name,mass_earth") == ["name", "mass_earth"]
        assert parse_field_list(["name"]) is None
        assert parse_field_list(None) is None
