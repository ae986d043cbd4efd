"""Tests for path rendering and dotted-path lookups."""

import pytest

from contractguard.validators.paths import format_path, get_path, parse_path

AUTH_RESPONSE = {"data": {"authUser": {"success": True, "token": "abc.def"}}}


class TestFormatPath:
    def test_root(self) -> None:
        assert format_path(()) == "<root>"

    def test_fields_and_indices(self) -> None:
        assert format_path(("data", "Categories", 1, "name")) == "data.Categories[1].name"

    def test_leading_index(self) -> None:
        assert format_path((0, "id")) == "[0].id"


class TestParsePath:
    def test_brackets_and_dots(self) -> None:
        assert parse_path("data.items[2].name") == ("data", "items", 2, "name")
        assert parse_path("data.items.2.name") == ("data", "items", 2, "name")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_path("  ")


class TestGetPath:
    def test_token_lookup(self) -> None:
        assert get_path(AUTH_RESPONSE, "data.authUser.token") == "abc.def"

    def test_list_index(self) -> None:
        assert get_path({"items": [{"id": 1}, {"id": 2}]}, "items[1].id") == 2

    def test_null_value_is_returned(self) -> None:
        assert get_path({"data": {"addProduct": None}}, "data.addProduct", default="missing") is None

    def test_missing_with_default(self) -> None:
        assert get_path(AUTH_RESPONSE, "data.authUser.refresh", default=None) is None

    def test_missing_raises(self) -> None:
        with pytest.raises(KeyError, match="data.login"):
            get_path(AUTH_RESPONSE, "data.login.token")

    def test_index_out_of_range(self) -> None:
        assert get_path({"items": []}, "items[0]", default="none") == "none"
