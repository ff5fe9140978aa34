"""Tests for tag utilities."""

import httpx
import pytest

from cachetags import (
    CACHE_TAGS_HEADER,
    InvalidTagError,
    parse_tag_header,
    tags_from_response,
    validate_tag,
    validate_tags,
)


class TestParseTagHeader:
    """Tests for parse_tag_header function."""

    def test_space_delimited(self) -> None:
        assert parse_tag_header("tag-a tag-2 other-tag") == [
            "tag-a",
            "tag-2",
            "other-tag",
        ]

    def test_single_tag(self) -> None:
        assert parse_tag_header("only") == ["only"]

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_header_is_empty(self, value: str | None) -> None:
        assert parse_tag_header(value) == []

    def test_runs_of_whitespace(self) -> None:
        """Repeated or surrounding spaces never produce empty tags."""
        assert parse_tag_header("  a   b\tc ") == ["a", "b", "c"]

    def test_keeps_duplicates(self) -> None:
        assert parse_tag_header("a a") == ["a", "a"]


class TestValidateTag:
    """Tests for validate_tag and validate_tags."""

    def test_valid_tag(self) -> None:
        assert validate_tag("N8o6P0uJTeCPs5ZN0RiBsA") == "N8o6P0uJTeCPs5ZN0RiBsA"

    @pytest.mark.parametrize("tag", ["", "a b", "a\nb", " a"])
    def test_invalid_tag(self, tag: str) -> None:
        with pytest.raises(InvalidTagError):
            validate_tag(tag)

    def test_non_string(self) -> None:
        with pytest.raises(InvalidTagError):
            validate_tag(42)  # type: ignore[arg-type]

    def test_invalid_tag_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_tag("")

    def test_validate_tags_dedupes_in_order(self) -> None:
        assert validate_tags(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_validate_tags_empty(self) -> None:
        assert validate_tags([]) == []


class TestTagsFromResponse:
    """Tests for reading tags off upstream HTTP responses."""

    def test_reads_header(self) -> None:
        response = httpx.Response(200, headers={"X-Cache-Tags": "a1 b2 c3"})
        assert tags_from_response(response) == ["a1", "b2", "c3"]

    def test_header_name_is_case_insensitive(self) -> None:
        response = httpx.Response(200, headers={CACHE_TAGS_HEADER.upper(): "a1"})
        assert tags_from_response(response) == ["a1"]

    def test_missing_header(self) -> None:
        assert tags_from_response(httpx.Response(200)) == []
