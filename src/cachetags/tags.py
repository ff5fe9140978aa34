"""Cache tag parsing and validation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from cachetags.errors import InvalidTagError
from cachetags.types import CacheTag

if TYPE_CHECKING:
    import httpx

CACHE_TAGS_HEADER = "x-cache-tags"


def parse_tag_header(value: str | None) -> list[CacheTag]:
    """
    Split a space-delimited tag header into tags.

    Example:
        parse_tag_header("tag-a tag-2 other-tag")  # ["tag-a", "tag-2", "other-tag"]
        parse_tag_header(None)                     # []
    """
    if not value:
        return []
    return [CacheTag(tag) for tag in value.split()]


def validate_tag(tag: str) -> CacheTag:
    """Return the tag unchanged, or raise InvalidTagError."""
    if not isinstance(tag, str) or not tag:
        raise InvalidTagError(f"Invalid cache tag: {tag!r}")
    if any(char.isspace() for char in tag):
        raise InvalidTagError(f"Cache tag must not contain whitespace: {tag!r}")
    return CacheTag(tag)


def validate_tags(tags: Iterable[str]) -> list[CacheTag]:
    """Validate tags and drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(validate_tag(tag) for tag in tags))


def tags_from_response(response: httpx.Response) -> list[CacheTag]:
    """Read the cache tags an upstream response declares in X-Cache-Tags."""
    return parse_tag_header(response.headers.get(CACHE_TAGS_HEADER))


__all__ = [
    "CACHE_TAGS_HEADER",
    "parse_tag_header",
    "tags_from_response",
    "validate_tag",
    "validate_tags",
]
