"""cachetags - query/cache-tag index for tag-based cache invalidation."""

from contextlib import suppress

# Backends (async only)
from cachetags.backends import (
    AsyncMemoryTagIndex,
    AsyncNoopTagIndex,
    AsyncTagIndex,
)

# Configuration
from cachetags.config import TagIndexConfig, create_tag_index
from cachetags.error_handling import ErrorHandlingTagIndex
from cachetags.errors import (
    InvalidQueryIdError,
    InvalidTableNameError,
    InvalidTagError,
    InvalidWebhookError,
)

# Invalidation flow
from cachetags.invalidation import invalidate, tags_from_webhook

# Identifiers and tags
from cachetags.query_id import derive_query_id
from cachetags.tags import (
    CACHE_TAGS_HEADER,
    parse_tag_header,
    tags_from_response,
    validate_tag,
    validate_tags,
)

# Core types
from cachetags.types import CacheTag, ErrorContext, OnError, QueryId

# Optional backend imports - only available when dependencies are installed
with suppress(ImportError):
    from cachetags.backends import AsyncRedisTagIndex

with suppress(ImportError):
    from cachetags.backends import SqlTagIndex

__version__ = "0.1.0"

__all__ = [
    "CACHE_TAGS_HEADER",
    "AsyncMemoryTagIndex",
    "AsyncNoopTagIndex",
    "AsyncRedisTagIndex",
    "AsyncTagIndex",
    "CacheTag",
    "ErrorContext",
    "ErrorHandlingTagIndex",
    "InvalidQueryIdError",
    "InvalidTableNameError",
    "InvalidTagError",
    "InvalidWebhookError",
    "OnError",
    "QueryId",
    "SqlTagIndex",
    "TagIndexConfig",
    "create_tag_index",
    "derive_query_id",
    "invalidate",
    "parse_tag_header",
    "tags_from_response",
    "tags_from_webhook",
    "validate_tag",
    "validate_tags",
]
