"""Tag index backends (async only)."""

from contextlib import suppress

from cachetags.backends.base import AsyncTagIndex
from cachetags.backends.memory import AsyncMemoryTagIndex
from cachetags.backends.noop import AsyncNoopTagIndex

# Optional backends - only available when dependencies are installed
with suppress(ImportError):
    from cachetags.backends.redis import AsyncRedisTagIndex

with suppress(ImportError):
    from cachetags.backends.sql import SqlTagIndex

__all__ = [
    "AsyncMemoryTagIndex",
    "AsyncNoopTagIndex",
    "AsyncRedisTagIndex",
    "AsyncTagIndex",
    "SqlTagIndex",
]
