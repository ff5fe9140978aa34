"""Configuration and backend selection."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlsplit

from cachetags.backends.base import AsyncTagIndex
from cachetags.backends.memory import AsyncMemoryTagIndex
from cachetags.backends.noop import AsyncNoopTagIndex
from cachetags.error_handling import ErrorHandlingTagIndex
from cachetags.types import OnError

_REDIS_SCHEMES = frozenset({"redis", "rediss", "unix"})
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class TagIndexConfig:
    """Settings for create_tag_index()."""

    url: str
    key_prefix: str = ""
    table: str | None = None  # relational backend default when None
    reverse_index: bool = True
    throw_on_error: bool = True
    on_error: OnError | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> TagIndexConfig:
        """Read CACHE_TAGS_* environment variables. Empty values count as unset."""
        if env is None:
            env = os.environ

        url = _get(env, "CACHE_TAGS_URL")
        if url is None:
            raise ValueError("CACHE_TAGS_URL is not set")

        return cls(
            url=url,
            key_prefix=_get(env, "CACHE_TAGS_KEY_PREFIX") or "",
            table=_get(env, "CACHE_TAGS_TABLE"),
            reverse_index=_get_bool(env, "CACHE_TAGS_REVERSE_INDEX", True),
            throw_on_error=_get_bool(env, "CACHE_TAGS_THROW_ON_ERROR", True),
        )


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value == "":
        return None
    return value


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = _get(env, key)
    if value is None:
        return default
    if value.lower() in _TRUE:
        return True
    if value.lower() in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _create_backend(config: TagIndexConfig) -> AsyncTagIndex:
    scheme = urlsplit(config.url).scheme.lower()

    if scheme in _REDIS_SCHEMES:
        from cachetags.backends.redis import AsyncRedisTagIndex

        return AsyncRedisTagIndex.from_url(
            config.url,
            prefix=config.key_prefix,
            reverse_index=config.reverse_index,
        )
    if scheme == "memory":
        return AsyncMemoryTagIndex()
    if scheme == "noop":
        return AsyncNoopTagIndex()

    from cachetags.backends.sql import SqlTagIndex

    if config.table is None:
        return SqlTagIndex.from_url(config.url)
    return SqlTagIndex.from_url(config.url, table=config.table)


def create_tag_index(config: TagIndexConfig) -> ErrorHandlingTagIndex:
    """Create the backend named by the config URL, wrapped in its error policy.

    The returned index owns its connection; call ``disconnect()`` when done.

    Examples:
        create_tag_index(TagIndexConfig(url="redis://localhost:6379/0"))
        create_tag_index(TagIndexConfig(url="postgresql+asyncpg://u:p@host/db"))
        create_tag_index(TagIndexConfig(url="memory://"))
    """
    return ErrorHandlingTagIndex(
        _create_backend(config),
        throw_on_error=config.throw_on_error,
        on_error=config.on_error,
    )


__all__ = ["TagIndexConfig", "create_tag_index"]
