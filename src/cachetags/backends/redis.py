"""Redis tag index.

Each tag is a Redis set of query ids (forward index). With
``reverse_index=True`` each query also gets a set of its tags, so evicting a
query touches only the tag sets it belongs to.

Batches run as non-transactional pipelines: they save round trips and raise
if any command in them failed, but they are not atomic across keys. A batch
that fails halfway can leave the two indexes briefly out of step; ``store``
is idempotent, so retrying it converges.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Sequence
from typing import Any

import redis.asyncio

from cachetags.backends.base import check_store_args
from cachetags.types import CacheTag, QueryId

logger = logging.getLogger(__name__)

_SCAN_COUNT = 1000
_GLOB_CHARS = re.compile(r"([\\*?\[\]])")


def _decode(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class AsyncRedisTagIndex:
    """Async Redis tag index with an optional per-query reverse index."""

    def __init__(
        self,
        client: redis.asyncio.Redis,
        *,
        prefix: str = "",
        reverse_index: bool = True,
    ) -> None:
        self._client = client
        self._prefix = prefix
        self._reverse_index = reverse_index

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        prefix: str = "",
        reverse_index: bool = True,
        **client_kwargs: Any,
    ) -> AsyncRedisTagIndex:
        """Create an index that owns a new client for ``url``."""
        client = redis.asyncio.from_url(url, **client_kwargs)
        return cls(client, prefix=prefix, reverse_index=reverse_index)

    @property
    def indexes_queries(self) -> bool:
        return self._reverse_index

    def _key(self, *parts: str) -> str:
        if self._prefix:
            return ":".join((self._prefix, *parts))
        return ":".join(parts)

    def _tag_key(self, tag: str) -> str:
        """Generate full Redis key for a tag's set of query ids."""
        return self._key("cache-tag", tag)

    def _query_key(self, query_id: str) -> str:
        """Generate full Redis key for a query's set of tags."""
        return self._key("query", query_id)

    def _pattern(self, kind: str) -> str:
        """SCAN pattern matching every key of one kind under the prefix."""
        prefix = _GLOB_CHARS.sub(r"\\\1", self._prefix)
        return ":".join(part for part in (prefix, kind, "*") if part)

    async def store(self, query_id: QueryId, tags: Sequence[CacheTag]) -> None:
        """Add the query to each tag set (and record its tags if reverse indexing)."""
        tags = check_store_args(query_id, tags)
        if not tags:
            return

        async with self._client.pipeline(transaction=False) as pipe:
            for tag in tags:
                pipe.sadd(self._tag_key(tag), query_id)
            if self._reverse_index:
                pipe.sadd(self._query_key(query_id), *tags)
            await pipe.execute()

    async def resolve(self, tags: Sequence[CacheTag]) -> list[QueryId]:
        """Union of the tag sets, computed server-side with SUNION."""
        if not tags:
            return []
        members = await self._client.sunion([self._tag_key(tag) for tag in tags])
        return [_decode(member) for member in members]

    async def delete_tags(self, tags: Sequence[CacheTag]) -> int:
        """Delete the tag sets, returning the number of tag keys removed."""
        if not tags:
            return 0
        tags = list(dict.fromkeys(tags))
        keys = [self._tag_key(tag) for tag in tags]

        if not self._reverse_index:
            return int(await self._client.delete(*keys))

        async with self._client.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.smembers(key)
            member_sets = await pipe.execute()

        async with self._client.pipeline(transaction=False) as pipe:
            for tag, members in zip(tags, member_sets):
                for query_id in members:
                    pipe.srem(self._query_key(_decode(query_id)), tag)
            pipe.delete(*keys)
            results = await pipe.execute()

        return int(results[-1])

    async def delete_queries(self, query_ids: Sequence[QueryId]) -> int:
        """Remove the queries from every tag set they belong to.

        Returns the number of query ids removed from tag sets. Without the
        reverse index this walks every tag key under the prefix.
        """
        if not query_ids:
            return 0
        query_ids = list(dict.fromkeys(query_ids))

        if not self._reverse_index:
            return await self._delete_queries_by_scan(query_ids)

        async with self._client.pipeline(transaction=False) as pipe:
            for query_id in query_ids:
                pipe.smembers(self._query_key(query_id))
            tag_sets = await pipe.execute()

        async with self._client.pipeline(transaction=False) as pipe:
            for query_id, tags in zip(query_ids, tag_sets):
                for tag in tags:
                    pipe.srem(self._tag_key(_decode(tag)), query_id)
            pipe.delete(*(self._query_key(query_id) for query_id in query_ids))
            results = await pipe.execute()

        # Last result is the DEL of the per-query sets
        return sum(int(removed) for removed in results[:-1])

    async def truncate(self) -> int:
        """Delete every key of this index, returning the number removed."""
        kinds = ["cache-tag", "query"] if self._reverse_index else ["cache-tag"]
        removed = 0
        for kind in kinds:
            async for keys in self._scan(self._pattern(kind)):
                removed += int(await self._client.delete(*keys))
        return removed

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()

    async def _delete_queries_by_scan(self, query_ids: list[QueryId]) -> int:
        logger.warning(
            "delete_queries on a forward-only index scans every tag key; "
            "enable reverse_index for query-driven eviction"
        )
        removed = 0
        async for keys in self._scan(self._pattern("cache-tag")):
            async with self._client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.srem(key, *query_ids)
                results = await pipe.execute()
            removed += sum(int(count) for count in results)
        return removed

    async def _scan(self, pattern: str) -> AsyncIterator[list[Any]]:
        """Yield pages of keys matching pattern using the SCAN cursor."""
        cursor: int = 0
        while True:
            result = await self._client.scan(cursor, match=pattern, count=_SCAN_COUNT)
            cursor = result[0]
            keys = result[1]
            if keys:
                logger.debug("scan %s: %d keys", pattern, len(keys))
                yield keys
            if cursor == 0:
                break
