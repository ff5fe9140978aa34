"""In-memory tag index (async only)."""

import asyncio
from collections.abc import Sequence

from cachetags.backends.base import check_store_args
from cachetags.types import CacheTag, QueryId


class AsyncMemoryTagIndex:
    """Async in-process dual index, for tests and single-process apps."""

    indexes_queries = True

    def __init__(self) -> None:
        self._queries_by_tag: dict[str, set[str]] = {}
        self._tags_by_query: dict[str, set[str]] = {}
        self._lock = asyncio.Lock()

    async def store(self, query_id: QueryId, tags: Sequence[CacheTag]) -> None:
        """Associate a query with each of its tags."""
        tags = check_store_args(query_id, tags)
        if not tags:
            return
        async with self._lock:
            for tag in tags:
                self._queries_by_tag.setdefault(tag, set()).add(query_id)
            self._tags_by_query.setdefault(query_id, set()).update(tags)

    async def resolve(self, tags: Sequence[CacheTag]) -> list[QueryId]:
        """Return the distinct query ids tagged with any of the given tags."""
        if not tags:
            return []
        async with self._lock:
            result: set[str] = set()
            for tag in tags:
                result |= self._queries_by_tag.get(tag, set())
            return list(result)

    async def delete_tags(self, tags: Sequence[CacheTag]) -> int:
        """Remove the tags, returning the number of associations removed."""
        if not tags:
            return 0
        removed = 0
        async with self._lock:
            for tag in set(tags):
                query_ids = self._queries_by_tag.pop(tag, set())
                removed += len(query_ids)
                for query_id in query_ids:
                    self._discard(self._tags_by_query, query_id, tag)
        return removed

    async def delete_queries(self, query_ids: Sequence[QueryId]) -> int:
        """Remove the queries, returning the number of associations removed."""
        if not query_ids:
            return 0
        removed = 0
        async with self._lock:
            for query_id in set(query_ids):
                tags = self._tags_by_query.pop(query_id, set())
                removed += len(tags)
                for tag in tags:
                    self._discard(self._queries_by_tag, tag, query_id)
        return removed

    async def truncate(self) -> int:
        """Remove everything, returning the number of associations removed."""
        async with self._lock:
            removed = sum(len(tags) for tags in self._tags_by_query.values())
            self._queries_by_tag.clear()
            self._tags_by_query.clear()
        return removed

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for memory)."""
        pass

    @staticmethod
    def _discard(index: dict[str, set[str]], key: str, member: str) -> None:
        members = index.get(key)
        if members is None:
            return
        members.discard(member)
        if not members:
            del index[key]
