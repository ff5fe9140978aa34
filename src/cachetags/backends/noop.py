"""Tag index that stores nothing.

Useful for disabling cache tags without changing the code that calls the
index, and for tests that only care about the calls being made.
"""

import logging
from collections.abc import Sequence

from cachetags.types import CacheTag, QueryId

logger = logging.getLogger(__name__)


class AsyncNoopTagIndex:
    """Async tag index that logs calls and always returns empty results."""

    indexes_queries = False

    async def store(self, query_id: QueryId, tags: Sequence[CacheTag]) -> None:
        logger.debug("store called: query_id=%s tags=%s", query_id, list(tags))

    async def resolve(self, tags: Sequence[CacheTag]) -> list[QueryId]:
        logger.debug("resolve called: tags=%s", list(tags))
        return []

    async def delete_tags(self, tags: Sequence[CacheTag]) -> int:
        logger.debug("delete_tags called: tags=%s", list(tags))
        return 0

    async def delete_queries(self, query_ids: Sequence[QueryId]) -> int:
        logger.debug("delete_queries called: query_ids=%s", list(query_ids))
        return 0

    async def truncate(self) -> int:
        logger.debug("truncate called")
        return 0

    async def disconnect(self) -> None:
        pass
