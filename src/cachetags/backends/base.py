"""Tag index protocol implemented by every storage backend."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from cachetags.errors import InvalidQueryIdError
from cachetags.tags import validate_tags
from cachetags.types import CacheTag, QueryId


@runtime_checkable
class AsyncTagIndex(Protocol):
    """Async index between query ids and the cache tags they depend on.

    Counts returned by the delete operations are informational and mean
    different things on different backends (keys, rows, set members).
    """

    # True when delete_queries does not need to walk the whole index
    indexes_queries: bool

    async def store(self, query_id: QueryId, tags: Sequence[CacheTag]) -> None:
        """Associate a query with each of its tags. Idempotent."""
        ...

    async def resolve(self, tags: Sequence[CacheTag]) -> list[QueryId]:
        """Return the distinct query ids tagged with any of the given tags."""
        ...

    async def delete_tags(self, tags: Sequence[CacheTag]) -> int:
        """Remove the tags and every association they take part in."""
        ...

    async def delete_queries(self, query_ids: Sequence[QueryId]) -> int:
        """Remove every association of the given queries."""
        ...

    async def truncate(self) -> int:
        """Remove every association in the index."""
        ...

    async def disconnect(self) -> None:
        """Close the connection owned by the backend."""
        ...


def check_store_args(query_id: QueryId, tags: Sequence[str]) -> list[CacheTag]:
    """Validate store() input, returning the de-duplicated tags."""
    if not query_id:
        raise InvalidQueryIdError("query_id must be a non-empty string")
    return validate_tags(tags)
