"""Uniform failure policy for any tag index."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from cachetags.backends.base import AsyncTagIndex
from cachetags.types import CacheTag, ErrorContext, OnError, QueryId

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorHandlingTagIndex:
    """Wraps a tag index to report, and optionally suppress, its failures.

    Every failure is passed to ``on_error`` first. With ``throw_on_error``
    (the default) it is then re-raised unchanged; otherwise it is logged and
    the operation returns its fallback: ``[]`` for resolve, ``0`` for counts,
    ``None`` for store and disconnect. A suppressed resolve therefore looks
    like an empty result to the caller, and only ``on_error`` tells them apart.

    Usage:
        index = ErrorHandlingTagIndex(
            AsyncRedisTagIndex.from_url("redis://localhost"),
            throw_on_error=False,
            on_error=lambda error, ctx: sentry_sdk.capture_exception(error),
        )
    """

    def __init__(
        self,
        index: AsyncTagIndex,
        *,
        throw_on_error: bool = True,
        on_error: OnError | None = None,
        name: str | None = None,
    ) -> None:
        self._index = index
        self._throw_on_error = throw_on_error
        self._on_error = on_error
        self._name = name or type(index).__name__

    @property
    def wrapped(self) -> AsyncTagIndex:
        return self._index

    @property
    def indexes_queries(self) -> bool:
        return self._index.indexes_queries

    async def store(self, query_id: QueryId, tags: Sequence[CacheTag]) -> None:
        await self._wrap(
            "store", (query_id, tags), lambda: self._index.store(query_id, tags), None
        )

    async def resolve(self, tags: Sequence[CacheTag]) -> list[QueryId]:
        return await self._wrap(
            "resolve", (tags,), lambda: self._index.resolve(tags), []
        )

    async def delete_tags(self, tags: Sequence[CacheTag]) -> int:
        return await self._wrap(
            "delete_tags", (tags,), lambda: self._index.delete_tags(tags), 0
        )

    async def delete_queries(self, query_ids: Sequence[QueryId]) -> int:
        return await self._wrap(
            "delete_queries",
            (query_ids,),
            lambda: self._index.delete_queries(query_ids),
            0,
        )

    async def truncate(self) -> int:
        return await self._wrap("truncate", (), self._index.truncate, 0)

    async def disconnect(self) -> None:
        await self._wrap("disconnect", (), self._index.disconnect, None)

    async def _wrap(
        self,
        operation: str,
        args: tuple[Any, ...],
        call: Callable[[], Awaitable[T]],
        fallback: T,
    ) -> T:
        try:
            return await call()
        except Exception as error:
            if self._on_error is not None:
                self._on_error(error, ErrorContext(self._name, operation, args))
            if self._throw_on_error:
                raise
            logger.warning(
                "Error in %s.%s, returning %r",
                self._name,
                operation,
                fallback,
                exc_info=error,
            )
            return fallback


__all__ = ["ErrorHandlingTagIndex"]
