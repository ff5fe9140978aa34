"""Turning an invalidation event into evicted queries."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from cachetags.backends.base import AsyncTagIndex
from cachetags.errors import InvalidWebhookError
from cachetags.tags import validate_tags
from cachetags.types import CacheTag, QueryId

WEBHOOK_ENTITY_TYPE = "cda_cache_tags"
WEBHOOK_EVENT_TYPE = "invalidate"


def tags_from_webhook(payload: Mapping[str, Any]) -> list[CacheTag]:
    """Extract the changed tags from a cache tag invalidation webhook.

    Expected shape:
        {
            "entity_type": "cda_cache_tags",
            "event_type": "invalidate",
            "entity": {
                "id": "cda_cache_tags",
                "type": "cda_cache_tags",
                "attributes": {"tags": ["tag-a", "tag-b"]},
            },
        }
    """
    if payload.get("entity_type") != WEBHOOK_ENTITY_TYPE:
        raise InvalidWebhookError(
            f"Expected entity_type {WEBHOOK_ENTITY_TYPE!r}, "
            f"got {payload.get('entity_type')!r}"
        )
    if payload.get("event_type", WEBHOOK_EVENT_TYPE) != WEBHOOK_EVENT_TYPE:
        raise InvalidWebhookError(
            f"Expected event_type {WEBHOOK_EVENT_TYPE!r}, "
            f"got {payload.get('event_type')!r}"
        )

    entity = payload.get("entity")
    attributes = entity.get("attributes") if isinstance(entity, Mapping) else None
    tags = attributes.get("tags") if isinstance(attributes, Mapping) else None
    if not isinstance(tags, list):
        raise InvalidWebhookError("Webhook payload has no entity.attributes.tags list")
    return validate_tags(tags)


async def invalidate(
    index: AsyncTagIndex,
    tags: Sequence[CacheTag],
    *,
    evict: Callable[[list[QueryId]], Awaitable[None]] | None = None,
) -> list[QueryId]:
    """Find the queries affected by changed tags and clean them out of the index.

    Args:
        index: Tag index to resolve against
        tags: Tags that changed upstream
        evict: Called with the affected query ids before the index is cleaned,
            to purge the cached results they identify

    Returns:
        The affected query ids
    """
    if not tags:
        return []

    query_ids = await index.resolve(tags)
    if not query_ids:
        return []

    if evict is not None:
        await evict(query_ids)

    if index.indexes_queries:
        await index.delete_queries(query_ids)
    else:
        await index.delete_tags(tags)
    return query_ids


__all__ = ["invalidate", "tags_from_webhook"]
