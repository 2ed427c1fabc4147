"""Redis Pub/Sub publisher for integration events."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


def _json_default(o: object) -> Any:
    if isinstance(o, UUID):
        return str(o)
    if isinstance(o, datetime):
        return o.isoformat()
    raise TypeError(f"{type(o).__name__} is not JSON serializable")


def encode_event(event_type: str, payload: dict[str, Any], *, published_at: datetime) -> str:
    """Envelope shared with the websocket protocol: ``{"type", "data"}`` plus a timestamp."""
    return json.dumps(
        {"type": str(event_type), "data": payload, "publishedAt": published_at},
        default=_json_default,
    )


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def publish(self, channel: str, event_type: str, payload: dict[str, Any]) -> None:
        message = encode_event(event_type, payload, published_at=datetime.now(timezone.utc))
        receivers = await self._redis.publish(channel, message)
        if not receivers:
            logger.debug("%s published to %s with no subscribers", event_type, channel)
