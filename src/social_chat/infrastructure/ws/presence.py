from __future__ import annotations

import asyncio
import logging

from social_chat.infrastructure.ws.protocol import OutboundEvent
from social_chat.infrastructure.ws.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class PresencePublisher:
    """Broadcasts the full online-user snapshot to every bound connection.

    Best-effort: no acks, no retries. Connections whose send fails are
    unbound, and the survivors get one more broadcast reflecting that.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    async def publish(self) -> None:
        while True:
            online = sorted(self._registry.snapshot())
            conns = self._registry.connections()
            results = await asyncio.gather(
                *(c.send(OutboundEvent.ONLINE_USERS, online) for c in conns),
                return_exceptions=True,
            )
            dead = [c for c, r in zip(conns, results) if isinstance(r, Exception)]
            removed = [c for c in dead if self._registry.unbind(c) is not None]
            if not removed:
                logger.debug("Presence broadcast: %d online", len(online))
                return
            logger.info("Dropped %d dead connection(s) during presence broadcast", len(removed))
