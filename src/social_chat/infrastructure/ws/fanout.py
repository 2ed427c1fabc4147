from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from social_chat.application.ports.connection import Connection
from social_chat.infrastructure.ws.registry import ConnectionRegistry

logger = logging.getLogger(__name__)

SendFailureHook = Callable[[Connection], Awaitable[None]]


class Fanout:
    """Shared delivery helpers for components that push to resolved users.

    A user that is not bound is a normal routing outcome: nothing is sent and
    nothing is raised.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        on_send_failure: SendFailureHook | None = None,
    ) -> None:
        self._registry = registry
        self._on_send_failure = on_send_failure

    async def send_to(self, connection: Connection, event_type: str, data: Any) -> bool:
        try:
            await connection.send(event_type, data)
        except Exception:
            logger.warning("Send of %s to %r failed", event_type, connection, exc_info=True)
            if self._on_send_failure is not None:
                await self._on_send_failure(connection)
            return False
        return True

    async def send_to_user(self, user_id: str, event_type: str, data: Any) -> bool:
        connection = self._registry.resolve(user_id)
        if connection is None:
            logger.debug("%s for %s skipped: not connected", event_type, user_id)
            return False
        return await self.send_to(connection, event_type, data)
