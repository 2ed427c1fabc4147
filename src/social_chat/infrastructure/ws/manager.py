"""Process-scoped owner of the realtime core."""
from __future__ import annotations

import logging

from social_chat.application.ports.clock import Clock
from social_chat.application.ports.connection import Connection
from social_chat.application.uow import UnitOfWorkFactory
from social_chat.infrastructure.ws.pipeline import MessagePipeline
from social_chat.infrastructure.ws.presence import PresencePublisher
from social_chat.infrastructure.ws.registry import ConnectionRegistry
from social_chat.infrastructure.ws.seen_tracker import SeenTracker
from social_chat.infrastructure.ws.typing_relay import TypingRelay

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Wires the registry to presence, message, seen and typing delivery.

    Created at application start-up and closed at shutdown; nothing outside
    this object mutates the registry.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, *, clock: Clock | None = None) -> None:
        self.registry = ConnectionRegistry()
        self.presence = PresencePublisher(self.registry)
        self.pipeline = MessagePipeline(
            self.registry, uow_factory, clock=clock, on_send_failure=self.disconnect,
        )
        self.seen = SeenTracker(
            self.registry, uow_factory, clock=clock, on_send_failure=self.disconnect,
        )
        self.typing = TypingRelay(self.registry, on_send_failure=self.disconnect)

    async def connect(self, user_id: str, connection: Connection) -> None:
        if connection.closed:
            # user-connected drained after the socket went away
            logger.debug("Ignoring bind of %s to closed %r", user_id, connection)
            return
        displaced = self.registry.bind(user_id, connection)
        if displaced is not None:
            logger.info("User %s reconnected; %r no longer receives events", user_id, displaced)
        logger.debug("User %s bound to %r (online=%d)", user_id, connection, len(self.registry))
        await self.presence.publish()

    async def disconnect(self, connection: Connection) -> None:
        """Unbind immediately and re-broadcast presence. No-op if not bound."""
        user_id = self.registry.unbind(connection)
        if user_id is None:
            return
        logger.debug("User %s unbound from %r", user_id, connection)
        await self.presence.publish()

    def online_users(self) -> list[str]:
        return sorted(self.registry.snapshot())

    async def close(self) -> None:
        conns = self.registry.clear()
        for conn in conns:
            await conn.close(code=1001)
        logger.info("Connection manager closed (%d connection(s) dropped)", len(conns))
