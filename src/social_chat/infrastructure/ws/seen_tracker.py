from __future__ import annotations

import logging

from social_chat.application.dto.seen import SeenReceipt
from social_chat.application.exceptions import AppError
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.ports.connection import Connection
from social_chat.application.uow import UnitOfWorkFactory
from social_chat.infrastructure.ws.fanout import Fanout, SendFailureHook
from social_chat.infrastructure.ws.protocol import OutboundEvent
from social_chat.infrastructure.ws.registry import ConnectionRegistry
from social_chat.services import seen_service

logger = logging.getLogger(__name__)


class SeenTracker(Fanout):
    def __init__(
        self,
        registry: ConnectionRegistry,
        uow_factory: UnitOfWorkFactory,
        *,
        clock: Clock | None = None,
        on_send_failure: SendFailureHook | None = None,
    ) -> None:
        super().__init__(registry, on_send_failure=on_send_failure)
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    async def mark_seen(
        self,
        viewer_id: str,
        counterpart_id: str,
        *,
        origin: Connection | None = None,
    ) -> SeenReceipt | None:
        """Mark the counterpart's messages to the viewer as seen and tell the counterpart.

        The notification goes out only after the update committed and only if
        at least one message changed.
        """
        try:
            async with self._uow_factory() as uow:
                receipt = await seen_service.mark_seen(
                    viewer_id, counterpart_id, uow, clock=self._clock,
                )
        except AppError as exc:
            logger.warning("mark_seen %s <- %s failed: %s", viewer_id, counterpart_id, exc.detail)
            if origin is not None:
                await self.send_to(
                    origin,
                    OutboundEvent.ERROR,
                    {"code": "mark_seen_failed", "detail": exc.detail},
                )
            return None

        if receipt.count:
            await self.send_to_user(
                counterpart_id,
                OutboundEvent.MESSAGE_SEEN,
                {
                    "by": viewer_id,
                    "seenAt": receipt.seen_at.isoformat(),
                    "count": receipt.count,
                },
            )
        return receipt
