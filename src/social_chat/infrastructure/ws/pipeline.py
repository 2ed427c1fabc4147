from __future__ import annotations

import logging

from social_chat.application.exceptions import AppError
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.ports.connection import Connection
from social_chat.application.uow import UnitOfWorkFactory
from social_chat.domain.entities.message import Message
from social_chat.domain.value_objects.enums import MessageType
from social_chat.infrastructure.ws.fanout import Fanout, SendFailureHook
from social_chat.infrastructure.ws.protocol import OutboundEvent, serialize_message
from social_chat.infrastructure.ws.registry import ConnectionRegistry
from social_chat.services import message_service

logger = logging.getLogger(__name__)


class MessagePipeline(Fanout):
    """Persist an inbound chat message, then deliver it to both parties.

    Nothing is delivered for a message that did not commit; the originating
    connection gets an ``error`` event with code ``send_failed`` instead.
    """

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

    async def submit(
        self,
        origin: Connection | None,
        sender_id: str,
        recipient_id: str,
        msg_type: MessageType,
        body: str,
    ) -> Message | None:
        try:
            async with self._uow_factory() as uow:
                msg = await message_service.send_message(
                    sender_id, recipient_id, msg_type, body, uow, clock=self._clock,
                )
        except AppError as exc:
            logger.warning("Message %s -> %s not persisted: %s", sender_id, recipient_id, exc.detail)
            if origin is not None:
                await self.send_to(
                    origin,
                    OutboundEvent.ERROR,
                    {"code": "send_failed", "to": recipient_id, "detail": exc.detail},
                )
            return None

        payload = serialize_message(msg)
        # The echo carries the server-assigned id and timestamp back to the sender.
        await self.send_to_user(sender_id, OutboundEvent.CHAT_MESSAGE, payload)
        if recipient_id != sender_id:
            await self.send_to_user(recipient_id, OutboundEvent.CHAT_MESSAGE, payload)
        return msg
