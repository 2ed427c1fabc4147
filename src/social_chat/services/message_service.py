from __future__ import annotations

import uuid

from social_chat.application.exceptions import ValidationError
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.uow import UnitOfWork
from social_chat.domain.entities.message import Message
from social_chat.domain.value_objects.enums import IntegrationEvent, MessageType

_system_clock = SystemClock()


async def send_message(
    sender_id: str,
    recipient_id: str,
    msg_type: MessageType,
    body: str,
    uow: UnitOfWork,
    *,
    clock: Clock = _system_clock,
) -> Message:
    """Persist a new unseen message and its integration event in one commit.

    Friendship is not checked here; gating chat on an accepted friend request
    is left to the caller.
    """
    if not sender_id or not recipient_id:
        raise ValidationError("Both sender and recipient are required")
    if not body:
        raise ValidationError("Message body is empty")

    msg = Message(
        id=uuid.uuid4(),
        sender_id=sender_id,
        recipient_id=recipient_id,
        type=msg_type.value,
        body=body,
        created_at=clock.now(),
    )
    msg = await uow.messages_w.add(msg)
    await uow.outbox.add(
        IntegrationEvent.MESSAGE_CREATED,
        {
            "message_id": str(msg.id),
            "sender_id": msg.sender_id,
            "recipient_id": msg.recipient_id,
            "type": msg.type,
            "created_at": msg.created_at.isoformat(),
        },
    )
    await uow.commit()
    return msg


async def list_history(
    user_id: str,
    peer_id: str,
    cursor: str | None,
    limit: int,
    uow: UnitOfWork,
) -> list[Message]:
    return await uow.messages.list_history(user_id, peer_id, cursor=cursor, limit=limit)
