from __future__ import annotations

from social_chat.domain.entities.message import Message
from social_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        recipient_id=model.recipient_id,
        type=model.type,
        body=model.body,
        created_at=model.created_at,
        seen=model.seen,
        seen_at=model.seen_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        sender_id=entity.sender_id,
        recipient_id=entity.recipient_id,
        type=entity.type,
        body=entity.body,
        created_at=entity.created_at,
        seen=entity.seen,
        seen_at=entity.seen_at,
    )
