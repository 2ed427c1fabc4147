from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    TEXT = "text"
    ATTACHMENT = "attachment"


class FriendRequestStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class IntegrationEvent(StrEnum):
    """Event types written to the outbox for consumers outside this service."""

    MESSAGE_CREATED = "chat.message_created"
    MESSAGES_SEEN = "chat.messages_seen"
    FRIEND_REQUEST_CREATED = "social.friend_request_created"
    FRIEND_REQUEST_ACCEPTED = "social.friend_request_accepted"


class OutboxStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"
    DEAD = "dead"
