"""WebSocket event protocol.

Every frame is an envelope ``{"type": ..., "data": ...}``. Inbound frames are
parsed into a closed set of typed events; anything else is rejected before it
reaches the realtime core.
"""
from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from social_chat.domain.entities.message import Message
from social_chat.domain.value_objects.enums import MessageType


class OutboundEvent(StrEnum):
    ONLINE_USERS = "online-users"
    CHAT_MESSAGE = "chat-message"
    MESSAGE_SEEN = "message-seen"
    TYPING = "typing"
    ERROR = "error"
    PONG = "pong"


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str
    data: Any = None


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class UserIdentity(_Payload):
    id: str = Field(min_length=1)
    display_name: str | None = Field(
        default=None, validation_alias=AliasChoices("displayName", "fullname"),
    )


class ChatMessagePayload(_Payload):
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
    text: str | None = None
    attachment_ref: str | None = Field(
        default=None, validation_alias=AliasChoices("attachmentRef", "image"),
    )

    @model_validator(mode="after")
    def _exactly_one_body(self) -> ChatMessagePayload:
        if bool(self.text) == bool(self.attachment_ref):
            raise ValueError("exactly one of text or attachmentRef is required")
        return self

    @property
    def message_type(self) -> MessageType:
        return MessageType.ATTACHMENT if self.attachment_ref else MessageType.TEXT

    @property
    def body(self) -> str:
        return self.attachment_ref or self.text or ""


class SeenPayload(_Payload):
    """``from`` sent the messages, ``to`` is the viewer acknowledging them."""

    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)


class TypingPayload(_Payload):
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
    is_typing: bool = Field(default=True, alias="isTyping")


class UserConnected(BaseModel):
    type: Literal["user-connected"]
    data: UserIdentity

    @field_validator("data", mode="before")
    @classmethod
    def _bare_id(cls, value: Any) -> Any:
        if isinstance(value, (str, int)):
            return {"id": str(value)}
        return value


class ChatMessage(BaseModel):
    type: Literal["chat-message"]
    data: ChatMessagePayload


class MarkSeen(BaseModel):
    type: Literal["mark-seen", "seen-message"]
    data: SeenPayload


class Typing(BaseModel):
    type: Literal["typing", "typing-start", "typing-stop"]
    data: TypingPayload

    @property
    def is_typing(self) -> bool:
        return self.type != "typing-stop" and self.data.is_typing


class Ping(BaseModel):
    type: Literal["ping"]
    data: Any = None


InboundEvent = Annotated[
    Union[UserConnected, ChatMessage, MarkSeen, Typing, Ping],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_inbound(raw: str | bytes) -> InboundEvent:
    """Parse one client frame. Raises ``pydantic.ValidationError`` if malformed."""
    return _inbound_adapter.validate_json(raw)


def serialize_message(msg: Message) -> dict[str, Any]:
    """Wire form of a persisted message, as delivered to both parties."""
    data: dict[str, Any] = {
        "id": str(msg.id),
        "from": msg.sender_id,
        "to": msg.recipient_id,
        "type": msg.type,
        "createdAt": msg.created_at.isoformat(),
        "seen": msg.seen,
        "seenAt": msg.seen_at.isoformat() if msg.seen_at else None,
    }
    if msg.type == MessageType.ATTACHMENT:
        data["attachmentRef"] = msg.body
    else:
        data["text"] = msg.body
    return data
