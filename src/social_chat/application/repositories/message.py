from __future__ import annotations

from datetime import datetime
from typing import Protocol

from social_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_history(
        self,
        user_a: str,
        user_b: str,
        *,
        cursor: str | None = None,
        limit: int = 50,
    ) -> list[Message]:
        """Messages exchanged between two users in both directions, oldest first."""
        ...


class MessageWriter(Protocol):
    async def add(self, message: Message) -> Message: ...

    async def mark_seen(
        self,
        sender_id: str,
        recipient_id: str,
        seen_at: datetime,
    ) -> int:
        """Flag every unseen sender→recipient message as seen. Returns the row count."""
        ...
