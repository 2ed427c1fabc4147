from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class MessageResponse(BaseModel):
    id: UUID
    sender_id: str
    recipient_id: str
    type: str
    body: str
    created_at: datetime
    seen: bool
    seen_at: datetime | None

    model_config = {"from_attributes": True}


class MessageHistoryResponse(BaseModel):
    """One page of a conversation, oldest first. ``next_cursor`` is null on the last page."""

    items: list[MessageResponse]
    next_cursor: str | None = None
