from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    """A direct message between two users.

    ``body`` carries the text, or the attachment reference when
    ``type`` is ``attachment``.
    """

    id: UUID
    sender_id: str
    recipient_id: str
    type: str
    body: str
    created_at: datetime
    seen: bool = False
    seen_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.seen != (self.seen_at is not None):
            raise ValueError("seen and seen_at must be set together")
