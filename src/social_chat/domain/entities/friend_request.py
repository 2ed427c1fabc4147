from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class FriendRequest:
    id: UUID
    from_user_id: str
    to_user_id: str
    status: str
    created_at: datetime
