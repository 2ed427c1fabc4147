from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    email: str
    fullname: str
    phone: str | None
    avatar: str | None
    created_at: datetime
    friends: list[str] = field(default_factory=list)
