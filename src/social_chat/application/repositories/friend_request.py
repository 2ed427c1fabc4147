from __future__ import annotations

from typing import Protocol
from uuid import UUID

from social_chat.domain.entities.friend_request import FriendRequest


class FriendRequestReader(Protocol):
    async def get_by_id(self, request_id: UUID) -> FriendRequest | None: ...

    async def get_pending(self, from_user_id: str, to_user_id: str) -> FriendRequest | None: ...

    async def list_pending_for(self, to_user_id: str) -> list[FriendRequest]: ...


class FriendRequestWriter(Protocol):
    async def create(self, request: FriendRequest) -> FriendRequest: ...

    async def set_status(self, request_id: UUID, status: str) -> None: ...
