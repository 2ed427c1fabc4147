from __future__ import annotations

from typing import Protocol

from social_chat.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...

    async def exists_with(self, *, username: str | None = None, email: str | None = None) -> bool: ...

    async def list_users(self, *, limit: int = 100) -> list[User]: ...


class UserWriter(Protocol):
    async def create(self, user: User) -> User: ...

    async def update_profile(
        self,
        user_id: str,
        *,
        fullname: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        avatar: str | None = None,
    ) -> None: ...

    async def add_friendship(self, user_id: str, friend_id: str) -> None:
        """Link both users as friends. Existing links are left untouched."""
        ...
