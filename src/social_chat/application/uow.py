from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from social_chat.application.repositories.friend_request import (
    FriendRequestReader,
    FriendRequestWriter,
)
from social_chat.application.repositories.message import MessageReader, MessageWriter
from social_chat.application.repositories.outbox import OutboxWriter
from social_chat.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    friend_requests: FriendRequestReader
    friend_requests_w: FriendRequestWriter
    messages: MessageReader
    messages_w: MessageWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


# Opens a fresh unit of work per operation; the realtime core never shares one
# across events.
UnitOfWorkFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
