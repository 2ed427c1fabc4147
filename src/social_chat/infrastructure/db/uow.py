from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

import asyncpg
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from social_chat.application.exceptions import PersistenceError
from social_chat.infrastructure.db.repositories.friend_request import (
    FriendRequestReaderRepo,
    FriendRequestWriterRepo,
)
from social_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from social_chat.infrastructure.db.repositories.outbox import OutboxWriterRepo
from social_chat.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo
from social_chat.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

# asyncpg raises connect failures as bare OSError, outside SQLAlchemy's wrapping.
_STORE_ERRORS = (SQLAlchemyError, asyncpg.PostgresError, OSError)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession.

    Driver and ORM failures escaping the ``async with`` block, including an
    unreachable server, are rolled back and re-raised as
    :class:`PersistenceError` so callers never depend on driver types.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.friend_requests = FriendRequestReaderRepo(session)
        self.friend_requests_w = FriendRequestWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.outbox = OutboxWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            return
        try:
            await self.rollback()
        except _STORE_ERRORS:
            logger.warning("Rollback failed", exc_info=True)
        if isinstance(exc_val, _STORE_ERRORS):
            raise PersistenceError(type(exc_val).__name__) from exc_val


@asynccontextmanager
async def open_uow() -> AsyncIterator[SqlAlchemyUoW]:
    """Default ``UnitOfWorkFactory``: one session per unit of work."""
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow
