"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends
from fastapi.requests import HTTPConnection

from social_chat.application.uow import UnitOfWork
from social_chat.infrastructure.ws.manager import ConnectionManager


async def get_uow(conn: HTTPConnection) -> AsyncIterator[UnitOfWork]:
    async with conn.app.state.uow_factory() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]
