from __future__ import annotations

import uuid

from social_chat.application.exceptions import ConflictError, NotFoundError
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.uow import UnitOfWork
from social_chat.domain.entities.user import User

_system_clock = SystemClock()


async def create_user(
    username: str,
    email: str,
    fullname: str,
    phone: str | None,
    uow: UnitOfWork,
    *,
    clock: Clock = _system_clock,
) -> User:
    if await uow.users.exists_with(username=username, email=email):
        raise ConflictError("User already exists")

    user = User(
        id=uuid.uuid4().hex,
        username=username,
        email=email,
        fullname=fullname,
        phone=phone,
        avatar=None,
        created_at=clock.now(),
    )
    user = await uow.users_w.create(user)
    await uow.commit()
    return user


async def get_user(user_id: str, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(limit: int, uow: UnitOfWork) -> list[User]:
    return await uow.users.list_users(limit=limit)


async def update_profile(
    user_id: str,
    uow: UnitOfWork,
    *,
    fullname: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    avatar: str | None = None,
) -> User:
    user = await get_user(user_id, uow)
    if email is not None and email != user.email and await uow.users.exists_with(email=email):
        raise ConflictError("Email already in use")

    await uow.users_w.update_profile(
        user_id, fullname=fullname, email=email, phone=phone, avatar=avatar,
    )
    await uow.commit()
    return await get_user(user_id, uow)
