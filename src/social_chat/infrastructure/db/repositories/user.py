from __future__ import annotations

from collections import defaultdict

from sqlalchemy import or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from social_chat.domain.entities.user import User
from social_chat.infrastructure.db.mappers import user as mapper
from social_chat.infrastructure.db.models.user import FriendshipModel, UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return None
        friends = await self._friends_of([user_id])
        return mapper.model_to_entity(model, friends[user_id])

    async def exists_with(self, *, username: str | None = None, email: str | None = None) -> bool:
        clauses = []
        if username is not None:
            clauses.append(UserModel.username == username)
        if email is not None:
            clauses.append(UserModel.email == email)
        if not clauses:
            return False
        stmt = select(UserModel.id).where(or_(*clauses)).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_users(self, *, limit: int = 100) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.username).limit(limit)
        result = await self._session.execute(stmt)
        models = result.scalars().all()
        friends = await self._friends_of([m.id for m in models])
        return [mapper.model_to_entity(m, friends[m.id]) for m in models]

    async def _friends_of(self, user_ids: list[str]) -> dict[str, list[str]]:
        out: dict[str, list[str]] = defaultdict(list)
        if not user_ids:
            return out
        stmt = (
            select(FriendshipModel.user_id, FriendshipModel.friend_id)
            .where(FriendshipModel.user_id.in_(user_ids))
            .order_by(FriendshipModel.created_at)
        )
        result = await self._session.execute(stmt)
        for user_id, friend_id in result.all():
            out[user_id].append(friend_id)
        return out


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: User) -> User:
        model = mapper.entity_to_model(user)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update_profile(
        self,
        user_id: str,
        *,
        fullname: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        avatar: str | None = None,
    ) -> None:
        values = {
            k: v
            for k, v in {"fullname": fullname, "email": email, "phone": phone, "avatar": avatar}.items()
            if v is not None
        }
        if not values:
            return
        stmt = update(UserModel).where(UserModel.id == user_id).values(**values)
        await self._session.execute(stmt)

    async def add_friendship(self, user_id: str, friend_id: str) -> None:
        stmt = (
            pg_insert(FriendshipModel)
            .values(
                [
                    {"user_id": user_id, "friend_id": friend_id},
                    {"user_id": friend_id, "friend_id": user_id},
                ]
            )
            .on_conflict_do_nothing(index_elements=["user_id", "friend_id"])
        )
        await self._session.execute(stmt)
