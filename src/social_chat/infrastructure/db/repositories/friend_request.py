from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from social_chat.domain.entities.friend_request import FriendRequest
from social_chat.domain.value_objects.enums import FriendRequestStatus
from social_chat.infrastructure.db.mappers import friend_request as mapper
from social_chat.infrastructure.db.models.friend_request import FriendRequestModel


class FriendRequestReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, request_id: UUID) -> FriendRequest | None:
        model = await self._session.get(FriendRequestModel, request_id)
        return mapper.model_to_entity(model) if model else None

    async def get_pending(self, from_user_id: str, to_user_id: str) -> FriendRequest | None:
        stmt = select(FriendRequestModel).where(
            FriendRequestModel.from_user_id == from_user_id,
            FriendRequestModel.to_user_id == to_user_id,
            FriendRequestModel.status == FriendRequestStatus.PENDING,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_pending_for(self, to_user_id: str) -> list[FriendRequest]:
        stmt = (
            select(FriendRequestModel)
            .where(
                FriendRequestModel.to_user_id == to_user_id,
                FriendRequestModel.status == FriendRequestStatus.PENDING,
            )
            .order_by(FriendRequestModel.created_at.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class FriendRequestWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, request: FriendRequest) -> FriendRequest:
        model = mapper.entity_to_model(request)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def set_status(self, request_id: UUID, status: str) -> None:
        stmt = (
            update(FriendRequestModel)
            .where(FriendRequestModel.id == request_id)
            .values(status=status)
        )
        await self._session.execute(stmt)
