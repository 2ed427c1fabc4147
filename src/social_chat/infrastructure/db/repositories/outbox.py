from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from social_chat.application.repositories.outbox import OutboxRecord
from social_chat.domain.value_objects.enums import OutboxStatus
from social_chat.infrastructure.db.models.outbox import OutboxEventModel

_CLAIMABLE = (OutboxStatus.PENDING, OutboxStatus.FAILED)


class OutboxWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._session.add(OutboxEventModel(event_type=str(event_type), payload=payload))
        await self._session.flush()

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        due = OutboxEventModel.next_retry_at.is_(None) | (
            OutboxEventModel.next_retry_at <= datetime.now(timezone.utc)
        )
        result = await self._session.execute(
            select(OutboxEventModel)
            .where(OutboxEventModel.status.in_(_CLAIMABLE), due)
            .order_by(OutboxEventModel.created_at.asc(), OutboxEventModel.id.asc())
            .limit(batch_size)
            .with_for_update(skip_locked=True)
        )
        rows = result.scalars().all()
        if not rows:
            return []

        await self._set_status([r.id for r in rows], OutboxStatus.PROCESSING)
        return [
            OutboxRecord(
                id=r.id,
                event_type=r.event_type,
                payload=r.payload,
                attempts=r.attempts,
                created_at=r.created_at,
            )
            for r in rows
        ]

    async def mark_sent(self, ids: list[int]) -> None:
        await self._set_status(ids, OutboxStatus.SENT, published_at=func.now())

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        await self._session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id == record_id)
            .values(
                status=OutboxStatus.FAILED,
                attempts=OutboxEventModel.attempts + 1,
                next_retry_at=next_retry_at,
            )
        )

    async def mark_dead(self, ids: list[int]) -> None:
        await self._set_status(ids, OutboxStatus.DEAD)

    async def _set_status(self, ids: list[int], status: OutboxStatus, **values: Any) -> None:
        if not ids:
            return
        await self._session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id.in_(ids))
            .values(status=status, **values)
        )
