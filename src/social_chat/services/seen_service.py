from __future__ import annotations

from social_chat.application.dto.seen import SeenReceipt
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.uow import UnitOfWork
from social_chat.domain.value_objects.enums import IntegrationEvent

_system_clock = SystemClock()


async def mark_seen(
    viewer_id: str,
    counterpart_id: str,
    uow: UnitOfWork,
    *,
    clock: Clock = _system_clock,
) -> SeenReceipt:
    """Flag everything ``counterpart_id`` sent to ``viewer_id`` as seen.

    Already-seen messages are untouched, so a repeated call reports
    ``count == 0`` and commits nothing.
    """
    seen_at = clock.now()
    count = await uow.messages_w.mark_seen(counterpart_id, viewer_id, seen_at)
    if count:
        await uow.outbox.add(
            IntegrationEvent.MESSAGES_SEEN,
            {
                "viewer_id": viewer_id,
                "sender_id": counterpart_id,
                "count": count,
                "seen_at": seen_at.isoformat(),
            },
        )
        await uow.commit()
    return SeenReceipt(
        viewer_id=viewer_id,
        counterpart_id=counterpart_id,
        count=count,
        seen_at=seen_at,
    )
