"""Outbox worker: polls pending outbox records, publishes them via Redis Pub/Sub.

Live delivery to connected clients does not go through here; these are
integration events for external consumers.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import redis.asyncio as aioredis

from social_chat.application.ports.bus import EventPublisher
from social_chat.application.uow import UnitOfWorkFactory
from social_chat.config import settings
from social_chat.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from social_chat.infrastructure.db.session import dispose_engine
from social_chat.infrastructure.db.uow import open_uow
from social_chat.log_config import configure_logging

logger = logging.getLogger(__name__)

BASE_DELAY_SECONDS = 5
MAX_DELAY_SECONDS = 300


def calc_backoff(attempts: int, *, now: datetime | None = None) -> datetime:
    delay = min(BASE_DELAY_SECONDS * (2 ** attempts), MAX_DELAY_SECONDS)
    return (now or datetime.now(timezone.utc)) + timedelta(seconds=delay)


async def process_batch(
    publisher: EventPublisher,
    uow_factory: UnitOfWorkFactory,
    *,
    channel: str,
    batch_size: int,
    max_attempts: int,
) -> int:
    """Publish one batch of due records. Returns how many were sent."""
    async with uow_factory() as uow:
        batch = await uow.outbox.fetch_pending(batch_size)
        if not batch:
            return 0

        sent_ids: list[int] = []
        dead_ids: list[int] = []
        for record in batch:
            if record.attempts >= max_attempts:
                logger.error(
                    "Outbox record %d (%s) gave up after %d attempts",
                    record.id, record.event_type, record.attempts,
                )
                dead_ids.append(record.id)
                continue
            try:
                await publisher.publish(channel, record.event_type, record.payload)
                sent_ids.append(record.id)
            except Exception:
                logger.exception("Failed to publish outbox record %d", record.id)
                await uow.outbox.mark_failed(record.id, calc_backoff(record.attempts))

        await uow.outbox.mark_sent(sent_ids)
        await uow.outbox.mark_dead(dead_ids)
        await uow.commit()

    if sent_ids:
        logger.info("Published %d outbox records", len(sent_ids))
    return len(sent_ids)


async def run_outbox_worker() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    publisher = RedisPubSubPublisher(redis)

    logger.info(
        "Outbox worker started (poll=%.1fs, batch=%d, max_attempts=%d)",
        settings.OUTBOX_POLL_INTERVAL,
        settings.OUTBOX_BATCH_SIZE,
        settings.OUTBOX_MAX_ATTEMPTS,
    )

    try:
        while True:
            try:
                await process_batch(
                    publisher,
                    open_uow,
                    channel=settings.REDIS_PUBSUB_CHANNEL,
                    batch_size=settings.OUTBOX_BATCH_SIZE,
                    max_attempts=settings.OUTBOX_MAX_ATTEMPTS,
                )
            except Exception:
                logger.exception("Outbox worker loop error")
            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL)
    finally:
        await redis.aclose()
        await dispose_engine()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(run_outbox_worker())


if __name__ == "__main__":
    main()
