"""Create all tables for a fresh development database."""
from __future__ import annotations

import asyncio
import logging

from social_chat.config import settings
from social_chat.infrastructure.db import models  # noqa: F401  (registers tables)
from social_chat.infrastructure.db.base import Base
from social_chat.infrastructure.db.session import dispose_engine, engine
from social_chat.log_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await dispose_engine()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(create_schema())


if __name__ == "__main__":
    main()
