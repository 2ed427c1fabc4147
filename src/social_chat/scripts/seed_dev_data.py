"""Seed development data: two befriended users and a short conversation."""
from __future__ import annotations

import asyncio
import logging

from social_chat.config import settings
from social_chat.domain.value_objects.enums import MessageType
from social_chat.infrastructure.db.uow import open_uow
from social_chat.log_config import configure_logging
from social_chat.services import friend_service, message_service, user_service

logger = logging.getLogger(__name__)


async def seed() -> None:
    async with open_uow() as uow:
        alice = await user_service.create_user("alice", "alice@example.com", "Alice Doe", None, uow)
        bob = await user_service.create_user("bob", "bob@example.com", "Bob Roe", None, uow)

        request = await friend_service.send_request(alice.id, bob.id, uow)
        await friend_service.accept_request(request.id, uow)

        conversation = [
            (alice.id, bob.id, "Hi Bob!"),
            (bob.id, alice.id, "Hey Alice, how are you?"),
            (alice.id, bob.id, "Great, thanks."),
        ]
        for sender_id, recipient_id, text in conversation:
            await message_service.send_message(sender_id, recipient_id, MessageType.TEXT, text, uow)

    logger.info("Seeded users %s, %s with %d messages", alice.id, bob.id, len(conversation))


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
