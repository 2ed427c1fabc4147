from __future__ import annotations

from social_chat.infrastructure.ws.fanout import Fanout
from social_chat.infrastructure.ws.protocol import OutboundEvent


class TypingRelay(Fanout):
    """Forwards ephemeral typing signals. Nothing is stored or queued."""

    async def notify_typing(self, from_id: str, to_id: str, is_typing: bool) -> bool:
        return await self.send_to_user(
            to_id, OutboundEvent.TYPING, {"from": from_id, "isTyping": is_typing},
        )
