from __future__ import annotations

from typing import Any, Protocol


class Connection(Protocol):
    """A live client connection the realtime core can push events to.

    Implementations must hash by identity: the registry keys its reverse
    index on the connection object itself.
    """

    id: str
    closed: bool

    async def send(self, event_type: str, data: Any) -> None:
        """Push one event. Raises if the underlying transport is gone."""
        ...

    async def close(self, code: int = 1000) -> None: ...
