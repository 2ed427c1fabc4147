"""In-memory identity ↔ connection bindings for this process."""
from __future__ import annotations

import logging
import threading

from social_chat.application.ports.connection import Connection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Maps each online user to exactly one live connection.

    A new binding for an already-bound user replaces the old one (last
    connection wins). A reverse index keeps ``unbind`` O(1). All methods are
    synchronous and hold the lock only for the dict mutation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_user: dict[str, Connection] = {}
        self._by_conn: dict[Connection, str] = {}

    def bind(self, user_id: str, connection: Connection) -> Connection | None:
        """Bind ``user_id`` to ``connection``.

        Returns the connection previously bound to ``user_id`` if this call
        displaced a different one.
        """
        with self._lock:
            previous_user = self._by_conn.pop(connection, None)
            if previous_user is not None and previous_user != user_id:
                del self._by_user[previous_user]

            displaced = self._by_user.get(user_id)
            if displaced is connection:
                displaced = None
            elif displaced is not None:
                del self._by_conn[displaced]

            self._by_user[user_id] = connection
            self._by_conn[connection] = user_id
            return displaced

    def unbind(self, connection: Connection) -> str | None:
        """Drop whatever binding points at ``connection``; returns its user id."""
        with self._lock:
            user_id = self._by_conn.pop(connection, None)
            if user_id is not None:
                del self._by_user[user_id]
            return user_id

    def resolve(self, user_id: str) -> Connection | None:
        with self._lock:
            return self._by_user.get(user_id)

    def user_of(self, connection: Connection) -> str | None:
        with self._lock:
            return self._by_conn.get(connection)

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._by_user)

    def connections(self) -> list[Connection]:
        with self._lock:
            return list(self._by_user.values())

    def clear(self) -> list[Connection]:
        with self._lock:
            conns = list(self._by_user.values())
            self._by_user.clear()
            self._by_conn.clear()
            return conns

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_user)
