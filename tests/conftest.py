"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import dataclasses
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator
from uuid import UUID

import pytest

from social_chat.application.exceptions import PersistenceError
from social_chat.application.repositories.outbox import OutboxRecord
from social_chat.domain.entities.friend_request import FriendRequest
from social_chat.domain.entities.message import Message
from social_chat.domain.entities.user import User
from social_chat.domain.value_objects.enums import FriendRequestStatus, MessageType
from social_chat.infrastructure.db.repositories._cursor import decode_cursor
from social_chat.infrastructure.ws.manager import ConnectionManager

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1.0) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@dataclass(eq=False)
class FakeConnection:
    """Records every event pushed to it. Hashes by identity like a real socket."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    closed: bool = False
    fail: bool = False
    sent: list[tuple[str, Any]] = field(default_factory=list)

    async def send(self, event_type: str, data: Any) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append((str(event_type), data))

    async def close(self, code: int = 1000) -> None:
        self.closed = True

    def events(self, event_type: str) -> list[Any]:
        return [data for kind, data in self.sent if kind == event_type]


def make_user(
    *,
    user_id: str | None = None,
    username: str = "alice",
    email: str | None = None,
    friends: list[str] | None = None,
) -> User:
    return User(
        id=user_id or uuid.uuid4().hex,
        username=username,
        email=email or f"{username}@example.com",
        fullname=username.title(),
        phone=None,
        avatar=None,
        created_at=T0,
        friends=friends or [],
    )


def make_message(
    *,
    sender_id: str = "alice",
    recipient_id: str = "bob",
    body: str = "hello",
    created_at: datetime = T0,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        sender_id=sender_id,
        recipient_id=recipient_id,
        type=MessageType.TEXT,
        body=body,
        created_at=created_at,
    )


@dataclass
class FakeUserReader:
    _store: dict[str, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    async def exists_with(self, *, username: str | None = None, email: str | None = None) -> bool:
        return any(
            (username is not None and u.username == username)
            or (email is not None and u.email == email)
            for u in self._store.values()
        )

    async def list_users(self, *, limit: int = 100) -> list[User]:
        return sorted(self._store.values(), key=lambda u: u.username)[:limit]


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, user: User) -> User:
        self._reader._store[user.id] = user
        return user

    async def update_profile(self, user_id: str, **fields: str | None) -> None:
        changes = {k: v for k, v in fields.items() if v is not None}
        user = self._reader._store[user_id]
        self._reader._store[user_id] = dataclasses.replace(user, **changes)

    async def add_friendship(self, user_id: str, friend_id: str) -> None:
        for a, b in ((user_id, friend_id), (friend_id, user_id)):
            user = self._reader._store[a]
            if b not in user.friends:
                self._reader._store[a] = dataclasses.replace(user, friends=[*user.friends, b])


@dataclass
class FakeFriendRequestReader:
    _requests: dict[UUID, FriendRequest] = field(default_factory=dict)

    async def get_by_id(self, request_id: UUID) -> FriendRequest | None:
        return self._requests.get(request_id)

    async def get_pending(self, from_user_id: str, to_user_id: str) -> FriendRequest | None:
        for r in self._requests.values():
            if (
                r.from_user_id == from_user_id
                and r.to_user_id == to_user_id
                and r.status == FriendRequestStatus.PENDING
            ):
                return r
        return None

    async def list_pending_for(self, to_user_id: str) -> list[FriendRequest]:
        return [
            r for r in self._requests.values()
            if r.to_user_id == to_user_id and r.status == FriendRequestStatus.PENDING
        ]


@dataclass
class FakeFriendRequestWriter:
    _reader: FakeFriendRequestReader

    async def create(self, request: FriendRequest) -> FriendRequest:
        self._reader._requests[request.id] = request
        return request

    async def set_status(self, request_id: UUID, status: str) -> None:
        request = self._reader._requests[request_id]
        self._reader._requests[request_id] = dataclasses.replace(request, status=status)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_history(
        self,
        user_a: str,
        user_b: str,
        *,
        cursor: str | None = None,
        limit: int = 50,
    ) -> list[Message]:
        pair = {(user_a, user_b), (user_b, user_a)}
        history = sorted(
            (m for m in self._messages if (m.sender_id, m.recipient_id) in pair),
            key=lambda m: (m.created_at, str(m.id)),
        )
        if cursor:
            ts, mid = decode_cursor(cursor)
            history = [m for m in history if (m.created_at, str(m.id)) > (ts, str(mid))]
        return history[:limit]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail: bool = False

    async def add(self, message: Message) -> Message:
        if self.fail:
            raise PersistenceError("store unreachable")
        self._reader._messages.append(message)
        return message

    async def mark_seen(self, sender_id: str, recipient_id: str, seen_at: datetime) -> int:
        if self.fail:
            raise PersistenceError("store unreachable")
        count = 0
        for i, m in enumerate(self._reader._messages):
            if m.sender_id == sender_id and m.recipient_id == recipient_id and not m.seen:
                self._reader._messages[i] = dataclasses.replace(m, seen=True, seen_at=seen_at)
                count += 1
        return count


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: list[tuple[int, datetime]] = field(default_factory=list)
    _dead: list[int] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        done = set(self._sent) | set(self._dead)
        return [
            OutboxRecord(
                id=i,
                event_type=r["event_type"],
                payload=r["payload"],
                attempts=r.get("attempts", 0),
                created_at=T0,
            )
            for i, r in enumerate(self._records)
            if i not in done
        ][:batch_size]

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        self._failed.append((record_id, next_retry_at))

    async def mark_dead(self, ids: list[int]) -> None:
        self._dead.extend(ids)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    friend_requests: FakeFriendRequestReader = field(default_factory=FakeFriendRequestReader)
    friend_requests_w: FakeFriendRequestWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.friend_requests_w is None:
            self.friend_requests_w = FakeFriendRequestWriter(self.friend_requests)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


def hold_commit(uow: FakeUoW) -> tuple[asyncio.Event, asyncio.Event]:
    """Park ``uow.commit`` until ``release`` is set; ``reached`` fires when it is entered."""
    reached, release = asyncio.Event(), asyncio.Event()
    commit = uow.commit

    async def _held_commit() -> None:
        reached.set()
        await release.wait()
        await commit()

    uow.commit = _held_commit
    return reached, release


def uow_factory_for(uow: FakeUoW):
    """A ``UnitOfWorkFactory`` handing out the same in-memory store every time."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUoW]:
        yield uow

    return _factory


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def manager(uow: FakeUoW, clock: FixedClock) -> ConnectionManager:
    return ConnectionManager(uow_factory_for(uow), clock=clock)
