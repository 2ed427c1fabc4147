from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from social_chat.domain.value_objects.enums import MessageType
from tests.conftest import FakeConnection, hold_commit


@pytest_asyncio.fixture
async def online(manager):
    alice, bob = FakeConnection(), FakeConnection()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)
    return alice, bob


@pytest.mark.asyncio
async def test_message_is_persisted_and_delivered_to_both(manager, uow, online):
    alice, bob = online

    msg = await manager.pipeline.submit(alice, "alice", "bob", MessageType.TEXT, "hi")

    assert msg is not None
    assert uow.messages._messages == [msg]
    assert uow._committed is True
    echo = alice.events("chat-message")
    delivered = bob.events("chat-message")
    assert echo == delivered
    assert len(delivered) == 1
    assert delivered[0]["id"] == str(msg.id)
    assert delivered[0]["from"] == "alice"
    assert delivered[0]["to"] == "bob"
    assert delivered[0]["text"] == "hi"
    assert delivered[0]["seen"] is False


@pytest.mark.asyncio
async def test_message_to_offline_recipient_is_stored_and_echoed(manager, uow):
    alice = FakeConnection()
    await manager.connect("alice", alice)

    msg = await manager.pipeline.submit(alice, "alice", "carol", MessageType.TEXT, "later")

    assert msg is not None
    assert uow.messages._messages == [msg]
    assert len(alice.events("chat-message")) == 1
    assert alice.events("error") == []


@pytest.mark.asyncio
async def test_message_to_self_is_delivered_once(manager):
    alice = FakeConnection()
    await manager.connect("alice", alice)

    await manager.pipeline.submit(alice, "alice", "alice", MessageType.TEXT, "note")

    assert len(alice.events("chat-message")) == 1


@pytest.mark.asyncio
async def test_persistence_failure_delivers_nothing_and_acks_error(manager, uow, online):
    alice, bob = online
    uow.messages_w.fail = True

    msg = await manager.pipeline.submit(alice, "alice", "bob", MessageType.TEXT, "hi")

    assert msg is None
    assert bob.events("chat-message") == []
    assert alice.events("chat-message") == []
    [error] = alice.events("error")
    assert error["code"] == "send_failed"
    assert error["to"] == "bob"
    assert uow.outbox._records == []


@pytest.mark.asyncio
async def test_messages_arrive_in_submit_order(manager, clock, online):
    alice, bob = online

    for text in ("one", "two", "three"):
        await manager.pipeline.submit(alice, "alice", "bob", MessageType.TEXT, text)
        clock.advance()

    assert [m["text"] for m in bob.events("chat-message")] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_failed_delivery_evicts_recipient(manager, uow, online):
    alice, bob = online
    bob.fail = True

    msg = await manager.pipeline.submit(alice, "alice", "bob", MessageType.TEXT, "hi")

    assert msg is not None
    assert uow.messages._messages == [msg]
    assert manager.online_users() == ["alice"]
    assert alice.events("online-users")[-1] == ["alice"]


@pytest.mark.asyncio
async def test_attachment_message(manager, online):
    alice, bob = online

    msg = await manager.pipeline.submit(
        alice, "alice", "bob", MessageType.ATTACHMENT, "uploads/cat.png",
    )

    assert msg.type == MessageType.ATTACHMENT
    [delivered] = bob.events("chat-message")
    assert delivered["type"] == "attachment"
    assert delivered["attachmentRef"] == "uploads/cat.png"
    assert "text" not in delivered


@pytest.mark.asyncio
async def test_recipient_disconnecting_mid_persist_is_treated_as_offline(manager, uow, online):
    alice, bob = online
    persisting, release = hold_commit(uow)

    task = asyncio.create_task(
        manager.pipeline.submit(alice, "alice", "bob", MessageType.TEXT, "hi"),
    )
    await persisting.wait()
    await manager.disconnect(bob)
    assert manager.online_users() == ["alice"]
    assert alice.events("online-users")[-1] == ["alice"]

    release.set()
    msg = await task

    assert msg is not None
    assert uow.messages._messages == [msg]
    assert uow._committed is True
    assert bob.events("chat-message") == []
    assert len(alice.events("chat-message")) == 1
    assert alice.events("error") == []
