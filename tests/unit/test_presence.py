from __future__ import annotations

import pytest

from tests.conftest import FakeConnection


@pytest.mark.asyncio
async def test_connect_broadcasts_snapshot_to_everyone(manager):
    alice, bob = FakeConnection(), FakeConnection()

    await manager.connect("alice", alice)
    await manager.connect("bob", bob)

    assert alice.events("online-users") == [["alice"], ["alice", "bob"]]
    assert bob.events("online-users") == [["alice", "bob"]]


@pytest.mark.asyncio
async def test_disconnect_broadcasts_to_survivors(manager):
    alice, bob = FakeConnection(), FakeConnection()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)

    await manager.disconnect(bob)

    assert alice.events("online-users")[-1] == ["alice"]
    assert manager.online_users() == ["alice"]


@pytest.mark.asyncio
async def test_duplicate_disconnect_sends_no_second_broadcast(manager):
    alice, bob = FakeConnection(), FakeConnection()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)

    await manager.disconnect(bob)
    before = len(alice.sent)
    await manager.disconnect(bob)

    assert len(alice.sent) == before


@pytest.mark.asyncio
async def test_disconnect_of_unbound_connection_is_silent(manager):
    alice = FakeConnection()
    await manager.connect("alice", alice)

    await manager.disconnect(FakeConnection())

    assert alice.events("online-users") == [["alice"]]


@pytest.mark.asyncio
async def test_dead_connection_is_dropped_and_survivors_rebroadcast(manager):
    alice, bob = FakeConnection(), FakeConnection()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)
    bob.fail = True
    carol = FakeConnection()

    await manager.connect("carol", carol)

    assert manager.online_users() == ["alice", "carol"]
    assert alice.events("online-users")[-1] == ["alice", "carol"]
    assert carol.events("online-users")[-1] == ["alice", "carol"]


@pytest.mark.asyncio
async def test_reconnect_keeps_single_presence_entry(manager):
    first, second = FakeConnection(), FakeConnection()
    await manager.connect("alice", first)

    await manager.connect("alice", second)

    assert manager.online_users() == ["alice"]
    assert second.events("online-users") == [["alice"]]
    assert manager.registry.resolve("alice") is second


@pytest.mark.asyncio
async def test_closed_connection_is_not_bound(manager):
    conn = FakeConnection(closed=True)

    await manager.connect("alice", conn)

    assert manager.online_users() == []
    assert conn.sent == []


@pytest.mark.asyncio
async def test_close_drops_every_connection(manager):
    alice, bob = FakeConnection(), FakeConnection()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)

    await manager.close()

    assert manager.online_users() == []
    assert alice.closed and bob.closed
