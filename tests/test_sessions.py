"""Session registry tests.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
import asyncio
import time

import anyio
import mcp.types as types
import pytest

from opsera_agent.errors import InternalTransportFailure, InvalidSession, SessionLimitExceeded
from opsera_agent.sessions import END_OF_STREAM, SessionRegistry


def ping(msg_id=1):
    return types.JSONRPCMessage(types.JSONRPCRequest(jsonrpc='2.0', id=msg_id, method='ping'))


def queued_ids(channel):
    ids = []
    while True:
        try:
            ids.append(channel.inbound.receive_nowait().message.root.id)
        except anyio.WouldBlock:
            return ids


@pytest.mark.asyncio
async def test_concurrent_opens_yield_distinct_ids():
    registry = SessionRegistry()

    async def opener():
        await asyncio.sleep(0)
        return registry.open()

    ids = await asyncio.gather(*(opener() for _ in range(200)))
    assert len(set(ids)) == 200
    assert len(registry) == 200
    assert all(len(sid) == 32 for sid in ids)


def test_lookup_close_lookup():
    registry = SessionRegistry()
    sid = registry.open()
    channel = registry.lookup(sid)
    assert channel is not None and channel.session_id == sid
    assert registry.close(sid) is True
    assert registry.lookup(sid) is None
    assert channel.released
    # second close is a no-op
    assert registry.close(sid) is False
    assert registry.close('never-opened') is False
    assert registry.close(None) is False


def test_lookup_unknown():
    registry = SessionRegistry()
    assert registry.lookup('missing') is None
    assert registry.lookup('') is None


def test_dispatch_forwards_to_session_stream():
    registry = SessionRegistry()
    sid = registry.open()
    channel = registry.dispatch(sid, ping(3))
    assert channel is registry.lookup(sid)
    assert queued_ids(channel) == [3]
    assert channel.message_count == 1


def test_dispatch_after_close_is_invalid_session():
    registry = SessionRegistry()
    sid = registry.open()
    other = registry.open()
    registry.close(sid)
    with pytest.raises(InvalidSession):
        registry.dispatch(sid, ping())
    assert queued_ids(registry.lookup(other)) == []
    assert registry.lookup(other).message_count == 0


def test_dispatch_missing_session_id():
    with pytest.raises(InvalidSession):
        SessionRegistry().dispatch(None, ping())


def test_dispatch_preserves_order():
    registry = SessionRegistry()
    sid = registry.open()
    for i in range(5):
        registry.dispatch(sid, ping(i))
    assert queued_ids(registry.lookup(sid)) == [0, 1, 2, 3, 4]


def test_full_sink_is_transport_failure():
    registry = SessionRegistry(queue_size=2)
    sid = registry.open()
    other = registry.open()
    registry.dispatch(sid, ping(1))
    registry.dispatch(sid, ping(2))
    with pytest.raises(InternalTransportFailure) as exc:
        registry.dispatch(sid, ping(3))
    assert exc.value.status_code == 500
    assert registry.lookup(sid).message_count == 2
    assert queued_ids(registry.dispatch(other, ping(4))) == [4]


@pytest.mark.asyncio
async def test_release_ends_stream_and_refuses_messages():
    registry = SessionRegistry()
    sid = registry.open()
    channel = registry.lookup(sid)
    pending = asyncio.ensure_future(channel.receive())
    await asyncio.sleep(0)
    registry.close(sid)
    assert await asyncio.wait_for(pending, timeout=1) is END_OF_STREAM
    assert await channel.receive() is END_OF_STREAM
    with pytest.raises(InternalTransportFailure):
        channel.deliver(ping())


def test_session_limit():
    registry = SessionRegistry(max_sessions=2)
    registry.open()
    sid = registry.open()
    with pytest.raises(SessionLimitExceeded):
        registry.open()
    registry.close(sid)
    assert registry.open()


def test_reap_idle():
    registry = SessionRegistry(idle_timeout=30)
    stale = registry.open()
    fresh = registry.open()
    registry.lookup(stale).last_activity = time.time() - 60
    assert registry.reap_idle() == [stale]
    assert stale not in registry
    assert fresh in registry


def test_reap_disabled():
    registry = SessionRegistry(idle_timeout=0)
    sid = registry.open()
    assert registry.reap_idle(now=time.time() + 10_000) == []
    assert sid in registry


def test_close_all_and_snapshot():
    registry = SessionRegistry()
    registry.open()
    registry.open()
    info = registry.snapshot()
    assert len(info) == 2
    assert info[0]['id'].endswith('...')
    assert registry.close_all() == 2
    assert len(registry) == 0
