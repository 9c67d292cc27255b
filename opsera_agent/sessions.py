"""Session channel registry for the SSE transport.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

The SSE transport splits one conversation into two independent HTTP requests:
a long-lived ``GET /sse`` stream and short ``POST /message`` calls. The
registry correlates them by session id. Each channel owns the pair of memory
streams an MCP server session runs against: inbound client messages and
outbound server messages. It is the only shared mutable state in the server
and is owned by the application object, never by a module global.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from typing import Any, Dict, List, Optional

import anyio
import mcp.types as types
from mcp.shared.message import SessionMessage

from .errors import InternalTransportFailure, InvalidSession, SessionLimitExceeded

logger = logging.getLogger('opsera_agent.sessions')

# Returned by ``SessionChannel.receive`` once the channel is released.
END_OF_STREAM = object()


def _short(session_id: str) -> str:
    return session_id[:8]


class SessionChannel:
    """One open SSE connection: its id and the MCP session's message streams."""

    def __init__(self, session_id: str, queue_size: int = 100):
        self.session_id = session_id
        self.created_at = time.time()
        self.last_activity = self.created_at
        self.message_count = 0
        self.released = False
        self._inbound_writer, self.inbound = anyio.create_memory_object_stream(queue_size)
        self.outbound, self._outbound_reader = anyio.create_memory_object_stream(queue_size)

    def deliver(self, message: types.JSONRPCMessage) -> None:
        """Queue a client message for the session's server without waiting."""
        try:
            self._inbound_writer.send_nowait(SessionMessage(message))
        except anyio.WouldBlock:
            raise InternalTransportFailure('Session transport backlog full')
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            raise InternalTransportFailure('Session transport closed')

    async def receive(self):
        """Wait for the next outbound ``SessionMessage``, or ``END_OF_STREAM``."""
        try:
            return await self._outbound_reader.receive()
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            return END_OF_STREAM

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        # closing the writers wakes both readers with end-of-stream
        for stream in (self._inbound_writer, self.outbound, self.inbound, self._outbound_reader):
            stream.close()

    def touch(self) -> None:
        self.last_activity = time.time()
        self.message_count += 1

    def info(self) -> Dict[str, Any]:
        now = time.time()
        return {
            'id': _short(self.session_id) + '...',
            'age_seconds': round(now - self.created_at, 3),
            'idle_seconds': round(now - self.last_activity, 3),
            'messages': self.message_count,
        }


class SessionRegistry:
    def __init__(self, queue_size: int = 100, max_sessions: int = 0, idle_timeout: float = 0.0):
        self.queue_size = queue_size
        self.max_sessions = max_sessions
        self.idle_timeout = idle_timeout
        self._channels: Dict[str, SessionChannel] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> 'SessionRegistry':
        return cls(
            queue_size=settings.session_queue_size,
            max_sessions=settings.max_sessions,
            idle_timeout=settings.session_idle_timeout,
        )

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._channels

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._channels)

    def open(self) -> str:
        """Register a new channel and return its session id."""
        with self._lock:
            if self.max_sessions and len(self._channels) >= self.max_sessions:
                raise SessionLimitExceeded('Too many open sessions')
            session_id = uuid.uuid4().hex
            while session_id in self._channels:
                session_id = uuid.uuid4().hex
            self._channels[session_id] = SessionChannel(session_id, self.queue_size)
            total = len(self._channels)
        logger.info("Session opened: %s (total active: %d)", _short(session_id), total)
        return session_id

    def lookup(self, session_id: Optional[str]) -> Optional[SessionChannel]:
        if not session_id:
            return None
        return self._channels.get(session_id)

    def close(self, session_id: Optional[str]) -> bool:
        """Remove a channel and release its streams. Unknown ids are ignored."""
        if not session_id:
            return False
        with self._lock:
            channel = self._channels.pop(session_id, None)
            if channel is None:
                return False
            channel.release()
            total = len(self._channels)
        logger.info(
            "Session closed: %s (duration: %.1fs, messages: %d, remaining: %d)",
            _short(session_id), time.time() - channel.created_at, channel.message_count, total,
        )
        return True

    def dispatch(self, session_id: Optional[str], message: types.JSONRPCMessage) -> SessionChannel:
        """Forward a client message to the session's MCP server.

        Responses are produced by that server and travel on the session's own
        stream. Returns the channel the message was queued on.
        """
        with self._lock:
            channel = self._channels.get(session_id) if session_id else None
            if channel is None:
                raise InvalidSession()
            channel.deliver(message)
            channel.touch()
        return channel

    def reap_idle(self, now: Optional[float] = None) -> List[str]:
        """Close channels idle for longer than ``idle_timeout`` seconds."""
        if not self.idle_timeout:
            return []
        now = time.time() if now is None else now
        with self._lock:
            stale = [sid for sid, ch in self._channels.items() if now - ch.last_activity > self.idle_timeout]
        for sid in stale:
            logger.warning("Removing idle session: %s", _short(sid))
            self.close(sid)
        return stale

    def close_all(self) -> int:
        ids = self.session_ids()
        for sid in ids:
            self.close(sid)
        return len(ids)

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [ch.info() for ch in self._channels.values()]


async def run_reaper(registry: SessionRegistry, interval: float) -> None:
    """Background loop closing idle sessions until cancelled."""
    while True:
        await asyncio.sleep(interval)
        removed = registry.reap_idle()
        if removed:
            logger.info("Reaped %d idle session(s)", len(removed))


__all__ = ['SessionChannel', 'SessionRegistry', 'END_OF_STREAM', 'run_reaper']
