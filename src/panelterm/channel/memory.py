"""In-process command channel.

Stands in for a real backend: requests are collected in ``sent`` and
events are fed with ``push()``. Used by tests and by demos that drive a
session without a network.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from panelterm.channel.base import ChannelError, CommandChannel
from panelterm.domain.models import BackendEvent, ExecuteCommand

logger = logging.getLogger(__name__)

_CLOSED = object()


class MemoryChannel(CommandChannel):
    """Queue-backed channel with scripted events."""

    def __init__(self, accepted_credentials: set[str] | None = None) -> None:
        self._accepted = accepted_credentials
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._open = False
        self._drop_reason: str | None = None
        self.sent: list[ExecuteCommand] = []
        self.open_attempts = 0

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self, credential: str) -> None:
        self.open_attempts += 1
        if self._accepted is not None and credential not in self._accepted:
            raise ChannelError("Authentication rejected")
        # Each connection gets its own event stream.
        self._queue = asyncio.Queue()
        self._open = True
        self._drop_reason = None

    async def close(self) -> None:
        if self._open:
            self._open = False
            self._queue.put_nowait(_CLOSED)

    async def send(self, request: ExecuteCommand) -> None:
        if not self._open:
            raise ChannelError("Channel is not open", target_id=request.target_id)
        self.sent.append(request)

    def push(self, *events: BackendEvent) -> None:
        """Queue events as if the backend had sent them."""
        for event in events:
            self._queue.put_nowait(event)

    def drop(self, reason: str = "connection reset") -> None:
        """Simulate the transport going away."""
        self._open = False
        self._drop_reason = reason
        self._queue.put_nowait(_CLOSED)

    async def events(self) -> AsyncIterator[BackendEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                if self._drop_reason is not None:
                    raise ChannelError(self._drop_reason)
                return
            yield item  # type: ignore[misc]
