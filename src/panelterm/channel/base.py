"""Abstract base class for the command channel.

All channel backends must conform to this interface, enabling the
session to run over the WebSocket backend against a real execution
service, or over the in-memory backend in tests, without changing any
other code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from panelterm.domain.models import BackendEvent, ExecuteCommand

logger = logging.getLogger(__name__)


class CommandChannel(ABC):
    """Abstract interface for a persistent channel to one target.

    A channel carries ``execute_command`` requests to the backend and
    yields the backend's events in arrival order. One channel serves
    exactly one target and is never reused after ``close()``.

    Example usage::

        async with WebSocketChannel(url="ws://localhost:8080/ws/terminal") as ch:
            await ch.send(ExecuteCommand(command="ls", target_id="site-1"))
            async for event in ch.events():
                ...
    """

    credential: str | None = None

    @abstractmethod
    async def open(self, credential: str) -> None:
        """Perform the handshake, presenting ``credential`` as bearer token.

        Raises:
            ChannelError: If the handshake fails.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Tear the channel down. Safe to call more than once."""
        ...

    @abstractmethod
    async def send(self, request: ExecuteCommand) -> None:
        """Transmit one request.

        Raises:
            ChannelError: If the channel is not open or the write fails.
        """
        ...

    @abstractmethod
    def events(self) -> AsyncIterator[BackendEvent]:
        """Yield inbound events until the channel closes.

        The iterator ends normally on an orderly close and raises
        ChannelError when the transport drops.
        """
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    async def __aenter__(self) -> CommandChannel:
        """Async context manager entry -- opens with the preset credential."""
        if self.credential is None:
            raise ChannelError("No credential configured for channel")
        await self.open(self.credential)
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- closes the channel."""
        await self.close()


class ChannelError(Exception):
    """Raised when the channel cannot open, send or receive."""

    def __init__(self, message: str, target_id: str = "") -> None:
        super().__init__(message)
        self.target_id = target_id
