"""WebSocket command channel backend.

Carries the wire contract as JSON text frames over a WebSocket to the
execution backend.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from panelterm.channel.base import ChannelError, CommandChannel
from panelterm.domain.models import BackendEvent, ExecuteCommand, parse_backend_event

logger = logging.getLogger(__name__)


class WebSocketChannel(CommandChannel):
    """Sends commands to the execution backend over a WebSocket."""

    def __init__(
        self,
        url: str = "ws://localhost:8080/ws/terminal",
        open_timeout: float = 10.0,
        close_timeout: float = 5.0,
        max_message_size: int = 1024 * 1024,
        credential: str | None = None,
    ) -> None:
        self._url = url
        self._open_timeout = open_timeout
        self._close_timeout = close_timeout
        self._max_message_size = max_message_size
        self._ws: ClientConnection | None = None
        self.credential = credential

    @property
    def is_open(self) -> bool:
        return self._ws is not None

    async def open(self, credential: str) -> None:
        """Connect and authenticate with a bearer token header.

        A socket left over from an earlier connection is closed first.
        """
        await self.close()
        try:
            self._ws = await connect(
                self._url,
                additional_headers={"Authorization": f"Bearer {credential}"},
                open_timeout=self._open_timeout,
                close_timeout=self._close_timeout,
                max_size=self._max_message_size,
            )
        except (WebSocketException, OSError, TimeoutError) as e:
            self._ws = None
            raise ChannelError(f"Failed to connect to {self._url}: {e}") from e
        logger.info("Connected to terminal backend at %s", self._url)

    async def close(self) -> None:
        """Close the WebSocket."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()
            logger.info("Disconnected from terminal backend")

    async def send(self, request: ExecuteCommand) -> None:
        """Send a request as a JSON text frame."""
        if self._ws is None:
            raise ChannelError("Channel is not open", target_id=request.target_id)
        try:
            await self._ws.send(request.to_wire())
        except ConnectionClosed as e:
            raise ChannelError(f"Connection lost while sending: {e}", target_id=request.target_id) from e
        logger.debug("Sent execute_command for %s", request.target_id)

    async def events(self) -> AsyncIterator[BackendEvent]:
        """Yield validated events; malformed frames are logged and skipped."""
        if self._ws is None:
            raise ChannelError("Channel is not open")
        ws = self._ws
        try:
            async for message in ws:
                try:
                    event = parse_backend_event(message)
                except ValidationError as e:
                    logger.warning("Ignoring invalid frame %r: %s", str(message)[:100], e)
                    continue
                logger.debug("Received %s", event.event)
                yield event
        except ConnectionClosedOK:
            return
        except ConnectionClosed as e:
            raise ChannelError(f"Connection dropped: {e}") from e
