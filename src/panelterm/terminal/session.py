"""The terminal session state machine.

A session owns one channel to one target, together with the transcript
and command history shown for it. Every change to connectivity, the
executing flag, the transcript or the history goes through the
transitions in this module.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from panelterm.channel.base import ChannelError, CommandChannel
from panelterm.domain.models import (
    ChannelClosed,
    ChannelOpened,
    CommandCompleted,
    CommandFailed,
    CommandOutput,
    CommandStarted,
    Connectivity,
    ExecuteCommand,
    LineKind,
    QuickAction,
    SessionEvent,
    Target,
)
from panelterm.terminal.formatter import format_command
from panelterm.terminal.history import CommandHistory
from panelterm.terminal.normalizer import normalize
from panelterm.terminal.transcript import LineListener, Transcript

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_MESSAGE = "Error: No authentication token found. Please login again."


class TerminalSession:
    """One logical connection to one execution target.

    States: DISCONNECTED -> CONNECTING -> CONNECTED, with an orthogonal
    ``executing`` flag that is only ever true while CONNECTED. At most
    one command is in flight; a submission made while executing is
    dropped without a transcript line or a transmission.

    Inbound traffic, both backend events and transport events, is fed
    through the single ``handle_event()`` transition function in arrival
    order.
    """

    def __init__(
        self,
        target: Target,
        channel: CommandChannel,
        *,
        formatter: Callable[[str], str] = format_command,
        on_line: LineListener | None = None,
        on_input_ready: Callable[[], None] | None = None,
    ) -> None:
        self._target = target
        self._channel = channel
        self._formatter = formatter
        self._on_input_ready = on_input_ready
        self._connectivity = Connectivity.DISCONNECTED
        self._executing = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._reader: asyncio.Task[None] | None = None
        self._closed = False
        self.transcript = Transcript(listener=on_line)
        self.history = CommandHistory()

    @property
    def target(self) -> Target:
        return self._target

    @property
    def connectivity(self) -> Connectivity:
        return self._connectivity

    @property
    def executing(self) -> bool:
        return self._executing

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def can_submit(self) -> bool:
        return self._connectivity is Connectivity.CONNECTED and not self._executing

    # ------------------------------------------------------------------
    # Operator-driven transitions
    # ------------------------------------------------------------------

    async def connect(self, credential: str | None) -> bool:
        """Open the channel and start consuming its events.

        Returns True once CONNECTED. Without a credential nothing is
        attempted: one error line is appended and the session stays
        DISCONNECTED.
        """
        if self._closed:
            raise ChannelError("Session has been closed", target_id=self._target.id)
        if self._connectivity is not Connectivity.DISCONNECTED:
            return self._connectivity is Connectivity.CONNECTED

        if not credential:
            logger.warning("No credential available for target %s", self._target.id)
            self.transcript.append(MISSING_CREDENTIAL_MESSAGE, LineKind.ERROR)
            return False

        await self._stop_reader()
        self._connectivity = Connectivity.CONNECTING
        logger.info("Connecting to target %s", self._target.id)
        try:
            await self._channel.open(credential)
        except ChannelError as e:
            self.handle_event(ChannelClosed(reason=str(e)))
            return False

        self.handle_event(ChannelOpened())
        self._reader = asyncio.create_task(
            self._read_events(), name=f"panelterm-reader-{self._target.id}"
        )
        return True

    async def submit(self, command: str) -> bool:
        """Send ``command`` to the backend if the session can take it.

        Returns True if the command was transmitted. Blank input, or a
        session that is not connected or already executing, is ignored.
        """
        raw = command.strip()
        if not raw or not self.can_submit:
            logger.debug(
                "Ignoring submission (connectivity=%s, executing=%s, blank=%s)",
                self._connectivity.value, self._executing, not raw,
            )
            return False

        self.transcript.append(f"$ {self._formatter(raw)}", LineKind.COMMAND)
        self._set_executing(True)
        try:
            await self._channel.send(ExecuteCommand(command=raw, target_id=self._target.id))
        except ChannelError as e:
            self.handle_event(ChannelClosed(reason=str(e)))
            await self._stop_reader()
            await self._channel.close()
            return False

        self.history.record(raw)
        logger.debug("Submitted command to %s", self._target.id)
        return True

    async def run_quick_action(self, action: QuickAction) -> bool:
        """Submit a quick action's raw command through the same gate as typed input."""
        return await self.submit(action.command)

    def clear(self) -> None:
        """Empty the transcript, leaving a single notice line."""
        self.transcript.reset()
        self.transcript.append("Terminal cleared", LineKind.INFO)

    async def wait_for_input(self) -> None:
        """Wait until no command is in flight."""
        await self._idle.wait()

    async def close(self) -> None:
        """Tear down the channel. The session cannot be reconnected afterwards."""
        self._closed = True
        await self._stop_reader()
        await self._channel.close()
        self._connectivity = Connectivity.DISCONNECTED
        self._set_executing(False)
        logger.info("Session for target %s closed", self._target.id)

    # ------------------------------------------------------------------
    # Event-driven transitions
    # ------------------------------------------------------------------

    def handle_event(self, event: SessionEvent) -> None:
        """Apply one inbound event to the session."""
        if isinstance(event, ChannelOpened):
            self._on_opened()
        elif isinstance(event, ChannelClosed):
            self._on_closed(event.reason)
        elif self._connectivity is not Connectivity.CONNECTED:
            logger.debug("Dropping %s received while %s", event.event, self._connectivity.value)
        elif isinstance(event, CommandStarted):
            self._set_executing(True)
            self.transcript.append(
                f"Executing [{event.type}]: {self._formatter(event.command)}", LineKind.INFO
            )
        elif isinstance(event, CommandOutput):
            for text, kind in normalize(event.data, event.type):
                self.transcript.append(text, kind)
        elif isinstance(event, CommandCompleted):
            self.transcript.append("✓ Command completed successfully", LineKind.SUCCESS)
            self._finish_command()
        elif isinstance(event, CommandFailed):
            self.transcript.append(f"✗ Error: {event.error}", LineKind.ERROR)
            self._finish_command()
        else:
            raise TypeError(f"Unknown session event: {event!r}")

    def _on_opened(self) -> None:
        if self._connectivity is not Connectivity.CONNECTING:
            logger.debug("Ignoring connected event while %s", self._connectivity.value)
            return
        self._connectivity = Connectivity.CONNECTED
        self._set_executing(False)
        target = self._target
        self.transcript.append("Connected to terminal server", LineKind.SUCCESS)
        self.transcript.append(f"Target instance: {target.name} ({target.id})", LineKind.SUCCESS)
        self.transcript.append(f"Environment detected: {target.environment_kind}", LineKind.SUCCESS)
        logger.info("Connected to target %s", target.id)
        self._notify_input_ready()

    def _on_closed(self, reason: str) -> None:
        previous = self._connectivity
        if previous is Connectivity.DISCONNECTED:
            return
        self._connectivity = Connectivity.DISCONNECTED
        was_executing = self._executing
        self._set_executing(False)
        if previous is Connectivity.CONNECTING:
            message = "Connection failed"
        else:
            message = "Disconnected from server"
        self.transcript.append(f"{message}: {reason}" if reason else message, LineKind.ERROR)
        logger.warning(
            "%s for target %s (executing=%s): %s", message, self._target.id, was_executing, reason,
        )
        self._notify_input_ready()

    def _finish_command(self) -> None:
        self._set_executing(False)
        self._notify_input_ready()

    def _set_executing(self, value: bool) -> None:
        self._executing = value
        if value:
            self._idle.clear()
        else:
            self._idle.set()

    def _notify_input_ready(self) -> None:
        if self._on_input_ready is not None:
            self._on_input_ready()

    async def _stop_reader(self) -> None:
        """Cancel and reap the reader of the previous connection, if any."""
        reader, self._reader = self._reader, None
        if reader is None or reader is asyncio.current_task():
            return
        reader.cancel()
        try:
            await reader
        except asyncio.CancelledError:
            pass

    async def _read_events(self) -> None:
        """Feed channel events to ``handle_event`` until the channel ends."""
        reason = "connection closed by server"
        try:
            async for event in self._channel.events():
                self.handle_event(event)
        except ChannelError as e:
            reason = str(e)
        # Only the reader of the current connection may report its end.
        if not self._closed and self._reader is asyncio.current_task():
            self.handle_event(ChannelClosed(reason=reason))
