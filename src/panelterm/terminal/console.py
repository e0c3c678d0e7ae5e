"""The console host: the surface that displays one terminal at a time.

Owns the active session and replaces it whenever the operator selects a
different target. A session is never retargeted in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from panelterm.channel.base import CommandChannel
from panelterm.domain.models import QuickAction, Target
from panelterm.terminal.quick_actions import QuickActionCatalog
from panelterm.terminal.session import TerminalSession
from panelterm.terminal.transcript import LineListener

logger = logging.getLogger(__name__)

ChannelFactory = Callable[[Target], CommandChannel]
CredentialProvider = Callable[[], "str | None"]


class TerminalConsole:
    """Hosts the single active ``TerminalSession``."""

    def __init__(
        self,
        channel_factory: ChannelFactory,
        credential_provider: CredentialProvider,
        catalog: QuickActionCatalog | None = None,
        on_line: LineListener | None = None,
        on_input_ready: Callable[[], None] | None = None,
    ) -> None:
        self._channel_factory = channel_factory
        self._credential_provider = credential_provider
        self._catalog = catalog or QuickActionCatalog()
        self._on_line = on_line
        self._on_input_ready = on_input_ready
        self._session: TerminalSession | None = None

    @property
    def session(self) -> TerminalSession | None:
        return self._session

    @property
    def quick_actions(self) -> list[QuickAction]:
        if self._session is None:
            return []
        return self._catalog.for_kind(self._session.target.environment_kind)

    async def switch_target(self, target: Target) -> TerminalSession:
        """Tear down the current session and connect a fresh one to ``target``.

        The new session starts with an empty transcript and history.
        """
        if self._session is not None:
            logger.info("Switching target %s -> %s", self._session.target.id, target.id)
            await self._session.close()
            self._session = None
        session = TerminalSession(
            target,
            self._channel_factory(target),
            on_line=self._on_line,
            on_input_ready=self._on_input_ready,
        )
        self._session = session
        await session.connect(self._credential_provider())
        return session

    async def reconnect(self) -> bool:
        """Reconnect the current session after a transport failure."""
        if self._session is None:
            return False
        return await self._session.connect(self._credential_provider())

    async def submit(self, command: str) -> bool:
        if self._session is None:
            return False
        return await self._session.submit(command)

    async def run_quick_action(self, action_id: str) -> bool:
        """Run the quick action with ``action_id`` for the current target."""
        if self._session is None:
            return False
        for action in self.quick_actions:
            if action.id == action_id:
                return await self._session.run_quick_action(action)
        logger.debug("Unknown quick action %s", action_id)
        return False

    def history_previous(self) -> str | None:
        return self._session.history.previous() if self._session else None

    def history_next(self) -> str | None:
        return self._session.history.next() if self._session else None

    def clear(self) -> None:
        if self._session is not None:
            self._session.clear()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
