"""Shared test fixtures for the panelterm test suite.

Provides common fixtures used across unit tests: sample targets, an
in-memory channel, and sessions wired to it.
"""

from __future__ import annotations

import asyncio

import pytest

from panelterm.channel.memory import MemoryChannel
from panelterm.domain.models import QuickAction, Target
from panelterm.terminal.session import TerminalSession


async def settle(rounds: int = 5) -> None:
    """Let background reader tasks process queued channel events."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Target Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def laravel_target() -> Target:
    """A Laravel site target."""
    return Target(id="site-1", name="shop", environment_kind="laravel")


@pytest.fixture
def node_target() -> Target:
    """A Node.js site target."""
    return Target(id="site-2", name="dashboard", environment_kind="node")


@pytest.fixture
def sample_quick_action() -> QuickAction:
    return QuickAction(
        id="migrate",
        label="Migrate",
        command="export PATH=/usr/local/bin:$PATH && /usr/local/bin/php artisan migrate --force",
        description="Run migrations",
    )


# ---------------------------------------------------------------------------
# Channel / Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_channel() -> MemoryChannel:
    """An in-memory channel that accepts the token 'secret'."""
    return MemoryChannel(accepted_credentials={"secret"})


@pytest.fixture
def session(laravel_target: Target, memory_channel: MemoryChannel) -> TerminalSession:
    """A disconnected session on the Laravel target."""
    return TerminalSession(laravel_target, memory_channel)
