"""Tests for the in-memory channel."""

from __future__ import annotations

import pytest

from panelterm.channel.base import ChannelError
from panelterm.channel.memory import MemoryChannel
from panelterm.domain.models import CommandCompleted, CommandOutput, ExecuteCommand


class TestMemoryChannel:
    @pytest.mark.asyncio
    async def test_rejects_unknown_credential(self) -> None:
        ch = MemoryChannel(accepted_credentials={"secret"})
        with pytest.raises(ChannelError):
            await ch.open("nope")
        assert not ch.is_open
        assert ch.open_attempts == 1

    @pytest.mark.asyncio
    async def test_send_requires_open(self) -> None:
        ch = MemoryChannel()
        with pytest.raises(ChannelError):
            await ch.send(ExecuteCommand(command="ls", target_id="t"))

    @pytest.mark.asyncio
    async def test_events_end_on_close(self) -> None:
        ch = MemoryChannel()
        await ch.open("any")
        ch.push(CommandOutput(data="x"), CommandCompleted())
        await ch.close()
        events = [e async for e in ch.events()]
        assert events == [CommandOutput(data="x"), CommandCompleted()]

    @pytest.mark.asyncio
    async def test_reopen_starts_fresh_stream(self) -> None:
        ch = MemoryChannel()
        await ch.open("any")
        ch.drop("reset by peer")
        await ch.open("any")
        ch.push(CommandCompleted())
        await ch.close()
        assert [e async for e in ch.events()] == [CommandCompleted()]

    @pytest.mark.asyncio
    async def test_drop_raises(self) -> None:
        ch = MemoryChannel()
        await ch.open("any")
        ch.drop("reset by peer")
        with pytest.raises(ChannelError, match="reset by peer"):
            async for _ in ch.events():
                pass
