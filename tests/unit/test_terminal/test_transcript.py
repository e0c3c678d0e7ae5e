"""Tests for the transcript store."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from panelterm.domain.models import LineKind, TerminalLine
from panelterm.terminal.transcript import Transcript


class TestTranscript:
    def test_append_order_and_ids(self) -> None:
        t = Transcript()
        first = t.append("one", LineKind.INFO)
        second = t.append("two", LineKind.STDOUT)
        assert t.contents() == ["one", "two"]
        assert second.id > first.id

    def test_lines_are_immutable(self) -> None:
        line = Transcript().append("x", LineKind.INFO)
        with pytest.raises(ValidationError):
            line.content = "y"  # type: ignore[misc]

    def test_reset_clears_everything(self) -> None:
        t = Transcript()
        old = t.append("old", LineKind.INFO)
        t.reset()
        assert len(t) == 0
        new = t.append("new", LineKind.INFO)
        assert new.id > old.id
        assert t.contents() == ["new"]

    def test_lines_returns_copy(self) -> None:
        t = Transcript()
        t.append("x", LineKind.INFO)
        t.lines.clear()
        assert len(t) == 1

    def test_filter_by_kind(self) -> None:
        t = Transcript()
        t.append("out", LineKind.STDOUT)
        t.append("err", LineKind.STDERR)
        assert t.contents(LineKind.STDERR) == ["err"]

    def test_listener_sees_each_line(self) -> None:
        seen: list[TerminalLine] = []
        t = Transcript(listener=seen.append)
        t.append("a", LineKind.INFO)
        t.append("b", LineKind.ERROR)
        assert [line.content for line in seen] == ["a", "b"]

    def test_iteration_is_a_snapshot(self) -> None:
        t = Transcript()
        t.append("a", LineKind.INFO)
        for line in t:
            t.append(line.content + "!", LineKind.INFO)
        assert [line.content for line in t] == ["a", "a!"]
