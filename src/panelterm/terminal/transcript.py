"""Append-only transcript of classified terminal lines."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from datetime import datetime

from panelterm.domain.models import LineKind, TerminalLine

logger = logging.getLogger(__name__)

LineListener = Callable[[TerminalLine], None]


class Transcript:
    """Ordered log of the lines shown in the terminal output pane.

    Lines are never reordered, edited or removed individually; the only
    removal is a full ``reset()``. Line ids keep increasing across resets.
    """

    def __init__(self, listener: LineListener | None = None) -> None:
        self._lines: list[TerminalLine] = []
        self._ids = itertools.count(1)
        self._listener = listener

    @property
    def lines(self) -> list[TerminalLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[TerminalLine]:
        return iter(list(self._lines))

    def append(self, content: str, kind: LineKind) -> TerminalLine:
        """Create a line with a fresh id and timestamp and append it."""
        line = TerminalLine(
            id=next(self._ids),
            content=content,
            kind=kind,
            timestamp=datetime.now(),
        )
        self._lines.append(line)
        if self._listener is not None:
            self._listener(line)
        return line

    def reset(self) -> None:
        """Drop every line at once."""
        logger.debug("Transcript reset (%d lines dropped)", len(self._lines))
        self._lines = []

    def contents(self, kind: LineKind | None = None) -> list[str]:
        """Line contents in order, optionally filtered by kind."""
        return [line.content for line in self._lines if kind is None or line.kind == kind]
