"""Command history with up/down browsing."""

from __future__ import annotations

NOT_BROWSING = -1


class CommandHistory:
    """Append-only list of submitted raw commands plus a browse cursor.

    The cursor is ``NOT_BROWSING`` (-1) until the operator starts
    browsing; otherwise it indexes the entries from oldest (0) to
    newest (len - 1).
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._cursor = NOT_BROWSING

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_browsing(self) -> bool:
        return self._cursor != NOT_BROWSING

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, raw: str) -> None:
        """Append a transmitted command and stop browsing."""
        self._entries.append(raw)
        self._cursor = NOT_BROWSING

    def previous(self) -> str | None:
        """Step toward older entries, clamped at the oldest one."""
        if not self._entries:
            return None
        if self._cursor == NOT_BROWSING:
            self._cursor = len(self._entries) - 1
        else:
            self._cursor = max(0, self._cursor - 1)
        return self._entries[self._cursor]

    def next(self) -> str | None:
        """Step toward newer entries.

        Moving past the newest entry stops browsing and returns ``""`` so
        the caller clears its input. Returns None when not browsing.
        """
        if self._cursor == NOT_BROWSING:
            return None
        new_cursor = self._cursor + 1
        if new_cursor >= len(self._entries):
            self._cursor = NOT_BROWSING
            return ""
        self._cursor = new_cursor
        return self._entries[new_cursor]
