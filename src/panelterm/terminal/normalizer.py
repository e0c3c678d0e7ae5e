"""Output normalization for streamed command output.

Raw chunks from the backend carry colors, cursor movement and window
title sequences meant for a real terminal. The transcript shows plain
lines, so every chunk is stripped and split before display.
"""

from __future__ import annotations

import re
from typing import Literal

from panelterm.domain.models import LineKind

OutputSource = Literal["stdout", "stderr"]

# Applied in order. Control characters go last so no ESC survives.
_ESCAPE_PATTERNS = (
    # CSI sequences (e.g., colors, cursor movement), 7-bit and 8-bit forms
    re.compile(r"(?:\x1b\[|\x9b)[0-?]*[ -/]*[@-~]"),
    # OSC sequences (e.g., window title)
    re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"),
    # Character set selection
    re.compile(r"\x1b[()#][A-Za-z0-9]"),
    # Keypad mode, save/restore cursor and other two-byte escapes
    re.compile(r"\x1b[=>78cDEHM]"),
)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\x80-\x9f]")


def normalize_text(raw: str) -> str:
    """Strip escape sequences and control characters from ``raw``.

    Newlines and tabs are kept; CRLF and bare CR become LF. The result
    contains no ESC byte, so normalizing it again is a no-op.
    """
    text = raw
    for pattern in _ESCAPE_PATTERNS:
        text = pattern.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", text)


def normalize(raw: str, source: OutputSource = "stdout") -> list[tuple[str, LineKind]]:
    """Convert one output chunk into display lines tagged with ``source``.

    Empty segments are dropped, so ``"a\\n\\nb"`` yields exactly two lines.
    """
    kind = LineKind(source)
    return [(line, kind) for line in normalize_text(raw).split("\n") if line]
