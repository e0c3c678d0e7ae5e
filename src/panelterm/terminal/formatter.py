"""Display formatting for submitted commands.

Quick actions and panel-generated commands often carry a PATH preamble
and absolute binary paths. The transcript echoes a shorter form; the
command sent to the backend is never touched.
"""

from __future__ import annotations

import re
from typing import NamedTuple


class DisplayRule(NamedTuple):
    """A single (pattern, replacement) rewrite applied to the display form."""

    name: str
    pattern: re.Pattern[str]
    replacement: str


DISPLAY_RULES: tuple[DisplayRule, ...] = (
    DisplayRule(
        "export-preamble",
        re.compile(r"""^\s*export\s+[A-Za-z_]\w*=(?:"[^"]*"|'[^']*'|\S*)\s*(?:&&|;)\s*"""),
        "",
    ),
    DisplayRule(
        "interpreter-path",
        re.compile(r"(?:/[\w.+-]+)*/php(?:\d+(?:\.\d+)*)?\s+"),
        "php ",
    ),
    DisplayRule(
        "package-manager-path",
        re.compile(r"(?:/[\w.+-]+)*/(composer|npm|npx|yarn|pnpm)\s+"),
        r"\1 ",
    ),
    DisplayRule(
        "framework-cli-path",
        re.compile(r"\bphp\s+(?:/[\w.+-]+)+/artisan\b"),
        "php artisan",
    ),
)


def format_command(raw: str, rules: tuple[DisplayRule, ...] = DISPLAY_RULES) -> str:
    """Return the operator-facing display form of ``raw``.

    Each rule is applied to the output of the previous one. Input that no
    rule matches is returned unchanged.
    """
    display = raw
    for rule in rules:
        display = rule.pattern.sub(rule.replacement, display)
    return display
