"""Terminal session module for panelterm.

Implements the operator-side terminal: output normalization, command
display formatting, history, the transcript, and the session state
machine that ties them to a command channel.
"""

from panelterm.terminal.console import TerminalConsole
from panelterm.terminal.formatter import DISPLAY_RULES, DisplayRule, format_command
from panelterm.terminal.history import NOT_BROWSING, CommandHistory
from panelterm.terminal.normalizer import normalize, normalize_text
from panelterm.terminal.quick_actions import QuickActionCatalog
from panelterm.terminal.session import TerminalSession
from panelterm.terminal.transcript import Transcript

__all__ = [
    "DISPLAY_RULES",
    "NOT_BROWSING",
    "CommandHistory",
    "DisplayRule",
    "QuickActionCatalog",
    "TerminalConsole",
    "TerminalSession",
    "Transcript",
    "format_command",
    "normalize",
    "normalize_text",
]
