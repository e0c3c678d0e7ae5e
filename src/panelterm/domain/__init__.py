"""Domain models for panelterm.

This package contains the core data structures, enumerations, and wire
messages used throughout the system. All models use Pydantic v2 for
validation and serialization.
"""

from panelterm.domain.models import (
    BackendEvent,
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
    TerminalLine,
    parse_backend_event,
)

__all__ = [
    "BackendEvent",
    "ChannelClosed",
    "ChannelOpened",
    "CommandCompleted",
    "CommandFailed",
    "CommandOutput",
    "CommandStarted",
    "Connectivity",
    "ExecuteCommand",
    "LineKind",
    "QuickAction",
    "SessionEvent",
    "Target",
    "TerminalLine",
    "parse_backend_event",
]
