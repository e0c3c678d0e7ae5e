"""Command channel module for panelterm.

Carries execute requests to the execution backend and streams its
events back through pluggable backends.

Public API:
    CommandChannel -- Abstract base class
    WebSocketChannel -- WebSocket backend for a real execution service
    MemoryChannel -- In-process backend for tests
"""

from panelterm.channel.base import ChannelError, CommandChannel
from panelterm.channel.memory import MemoryChannel

__all__ = ["ChannelError", "CommandChannel", "MemoryChannel", "WebSocketChannel"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "WebSocketChannel":
        from panelterm.channel.websocket_backend import WebSocketChannel
        return WebSocketChannel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
