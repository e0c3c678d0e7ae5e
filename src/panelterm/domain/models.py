"""Core domain models for the panelterm system.

These models represent the data flowing through a terminal session:
targets and their quick actions, transcript lines shown to the operator,
and the wire messages exchanged with the execution backend.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Connectivity(str, enum.Enum):
    """Connection status of a terminal session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class LineKind(str, enum.Enum):
    """Classification of a transcript line."""

    COMMAND = "command"  # Local echo of a submitted command
    STDOUT = "stdout"
    STDERR = "stderr"
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class Target(BaseModel):
    """A tenant environment a terminal session can attach to."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(description="Target identifier sent as targetId on the wire")
    name: str = Field(description="Human-readable target name")
    environment_kind: str = Field(
        default="static",
        alias="framework",
        description="Application stack of the target, selects quick actions",
    )


class QuickAction(BaseModel):
    """A predefined raw command offered as a one-click shortcut."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    command: str = Field(description="Raw command, transmitted unaltered")
    description: str = ""


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TerminalLine(BaseModel):
    """A single classified line in the terminal transcript."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, description="Monotonic line identifier")
    content: str
    kind: LineKind
    timestamp: datetime = Field(default_factory=datetime.now)


# ---------------------------------------------------------------------------
# Wire messages (client -> backend)
# ---------------------------------------------------------------------------


class ExecuteCommand(BaseModel):
    """Request to run exactly one command on the named target."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["execute_command"] = "execute_command"
    command: str
    target_id: str = Field(alias="targetId")

    def to_wire(self) -> str:
        return self.model_dump_json(by_alias=True)


# ---------------------------------------------------------------------------
# Wire events (backend -> client, discriminated union)
# ---------------------------------------------------------------------------


class CommandStarted(BaseModel):
    """The backend began running a command."""

    model_config = ConfigDict(frozen=True)

    event: Literal["command_started"] = "command_started"
    command: str
    type: str = "command"


class CommandOutput(BaseModel):
    """A raw output chunk; may carry several lines."""

    model_config = ConfigDict(frozen=True)

    event: Literal["command_output"] = "command_output"
    data: str
    type: Literal["stdout", "stderr"] = "stdout"


class CommandCompleted(BaseModel):
    """Terminal success event for the in-flight command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["command_completed"] = "command_completed"
    exit_code: int | None = Field(default=None, alias="exitCode")


class CommandFailed(BaseModel):
    """Terminal failure event for the in-flight command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: Literal["command_error"] = "command_error"
    error: str
    exit_code: int | None = Field(default=None, alias="exitCode")


BackendEvent = Annotated[
    Union[CommandStarted, CommandOutput, CommandCompleted, CommandFailed],
    Field(discriminator="event"),
]

backend_event_adapter: TypeAdapter[BackendEvent] = TypeAdapter(BackendEvent)


# ---------------------------------------------------------------------------
# Transport events (produced locally by the channel)
# ---------------------------------------------------------------------------


class ChannelOpened(BaseModel):
    """The handshake with the backend succeeded."""

    model_config = ConfigDict(frozen=True)

    event: Literal["connected"] = "connected"


class ChannelClosed(BaseModel):
    """The channel dropped or failed to open."""

    model_config = ConfigDict(frozen=True)

    event: Literal["disconnected"] = "disconnected"
    reason: str = ""


SessionEvent = Union[
    ChannelOpened,
    ChannelClosed,
    CommandStarted,
    CommandOutput,
    CommandCompleted,
    CommandFailed,
]


def parse_backend_event(raw: str | bytes) -> BackendEvent:
    """Validate one JSON frame received from the backend.

    Raises:
        pydantic.ValidationError: If the frame is not a known event.
    """
    return backend_event_adapter.validate_json(raw)
