"""Tests for domain models and wire parsing."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from panelterm.domain.models import (
    CommandCompleted,
    CommandFailed,
    CommandOutput,
    CommandStarted,
    ExecuteCommand,
    Target,
    parse_backend_event,
)


class TestParseBackendEvent:
    def test_started(self) -> None:
        event = parse_backend_event('{"event": "command_started", "command": "ls", "type": "docker"}')
        assert event == CommandStarted(command="ls", type="docker")

    def test_output_defaults_to_stdout(self) -> None:
        event = parse_backend_event('{"event": "command_output", "data": "x"}')
        assert isinstance(event, CommandOutput)
        assert event.type == "stdout"

    def test_output_rejects_unknown_stream(self) -> None:
        with pytest.raises(ValidationError):
            parse_backend_event('{"event": "command_output", "data": "x", "type": "stdlog"}')

    def test_completed_with_exit_code(self) -> None:
        event = parse_backend_event('{"event": "command_completed", "exitCode": 0}')
        assert event == CommandCompleted(exit_code=0)

    def test_error(self) -> None:
        event = parse_backend_event(b'{"event": "command_error", "error": "boom", "details": "ignored"}')
        assert isinstance(event, CommandFailed)
        assert event.error == "boom"

    def test_unknown_event(self) -> None:
        with pytest.raises(ValidationError):
            parse_backend_event('{"event": "terminal:clear"}')


class TestExecuteCommand:
    def test_wire_form(self) -> None:
        request = ExecuteCommand(command="  ls ", target_id="7")
        assert json.loads(request.to_wire()) == {
            "event": "execute_command",
            "command": "  ls ",
            "targetId": "7",
        }

    def test_accepts_wire_alias(self) -> None:
        request = ExecuteCommand.model_validate({"command": "ls", "targetId": "site-1"})
        assert request.target_id == "site-1"


class TestTarget:
    def test_framework_alias_and_numeric_id(self) -> None:
        target = Target.model_validate({"id": 12, "name": "blog", "framework": "laravel"})
        assert target.id == "12"
        assert target.environment_kind == "laravel"

    def test_default_environment(self) -> None:
        assert Target(id="x", name="x").environment_kind == "static"
