"""FastAPI stand-in for the execution backend.

Serves the terminal wire contract on ``/ws/terminal`` so the client can
be exercised without a tenant container. Commands run on the local
machine inside a workspace directory; there is no command allow-list.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, ValidationError

from panelterm.config.settings import EndpointConfig
from panelterm.domain.models import (
    BackendEvent,
    CommandCompleted,
    CommandFailed,
    CommandOutput,
    CommandStarted,
    ExecuteCommand,
)
from panelterm.endpoint.runner import CommandRunner, RunnerError

logger = logging.getLogger(__name__)

VIRTUAL_ROOT = "/workspace"

HELP_TEXT = (
    "\nAvailable Commands:\n"
    "  ls, cd, pwd, cat     - File navigation\n"
    "  git                  - Version control\n"
    "  npm, node, npx       - Node.js\n"
    "  php, composer        - PHP/Laravel\n"
    "  unzip, zip, tar      - Archive tools\n"
    "  clear                - Clear screen\n"
    '\nTip: Use "cd folder" to change directory persistently\n\n'
)


class EndpointStatus(BaseModel):
    status: str = "ok"
    workspace: str
    active_connections: int = 0


@dataclass
class ConnectionState:
    """Per-connection state: working directory and the in-flight command."""

    root: Path
    cwd: Path
    target_id: str | None = None
    task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def busy(self) -> bool:
        return self.task is not None and not self.task.done()

    def display_path(self, path: Path | None = None) -> str:
        rel = (path or self.cwd).relative_to(self.root)
        return VIRTUAL_ROOT if str(rel) == "." else f"{VIRTUAL_ROOT}/{rel.as_posix()}"

    def select_target(self, target_id: str) -> None:
        """Start in the target's own folder the first time it is addressed."""
        if self.target_id == target_id:
            return
        self.target_id = target_id
        candidate = (self.root / target_id).resolve()
        if candidate.is_relative_to(self.root) and candidate.is_dir():
            self.cwd = candidate
        else:
            self.cwd = self.root

    def resolve_cd(self, argument: str) -> Path:
        """Resolve a ``cd`` argument, confined to the workspace.

        Raises:
            PermissionError: If the path leaves the workspace.
            FileNotFoundError: If the directory does not exist.
        """
        arg = argument.strip()
        if arg in ("", "~"):
            return self.root
        if arg.startswith("/"):
            if arg != VIRTUAL_ROOT and not arg.startswith(VIRTUAL_ROOT + "/"):
                raise PermissionError(f"Access denied: Can only navigate within {VIRTUAL_ROOT}")
            candidate = self.root / arg[len(VIRTUAL_ROOT):].lstrip("/")
        else:
            candidate = self.cwd / arg
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            raise PermissionError(f"Access denied: Can only navigate within {VIRTUAL_ROOT}")
        if not resolved.is_dir():
            raise FileNotFoundError(f"Directory not found: {arg}")
        return resolved


def create_app(
    runner: CommandRunner | None = None,
    token: str | None = None,
    workspace: Path | str = Path("workspace"),
    shell_command: str = "/bin/bash",
    exec_timeout: float | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    With ``token`` set, clients must present exactly that bearer token;
    otherwise any non-empty bearer token is accepted.
    """
    root = Path(workspace).resolve()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        root.mkdir(parents=True, exist_ok=True)
        logger.info("Endpoint started (workspace=%s)", root)
        yield
        logger.info("Endpoint stopped")

    app = FastAPI(
        title="panelterm Endpoint",
        description="Local stand-in for the terminal execution backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.runner = runner or CommandRunner(shell_command=shell_command, timeout=exec_timeout)
    app.state.connections = 0

    @app.get("/health")
    async def health_check() -> EndpointStatus:
        return EndpointStatus(
            workspace=str(root),
            active_connections=app.state.connections,
        )

    @app.websocket("/ws/terminal")
    async def terminal_socket(websocket: WebSocket) -> None:
        if not _authorized(websocket.headers.get("authorization", ""), token):
            logger.warning("Rejected terminal connection: bad or missing bearer token")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await websocket.accept()
        root.mkdir(parents=True, exist_ok=True)
        state = ConnectionState(root=root, cwd=root)
        app.state.connections += 1
        logger.info("Client connected (%d active)", app.state.connections)
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    request = ExecuteCommand.model_validate_json(raw)
                except ValidationError as e:
                    logger.warning("Ignoring malformed request: %s", e)
                    continue
                if state.busy:
                    logger.warning("Ignoring command for %s: one is already running", request.target_id)
                    continue
                state.task = asyncio.create_task(
                    _handle_command(websocket, state, request, app.state.runner)
                )
        except WebSocketDisconnect:
            logger.info("Client disconnected")
        finally:
            app.state.connections -= 1
            if state.busy:
                state.task.cancel()
                try:
                    await state.task
                except asyncio.CancelledError:
                    pass

    return app


def _authorized(header: str, token: str | None) -> bool:
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return False
    return token is None or value.strip() == token


async def _send(websocket: WebSocket, event: BackendEvent) -> None:
    await websocket.send_text(event.model_dump_json(by_alias=True))


async def _handle_command(
    websocket: WebSocket,
    state: ConnectionState,
    request: ExecuteCommand,
    runner: CommandRunner,
) -> None:
    """Run one request and emit exactly one terminal event for it."""
    state.select_target(request.target_id)
    command = request.command.strip()
    try:
        if not command:
            await _send(websocket, CommandFailed(error="Empty command"))
            return

        if command == "help":
            await _send(websocket, CommandOutput(data=HELP_TEXT, type="stdout"))
            await _send(websocket, CommandCompleted(exit_code=0))
            return

        if command == "clear":
            await _send(websocket, CommandCompleted(exit_code=0))
            return

        if command == "pwd":
            await _send(websocket, CommandOutput(data=state.display_path() + "\n", type="stdout"))
            await _send(websocket, CommandCompleted(exit_code=0))
            return

        if command == "cd" or command.startswith("cd "):
            try:
                state.cwd = state.resolve_cd(command[2:])
            except (PermissionError, FileNotFoundError) as e:
                await _send(websocket, CommandFailed(error=str(e)))
                return
            await _send(websocket, CommandOutput(data=state.display_path() + "\n", type="stdout"))
            await _send(websocket, CommandCompleted(exit_code=0))
            return

        await _send(websocket, CommandStarted(command=command, type="shell"))
        had_output = False

        async def forward(source: str, data: str) -> None:
            nonlocal had_output
            had_output = True
            await _send(websocket, CommandOutput(data=data, type=source))

        try:
            exit_code = await runner.run(command, state.cwd, forward)
        except RunnerError as e:
            await _send(websocket, CommandFailed(error=f"Failed to execute command: {e}"))
            return

        if exit_code == 0:
            await _send(websocket, CommandCompleted(exit_code=0))
            return
        if not had_output:
            await _send(websocket, CommandOutput(
                data=f"Command finished with no output (exit code: {exit_code})\n",
                type="stderr",
            ))
        await _send(websocket, CommandFailed(
            error=f"Command exited with code {exit_code}", exit_code=exit_code,
        ))
    except WebSocketDisconnect:
        logger.info("Client went away while running a command")


def main(config: EndpointConfig | None = None, token: str | None = None) -> None:
    """Serve the endpoint with uvicorn using the given endpoint settings."""
    if config is None:
        config = EndpointConfig()
    app = create_app(
        token=token,
        workspace=config.workspace,
        shell_command=config.shell_command,
        exec_timeout=config.exec_timeout,
    )
    logger.info("Serving terminal endpoint on %s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)
