"""Command runner for the local stand-in backend.

Runs one shell command at a time as a subprocess inside the workspace
and streams its stdout and stderr as they arrive.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
from collections.abc import Awaitable, Callable
from pathlib import Path

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str, str], Awaitable[None]]

READ_CHUNK_SIZE = 4096
DEFAULT_PATH = "/usr/local/bin:/usr/bin:/bin:/usr/local/sbin:/usr/sbin:/sbin"


class CommandRunner:
    """Runs shell commands via ``<shell> -c`` and streams their output."""

    def __init__(
        self,
        shell_command: str = "/bin/bash",
        timeout: float | None = None,
    ) -> None:
        self._shell_command = shell_command
        self._timeout = timeout

    async def run(self, command: str, cwd: Path, on_output: OutputCallback) -> int:
        """Run ``command`` in ``cwd`` and return its exit code.

        ``on_output(source, data)`` is awaited for every chunk, with
        ``source`` being ``"stdout"`` or ``"stderr"``. Cancelling the
        caller kills the process.

        Raises:
            RunnerError: If the process cannot be started or times out.
        """
        env = os.environ.copy()
        env["TERM"] = "xterm-256color"
        env.setdefault("PATH", DEFAULT_PATH)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._shell_command, "-c", command,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            raise RunnerError(f"Failed to start {self._shell_command}: {e}") from e
        logger.info("Started command (pid=%d) in %s", proc.pid, cwd)

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _pump(proc.stdout, "stdout", on_output),
                    _pump(proc.stderr, "stderr", on_output),
                    proc.wait(),
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            await _kill(proc)
            raise RunnerError(f"Command timed out after {self._timeout:g}s") from e
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        logger.info("Command (pid=%d) exited with code %s", proc.pid, proc.returncode)
        return proc.returncode if proc.returncode is not None else -1


async def _pump(stream: asyncio.StreamReader | None, source: str, on_output: OutputCallback) -> None:
    """Forward decoded chunks from ``stream`` until EOF."""
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await stream.read(READ_CHUNK_SIZE)
        if not data:
            tail = decoder.decode(b"", final=True)
            if tail:
                await on_output(source, tail)
            return
        text = decoder.decode(data)
        if text:
            await on_output(source, text)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        logger.info("Killed command (pid=%d)", proc.pid)


class RunnerError(Exception):
    """Raised when a command cannot be run."""
