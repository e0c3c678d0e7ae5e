"""Command-line interface for panelterm.

Provides the main entry point for opening an interactive terminal
session on a target, listing targets, or starting the local stand-in
execution backend.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from panelterm.domain.models import LineKind, TerminalLine

logger = logging.getLogger(__name__)

LINE_COLORS = {
    LineKind.COMMAND: "\x1b[1;34m",
    LineKind.STDOUT: "",
    LineKind.STDERR: "\x1b[33m",
    LineKind.INFO: "\x1b[93m",
    LineKind.SUCCESS: "\x1b[32m",
    LineKind.ERROR: "\x1b[31m",
}

CONSOLE_HELP = """\
  :quick          list quick actions for this target
  :quick N        run quick action number N
  :history        show submitted commands
  :clear          clear the transcript
  :switch ID      open another target
  :reconnect      reconnect after a dropped connection
  :quit           leave the terminal"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="panelterm",
        description="Remote command terminal for hosting panel targets",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/panelterm.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    connect_parser = subparsers.add_parser("connect", help="Open an interactive terminal on a target")
    connect_parser.add_argument(
        "--target", type=str, required=True,
        help="Target id to attach to",
    )
    connect_parser.add_argument(
        "--url", type=str, default=None,
        help="WebSocket URL of the execution backend (overrides config)",
    )

    subparsers.add_parser("targets", help="List available targets")
    subparsers.add_parser("endpoint", help="Start the local stand-in execution backend")

    return parser.parse_args(argv)


def render_line(line: TerminalLine, color: bool = False) -> str:
    """Format a transcript line for a text console."""
    if not color:
        return line.content
    prefix = LINE_COLORS.get(line.kind, "")
    return f"{prefix}{line.content}\x1b[0m" if prefix else line.content


def _print_line(line: TerminalLine) -> None:
    print(render_line(line, color=sys.stdout.isatty()), flush=True)


def _build_directory(settings):
    from panelterm.targets import TargetDirectory

    return TargetDirectory(
        static_targets=settings.targets,
        base_url=settings.panel.base_url,
        credential=settings.credential(),
        timeout=settings.panel.timeout,
    )


async def _list_targets(settings) -> int:
    """Print the targets the operator can open."""
    from panelterm.targets import TargetLookupError

    try:
        targets = await _build_directory(settings).list_targets()
    except TargetLookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not targets:
        print("No targets available.")
        return 0
    for target in targets:
        print(f"  {target.id:<16} {target.name} ({target.environment_kind})")
    return 0


async def _run_console(settings, args) -> int:
    """Attach to a target and run an interactive line-mode terminal."""
    from panelterm.channel.websocket_backend import WebSocketChannel
    from panelterm.targets import TargetLookupError
    from panelterm.terminal.console import TerminalConsole
    from panelterm.terminal.quick_actions import QuickActionCatalog

    directory = _build_directory(settings)
    try:
        target = await directory.get(args.target)
    except TargetLookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ch = settings.channel
    url = args.url or ch.url

    def channel_factory(_target):
        return WebSocketChannel(
            url=url,
            open_timeout=ch.open_timeout,
            close_timeout=ch.close_timeout,
            max_message_size=ch.max_message_size,
        )

    console = TerminalConsole(
        channel_factory=channel_factory,
        credential_provider=settings.credential,
        catalog=QuickActionCatalog(settings.quick_actions),
        on_line=_print_line,
    )
    await console.switch_target(target)
    print("Type :help for console commands.")

    try:
        while True:
            await console.session.wait_for_input()
            try:
                text = await asyncio.to_thread(input, "$ ")
            except EOFError:
                break
            text = text.strip()
            if not text.startswith(":"):
                await console.submit(text)
                continue

            name, _, arg = text[1:].partition(" ")
            arg = arg.strip()
            if name in ("quit", "exit", "q"):
                break
            elif name == "help":
                print(CONSOLE_HELP)
            elif name == "clear":
                console.clear()
            elif name == "history":
                for i, entry in enumerate(console.session.history.entries, start=1):
                    print(f"  {i:>3}  {entry}")
            elif name == "reconnect":
                await console.reconnect()
            elif name == "quick":
                actions = console.quick_actions
                if not arg:
                    if not actions:
                        print("No quick actions for this environment.")
                    for i, action in enumerate(actions, start=1):
                        print(f"  {i}. {action.label:<20} {action.description}")
                elif arg.isdigit() and 1 <= int(arg) <= len(actions):
                    await console.run_quick_action(actions[int(arg) - 1].id)
                else:
                    print(f"No quick action {arg!r}")
            elif name == "switch":
                try:
                    new_target = await directory.get(arg)
                except TargetLookupError as e:
                    print(f"Error: {e}", file=sys.stderr)
                    continue
                await console.switch_target(new_target)
            else:
                print(f"Unknown console command :{name} (try :help)")
    finally:
        await console.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the panelterm CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 0

    from panelterm.config.settings import load_settings
    from panelterm.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "connect":
        logger.info("Opening terminal on target %s", args.target)
        return asyncio.run(_run_console(settings, args))

    elif args.command == "targets":
        return asyncio.run(_list_targets(settings))

    elif args.command == "endpoint":
        logger.info("Starting stand-in endpoint")
        from panelterm.endpoint.server import main as serve_endpoint
        serve_endpoint(settings.endpoint, token=settings.credential())

    return 0


if __name__ == "__main__":
    sys.exit(main())
