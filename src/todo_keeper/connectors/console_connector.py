# src/todo_keeper/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import add_from_input, render_view
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_input(state: AppState, user_input: str) -> str:
    """One console line -> reply text. Commands go to the registry, anything else is a new task."""

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    with state.lock:
        reply = command_registry.handle(state, user_input, emit=emit)
        if reply is None:
            reply = add_from_input(state, user_input)
    return reply


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "todo"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.")
    print(render_view(state))

    while True:
        try:
            user_input = input("> ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] > {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_input(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        print(reply)

    logger.info("Console connector finished.")
