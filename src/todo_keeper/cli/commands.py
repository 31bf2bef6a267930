# src/todo_keeper/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import edit_task, task_at_position
from ..tasks.task_models import TaskFilter
from .render import render_footer, render_task_list

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._maxsplit: dict[str, int | None] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        maxsplit: int | None = None,
    ) -> None:
        """
        maxsplit limits how many leading args are split off; the remainder is
        passed as the last arg with its inner whitespace intact (free text).
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._maxsplit[key] = maxsplit
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._maxsplit[alias.lower()] = maxsplit

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        maxsplit = self._maxsplit.get(name)
        args = rest.split() if maxsplit is None else rest.split(maxsplit=maxsplit)

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other line is added as a new task. /exit quits.")
        return "\n".join(lines)


registry = CommandRegistry()


def render_view(state: AppState) -> str:
    store = state.task_store
    return (
        render_task_list(store.visible_tasks(), store.filter)
        + "\n"
        + render_footer(store.active_count(), store.filter, store.has_completed())
    )


def add_from_input(state: AppState, text: str) -> str:
    """The plain-input path: a non-command line becomes a new task."""
    state.task_store.add(text)
    return render_view(state)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <description>"
    return add_from_input(state, args[0])


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <n>"
    task = task_at_position(state.task_store, args[0])
    if task is None:
        return f"No task at position {args[0]}."
    state.task_store.toggle(task.id)
    return render_view(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 1:
        return "Usage: /edit <n> <new description>"
    task = task_at_position(state.task_store, args[0])
    if task is None:
        return f"No task at position {args[0]}."
    if not edit_task(state.task_store, task.id, args[1] if len(args) > 1 else ""):
        return "Description cannot be empty; task left unchanged."
    return render_view(state)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <n>"
    task = task_at_position(state.task_store, args[0])
    if task is None:
        return f"No task at position {args[0]}."
    state.task_store.delete(task.id)
    return render_view(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    if not state.task_store.has_completed():
        return "No completed tasks to clear."
    state.task_store.clear_completed()
    return render_view(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter            -> show current filter
    /filter active     -> switch view (all | active | completed)
    """
    store = state.task_store
    if not args:
        return f"Filter is {store.filter.value}. Use /filter all|active|completed."

    raw = args[0].lower()
    if raw not in {f.value for f in TaskFilter}:
        return "Usage: /filter all|active|completed"
    store.set_filter(raw)
    return render_view(state)


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.task_store
    total = len(store.tasks)
    active = store.active_count()
    storage_path = getattr(state.settings, "storage_path", "?")
    storage_key = getattr(state.settings, "storage_key", "tasks")
    return (
        "Status:\n"
        f"  Tasks: {total} ({active} active, {total - active} completed)\n"
        f"  Filter: {store.filter.value}\n"
        f"  Storage: {storage_path} [key={storage_key}]"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks in the current filter.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <description>.", maxsplit=0)
registry.register(
    "toggle", cmd_toggle, help_text="Mark a task done/undone: /toggle <n>.", aliases=["done"]
)
registry.register(
    "edit", cmd_edit, help_text="Change a task's text: /edit <n> <text>.", maxsplit=1
)
registry.register("delete", cmd_delete, help_text="Remove a task: /delete <n>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register(
    "filter", cmd_filter, help_text="Switch view: /filter all | active | completed."
)
registry.register("status", cmd_status, help_text="Show task counts and storage location.")
