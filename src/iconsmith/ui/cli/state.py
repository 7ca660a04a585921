"""Per-invocation CLI state: verbosity, traceback mode and rich consoles."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any, TextIO

import click

from iconsmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
]


@dataclass(slots=True)
class CLIState:
    """Verbosity and console handles shared by the commands of one invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _consoles: dict[str, Console] = field(default_factory=dict, init=False, repr=False)

    def _bind(self, key: str, stream: TextIO, **options: Any) -> Console:
        from rich.console import Console

        console = self._consoles.get(key)
        # Test runners swap the standard streams between invocations.
        if console is None or console.file is not stream:
            console = self._consoles[key] = Console(file=stream, **options)
        return console

    @property
    def console(self) -> Console:
        """Console writing to the current ``sys.stdout``."""
        return self._bind("stdout", sys.stdout)

    @property
    def err_console(self) -> Console:
        """Console writing to the current ``sys.stderr``, without highlighting."""
        return self._bind("stderr", sys.stderr, highlight=False)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("iconsmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None) -> CLIState:
    """Return the state attached to the active click context.

    The first lookup inside an invocation attaches a fresh state to the
    context. Outside of click, the last state seen in this context is reused.
    """
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is None:
            state = ctx.obj = CLIState()
    else:
        state = _STATE_VAR.get() or CLIState()
    _STATE_VAR.set(state)
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` to stderr; verbose runs also list the exception chain."""
    state = get_cli_state()

    if level == "info":
        state.err_console.log(message)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        details = [line for line in exception_messages(exception) if line not in message]
        details.append(f"type: {type(exception).__name__}")
        text.append("\n" + "\n".join(details), style=style)

    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether the last invocation asked for full tracebacks."""
    state = _STATE_VAR.get()
    return state is not None and state.show_tracebacks
