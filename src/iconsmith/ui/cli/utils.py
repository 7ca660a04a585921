"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from iconsmith.config import build_context, load_settings
from iconsmith.context import IconContext
from iconsmith.core.exceptions import IconSmithError

from .diagnostics import CliEmitter
from .state import emit_error, get_cli_state


def cli_context(config: Path | None, *, verbosity: int = 0) -> IconContext:
    """Build the icon context for a command, exiting on configuration errors."""
    state = get_cli_state()
    state.verbosity = max(state.verbosity, verbosity)
    emitter = CliEmitter(state)
    try:
        settings = load_settings(config) if config is not None else None
        return build_context(settings, emitter=emitter)
    except IconSmithError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=2) from exc


__all__ = ["cli_context"]
