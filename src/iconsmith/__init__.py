"""Primary public API for iconsmith."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from iconsmith.config import IconSettings, build_context, load_settings
from iconsmith.context import (
    DEFAULT_FALLBACK_CLASSES,
    IconContext,
    create_context,
    default_context,
    set_default_context,
)
from iconsmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    RecordingEmitter,
)
from iconsmith.core.exceptions import (
    ConfigurationError,
    IconSmithError,
    RegistrationError,
    RegistrationFailure,
)
from iconsmith.fonts import FontRegistry, IconFontEntry, IconFontModel
from iconsmith.version import get_version


__version__ = get_version()


def classify(
    value: Any,
    *,
    infer: bool = True,
    strict: bool = False,
    fallback: bool | str | Iterable[str] = True,
    font: IconFontEntry | str | Iterable[str] | None = None,
    context: IconContext | None = None,
) -> str:
    """Resolve ``value`` into canonical icon classes using ``context``."""
    ctx = context or default_context()
    return ctx.classify(value, infer=infer, strict=strict, fallback=fallback, font=font)


def select_font(
    tokens: Any, limit_to: Any = None, *, context: IconContext | None = None
) -> IconFontEntry | None:
    """Return the highest-precedence font recognising any of ``tokens``."""
    return (context or default_context()).select_font(tokens, limit_to)


def is_valid_icon(glyph: Any, limit_to: Any = None, *, context: IconContext | None = None) -> bool:
    """Return whether ``glyph`` belongs to a registered (or permitted) font."""
    return (context or default_context()).is_valid_icon(glyph, limit_to)


def register_font(
    entry: IconFontEntry | IconFontModel | Mapping[str, Any],
    *,
    context: IconContext | None = None,
) -> IconFontEntry:
    """Register an icon font, raising `RegistrationError` when it is invalid."""
    return (context or default_context()).register(entry)


__all__ = [
    "DEFAULT_FALLBACK_CLASSES",
    "ConfigurationError",
    "DiagnosticEmitter",
    "FontRegistry",
    "IconContext",
    "IconFontEntry",
    "IconFontModel",
    "IconSettings",
    "IconSmithError",
    "LoggingEmitter",
    "NullEmitter",
    "RecordingEmitter",
    "RegistrationError",
    "RegistrationFailure",
    "__version__",
    "build_context",
    "classify",
    "create_context",
    "default_context",
    "is_valid_icon",
    "load_settings",
    "register_font",
    "select_font",
    "set_default_context",
]
