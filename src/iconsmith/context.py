"""Explicit context bundling a font registry with fallback and diagnostics."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from iconsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from iconsmith.fonts.classifier import classify as _classify
from iconsmith.fonts.registry import FontRegistry
from iconsmith.fonts.schema import IconFontEntry, IconFontModel


DEFAULT_FALLBACK_CLASSES = "fa-solid fa-question iconsmith-fallback-icon"


@dataclass(slots=True)
class IconContext:
    """Everything a classification call reads: registry, fallback, emitter."""

    registry: FontRegistry = field(default_factory=FontRegistry)
    fallback_classes: str = DEFAULT_FALLBACK_CLASSES
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)

    def register(self, entry: IconFontEntry | IconFontModel | Mapping[str, Any]) -> IconFontEntry:
        return self.registry.register(entry)

    def select_font(self, tokens: Any, limit_to: Any = None) -> IconFontEntry | None:
        return self.registry.select_font(tokens, limit_to)

    def is_valid_icon(self, glyph: Any, limit_to: Any = None) -> bool:
        return self.registry.is_valid_icon(glyph, limit_to)

    def classify(
        self,
        value: Any,
        *,
        infer: bool = True,
        strict: bool = False,
        fallback: bool | str | Iterable[str] = True,
        font: IconFontEntry | str | Iterable[str] | None = None,
    ) -> str:
        return _classify(self, value, infer=infer, strict=strict, fallback=fallback, font=font)


def create_context(
    *,
    fallback_classes: str = DEFAULT_FALLBACK_CLASSES,
    emitter: DiagnosticEmitter | None = None,
    builtin_fonts: bool = True,
) -> IconContext:
    """Build a fresh context, optionally pre-loaded with the bundled fonts."""
    emitter = emitter or NullEmitter()
    context = IconContext(
        registry=FontRegistry(emitter=emitter),
        fallback_classes=fallback_classes,
        emitter=emitter,
    )
    if builtin_fonts:
        from iconsmith.fonts.builtin import register_builtin_fonts

        register_builtin_fonts(context.registry)
    return context


_DEFAULT_CONTEXT: IconContext | None = None
_DEFAULT_LOCK = Lock()


def default_context() -> IconContext:
    """Return the lazily created process-wide context."""
    global _DEFAULT_CONTEXT
    with _DEFAULT_LOCK:
        if _DEFAULT_CONTEXT is None:
            from iconsmith.core.diagnostics import LoggingEmitter

            _DEFAULT_CONTEXT = create_context(emitter=LoggingEmitter())
        return _DEFAULT_CONTEXT


def set_default_context(context: IconContext | None) -> None:
    """Replace (or reset with ``None``) the process-wide context."""
    global _DEFAULT_CONTEXT
    with _DEFAULT_LOCK:
        _DEFAULT_CONTEXT = context


__all__ = [
    "DEFAULT_FALLBACK_CLASSES",
    "IconContext",
    "create_context",
    "default_context",
    "set_default_context",
]
