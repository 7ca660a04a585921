"""Custom exception hierarchy for icon font registration and configuration."""

from __future__ import annotations

from enum import Enum


class IconSmithError(RuntimeError):
    """Base exception for iconsmith failures."""


class RegistrationFailure(str, Enum):
    """Reasons an icon font entry can be refused by the registry."""

    MALFORMED = "malformed"
    NAME = "name"
    PREFIX = "prefix"
    LIST = "list"
    GLYPH_EXACT = "glyph-exact"
    SORT = "sort"


class RegistrationError(IconSmithError, ValueError):
    """Raised when an icon font entry fails validation on registration."""

    def __init__(self, reason: RegistrationFailure, message: str, *, name: str | None = None):
        super().__init__(message)
        self.reason = reason
        self.name = name


class ConfigurationError(IconSmithError):
    """Raised when settings cannot be loaded or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "ConfigurationError",
    "IconSmithError",
    "RegistrationError",
    "RegistrationFailure",
    "exception_messages",
]
