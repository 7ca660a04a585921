"""Helpers turning loosely-typed string arguments into class token lists."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any


def _iter_strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
        return
    if isinstance(value, (bytes, bytearray)) or not isinstance(value, Iterable):
        return
    for item in value:
        yield from _iter_strings(item)


def string_args(
    value: Any,
    *,
    split: bool = True,
    lower: bool = False,
    transform: Callable[[str], str] | None = None,
) -> list[str]:
    """
    Flatten ``value`` into a list of non-empty strings.

    Nested iterables are walked depth-first and anything that is not a string is
    dropped. With ``split`` each string is broken on whitespace. ``transform`` is
    applied after lower-casing and the transformed text is split again, so a
    single token may expand into several.
    """
    tokens: list[str] = []
    for raw in _iter_strings(value):
        text = raw.lower() if lower else raw
        pieces = text.split() if split else [text.strip()]
        for piece in pieces:
            if not piece:
                continue
            if transform is not None:
                piece = transform(piece)
                if split:
                    tokens.extend(piece.split())
                    continue
            if piece:
                tokens.append(piece)
    return tokens


def normalize_tokens(value: Any) -> list[str]:
    """Return the lower-cased, whitespace-split token list for ``value``."""
    return string_args(value, lower=True)


def expand_aliases(tokens: Iterable[str], aliases: Mapping[str, str] | None) -> list[str]:
    """Replace whole tokens through ``aliases``; replacements are re-split."""
    if not aliases:
        return list(tokens)
    return string_args(list(tokens), transform=lambda token: aliases.get(token, token))


def join_tokens(*groups: Iterable[str]) -> str:
    """Join token groups with single spaces, skipping empties."""
    return " ".join(token for group in groups for token in group if token)


def strip_prefix(token: str, prefixes: Iterable[str]) -> str:
    """Remove the first matching prefix from ``token``."""
    for prefix in prefixes:
        if prefix and token.startswith(prefix):
            return token[len(prefix) :]
    return token


__all__ = [
    "expand_aliases",
    "join_tokens",
    "normalize_tokens",
    "strip_prefix",
    "string_args",
]
