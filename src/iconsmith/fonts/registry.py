"""Append-only registry of icon fonts, ordered by their ``sort`` precedence."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from threading import Lock
from typing import Any

from pydantic import ValidationError

from iconsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from iconsmith.core.exceptions import RegistrationError, RegistrationFailure
from iconsmith.core.tokens import normalize_tokens, strip_prefix, string_args
from iconsmith.fonts.schema import IconFontEntry, IconFontModel, build_slots, compile_schema


SORT_STEP = 5


def _coerce_model(entry: Any) -> IconFontModel:
    if isinstance(entry, IconFontModel):
        return entry
    if not isinstance(entry, Mapping):
        raise RegistrationError(
            RegistrationFailure.MALFORMED,
            f"Icon font entries must be mappings, got {type(entry).__name__}.",
        )
    try:
        return IconFontModel.model_validate(dict(entry))
    except ValidationError as exc:
        name = entry.get("name") if isinstance(entry.get("name"), str) else None
        raise RegistrationError(
            RegistrationFailure.MALFORMED,
            f"Invalid icon font entry {name or '<unnamed>'!r}: {exc}",
            name=name,
        ) from exc


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise RegistrationError(
            RegistrationFailure.NAME, "Icon font entries require a non-empty string name."
        )
    return name


def _check_prefixes(name: str, prefixes: Any) -> tuple[str, ...]:
    if isinstance(prefixes, str):
        prefixes = [prefixes]
    if not isinstance(prefixes, (list, tuple)) or not all(isinstance(p, str) for p in prefixes):
        raise RegistrationError(
            RegistrationFailure.PREFIX,
            f"Icon font '{name}' requires a list of string prefixes.",
            name=name,
        )
    if not prefixes or not all(prefix.strip() for prefix in prefixes):
        raise RegistrationError(
            RegistrationFailure.PREFIX,
            f"Icon font '{name}' requires at least one non-blank prefix.",
            name=name,
        )
    return tuple(prefixes)


def _check_glyphs(name: str, glyphs: Any) -> frozenset[str]:
    if isinstance(glyphs, (str, bytes)) or not isinstance(glyphs, Iterable):
        raise RegistrationError(
            RegistrationFailure.LIST,
            f"Icon font '{name}' requires a list of glyph names.",
            name=name,
        )
    values = list(glyphs)
    if not values or not all(isinstance(glyph, str) and glyph for glyph in values):
        raise RegistrationError(
            RegistrationFailure.LIST,
            f"Icon font '{name}' requires a non-empty list of non-empty glyph names.",
            name=name,
        )
    return frozenset(values)


def _check_aliases(name: str, aliases: Any) -> dict[str, str]:
    if not isinstance(aliases, Mapping) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in aliases.items()
    ):
        raise RegistrationError(
            RegistrationFailure.MALFORMED,
            f"Icon font '{name}' requires aliases mapping strings to strings.",
            name=name,
        )
    return {key.lower(): value.lower() for key, value in aliases.items()}


def _check_sort(name: str, requested: Any) -> int:
    if requested is None:
        return 0
    if isinstance(requested, bool) or not isinstance(requested, int):
        raise RegistrationError(
            RegistrationFailure.SORT,
            f"Icon font '{name}' has a non-integer sort value: {requested!r}.",
            name=name,
        )
    return requested


def freeze_entry(entry: IconFontEntry | IconFontModel | Mapping[str, Any]) -> IconFontEntry:
    """Validate one icon font on its own and return it with a compiled schema.

    Checks that depend on other fonts (unique names and prefixes, free sort
    slots) belong to `FontRegistry.register`. A missing ``sort`` becomes 0.
    """
    if isinstance(entry, IconFontEntry):
        name = _check_name(entry.name)
        prefixes = _check_prefixes(name, entry.prefixes)
        glyphs = _check_glyphs(name, entry.glyphs)
        schema = compile_schema(entry.schema, prefixes, font=name)
        aliases = _check_aliases(name, entry.aliases)
        sort = _check_sort(name, entry.sort)
    else:
        model = _coerce_model(entry)
        name = _check_name(model.name)
        prefixes = _check_prefixes(name, model.prefixes)
        glyphs = _check_glyphs(name, model.glyphs)
        schema = build_slots(model.slots, prefixes, font=name)
        aliases = _check_aliases(name, model.aliases)
        sort = _check_sort(name, model.sort)
    return IconFontEntry(
        name=name,
        prefixes=prefixes,
        glyphs=glyphs,
        sort=sort,
        aliases=aliases,
        schema=schema,
    )


@dataclass(slots=True)
class FontRegistry:
    """Thread-safe, append-only collection of validated icon font entries."""

    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    _entries: list[IconFontEntry] = field(default_factory=list)
    _ordered: tuple[IconFontEntry, ...] = ()
    _lock: Lock = field(default_factory=Lock)

    def register(self, entry: IconFontEntry | IconFontModel | Mapping[str, Any]) -> IconFontEntry:
        """Validate ``entry`` and append it, returning the frozen font entry."""
        frozen = freeze_entry(entry)
        if isinstance(entry, Mapping):
            requested = entry.get("sort")
        else:
            requested = getattr(entry, "sort", None)
        with self._lock:
            self._check_identity(frozen.name, frozen.prefixes)
            sort = self._resolve_sort(frozen.name, requested)
            if sort != frozen.sort:
                frozen = replace(frozen, sort=sort)
            self._entries.append(frozen)
            self._ordered = tuple(sorted(self._entries, key=lambda item: item.sort))
        return frozen

    def fonts(self, limit_to: Any = None) -> tuple[IconFontEntry, ...]:
        """Return a snapshot of registered fonts in ascending sort order."""
        ordered = self._ordered
        names = string_args(limit_to) if limit_to is not None else []
        if not names:
            return ordered
        return tuple(entry for entry in ordered if entry.name in names)

    def get(self, name: str) -> IconFontEntry | None:
        for entry in self._ordered:
            if entry.name == name:
                return entry
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[IconFontEntry]:
        return iter(self._ordered)

    def select_font(self, tokens: Any, limit_to: Any = None) -> IconFontEntry | None:
        """Return the first font, by sort, whose vocabulary holds any token."""
        parts = normalize_tokens(tokens)
        for font in self.fonts(limit_to):
            for part in parts:
                if font.has_glyph(strip_prefix(part, font.prefixes)):
                    return font
        self.emitter.event(
            "icon_font_unresolved",
            {"tokens": parts, "limit_to": string_args(limit_to) if limit_to else None},
        )
        return None

    def is_valid_icon(self, glyph: Any, limit_to: Any = None) -> bool:
        """Return whether any permitted font recognises ``glyph``."""
        return self.select_font(glyph, limit_to) is not None

    def _check_identity(self, name: str, prefixes: tuple[str, ...]) -> None:
        if any(existing.name == name for existing in self._entries):
            raise RegistrationError(
                RegistrationFailure.NAME,
                f"An icon font named '{name}' is already registered.",
                name=name,
            )
        taken = {
            prefix: existing.name for existing in self._entries for prefix in existing.prefixes
        }
        clashes = sorted(prefix for prefix in prefixes if prefix in taken)
        if clashes:
            owners = ", ".join(f"'{prefix}' ({taken[prefix]})" for prefix in clashes)
            raise RegistrationError(
                RegistrationFailure.PREFIX,
                f"Icon font '{name}' reuses registered prefixes: {owners}.",
                name=name,
            )

    def _resolve_sort(self, name: str, requested: int | None) -> int:
        taken = {existing.sort for existing in self._entries}
        if requested is not None and requested not in taken:
            return requested
        sort = len(self._entries) * SORT_STEP
        while sort in taken:
            sort += SORT_STEP
        self.emitter.event(
            "icon_font_sort_assigned",
            {"font": name, "sort": sort, "requested": requested},
        )
        return sort


__all__ = ["SORT_STEP", "FontRegistry", "freeze_entry"]
