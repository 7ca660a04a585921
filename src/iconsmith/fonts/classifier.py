"""Resolve free-form icon input into a canonical class token string.

Each input token ends in exactly one of three states:

: **accepted** by the first slot that takes it,
: **discarded** when an explicit (prefixed or exact) match hits a slot that is
  full or precluded,
: **unclassified** when no slot takes it; kept at the end of the result unless
  ``strict`` is set.

An inferred (unprefixed) match that hits a full or precluded slot is not
discarded: it keeps walking the remaining slots and may end up unclassified.
Existing font schemas depend on this asymmetry.

Preclusion works in both directions. Once a slot accepts a token, the slots it
precludes are closed. A slot that precludes an already filled slot is closed
too. Results are emitted in schema order, so this keeps a classified result
stable when it is classified again.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from iconsmith.core.exceptions import RegistrationError
from iconsmith.core.tokens import expand_aliases, join_tokens, normalize_tokens, string_args
from iconsmith.fonts.registry import freeze_entry
from iconsmith.fonts.schema import GLYPH_SLOT, IconFontEntry, SlotDefinition


if TYPE_CHECKING:
    from iconsmith.context import IconContext


@dataclass(slots=True)
class _ClassificationState:
    font: IconFontEntry
    strict: bool
    filled: dict[str, list[str]] = field(default_factory=dict)
    precluded: set[str] = field(default_factory=set)
    unclassified: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.filled = {slot.name: [] for slot in self.font.schema}

    def result(self) -> str:
        groups = [self.filled[slot.name] for slot in self.font.schema]
        if not self.strict:
            groups.append(self.unclassified)
        return join_tokens(*groups)


def _resolve_font(
    context: IconContext, tokens: list[str], font: Any
) -> IconFontEntry | None:
    if isinstance(font, IconFontEntry):
        if context.registry.get(font.name) is font:
            return font
        try:
            return freeze_entry(font)
        except RegistrationError as exc:
            context.emitter.warning(f"Icon font '{font.name}' cannot be used: {exc}", exc)
            return None
    if isinstance(font, str):
        entry = context.registry.get(font)
        if entry is None:
            context.emitter.event("icon_font_unresolved", {"font": font, "tokens": tokens})
        return entry
    limit_to = string_args(font) if font is not None else None
    return context.registry.select_font(tokens, limit_to or None)


def _place_token(
    context: IconContext,
    state: _ClassificationState,
    token: str,
    *,
    infer: bool,
) -> None:
    font = state.font
    for slot in font.schema:
        found = slot.match(token)
        if found is None:
            continue
        if not found.explicit and not infer:
            continue
        if slot.name in state.precluded or any(state.filled.get(name) for name in slot.precludes):
            if found.explicit:
                _discard(context, font, slot, token, "precluded")
                return
            continue
        if len(state.filled[slot.name]) >= slot.max:
            if found.explicit:
                _discard(context, font, slot, token, "capacity")
                return
            continue
        if slot.name == GLYPH_SLOT and not font.has_glyph(found.body.lower()):
            context.emitter.event(
                "icon_glyph_invalid", {"font": font.name, "glyph": found.body, "token": token}
            )
            continue
        state.filled[slot.name].append(slot.canonical(found, font.prefixes))
        state.precluded.update(slot.precludes)
        return
    state.unclassified.append(token)


def _discard(
    context: IconContext, font: IconFontEntry, slot: SlotDefinition, token: str, reason: str
) -> None:
    context.emitter.event(
        "icon_token_discarded",
        {"font": font.name, "slot": slot.name, "token": token, "reason": reason},
    )


def _missing_required(state: _ClassificationState) -> list[str]:
    missing: list[str] = []
    for slot in state.font.schema:
        if not slot.required or state.filled[slot.name]:
            continue
        if slot.default is not None:
            state.filled[slot.name].append(slot.default)
        else:
            missing.append(slot.name)
    return missing


def _fallback(context: IconContext, value: Any, fallback: Any, reason: str) -> str:
    if fallback is False or fallback is None:
        context.emitter.warning(f"Icon input {value!r} could not be resolved ({reason}).")
        return ""
    source = context.fallback_classes if fallback is True else fallback
    resolved = classify(context, source, fallback=False)
    context.emitter.warning(
        f"Icon input {value!r} could not be resolved ({reason}); "
        f"using fallback {resolved or '<empty>'!r}."
    )
    return resolved


def classify(
    context: IconContext,
    value: Any,
    *,
    infer: bool = True,
    strict: bool = False,
    fallback: bool | str | Iterable[str] = True,
    font: IconFontEntry | str | Iterable[str] | None = None,
) -> str:
    """
    Return the canonical class string for ``value`` or the fallback result.

    ``font`` forces a font (entry or registered name) or limits inference to a
    list of names. ``fallback`` is ``True`` for the context's fallback classes,
    ``False`` for an empty result, or explicit classes that are themselves
    validated. This function never raises.
    """
    tokens = normalize_tokens(value)
    entry = _resolve_font(context, tokens, font)
    if entry is None:
        return _fallback(context, value, fallback, "no matching icon font")

    state = _ClassificationState(font=entry, strict=strict)
    for token in expand_aliases(tokens, entry.aliases):
        _place_token(context, state, token, infer=infer)

    missing = _missing_required(state)
    if missing:
        context.emitter.event(
            "icon_required_missing",
            {"font": entry.name, "slots": missing, "tokens": tokens},
        )
        return _fallback(
            context, value, fallback, f"missing required slot(s) {', '.join(missing)}"
        )
    return state.result()


__all__ = ["classify"]
