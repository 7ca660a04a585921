"""Icon font data model: slot matchers, slot definitions, and font entries.

Icon font records arrive as loosely-typed mappings (usually straight from YAML).
`IconFontModel` and `SlotModel` validate their shape with pydantic, then
`iconsmith.fonts.registry.freeze_entry` turns them into immutable
`IconFontEntry` objects whose slots carry a compiled matcher. Hand-built
entries go through `compile_schema` as well, so every registered schema ends
with a glyph slot and only holds compiled slots.

Slot matchers
: `ExactValue` matches one literal, case-insensitively, and never accepts a
  prefix.
: `Pattern` matches a regular expression body, optionally preceded by one of
  the slot's prefixes.
: `Choices` matches one of an enumerated list of bodies, optionally preceded
  by one of the slot's prefixes.

The `glyph` slot is always evaluated last and must draw its body from the
font's glyph vocabulary.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from iconsmith.core.exceptions import RegistrationError, RegistrationFailure


GLYPH_SLOT = "glyph"
DEFAULT_GLYPH_PATTERN = "[-a-z0-9_]+"

# The body is wrapped in its own group behind the prefix group, which would
# shift numbered references. Named groups are unaffected.
_NUMBERED_REFERENCE = re.compile(r"(?<!\\)(?:\\\\)*(?:\\[1-9]|\(\?\(\d+\))")


@dataclass(frozen=True, slots=True)
class ExactValue:
    """Literal, prefix-less slot value."""

    value: str


@dataclass(frozen=True, slots=True)
class Pattern:
    """Regular expression body matched after an optional prefix."""

    pattern: str


@dataclass(frozen=True, slots=True)
class Choices:
    """Enumerated bodies matched after an optional prefix."""

    choices: tuple[str, ...]


SlotMatcher = ExactValue | Pattern | Choices


@dataclass(frozen=True, slots=True)
class SlotMatch:
    """Outcome of matching one token against one slot."""

    token: str
    body: str
    prefix: str | None = None
    exact: bool = False

    @property
    def explicit(self) -> bool:
        """Whether the match is exact or carried a recognised prefix."""
        return self.exact or bool(self.prefix)


def _alternation(values: tuple[str, ...]) -> str:
    return "|".join(re.escape(value) for value in values)


@dataclass(frozen=True, slots=True)
class SlotDefinition:
    """One matchable category of an icon font schema."""

    name: str
    matcher: SlotMatcher
    required: bool = False
    default: str | None = None
    max: int = 1
    precludes: frozenset[str] = frozenset()
    prefixes: tuple[str, ...] | None = None
    _regex: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    def compiled(self, font_prefixes: tuple[str, ...]) -> SlotDefinition:
        """Return a copy with the matcher regex compiled against its prefixes."""
        regex: re.Pattern[str] | None = None
        match self.matcher:
            case ExactValue():
                pass
            case Pattern(pattern=pattern):
                regex = self._wrap(pattern, font_prefixes)
            case Choices(choices=choices):
                regex = self._wrap(_alternation(choices), font_prefixes)
        return SlotDefinition(
            name=self.name,
            matcher=self.matcher,
            required=self.required,
            default=self.default,
            max=self.max,
            precludes=frozenset(self.precludes),
            prefixes=tuple(self.prefixes) if self.prefixes is not None else None,
            _regex=regex,
        )

    def _wrap(self, body: str, font_prefixes: tuple[str, ...]) -> re.Pattern[str]:
        prefixes = self.effective_prefixes(font_prefixes)
        prefix_group = f"(?P<prefix>{_alternation(prefixes)})?" if prefixes else ""
        return re.compile(f"{prefix_group}(?P<body>{body})", re.IGNORECASE)

    def effective_prefixes(self, font_prefixes: tuple[str, ...]) -> tuple[str, ...]:
        return self.prefixes if self.prefixes is not None else font_prefixes

    def match(self, token: str) -> SlotMatch | None:
        """Match a lower-cased token, returning ``None`` when it does not fit."""
        match self.matcher:
            case ExactValue(value=value):
                if token != value.lower():
                    return None
                return SlotMatch(token=token, body=token, exact=True)
            case Pattern() | Choices():
                if self._regex is None:
                    raise RuntimeError(f"Slot '{self.name}' was used before being compiled.")
                found = self._regex.fullmatch(token)
                if found is None:
                    return None
                return SlotMatch(
                    token=token,
                    body=found.group("body"),
                    prefix=found.groupdict().get("prefix") or None,
                )

    def canonical(self, found: SlotMatch, font_prefixes: tuple[str, ...]) -> str:
        """Render an accepted match as its canonical class token."""
        if found.exact:
            return found.token
        prefixes = self.effective_prefixes(font_prefixes)
        prefix = found.prefix or (prefixes[0] if prefixes else "")
        return f"{prefix}{found.body}"


@dataclass(frozen=True, slots=True)
class IconFontEntry:
    """A registered icon font: prefixes, aliases, schema, and glyph vocabulary."""

    name: str
    prefixes: tuple[str, ...]
    glyphs: frozenset[str]
    sort: int
    aliases: Mapping[str, str] = field(default_factory=dict)
    # Matching order; the glyph slot is always last.
    schema: tuple[SlotDefinition, ...] = ()

    def slot(self, name: str) -> SlotDefinition | None:
        for definition in self.schema:
            if definition.name == name:
                return definition
        return None

    def has_glyph(self, glyph: str) -> bool:
        return glyph in self.glyphs


def _as_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


class SlotModel(BaseModel):
    """Raw slot definition as written in configuration."""

    model_config = ConfigDict(extra="forbid")

    value: str | None = None
    pattern: str | None = None
    choices: list[str] | None = None
    required: bool = False
    default: str | None = None
    max: int = Field(default=1, ge=1)
    precludes: list[str] = Field(default_factory=list)
    prefixes: list[str] | None = None

    @field_validator("precludes", "prefixes", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        return _as_list(value)

    def declared_matchers(self) -> list[str]:
        return [
            key
            for key in ("value", "pattern", "choices")
            if getattr(self, key) is not None
        ]


class IconFontModel(BaseModel):
    """Raw icon font record as written in configuration.

    Fields whose violations map to a dedicated registration failure (``name``,
    ``prefixes``, ``list``, ``sort``) are typed loosely here and checked by the
    registry.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Any = None
    prefixes: Any = None
    aliases: dict[str, str] = Field(default_factory=dict)
    slots: dict[str, SlotModel] = Field(default_factory=dict, alias="schema")
    glyphs: Any = Field(default=None, alias="list")
    sort: Any = None

    @field_validator("prefixes", mode="before")
    @classmethod
    def _coerce_prefixes(cls, value: Any) -> Any:
        return _as_list(value)


def _matcher_for(name: str, model: SlotModel, *, font: str) -> SlotMatcher:
    declared = model.declared_matchers()
    if len(declared) != 1:
        raise RegistrationError(
            RegistrationFailure.MALFORMED,
            f"Slot '{name}' of icon font '{font}' must declare exactly one of "
            f"value, pattern or choices (got {', '.join(declared) or 'none'}).",
            name=font,
        )
    kind = declared[0]
    if kind == "value":
        return ExactValue(model.value or "")
    if kind == "choices":
        choices = tuple(choice.lower() for choice in model.choices or () if choice)
        if not choices:
            raise RegistrationError(
                RegistrationFailure.MALFORMED,
                f"Slot '{name}' of icon font '{font}' has no choices.",
                name=font,
            )
        return Choices(choices)
    return Pattern(model.pattern or "")


def _default_glyph_slot() -> SlotDefinition:
    return SlotDefinition(name=GLYPH_SLOT, matcher=Pattern(DEFAULT_GLYPH_PATTERN), required=True)


def _glyph_slot(model: SlotModel | None, *, font: str) -> SlotDefinition:
    """Merge an explicit glyph slot over the implicit required glyph slot."""
    if model is None:
        return _default_glyph_slot()
    explicit = model.model_fields_set
    if model.declared_matchers():
        matcher = _matcher_for(GLYPH_SLOT, model, font=font)
    else:
        matcher = Pattern(DEFAULT_GLYPH_PATTERN)
    return SlotDefinition(
        name=GLYPH_SLOT,
        matcher=matcher,
        required=model.required if "required" in explicit else True,
        default=model.default,
        max=model.max,
        precludes=frozenset(model.precludes),
        prefixes=tuple(model.prefixes) if model.prefixes is not None else None,
    )


def build_slots(
    slots: Mapping[str, SlotModel], prefixes: tuple[str, ...], *, font: str
) -> tuple[SlotDefinition, ...]:
    """Build compiled slot definitions in matching order, glyph last."""
    definitions: list[SlotDefinition] = []
    for name, model in slots.items():
        if name == GLYPH_SLOT:
            continue
        definitions.append(
            SlotDefinition(
                name=name,
                matcher=_matcher_for(name, model, font=font),
                required=model.required,
                default=model.default,
                max=model.max,
                precludes=frozenset(model.precludes),
                prefixes=tuple(model.prefixes) if model.prefixes is not None else None,
            )
        )
    definitions.append(_glyph_slot(slots.get(GLYPH_SLOT), font=font))
    return compile_schema(definitions, prefixes, font=font)


def _malformed(font: str, message: str) -> RegistrationError:
    return RegistrationError(RegistrationFailure.MALFORMED, message, name=font)


def _compile_slot(slot: Any, prefixes: tuple[str, ...], *, font: str) -> SlotDefinition:
    if not isinstance(slot, SlotDefinition):
        raise _malformed(font, f"Icon font '{font}' has a non-slot schema member {slot!r}.")
    label = f"Slot '{slot.name}' of icon font '{font}'"
    match slot.matcher:
        case ExactValue(value=str() as value) if value:
            pass
        case Pattern(pattern=str()):
            pass
        case Choices(choices=(str(), *_) as choices) if all(isinstance(c, str) for c in choices):
            pass
        case _:
            raise _malformed(font, f"{label} has an unusable matcher {slot.matcher!r}.")
    if isinstance(slot.max, bool) or not isinstance(slot.max, int) or slot.max < 1:
        raise _malformed(font, f"{label} must allow at least one token (max={slot.max!r}).")
    for attribute in ("precludes", "prefixes"):
        values = getattr(slot, attribute)
        if values is None and attribute == "prefixes":
            continue
        if not isinstance(values, (tuple, list, set, frozenset)) or not all(
            isinstance(value, str) for value in values
        ):
            raise _malformed(font, f"{label} needs a collection of strings for {attribute}.")
    if isinstance(slot.matcher, Pattern) and _NUMBERED_REFERENCE.search(slot.matcher.pattern):
        raise _malformed(font, f"{label} uses numbered group references; use named groups.")
    try:
        return slot.compiled(prefixes)
    except re.error as exc:
        raise _malformed(font, f"{label} has an invalid pattern: {exc}") from exc


def compile_schema(
    slots: Iterable[Any], prefixes: tuple[str, ...], *, font: str
) -> tuple[SlotDefinition, ...]:
    """Validate and compile slot definitions, moving the glyph slot last.

    A schema without a glyph slot receives the implicit required one. The
    glyph slot never accepts an exact value.
    """
    members = list(slots)
    seen: set[str] = set()
    for slot in members:
        name = getattr(slot, "name", None)
        if name in seen:
            raise _malformed(font, f"Icon font '{font}' declares slot '{name}' twice.")
        if isinstance(name, str):
            seen.add(name)
    glyph = next((slot for slot in members if getattr(slot, "name", None) == GLYPH_SLOT), None)
    if glyph is None:
        glyph = _default_glyph_slot()
    elif isinstance(glyph, SlotDefinition) and isinstance(glyph.matcher, ExactValue):
        raise RegistrationError(
            RegistrationFailure.GLYPH_EXACT,
            f"The glyph slot of icon font '{font}' cannot use an exact value.",
            name=font,
        )
    ordered = [slot for slot in members if slot is not glyph]
    ordered.append(glyph)
    return tuple(_compile_slot(slot, prefixes, font=font) for slot in ordered)


__all__ = [
    "DEFAULT_GLYPH_PATTERN",
    "GLYPH_SLOT",
    "Choices",
    "ExactValue",
    "IconFontEntry",
    "IconFontModel",
    "Pattern",
    "SlotDefinition",
    "SlotMatch",
    "SlotMatcher",
    "SlotModel",
    "build_slots",
    "compile_schema",
]
