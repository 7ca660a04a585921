from __future__ import annotations

from typing import Any

import pytest

from iconsmith.core.diagnostics import RecordingEmitter
from iconsmith.core.exceptions import RegistrationError, RegistrationFailure
from iconsmith.fonts.registry import FontRegistry
from iconsmith.fonts.schema import (
    Choices,
    ExactValue,
    IconFontEntry,
    Pattern,
    SlotDefinition,
    SlotMatch,
)


def _font(name: str = "demo", **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "name": name,
        "prefixes": [f"{name}-"],
        "schema": {"style": {"choices": ["solid", "regular"]}},
        "list": ["check", "star"],
    }
    record.update(overrides)
    return record


def test_register_returns_frozen_entry() -> None:
    registry = FontRegistry()
    entry = registry.register(_font(aliases={"DS": "Demo-Solid"}))

    assert entry.name == "demo"
    assert entry.prefixes == ("demo-",)
    assert entry.glyphs == frozenset({"check", "star"})
    assert entry.aliases == {"ds": "demo-solid"}
    assert [slot.name for slot in entry.schema] == ["style", "glyph"]
    assert isinstance(entry.slot("style").matcher, Choices)
    assert len(registry) == 1
    assert "demo" in registry


def test_glyph_slot_is_moved_last_and_defaults_to_required_pattern() -> None:
    registry = FontRegistry()
    schema = {
        "glyph": {"max": 1},
        "size": {"pattern": "[0-9]x"},
        "spin": {"value": "Demo-Spin"},
    }
    entry = registry.register(_font(schema=schema))

    assert [slot.name for slot in entry.schema] == ["size", "spin", "glyph"]
    glyph = entry.slot("glyph")
    assert glyph.required is True
    assert glyph.matcher == Pattern("[-a-z0-9_]+")
    assert entry.slot("spin").matcher == ExactValue("Demo-Spin")


def test_explicit_glyph_settings_override_implicit_defaults() -> None:
    registry = FontRegistry()
    entry = registry.register(
        _font(schema={"glyph": {"choices": ["check"], "required": False, "default": "demo-star"}})
    )

    glyph = entry.slot("glyph")
    assert glyph.matcher == Choices(("check",))
    assert glyph.required is False
    assert glyph.default == "demo-star"


def test_sort_is_assigned_in_steps_of_five() -> None:
    emitter = RecordingEmitter()
    registry = FontRegistry(emitter=emitter)
    first = registry.register(_font("one"))
    second = registry.register(_font("two", sort=5))
    third = registry.register(_font("three"))

    assert (first.sort, second.sort, third.sort) == (0, 5, 10)
    assert emitter.names().count("icon_font_sort_assigned") == 2


def test_colliding_sort_is_reassigned() -> None:
    emitter = RecordingEmitter()
    registry = FontRegistry(emitter=emitter)
    registry.register(_font("one", sort=5))
    entry = registry.register(_font("two", sort=5))

    assert entry.sort == 10
    name, payload = emitter.events[-1]
    assert name == "icon_font_sort_assigned"
    assert payload == {"font": "two", "sort": 10, "requested": 5}


def test_fonts_are_iterated_by_sort() -> None:
    registry = FontRegistry()
    registry.register(_font("late", sort=50))
    registry.register(_font("early", sort=1))

    assert [entry.name for entry in registry] == ["early", "late"]
    assert [entry.name for entry in registry.fonts(limit_to=["late"])] == ["late"]


@pytest.mark.parametrize(
    ("record", "reason"),
    [
        (["not", "a", "mapping"], RegistrationFailure.MALFORMED),
        (_font(unexpected=True), RegistrationFailure.MALFORMED),
        (_font(schema={"style": {"pattern": "x", "choices": ["x"]}}), RegistrationFailure.MALFORMED),
        (_font(schema={"style": {"required": True}}), RegistrationFailure.MALFORMED),
        (_font(schema={"style": {"pattern": "("}}), RegistrationFailure.MALFORMED),
        (_font(schema={"style": {"pattern": "x", "max": 0}}), RegistrationFailure.MALFORMED),
        (_font(schema={"spin": {"pattern": "(?i)spin"}}), RegistrationFailure.MALFORMED),
        (_font(schema={"spin": {"pattern": "(?P<body>spin)"}}), RegistrationFailure.MALFORMED),
        (_font(schema={"pair": {"pattern": r"(a)\1"}}), RegistrationFailure.MALFORMED),
        ({"prefixes": ["x-"], "list": ["a"]}, RegistrationFailure.NAME),
        (_font(name="  "), RegistrationFailure.NAME),
        (_font(prefixes=[]), RegistrationFailure.PREFIX),
        (_font(prefixes=["ok-", 3]), RegistrationFailure.PREFIX),
        (_font(list=[]), RegistrationFailure.LIST),
        (_font(list=["check", ""]), RegistrationFailure.LIST),
        (_font(list=["check", 7]), RegistrationFailure.LIST),
        (_font(list="check"), RegistrationFailure.LIST),
        (_font(list=None), RegistrationFailure.LIST),
        (_font(schema={"glyph": {"value": "demo-check"}}), RegistrationFailure.GLYPH_EXACT),
        (_font(sort="1"), RegistrationFailure.SORT),
        (_font(sort=True), RegistrationFailure.SORT),
        (_font(sort=2.5), RegistrationFailure.SORT),
    ],
)
def test_invalid_entries_are_rejected(record: Any, reason: RegistrationFailure) -> None:
    registry = FontRegistry()
    with pytest.raises(RegistrationError) as excinfo:
        registry.register(record)
    assert excinfo.value.reason is reason
    assert len(registry) == 0


def test_duplicate_names_and_prefixes_are_rejected() -> None:
    registry = FontRegistry()
    registry.register(_font("demo"))

    with pytest.raises(RegistrationError) as duplicate:
        registry.register(_font("demo", prefixes=["other-"]))
    assert duplicate.value.reason is RegistrationFailure.NAME

    with pytest.raises(RegistrationError) as overlap:
        registry.register(_font("other", prefixes=["other-", "demo-"]))
    assert overlap.value.reason is RegistrationFailure.PREFIX
    assert "demo-" in str(overlap.value)

    assert [entry.name for entry in registry] == ["demo"]


def test_single_string_prefix_is_accepted() -> None:
    registry = FontRegistry()
    entry = registry.register(_font(prefixes="demo-"))
    assert entry.prefixes == ("demo-",)


def test_registered_entry_can_seed_another_registry() -> None:
    source = FontRegistry()
    entry = source.register(_font(sort=20))

    target = FontRegistry()
    target.register(_font("first"))
    copied = target.register(entry)

    assert copied.sort == 20
    assert copied.schema == entry.schema


def test_select_font_strips_prefixes_and_respects_sort() -> None:
    registry = FontRegistry()
    registry.register(_font("late", sort=10, list=["star"]))
    registry.register(_font("early", sort=0, list=["star", "moon"]))

    assert registry.select_font("star").name == "early"
    assert registry.select_font("late-star").name == "late"
    assert registry.select_font(["nothing", "moon"]).name == "early"
    assert registry.select_font("star", limit_to="late").name == "late"


def test_select_font_reports_unresolved_input() -> None:
    emitter = RecordingEmitter()
    registry = FontRegistry(emitter=emitter)
    registry.register(_font())

    assert registry.select_font("demo-unknown") is None
    assert registry.select_font("demo-check", limit_to=["missing"]) is None
    assert emitter.names() == [
        "icon_font_sort_assigned",
        "icon_font_unresolved",
        "icon_font_unresolved",
    ]


def test_is_valid_icon() -> None:
    registry = FontRegistry()
    registry.register(_font())

    assert registry.is_valid_icon("demo-check")
    assert registry.is_valid_icon("CHECK")
    assert not registry.is_valid_icon("demo-missing")
    assert not registry.is_valid_icon(None)
    assert not registry.is_valid_icon("check", limit_to="other")


def test_named_group_references_are_supported() -> None:
    registry = FontRegistry()
    entry = registry.register(_font(schema={"twin": {"pattern": "(?P<half>[a-z])(?P=half)"}}))
    twin = entry.slot("twin")

    assert twin.match("demo-xx") == SlotMatch(token="demo-xx", body="xx", prefix="demo-")
    assert twin.match("demo-xy") is None


def _hand_built(*slots: SlotDefinition) -> IconFontEntry:
    return IconFontEntry(
        name="hand",
        prefixes=("ha-",),
        glyphs=frozenset({"moon"}),
        sort=0,
        schema=slots,
    )


@pytest.mark.parametrize(
    ("slots", "reason"),
    [
        ((SlotDefinition("glyph", ExactValue("ha-moon")),), RegistrationFailure.GLYPH_EXACT),
        ((SlotDefinition("size", Pattern("big"), max=0),), RegistrationFailure.MALFORMED),
        ((SlotDefinition("size", Pattern("(")),), RegistrationFailure.MALFORMED),
        (
            (SlotDefinition("size", Pattern("big"), precludes="flip"),),
            RegistrationFailure.MALFORMED,
        ),
        (
            (SlotDefinition("size", Pattern("big")), SlotDefinition("size", Pattern("huge"))),
            RegistrationFailure.MALFORMED,
        ),
    ],
)
def test_hand_built_entries_are_validated(
    slots: tuple[SlotDefinition, ...], reason: RegistrationFailure
) -> None:
    registry = FontRegistry()
    with pytest.raises(RegistrationError) as excinfo:
        registry.register(_hand_built(*slots))
    assert excinfo.value.reason is reason
    assert len(registry) == 0


def test_hand_built_entry_gets_compiled_schema_and_glyph_slot() -> None:
    registry = FontRegistry()
    entry = registry.register(_hand_built(SlotDefinition("size", Pattern("big"))))

    assert [slot.name for slot in entry.schema] == ["size", "glyph"]
    assert entry.slot("glyph").required is True
    assert entry.slot("size").match("ha-big") == SlotMatch(token="ha-big", body="big", prefix="ha-")
