from __future__ import annotations

import pytest

import iconsmith
from iconsmith.context import create_context
from iconsmith.fonts.builtin import load_builtin_fonts, register_builtin_fonts
from iconsmith.fonts.registry import FontRegistry


def test_builtin_records_describe_fontawesome() -> None:
    records = load_builtin_fonts()
    names = [record["name"] for record in records]
    assert names == ["fontawesome"]
    fontawesome = records[0]
    assert fontawesome["prefixes"] == ["fa-"]
    assert fontawesome["aliases"]["fass"] == "fa-sharp fa-solid"
    assert {"check", "question", "house"} <= set(fontawesome["list"])


def test_register_builtin_fonts_skips_existing_names() -> None:
    registry = FontRegistry()
    assert [entry.name for entry in register_builtin_fonts(registry)] == ["fontawesome"]
    assert register_builtin_fonts(registry) == []
    assert len(registry) == 1


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("fas fa-house", "fa-solid fa-house"),
        ("fasd fa-dragon fa-rotate-90 fa-fw", "fa-fw fa-sharp fa-rotate-90 fa-duotone fa-dragon"),
        ("far fa-flip-vertical fa-star", "fa-flip-vertical fa-regular fa-star"),
        ("dice-d20", "fa-solid fa-dice-d20"),
    ],
)
def test_builtin_fontawesome_resolution(value: str, expected: str) -> None:
    context = create_context()
    assert context.classify(value) == expected


def test_default_fallback_classes_are_valid() -> None:
    context = create_context()
    assert context.classify("definitely-not-an-icon") == (
        "fa-solid fa-question iconsmith-fallback-icon"
    )


def test_module_level_helpers_use_default_context() -> None:
    context = create_context()
    iconsmith.set_default_context(context)
    try:
        assert iconsmith.default_context() is context
        assert iconsmith.classify("fa-check") == "fa-solid fa-check"
        assert iconsmith.is_valid_icon("fa-gear")
        assert not iconsmith.is_valid_icon("fa-gearbox")
        assert iconsmith.select_font("wand-magic").name == "fontawesome"
        entry = iconsmith.register_font(
            {"name": "runes", "prefixes": ["rn-"], "list": ["fehu"], "sort": 100}
        )
        assert entry.sort == 100
        assert iconsmith.classify("fehu") == "rn-fehu"
    finally:
        iconsmith.set_default_context(None)


def test_explicit_context_argument_wins() -> None:
    context = create_context(builtin_fonts=False)
    context.register({"name": "runes", "prefixes": ["rn-"], "list": ["fehu"]})
    assert iconsmith.classify("fehu", context=context) == "rn-fehu"
    assert iconsmith.classify("fa-check", context=context, fallback=False) == ""
