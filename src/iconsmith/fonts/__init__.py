"""Icon font registry and class resolution.

Architecture
: `FontRegistry` validates icon font records and freezes them into
  `IconFontEntry` objects ordered by `sort`. `select_font` picks the first
  font whose glyph vocabulary recognises one of the input tokens.
: `classify` walks the selected font's schema slot by slot, applying aliases,
  prefix inference, capacity limits and preclusion, then returns the canonical
  class string or the configured fallback.
: `load_builtin_fonts`/`register_builtin_fonts` expose the bundled FontAwesome
  definition.
"""

from iconsmith.fonts.builtin import load_builtin_fonts, register_builtin_fonts
from iconsmith.fonts.classifier import classify
from iconsmith.fonts.registry import FontRegistry, freeze_entry
from iconsmith.fonts.schema import (
    Choices,
    ExactValue,
    IconFontEntry,
    IconFontModel,
    Pattern,
    SlotDefinition,
    SlotModel,
)


__all__ = [
    "Choices",
    "ExactValue",
    "FontRegistry",
    "IconFontEntry",
    "IconFontModel",
    "Pattern",
    "SlotDefinition",
    "SlotModel",
    "classify",
    "freeze_entry",
    "load_builtin_fonts",
    "register_builtin_fonts",
]
