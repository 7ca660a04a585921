"""Configuration models used to build an icon context.

IconSettings

`fallback_icon_classes` (`str`)
: Class string returned when an input cannot be resolved and the caller asked
  for the default fallback. It is validated like any other input, so it must
  reference a registered glyph.

`include_builtin_fonts` (`bool`)
: Register the bundled FontAwesome definition before the configured fonts.

`icon_fonts` (`list[dict]`)
: Additional icon font records, registered in order. Each record takes
  `name`, `prefixes`, `aliases`, `schema`, `list`, and an optional `sort`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from iconsmith.context import DEFAULT_FALLBACK_CLASSES, IconContext, create_context
from iconsmith.core.diagnostics import DiagnosticEmitter
from iconsmith.core.exceptions import ConfigurationError


class IconSettings(BaseModel):
    """Top-level settings payload parsed from YAML."""

    model_config = ConfigDict(extra="forbid")

    fallback_icon_classes: str = Field(
        default=DEFAULT_FALLBACK_CLASSES, description="Classes used when resolution fails"
    )
    include_builtin_fonts: bool = True
    icon_fonts: list[dict[str, Any]] = Field(default_factory=list)


def parse_settings(raw: Any) -> IconSettings:
    """Validate a raw mapping (or ``None``) into settings."""
    if raw is None:
        return IconSettings()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Icon settings must be a mapping, got {type(raw).__name__}.")
    try:
        return IconSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid icon settings: {exc}") from exc


def load_settings(path: Path | str) -> IconSettings:
    """Read settings from a YAML file."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read icon settings '{source}': {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Icon settings '{source}' are not valid YAML: {exc}") from exc
    return parse_settings(raw)


def build_context(
    settings: IconSettings | None = None, *, emitter: DiagnosticEmitter | None = None
) -> IconContext:
    """Create a context and register the fonts described by ``settings``.

    Registration failures propagate as `RegistrationError`.
    """
    settings = settings or IconSettings()
    context = create_context(
        fallback_classes=settings.fallback_icon_classes,
        emitter=emitter,
        builtin_fonts=settings.include_builtin_fonts,
    )
    for record in settings.icon_fonts:
        context.register(record)
    return context


__all__ = ["IconSettings", "build_context", "load_settings", "parse_settings"]
