"""Bundled icon font definitions shipped with the package."""

from __future__ import annotations

from importlib import resources
from typing import Any

import yaml

from iconsmith.core.exceptions import ConfigurationError
from iconsmith.fonts.registry import FontRegistry
from iconsmith.fonts.schema import IconFontEntry


_DATA_PACKAGE = "iconsmith.fonts.data"
_BUILTIN_FILE = "builtin_fonts.yaml"


def _resource_text(name: str) -> str:
    resource = resources.files(_DATA_PACKAGE) / name
    return resource.read_text(encoding="utf-8")


def load_builtin_fonts() -> list[dict[str, Any]]:
    """Return the raw records of the bundled icon fonts."""
    data = yaml.safe_load(_resource_text(_BUILTIN_FILE)) or []
    if not isinstance(data, list):
        raise ConfigurationError(f"{_BUILTIN_FILE} must contain a list of icon fonts.")
    return [dict(item) for item in data]


def register_builtin_fonts(registry: FontRegistry) -> list[IconFontEntry]:
    """Register every bundled font not already present in ``registry``."""
    registered: list[IconFontEntry] = []
    for record in load_builtin_fonts():
        if record.get("name") in registry:
            continue
        registered.append(registry.register(record))
    return registered


__all__ = ["load_builtin_fonts", "register_builtin_fonts"]
