from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from iconsmith.ui.cli import app
from iconsmith.version import get_version


runner = CliRunner()


def test_classify_prints_canonical_classes() -> None:
    result = runner.invoke(app, ["classify", "fas", "fa-house"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "fa-solid fa-house"


def test_classify_options_are_forwarded() -> None:
    result = runner.invoke(app, ["classify", "--strict", "fa-check", "extra-class"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "fa-solid fa-check"

    result = runner.invoke(app, ["classify", "--no-infer", "check", "fa-house"])
    assert result.stdout.strip() == "fa-solid fa-house check"


def test_classify_uses_fallback_unless_disabled() -> None:
    result = runner.invoke(app, ["classify", "fa-nope"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "fa-solid fa-question iconsmith-fallback-icon"

    result = runner.invoke(app, ["classify", "--fallback-classes", "fa-star", "fa-nope"])
    assert result.stdout.strip() == "fa-solid fa-star"

    result = runner.invoke(app, ["classify", "--no-fallback", "fa-nope"])
    assert result.exit_code == 1
    assert result.stdout.strip() == ""


def test_check_reports_validity() -> None:
    result = runner.invoke(app, ["check", "fa-house"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "valid (fontawesome)"

    result = runner.invoke(app, ["check", "fa-house", "--font", "other"])
    assert result.exit_code == 1
    assert result.stdout.strip() == "invalid"


def test_fonts_lists_registered_fonts(tmp_path: Path) -> None:
    config = tmp_path / "icons.yml"
    config.write_text(
        "icon_fonts:\n  - name: runes\n    prefixes: [rn-]\n    list: [fehu, uruz]\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["fonts", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "fontawesome" in result.stdout
    assert "runes" in result.stdout
    assert "rn-" in result.stdout

    result = runner.invoke(app, ["classify", "--config", str(config), "uruz"])
    assert result.stdout.strip() == "rn-uruz"


def test_invalid_config_exits_with_error(tmp_path: Path) -> None:
    config = tmp_path / "icons.yml"
    config.write_text("icon_fonts:\n  - name: fontawesome\n    prefixes: [x-]\n    list: [a]\n")
    result = runner.invoke(app, ["fonts", "--config", str(config)])
    assert result.exit_code == 2


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == get_version()


def test_very_verbose_classify_reports_diagnostic_events() -> None:
    args = ["classify", "fa-regular", "fa-duotone", "fa-check"]
    result = runner.invoke(app, [*args, "-vv"])
    assert result.exit_code == 0, result.output
    assert "fa-regular fa-check" in result.output
    assert "'fa-duotone'" in result.output

    quiet = runner.invoke(app, args)
    assert quiet.stdout.strip() == "fa-regular fa-check"
    assert "'fa-duotone'" not in quiet.output
