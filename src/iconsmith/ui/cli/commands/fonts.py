"""CLI command listing the registered icon fonts."""

from __future__ import annotations

from rich import box
from rich.table import Table

from iconsmith.fonts.schema import IconFontEntry

from .._options import ConfigOption, VerboseOption
from ..state import get_cli_state
from ..utils import cli_context


def _format_list(values: list[str] | tuple[str, ...]) -> str:
    return ", ".join(values) if values else "-"


def _describe_slot(entry: IconFontEntry) -> list[str]:
    labels: list[str] = []
    for slot in entry.schema:
        label = slot.name
        if slot.required:
            label += "*"
        if slot.max != 1:
            label += f"[{slot.max}]"
        labels.append(label)
    return labels


def fonts(config: ConfigOption = None, verbose: VerboseOption = 0) -> None:
    """Print a table of registered icon fonts in precedence order."""
    context = cli_context(config, verbosity=verbose)
    console = get_cli_state().console
    table = Table(
        title="Registered Icon Fonts",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Name", style="magenta", no_wrap=True)
    table.add_column("Sort", justify="right")
    table.add_column("Prefixes", style="green", no_wrap=True)
    table.add_column("Slots")
    table.add_column("Glyphs", justify="right")

    entries = list(context.registry)
    if not entries:
        table.add_row("-", "-", "-", "-", "No icon fonts registered")
    for entry in entries:
        table.add_row(
            entry.name,
            str(entry.sort),
            _format_list(entry.prefixes),
            _format_list(_describe_slot(entry)),
            str(len(entry.glyphs)),
        )
    console.print(table)


__all__ = ["fonts"]
