"""CLI commands resolving icon classes and checking glyph names."""

from __future__ import annotations

from typing import Annotated

import typer

from .._options import RESOLUTION_PANEL, ConfigOption, FontOption, VerboseOption
from ..utils import cli_context


def classify(
    tokens: Annotated[
        list[str],
        typer.Argument(metavar="TOKENS...", help="Icon classes or glyph names to resolve."),
    ],
    font: FontOption = None,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Drop tokens that do not belong to the icon font schema.",
            rich_help_panel=RESOLUTION_PANEL,
        ),
    ] = False,
    infer: Annotated[
        bool,
        typer.Option(
            "--infer/--no-infer",
            help="Accept tokens that omit the icon font prefix.",
            rich_help_panel=RESOLUTION_PANEL,
        ),
    ] = True,
    use_fallback: Annotated[
        bool,
        typer.Option(
            "--fallback/--no-fallback",
            help="Return the configured fallback classes when resolution fails.",
            rich_help_panel=RESOLUTION_PANEL,
        ),
    ] = True,
    fallback_classes: Annotated[
        str | None,
        typer.Option(
            "--fallback-classes",
            help="Explicit fallback classes, validated before use.",
            rich_help_panel=RESOLUTION_PANEL,
        ),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Print the canonical class string for TOKENS."""
    context = cli_context(config, verbosity=verbose)
    fallback: bool | str = use_fallback
    if use_fallback and fallback_classes:
        fallback = fallback_classes
    result = context.classify(
        tokens, infer=infer, strict=strict, fallback=fallback, font=font or None
    )
    typer.echo(result)
    if not result:
        raise typer.Exit(code=1)


def check(
    glyph: Annotated[str, typer.Argument(help="Glyph name, with or without its prefix.")],
    font: FontOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Report whether GLYPH belongs to a registered icon font."""
    context = cli_context(config, verbosity=verbose)
    entry = context.select_font(glyph, font or None)
    if entry is None:
        typer.echo("invalid")
        raise typer.Exit(code=1)
    typer.echo(f"valid ({entry.name})")


__all__ = ["check", "classify"]
