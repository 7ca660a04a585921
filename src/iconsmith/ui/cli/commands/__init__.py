"""Command implementations exposed by the iconsmith CLI."""

from .classify import check, classify
from .fonts import fonts


__all__ = ["check", "classify", "fonts"]
