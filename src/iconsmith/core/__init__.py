"""Shared building blocks: token helpers, diagnostics, and exceptions."""
