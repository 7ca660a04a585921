"""Data files bundled with iconsmith's font support."""
