"""Parsers for the Linux /proc pseudo-filesystem: system statistics and per-process files."""

__version__ = "0.1.0"