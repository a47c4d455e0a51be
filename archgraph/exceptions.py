"""
Error Types
===========

Exceptions raised by archgraph. Only fatal conditions raise; per-file problems
(unreadable files, broken imports) are recorded as warnings on the graph.
"""

from __future__ import annotations


class ArchGraphError(Exception):
    """Base class for all archgraph errors."""


class ScanRootNotFoundError(ArchGraphError):
    """The directory to analyze does not exist or is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Scan root does not exist or is not a directory: {path}")


class ConfigError(ArchGraphError, ValueError):
    """A configuration file could not be read or failed validation."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(message)
