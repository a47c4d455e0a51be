"""
Source File Discovery
=====================

Enumerates candidate source files under a scan root.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .config import DEFAULT_EXTENSIONS, DEFAULT_IGNORE_DIRS, DEFAULT_IGNORE_PATTERNS

logger = logging.getLogger(__name__)


def is_ignored(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def list_source_files(
    root: Path | str,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
    ignore_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[Path]:
    """
    Discover all supported source files under root.

    Args:
        root: Directory to walk.
        ignore_dirs: Directory names never descended into.
        ignore_patterns: fnmatch patterns for file names to skip.
        extensions: File extensions to keep.

    Returns:
        Sorted list of file paths.
    """
    root = Path(root)
    skip_dirs = set(ignore_dirs)
    patterns = list(ignore_patterns)
    suffixes = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk never enters ignored directories
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)

        for filename in filenames:
            if os.path.splitext(filename)[1].lower() not in suffixes:
                continue
            if is_ignored(filename, patterns):
                continue
            files.append(Path(dirpath) / filename)

    files.sort()
    logger.debug("Discovered %d source files under %s", len(files), root)
    return files
