"""
Import Resolver
===============

Maps a raw import specifier found in a source file to one of:

- INTERNAL: a scanned file inside the project
- EXTERNAL: a normalized third-party package identifier
- UNRESOLVED: an internal-looking specifier that matches no scanned file

Resolution works purely against the set of scanned files and never touches
the filesystem, so the same resolver can be shared by parallel workers.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

PYTHON_SUFFIX = ".py"
PYTHON_SOURCE_DIRS = ["", "src"]

# "./util.js" may point at util.ts in TypeScript projects
TS_EXTENSION_SWAPS = {
    ".js": [".ts", ".tsx"],
    ".jsx": [".tsx"],
    ".mjs": [".mts"],
    ".cjs": [".cts"],
}


class ImportKind(str, Enum):
    """How a specifier resolved."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ResolvedImport:
    """Outcome of resolving one specifier."""

    kind: ImportKind
    value: str  # file path, package identifier or the raw specifier

    @classmethod
    def internal(cls, path: str) -> "ResolvedImport":
        return cls(ImportKind.INTERNAL, path)

    @classmethod
    def external(cls, identifier: str) -> "ResolvedImport":
        return cls(ImportKind.EXTERNAL, identifier)

    @classmethod
    def unresolved(cls, specifier: str) -> "ResolvedImport":
        return cls(ImportKind.UNRESOLVED, specifier)


def normalize_package_name(specifier: str) -> str:
    """
    Reduce a bare specifier to its package identifier.

    "@scope/pkg/sub" -> "@scope/pkg", "lodash/fp" -> "lodash"
    """
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def is_path_like(specifier: str) -> bool:
    return specifier.startswith(".") or specifier.startswith("/")


class ImportResolver:
    """
    Resolves import specifiers against a fixed set of scanned files.

    Args:
        root: Canonical scan root
        known_files: Canonical absolute paths of every scanned file
        extensions: Extensions tried when a specifier omits one
        path_aliases: alias -> target directory (absolute or root-relative)
    """

    def __init__(
        self,
        root: Path | str,
        known_files: Iterable[str],
        extensions: Iterable[str] = (),
        path_aliases: dict[str, str] | None = None,
    ):
        self.root = os.path.normpath(str(root))
        self.known_files = frozenset(known_files)
        self.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in extensions]

        aliases = {}
        for alias, target in (path_aliases or {}).items():
            target_path = target if os.path.isabs(target) else os.path.join(self.root, target)
            aliases[alias.rstrip("/*")] = os.path.normpath(target_path)
        # Longest alias wins ("@/components" before "@")
        self.path_aliases = dict(sorted(aliases.items(), key=lambda item: -len(item[0])))

        self._python_top_level = self._collect_python_top_level()

    def _collect_python_top_level(self) -> frozenset[str]:
        """Top-level package/module names that live inside the project."""
        names = set()
        for path in self.known_files:
            if not path.endswith(PYTHON_SUFFIX):
                continue
            rel = os.path.relpath(path, self.root)
            parts = rel.split(os.sep)
            if parts[0] == os.pardir:
                continue
            for source_dir in PYTHON_SOURCE_DIRS:
                if source_dir:
                    if len(parts) < 2 or parts[0] != source_dir:
                        continue
                    parts = parts[1:]
                head = parts[0]
                if len(parts) == 1:
                    if not head.endswith(PYTHON_SUFFIX):
                        continue
                    head = head[: -len(PYTHON_SUFFIX)]
                names.add(head)
        return frozenset(names)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, specifier: str, source_file: str) -> ResolvedImport:
        """Resolve a raw specifier imported by `source_file`."""
        if source_file.endswith(PYTHON_SUFFIX):
            result = self._resolve_python(specifier, source_file)
        else:
            result = self._resolve_js(specifier, source_file)
        logger.debug("%s: %r -> %s %s", source_file, specifier, result.kind.value, result.value)
        return result

    # ------------------------------------------------------------------
    # JS / TS
    # ------------------------------------------------------------------

    def _apply_alias(self, specifier: str) -> str | None:
        for alias, target in self.path_aliases.items():
            if specifier == alias:
                return target
            if specifier.startswith(alias + "/"):
                return os.path.join(target, specifier[len(alias) + 1 :])
        return None

    def _resolve_js(self, specifier: str, source_file: str) -> ResolvedImport:
        aliased = self._apply_alias(specifier)
        if aliased is not None:
            bases = [os.path.normpath(aliased)]
        elif specifier.startswith("/"):
            bases = [
                os.path.normpath(specifier),
                os.path.normpath(os.path.join(self.root, specifier.lstrip("/"))),
            ]
        elif specifier.startswith("."):
            bases = [os.path.normpath(os.path.join(os.path.dirname(source_file), specifier))]
        else:
            return ResolvedImport.external(normalize_package_name(specifier))

        for base in bases:
            match = self._match_js_file(base)
            if match is not None:
                return ResolvedImport.internal(match)
        return ResolvedImport.unresolved(specifier)

    def _match_js_file(self, base: str) -> str | None:
        """Exact file, then base + ext, then base/index.ext."""
        if base in self.known_files:
            return base

        for ext in self.extensions:
            candidate = base + ext
            if candidate in self.known_files:
                return candidate

        for ext in self.extensions:
            candidate = os.path.join(base, f"index{ext}")
            if candidate in self.known_files:
                return candidate

        stem, ext = os.path.splitext(base)
        for swapped in TS_EXTENSION_SWAPS.get(ext, []):
            candidate = stem + swapped
            if candidate in self.known_files:
                return candidate

        return None

    # ------------------------------------------------------------------
    # Python
    # ------------------------------------------------------------------

    def _match_python_module(self, base_dir: str, parts: list[str], min_parts: int) -> str | None:
        """
        Map dotted parts under base_dir to a scanned file.

        Trailing parts are dropped until something matches, so
        "pkg.module.symbol" finds pkg/module.py.
        """
        for n in range(len(parts), min_parts - 1, -1):
            module_dir = os.path.join(base_dir, *parts[:n])
            candidates = [os.path.join(module_dir, "__init__.py")]
            if n > 0:
                candidates.insert(0, module_dir + PYTHON_SUFFIX)
            for candidate in candidates:
                if candidate in self.known_files:
                    return candidate
        return None

    def _resolve_python(self, specifier: str, source_file: str) -> ResolvedImport:
        level = len(specifier) - len(specifier.lstrip("."))
        module = specifier[level:]
        parts = [p for p in module.split(".") if p]

        if level > 0:
            base_dir = os.path.dirname(source_file)
            for _ in range(level - 1):
                base_dir = os.path.dirname(base_dir)
            match = self._match_python_module(base_dir, parts, min_parts=0)
            if match is not None:
                return ResolvedImport.internal(match)
            return ResolvedImport.unresolved(specifier)

        if not parts:
            return ResolvedImport.unresolved(specifier)

        for source_dir in PYTHON_SOURCE_DIRS:
            base_dir = os.path.join(self.root, source_dir) if source_dir else self.root
            match = self._match_python_module(base_dir, parts, min_parts=1)
            if match is not None:
                return ResolvedImport.internal(match)

        if parts[0] in self._python_top_level:
            return ResolvedImport.unresolved(specifier)
        return ResolvedImport.external(parts[0])
