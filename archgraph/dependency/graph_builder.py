"""
Dependency Graph Builder
========================

Builds a DependencyGraph from a list of candidate source files.

The build runs in two parallel phases followed by a single reducer:

1. read + extract: each file is read and its raw import specifiers are
   extracted. Unreadable files are logged, recorded as warnings and omitted.
2. resolve: once the node set is fixed, every specifier is resolved against
   it. Workers only read shared state and return per-file results.

The reducer then assembles the immutable graph, so no locking is needed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from ..config import AnalysisConfig
from ..discovery import list_source_files
from ..exceptions import ScanRootNotFoundError
from ..models.graph_models import DependencyGraph, FileNode
from .js_parser import JSDependencyParser, load_path_aliases
from .python_parser import PythonDependencyParser
from .resolver import ImportKind, ImportResolver

logger = logging.getLogger(__name__)


LANGUAGE_BY_EXTENSION = {
    ".py": "Python",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".mts": "TypeScript",
    ".cts": "TypeScript",
}


def detect_language(path: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(os.path.splitext(path)[1].lower(), "Unknown")


@dataclass
class _ExtractedFile:
    """Phase 1 result for one file."""

    path: str
    specifiers: list[str] = field(default_factory=list)
    warning: str | None = None
    readable: bool = True


@dataclass
class _ResolvedFile:
    """Phase 2 result for one file."""

    path: str
    imports: set[str] = field(default_factory=set)
    external: set[str] = field(default_factory=set)
    unresolved: set[str] = field(default_factory=set)


class DependencyGraphBuilder:
    """Builds file-level dependency graphs from source files."""

    def __init__(self, project_root: Path | str, config: AnalysisConfig | None = None):
        """
        Initialize the graph builder.

        Args:
            project_root: Root directory of the project to analyze.
            config: Analysis settings (defaults when omitted).
        """
        self.project_root = Path(project_root).resolve()
        self.config = config or AnalysisConfig()
        self.python_parser = PythonDependencyParser()
        self.js_parser = JSDependencyParser()

    def build(self, files: Iterable[Path | str]) -> DependencyGraph:
        """
        Build the dependency graph for the given candidate files.

        Args:
            files: Candidate source paths. Duplicates collapse to one node.

        Returns:
            DependencyGraph with every readable candidate as a node.
        """
        candidates = self._canonicalize(files)
        logger.info("Building dependency graph for %d files under %s", len(candidates), self.project_root)

        # Phase 1: read + extract
        extracted = self._map(self._extract, candidates)
        warnings = [item.warning for item in extracted if item.warning]
        readable = [item for item in extracted if item.readable]

        # Node identities are fixed from here on
        resolver = ImportResolver(
            self.project_root,
            known_files=[item.path for item in readable],
            extensions=self.config.extensions,
            path_aliases=self._path_aliases(),
        )

        # Phase 2: resolve
        resolved = self._map(lambda item: self._resolve(item, resolver), readable)

        # Reduce
        nodes = [
            FileNode(
                path=result.path,
                relative_path=self._relative(result.path),
                language=detect_language(result.path),
                imports=frozenset(result.imports),
                external_imports=frozenset(result.external),
                unresolved_imports=frozenset(result.unresolved),
            )
            for result in resolved
        ]
        graph = DependencyGraph(str(self.project_root), nodes, warnings=warnings)

        logger.info(
            "Graph built: %d files, %d edges, %d external packages, %d unresolved imports",
            graph.stats.total_files,
            graph.stats.total_edges,
            graph.stats.external_deps,
            graph.stats.unresolved_imports,
        )
        return graph

    def build_from_directory(self, path: Path | str | None = None) -> DependencyGraph:
        """
        Discover source files under `path` (default: the project root) and build.

        Raises:
            ScanRootNotFoundError: If the directory does not exist
        """
        scan_dir = Path(path).resolve() if path is not None else self.project_root
        if not scan_dir.is_dir():
            raise ScanRootNotFoundError(str(scan_dir))

        files = list_source_files(
            scan_dir,
            ignore_dirs=self.config.ignore_dirs,
            ignore_patterns=self.config.ignore_patterns,
            extensions=self.config.extensions,
        )
        return self.build(files)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _map(self, fn, items: list) -> list:
        """Run fn over items on the worker pool, preserving order."""
        if not items:
            return []
        if self.config.max_workers == 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            return list(executor.map(fn, items))

    def _extract(self, path: str) -> _ExtractedFile:
        """Read one file and extract its raw import specifiers."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            message = f"Could not read {self._relative(path)}: {e}"
            logger.warning(message)
            return _ExtractedFile(path, warning=message, readable=False)

        if path.endswith(".py"):
            try:
                specifiers = self.python_parser.extract_specifiers(content, filename=path)
            except (SyntaxError, ValueError) as e:
                # Still a node; its imports are just unknown
                message = f"Could not parse {self._relative(path)}: {e}"
                logger.warning(message)
                return _ExtractedFile(path, warning=message)
        else:
            specifiers = self.js_parser.extract_specifiers(content)

        return _ExtractedFile(path, specifiers=specifiers)

    def _resolve(self, item: _ExtractedFile, resolver: ImportResolver) -> _ResolvedFile:
        """Resolve every specifier of one file."""
        result = _ResolvedFile(item.path)
        for specifier in item.specifiers:
            resolved = resolver.resolve(specifier, item.path)
            if resolved.kind is ImportKind.INTERNAL:
                result.imports.add(resolved.value)
            elif resolved.kind is ImportKind.EXTERNAL:
                result.external.add(resolved.value)
            else:
                result.unresolved.add(resolved.value)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _canonicalize(self, files: Iterable[Path | str]) -> list[str]:
        """Absolute, symlink-free, de-duplicated and sorted."""
        seen = set()
        for file_path in files:
            path = Path(file_path)
            if not path.is_absolute():
                path = self.project_root / path
            seen.add(str(path.resolve()))
        return sorted(seen)

    def _relative(self, path: str) -> str:
        return os.path.relpath(path, self.project_root).replace(os.sep, "/")

    def _path_aliases(self) -> dict[str, str]:
        """tsconfig/jsconfig aliases, overridden by configured ones."""
        aliases = load_path_aliases(self.project_root)
        aliases.update(self.config.path_aliases)
        return aliases
