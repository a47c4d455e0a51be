"""
Data Models for the Dependency Graph
====================================

Core data structures for representing a codebase's file-level dependency
graph: file nodes, dependency edges, summary stats and the read-only graph
that every analysis pass queries.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileNode:
    """Represents a single scanned source file."""

    path: str
    relative_path: str
    language: str = "Unknown"

    # Resolved dependencies
    imports: frozenset[str] = field(default_factory=frozenset)
    external_imports: frozenset[str] = field(default_factory=frozenset)
    unresolved_imports: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "path": self.path,
            "relative_path": self.relative_path,
            "language": self.language,
            "imports": sorted(self.imports),
            "external_imports": sorted(self.external_imports),
            "unresolved_imports": sorted(self.unresolved_imports),
        }


@dataclass(frozen=True, order=True)
class DependencyEdge:
    """A directed import relationship between two scanned files."""

    from_file: str
    to_file: str

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"from": self.from_file, "to": self.to_file}


@dataclass(frozen=True)
class GraphStats:
    """Summary counts for a built graph."""

    total_files: int = 0
    total_edges: int = 0
    external_deps: int = 0
    unresolved_imports: int = 0

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "total_files": self.total_files,
            "total_edges": self.total_edges,
            "external_deps": self.external_deps,
            "unresolved_imports": self.unresolved_imports,
        }


class DependencyGraph:
    """
    Read-only, file-level dependency graph.

    The graph is assembled once by DependencyGraphBuilder and then shared by
    reference between the analysis passes. Analyses only rely on the query
    methods files(), imports_of(), importers_of() and relative_path().

    The constructor enforces the edge invariants: both endpoints must be
    nodes, self-loops are dropped and duplicate edges collapse to one.
    """

    def __init__(
        self,
        root: str,
        nodes: Iterable[FileNode],
        warnings: Iterable[str] = (),
    ):
        self.root = root
        self.warnings: list[str] = list(warnings)

        self._nodes: dict[str, FileNode] = {}
        for node in sorted(nodes, key=lambda n: n.path):
            self._nodes[node.path] = node

        imports: dict[str, frozenset[str]] = {}
        importers: dict[str, set[str]] = {path: set() for path in self._nodes}
        edges: list[DependencyEdge] = []
        external: set[str] = set()
        unresolved = 0

        for path, node in self._nodes.items():
            targets = frozenset(t for t in node.imports if t != path and t in self._nodes)
            imports[path] = targets
            for target in targets:
                importers[target].add(path)
                edges.append(DependencyEdge(path, target))
            external.update(node.external_imports)
            unresolved += len(node.unresolved_imports)

        self._imports = imports
        self._importers = {path: frozenset(sources) for path, sources in importers.items()}
        self.edges: tuple[DependencyEdge, ...] = tuple(sorted(edges))
        self.external: frozenset[str] = frozenset(external)
        self.stats = GraphStats(
            total_files=len(self._nodes),
            total_edges=len(self.edges),
            external_deps=len(self.external),
            unresolved_imports=unresolved,
        )

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------

    def files(self) -> list[str]:
        """All node paths, sorted."""
        return list(self._nodes)

    def imports_of(self, path: str) -> frozenset[str]:
        """Files that `path` imports (empty for unknown paths)."""
        return self._imports.get(path, frozenset())

    def importers_of(self, path: str) -> frozenset[str]:
        """Files that import `path` (empty for unknown paths)."""
        return self._importers.get(path, frozenset())

    def relative_path(self, path: str) -> str:
        """Display name of a node, relative to the scan root."""
        node = self._nodes.get(path)
        if node is not None:
            return node.relative_path
        return os.path.relpath(path, self.root).replace(os.sep, "/")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, FileNode]:
        """Mapping of path -> FileNode."""
        return self._nodes

    def node(self, path: str) -> FileNode | None:
        """Get a node by its path."""
        return self._nodes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(root={self.root!r}, files={self.stats.total_files}, "
            f"edges={self.stats.total_edges})"
        )

    def to_dict(self) -> dict:
        """
        Convert to the stable rendering shape.

        nodes: [{id, name, imports, imported_by}]
        edges: [{from, to, from_name, to_name}]
        """
        return {
            "root": self.root,
            "nodes": [
                {
                    "id": path,
                    "name": node.relative_path,
                    "language": node.language,
                    "imports": len(self._imports[path]),
                    "imported_by": len(self._importers[path]),
                }
                for path, node in self._nodes.items()
            ],
            "edges": [
                {
                    "from": edge.from_file,
                    "to": edge.to_file,
                    "from_name": self._nodes[edge.from_file].relative_path,
                    "to_name": self._nodes[edge.to_file].relative_path,
                }
                for edge in self.edges
            ],
            "external": sorted(self.external),
            "stats": self.stats.to_dict(),
            "warnings": list(self.warnings),
        }
