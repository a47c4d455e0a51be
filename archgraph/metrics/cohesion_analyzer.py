"""
Cohesion Analyzer
=================

Measures how strongly the files of each directory-scoped module depend on
each other rather than on the rest of the codebase.

For a module M:
    internal_deps = edges with both ends in M
    external_deps = edges with exactly one end in M (either direction)
    cohesion      = internal_deps / (internal_deps + external_deps)

A module with no edges at all has no measurable cohesion. It is reported with
cohesion 0.0 and has_edges=False, listed under isolated_modules and kept out
of the low-cohesion list.
"""

from __future__ import annotations

import logging
import posixpath
from collections import Counter, defaultdict

from ..config import AnalysisConfig
from ..models.analysis_models import CohesionReport, ModuleCohesion, MoveSuggestion
from ..models.graph_models import DependencyGraph

logger = logging.getLogger(__name__)

ROOT_MODULE = "(root)"
OUTLIER_COHESION = 0.5


def module_of(relative_path: str, depth: int | None = None) -> str:
    """
    Module name of a file: its containing directory, optionally truncated
    to the first `depth` components. Root-level files belong to "(root)".
    """
    directory = posixpath.dirname(relative_path)
    if not directory or directory == ".":
        return ROOT_MODULE
    if depth is not None and depth > 0:
        directory = "/".join(directory.split("/")[:depth])
    return directory


def group_by_module(graph: DependencyGraph, depth: int | None = None) -> dict[str, list[str]]:
    """module name -> sorted file paths."""
    modules: dict[str, list[str]] = defaultdict(list)
    for path in graph.files():
        modules[module_of(graph.relative_path(path), depth)].append(path)
    return dict(sorted(modules.items()))


class CohesionAnalyzer:
    """Analyzes module cohesion based on dependency relationships."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    def module_of(self, relative_path: str) -> str:
        return module_of(relative_path, self.config.module_depth)

    def analyze(self, graph: DependencyGraph) -> CohesionReport:
        """Analyze cohesion for every module of the graph."""
        groups = group_by_module(graph, self.config.module_depth)
        file_module = {path: name for name, paths in groups.items() for path in paths}

        modules = [self._analyze_module(name, paths, graph) for name, paths in groups.items()]

        threshold = self.config.low_cohesion_threshold
        low_cohesion = sorted(
            (m for m in modules if m.has_edges and m.cohesion < threshold),
            key=lambda m: (m.cohesion, m.name),
        )
        isolated_modules = [m for m in modules if not m.has_edges]

        suggestions = []
        for module in modules:
            if module.single_file:
                continue
            suggestions.extend(self._find_outliers(module, graph, file_module))

        average = round(sum(m.cohesion for m in modules) / len(modules), 3) if modules else 0.0
        logger.debug(
            "Cohesion: %d modules, average %.3f, %d below %.2f",
            len(modules),
            average,
            len(low_cohesion),
            threshold,
        )

        return CohesionReport(
            modules=modules,
            low_cohesion=low_cohesion,
            isolated_modules=isolated_modules,
            suggestions=suggestions,
            average_cohesion=average,
        )

    def _analyze_module(self, name: str, paths: list[str], graph: DependencyGraph) -> ModuleCohesion:
        members = set(paths)
        internal = 0
        external = 0

        for path in paths:
            for target in graph.imports_of(path):
                if target in members:
                    internal += 1
                else:
                    external += 1
            # Internal importers were already counted from the importer's side
            external += len(graph.importers_of(path) - members)

        total = internal + external
        return ModuleCohesion(
            name=name,
            files=list(paths),
            file_names=[graph.relative_path(p) for p in paths],
            internal_deps=internal,
            external_deps=external,
            cohesion=round(internal / total, 3) if total else 0.0,
            has_edges=total > 0,
        )

    def _find_outliers(
        self,
        module: ModuleCohesion,
        graph: DependencyGraph,
        file_module: dict[str, str],
    ) -> list[MoveSuggestion]:
        """Files that depend more on another module than on their own."""
        members = set(module.files)
        outliers = []

        for path in module.files:
            neighbors = list(graph.imports_of(path)) + list(graph.importers_of(path))
            if not neighbors:
                continue

            internal = sum(1 for n in neighbors if n in members)
            by_module = Counter(file_module[n] for n in neighbors if n not in members)
            if not by_module:
                continue

            # Most dependencies first, ties by module name
            target, count = min(by_module.items(), key=lambda item: (-item[1], item[0]))
            file_cohesion = internal / len(neighbors)

            if count > internal and file_cohesion < OUTLIER_COHESION:
                outliers.append(
                    MoveSuggestion(
                        file=graph.relative_path(path),
                        from_module=module.name,
                        to_module=target,
                        reason=f"File has {count} dependencies with {target} vs {internal} internal",
                        impact=round(count / len(neighbors), 2),
                    )
                )

        return outliers
