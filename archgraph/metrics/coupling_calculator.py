"""
Coupling Calculator
===================

Robert C. Martin's coupling metrics per file:

    Ca (afferent)  number of files importing this file
    Ce (efferent)  number of files this file imports
    I (instability) = Ce / (Ca + Ce), 0.0 for a file with no edges

Hubs (high Ca) are risky to change; dependent files (high Ce) break easily.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from ..config import AnalysisConfig
from ..models.analysis_models import CouplingMatrix, CouplingReport, FileCoupling, ModuleCoupling
from ..models.graph_models import DependencyGraph
from .cohesion_analyzer import group_by_module

logger = logging.getLogger(__name__)


def instability(afferent: int, efferent: int) -> float:
    total = afferent + efferent
    return efferent / total if total else 0.0


class CouplingCalculator:
    """Calculates coupling metrics for the files of a graph."""

    def __init__(self, graph: DependencyGraph, config: AnalysisConfig | None = None):
        self.graph = graph
        self.config = config or AnalysisConfig()

    # ------------------------------------------------------------------
    # Per-file metrics
    # ------------------------------------------------------------------

    def afferent_coupling(self, path: str) -> int:
        return len(self.graph.importers_of(path))

    def efferent_coupling(self, path: str) -> int:
        return len(self.graph.imports_of(path))

    def instability(self, path: str) -> float:
        return instability(self.afferent_coupling(path), self.efferent_coupling(path))

    def get_metrics(self, path: str) -> FileCoupling:
        """All coupling metrics for one file."""
        ca = self.afferent_coupling(path)
        ce = self.efferent_coupling(path)
        return FileCoupling(
            file=path,
            name=self.graph.relative_path(path),
            afferent_coupling=ca,
            efferent_coupling=ce,
            instability=instability(ca, ce),
        )

    def all_metrics(self) -> list[FileCoupling]:
        """Metrics for every file, in graph order."""
        return [self.get_metrics(path) for path in self.graph.files()]

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def hub_files(self, threshold: int | None = None) -> list[FileCoupling]:
        """Files imported by at least `threshold` others, most imported first."""
        threshold = self.config.hub_threshold if threshold is None else threshold
        hubs = [m for m in self.all_metrics() if m.afferent_coupling >= threshold]
        return sorted(hubs, key=lambda m: (-m.afferent_coupling, m.name))

    def dependent_files(self, threshold: int | None = None) -> list[FileCoupling]:
        """Files importing at least `threshold` others, most imports first."""
        threshold = self.config.dependent_threshold if threshold is None else threshold
        dependent = [m for m in self.all_metrics() if m.efferent_coupling >= threshold]
        return sorted(dependent, key=lambda m: (-m.efferent_coupling, m.name))

    def isolated_files(self) -> list[str]:
        """Files with no incoming and no outgoing edges."""
        return [m.file for m in self.all_metrics() if m.total_coupling == 0]

    def highly_coupled_files(self, threshold: int | None = None) -> list[FileCoupling]:
        """Files with Ca + Ce >= threshold, highest total first."""
        threshold = self.config.highly_coupled_threshold if threshold is None else threshold
        coupled = [m for m in self.all_metrics() if m.total_coupling >= threshold]
        return sorted(coupled, key=lambda m: (-m.total_coupling, m.name))

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def coupling_matrix(self) -> CouplingMatrix:
        """
        Adjacency matrix where matrix[i][j] == 1 iff files[i] imports files[j].
        """
        files = self.graph.files()
        index = {path: i for i, path in enumerate(files)}
        matrix = [[0] * len(files) for _ in files]

        for edge in self.graph.edges:
            matrix[index[edge.from_file]][index[edge.to_file]] = 1

        return CouplingMatrix(files=files, index=index, matrix=matrix)

    def module_metrics(self) -> list[ModuleCoupling]:
        """Ca/Ce per directory module, counting only edges that cross its border."""
        groups = group_by_module(self.graph, self.config.module_depth)
        file_module = {path: name for name, paths in groups.items() for path in paths}

        afferent: dict[str, int] = defaultdict(int)
        efferent: dict[str, int] = defaultdict(int)
        for edge in self.graph.edges:
            source = file_module[edge.from_file]
            target = file_module[edge.to_file]
            if source != target:
                efferent[source] += 1
                afferent[target] += 1

        return [
            ModuleCoupling(
                module=name,
                file_count=len(paths),
                afferent_coupling=afferent[name],
                efferent_coupling=efferent[name],
                instability=instability(afferent[name], efferent[name]),
            )
            for name, paths in groups.items()
        ]

    def analyze(self) -> CouplingReport:
        """Full coupling report."""
        report = CouplingReport(
            files=self.all_metrics(),
            hubs=self.hub_files(),
            dependent=self.dependent_files(),
            isolated=self.isolated_files(),
            highly_coupled=self.highly_coupled_files(),
            modules=self.module_metrics(),
        )
        logger.debug("Coupling summary: %s", report.summary)
        return report
