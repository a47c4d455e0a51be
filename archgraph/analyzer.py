"""
Architecture Analyzer
=====================

Orchestrates a full analysis run: builds the dependency graph, runs the
circular, coupling and cohesion passes concurrently over the shared read-only
graph, then derives service boundaries from their results.

Usage:
    from archgraph import ArchitectureAnalyzer

    result = ArchitectureAnalyzer("/path/to/project").analyze()
    print(result.summary.cycles_found)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .architecture.boundary_detector import BoundaryDetector
from .config import AnalysisConfig
from .dependency.graph_builder import DependencyGraphBuilder
from .exceptions import ScanRootNotFoundError
from .metrics.circular_detector import CircularDetector
from .metrics.cohesion_analyzer import CohesionAnalyzer
from .metrics.coupling_calculator import CouplingCalculator
from .models.analysis_result import AnalysisSummary, ArchitectureResult

logger = logging.getLogger(__name__)

SECTION_CIRCULAR = "circular"
SECTION_METRICS = "metrics"
SECTION_BOUNDARIES = "boundaries"
ALL_SECTIONS = frozenset({SECTION_CIRCULAR, SECTION_METRICS, SECTION_BOUNDARIES})


class ArchitectureAnalyzer:
    """
    Runs the complete architecture analysis pipeline for one project.

    Nothing is cached between calls: every analyze() builds a fresh graph.
    """

    def __init__(self, project_dir: Path | str, config: AnalysisConfig | None = None):
        """
        Initialize the analyzer.

        Args:
            project_dir: Root directory of the project to analyze
            config: Analysis settings (defaults when omitted)

        Raises:
            ScanRootNotFoundError: If project_dir is not an existing directory
        """
        self.project_dir = Path(project_dir).resolve()
        if not self.project_dir.is_dir():
            raise ScanRootNotFoundError(str(self.project_dir))
        self.config = config or AnalysisConfig()

    def analyze(
        self,
        target_path: Path | str | None = None,
        sections: Iterable[str] | None = None,
    ) -> ArchitectureResult:
        """
        Perform the analysis.

        Args:
            target_path: Sub-directory to scan (default: the whole project).
                Display paths stay relative to the project root.
            sections: Any of "circular", "metrics", "boundaries" (default: all)

        Returns:
            ArchitectureResult; sections that were not requested are None

        Raises:
            ScanRootNotFoundError: If target_path does not exist
        """
        start_time = time.time()
        wanted = ALL_SECTIONS if sections is None else frozenset(sections)
        unknown = wanted - ALL_SECTIONS
        if unknown:
            raise ValueError(f"Unknown analysis sections: {', '.join(sorted(unknown))}")

        scan_dir = self._resolve_target(target_path)
        builder = DependencyGraphBuilder(self.project_dir, self.config)
        graph = builder.build_from_directory(scan_dir)

        need_metrics = bool(wanted & {SECTION_METRICS, SECTION_BOUNDARIES})
        circular = coupling = cohesion = boundaries = None

        # The three passes only read the graph
        with ThreadPoolExecutor(max_workers=3) as executor:
            circular_future = (
                executor.submit(CircularDetector().detect, graph) if SECTION_CIRCULAR in wanted else None
            )
            coupling_future = (
                executor.submit(CouplingCalculator(graph, self.config).analyze) if need_metrics else None
            )
            cohesion_future = (
                executor.submit(CohesionAnalyzer(self.config).analyze, graph) if need_metrics else None
            )

            if circular_future is not None:
                circular = circular_future.result()
            if coupling_future is not None:
                coupling = coupling_future.result()
            if cohesion_future is not None:
                cohesion = cohesion_future.result()

        if SECTION_BOUNDARIES in wanted:
            boundaries = BoundaryDetector(self.config).detect(graph, coupling, cohesion)

        summary = AnalysisSummary(
            total_files=graph.stats.total_files,
            total_dependencies=graph.stats.total_edges,
            external_dependencies=graph.stats.external_deps,
            suggested_services=len(boundaries.services) if boundaries else 0,
            cycles_found=circular.cycle_count if circular else 0,
            average_cohesion=cohesion.average_cohesion if cohesion else 0.0,
        )

        if SECTION_METRICS not in wanted:
            coupling = cohesion = None

        duration = time.time() - start_time
        logger.info("Analysis of %s finished in %.2fs", scan_dir, duration)

        return ArchitectureResult(
            root=str(self.project_dir),
            graph=graph,
            circular=circular,
            coupling=coupling,
            cohesion=cohesion,
            boundaries=boundaries,
            summary=summary,
            warnings=list(graph.warnings),
            duration_seconds=duration,
        )

    def _resolve_target(self, target_path: Path | str | None) -> Path:
        if target_path is None:
            return self.project_dir
        target = Path(target_path)
        if not target.is_absolute():
            target = self.project_dir / target
        target = target.resolve()
        if not target.is_dir():
            raise ScanRootNotFoundError(str(target))
        return target
