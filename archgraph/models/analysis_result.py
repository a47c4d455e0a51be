"""
Aggregate result of a full architecture analysis run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .analysis_models import BoundaryReport, CircularReport, CohesionReport, CouplingReport
from .graph_models import DependencyGraph


@dataclass
class AnalysisSummary:
    """Headline numbers shown at the top of every report."""

    total_files: int = 0
    total_dependencies: int = 0
    external_dependencies: int = 0
    suggested_services: int = 0
    cycles_found: int = 0
    average_cohesion: float = 0.0

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "total_files": self.total_files,
            "total_dependencies": self.total_dependencies,
            "external_dependencies": self.external_dependencies,
            "suggested_services": self.suggested_services,
            "cycles_found": self.cycles_found,
            "average_cohesion": self.average_cohesion,
        }


@dataclass
class ArchitectureResult:
    """
    Everything one analysis run produced.

    Sections that were not requested stay None and are left out of to_dict().
    """

    root: str
    graph: DependencyGraph
    circular: CircularReport | None = None
    coupling: CouplingReport | None = None
    cohesion: CohesionReport | None = None
    boundaries: BoundaryReport | None = None
    summary: AnalysisSummary = field(default_factory=AnalysisSummary)
    warnings: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def has_cycles(self) -> bool:
        return self.circular is not None and self.circular.has_cycles

    def to_dict(self, include_graph: bool = True) -> dict:
        """Convert to JSON-serializable dict."""
        data: dict = {
            "root": self.root,
            "summary": self.summary.to_dict(),
        }
        if include_graph:
            data["graph"] = self.graph.to_dict()
        if self.circular is not None:
            data["circular"] = self.circular.to_dict()
        if self.coupling is not None:
            data["coupling"] = self.coupling.to_dict()
        if self.cohesion is not None:
            data["cohesion"] = self.cohesion.to_dict()
        if self.boundaries is not None:
            data["boundaries"] = self.boundaries.to_dict()
        data["warnings"] = list(self.warnings)
        data["duration_seconds"] = round(self.duration_seconds, 3)
        return data
