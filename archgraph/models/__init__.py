"""
Data models for the dependency graph and analysis results.
"""

from .analysis_models import (
    BoundaryReport,
    BoundarySuggestion,
    CircularReport,
    CohesionReport,
    CouplingMatrix,
    CouplingReport,
    Cycle,
    CycleBreakSuggestion,
    FileCoupling,
    ModuleCohesion,
    ModuleCoupling,
    MoveSuggestion,
    ServiceCluster,
)
from .analysis_result import AnalysisSummary, ArchitectureResult
from .graph_models import DependencyEdge, DependencyGraph, FileNode, GraphStats

__all__ = [
    # Graph
    "FileNode",
    "DependencyEdge",
    "GraphStats",
    "DependencyGraph",
    # Circular
    "Cycle",
    "CycleBreakSuggestion",
    "CircularReport",
    # Coupling
    "FileCoupling",
    "ModuleCoupling",
    "CouplingMatrix",
    "CouplingReport",
    # Cohesion
    "ModuleCohesion",
    "MoveSuggestion",
    "CohesionReport",
    # Boundaries
    "ServiceCluster",
    "BoundarySuggestion",
    "BoundaryReport",
    # Aggregate
    "AnalysisSummary",
    "ArchitectureResult",
]
