"""
archgraph
=========

File-level dependency graph analysis for JavaScript, TypeScript and Python
codebases: circular dependency detection, coupling and cohesion metrics, and
candidate service boundary detection.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .analyzer import ArchitectureAnalyzer  # noqa: E402
from .architecture.boundary_detector import BoundaryDetector  # noqa: E402
from .config import AnalysisConfig, ConfigLoader, load_config  # noqa: E402
from .dependency.graph_builder import DependencyGraphBuilder  # noqa: E402
from .dependency.resolver import ImportKind, ImportResolver, ResolvedImport  # noqa: E402
from .discovery import list_source_files  # noqa: E402
from .exceptions import ArchGraphError, ConfigError, ScanRootNotFoundError  # noqa: E402
from .metrics.circular_detector import CircularDetector  # noqa: E402
from .metrics.cohesion_analyzer import CohesionAnalyzer  # noqa: E402
from .metrics.coupling_calculator import CouplingCalculator  # noqa: E402
from .models.analysis_result import ArchitectureResult  # noqa: E402
from .models.graph_models import DependencyGraph, FileNode  # noqa: E402

__all__ = [
    "__version__",
    "ArchitectureAnalyzer",
    "ArchitectureResult",
    "AnalysisConfig",
    "ConfigLoader",
    "load_config",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "FileNode",
    "ImportResolver",
    "ImportKind",
    "ResolvedImport",
    "list_source_files",
    "CircularDetector",
    "CouplingCalculator",
    "CohesionAnalyzer",
    "BoundaryDetector",
    "ArchGraphError",
    "ConfigError",
    "ScanRootNotFoundError",
]
