"""
Data Models for Analysis Results
================================

Result types produced by the circular dependency, coupling, cohesion and
service boundary passes. All of them are derived, read-only values computed
from a DependencyGraph and discarded after reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# =============================================================================
# CIRCULAR DEPENDENCIES
# =============================================================================

@dataclass(frozen=True)
class Cycle:
    """A dependency cycle in canonical rotation (smallest path first)."""

    path: tuple[str, ...]
    path_names: tuple[str, ...]

    @property
    def length(self) -> int:
        return len(self.path)

    def edges(self) -> list[tuple[str, str]]:
        """Edges of the cycle, including the closing edge back to the start."""
        return [(self.path[i], self.path[(i + 1) % len(self.path)]) for i in range(len(self.path))]

    def chain(self) -> str:
        """Human-readable chain: a -> b -> c -> a"""
        return " -> ".join([*self.path_names, self.path_names[0]])

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "path": list(self.path),
            "path_names": list(self.path_names),
            "length": self.length,
        }


@dataclass(frozen=True)
class CycleBreakSuggestion:
    """Proposed import to remove in order to break a cycle."""

    cycle_index: int
    break_at: str
    break_at_name: str
    remove_from: str
    remove_to: str
    remove_from_name: str
    remove_to_name: str
    external_dependents: int
    reason: str

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "cycle_index": self.cycle_index,
            "break_at": self.break_at,
            "break_at_name": self.break_at_name,
            "remove_import": {
                "from": self.remove_from,
                "from_name": self.remove_from_name,
                "to": self.remove_to,
                "to_name": self.remove_to_name,
            },
            "external_dependents": self.external_dependents,
            "reason": self.reason,
        }


@dataclass
class CircularReport:
    """Result of circular dependency detection."""

    cycles: list[Cycle] = field(default_factory=list)
    suggestions: list[CycleBreakSuggestion] = field(default_factory=list)

    # Stats
    total_nodes: int = 0
    total_edges: int = 0
    nodes_in_cycles: int = 0

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def cycle_count(self) -> int:
        return len(self.cycles)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "has_cycles": self.has_cycles,
            "cycle_count": self.cycle_count,
            "cycles": [cycle.to_dict() for cycle in self.cycles],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "stats": {
                "total_nodes": self.total_nodes,
                "total_edges": self.total_edges,
                "nodes_in_cycles": self.nodes_in_cycles,
            },
        }


# =============================================================================
# COUPLING
# =============================================================================

@dataclass(frozen=True)
class FileCoupling:
    """Coupling metrics for one file."""

    file: str
    name: str
    afferent_coupling: int = 0  # Ca: files importing this one
    efferent_coupling: int = 0  # Ce: files this one imports
    instability: float = 0.0  # Ce / (Ca + Ce)

    @property
    def total_coupling(self) -> int:
        return self.afferent_coupling + self.efferent_coupling

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "file": self.file,
            "name": self.name,
            "afferent_coupling": self.afferent_coupling,
            "efferent_coupling": self.efferent_coupling,
            "total_coupling": self.total_coupling,
            "instability": round(self.instability, 3),
        }


@dataclass(frozen=True)
class ModuleCoupling:
    """Coupling metrics for a directory module (edges crossing its border)."""

    module: str
    file_count: int = 0
    afferent_coupling: int = 0
    efferent_coupling: int = 0
    instability: float = 0.0

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "module": self.module,
            "file_count": self.file_count,
            "afferent_coupling": self.afferent_coupling,
            "efferent_coupling": self.efferent_coupling,
            "instability": round(self.instability, 3),
        }


@dataclass
class CouplingMatrix:
    """Adjacency matrix over an explicit file -> index map."""

    files: list[str] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)
    matrix: list[list[int]] = field(default_factory=list)

    def imports(self, source: str, target: str) -> bool:
        """True if `source` imports `target`."""
        i = self.index.get(source)
        j = self.index.get(target)
        if i is None or j is None:
            return False
        return self.matrix[i][j] == 1

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"files": list(self.files), "matrix": [list(row) for row in self.matrix]}


@dataclass
class CouplingReport:
    """Result of coupling analysis."""

    files: list[FileCoupling] = field(default_factory=list)
    hubs: list[FileCoupling] = field(default_factory=list)
    dependent: list[FileCoupling] = field(default_factory=list)
    isolated: list[str] = field(default_factory=list)
    highly_coupled: list[FileCoupling] = field(default_factory=list)
    modules: list[ModuleCoupling] = field(default_factory=list)

    @property
    def summary(self) -> dict:
        return {
            "total_files": len(self.files),
            "hub_count": len(self.hubs),
            "dependent_count": len(self.dependent),
            "isolated_count": len(self.isolated),
            "highly_coupled_count": len(self.highly_coupled),
        }

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "files": [f.to_dict() for f in self.files],
            "hubs": [f.to_dict() for f in self.hubs],
            "dependent": [f.to_dict() for f in self.dependent],
            "isolated": list(self.isolated),
            "highly_coupled": [f.to_dict() for f in self.highly_coupled],
            "modules": [m.to_dict() for m in self.modules],
            "summary": self.summary,
        }


# =============================================================================
# COHESION
# =============================================================================

@dataclass
class ModuleCohesion:
    """Cohesion of a directory-scoped module."""

    name: str
    files: list[str] = field(default_factory=list)  # absolute paths
    file_names: list[str] = field(default_factory=list)  # relative paths
    internal_deps: int = 0
    external_deps: int = 0
    cohesion: float = 0.0
    has_edges: bool = False

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def single_file(self) -> bool:
        return len(self.files) == 1

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "module": self.name,
            "files": list(self.file_names),
            "file_count": self.file_count,
            "internal_deps": self.internal_deps,
            "external_deps": self.external_deps,
            "cohesion": self.cohesion,
            "has_edges": self.has_edges,
            "single_file": self.single_file,
        }


@dataclass(frozen=True)
class MoveSuggestion:
    """A file that depends more on another module than on its own."""

    file: str
    from_module: str
    to_module: str
    reason: str
    impact: float

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "type": "move",
            "file": self.file,
            "from": self.from_module,
            "to": self.to_module,
            "reason": self.reason,
            "impact": self.impact,
        }


@dataclass
class CohesionReport:
    """Result of cohesion analysis."""

    modules: list[ModuleCohesion] = field(default_factory=list)
    low_cohesion: list[ModuleCohesion] = field(default_factory=list)
    isolated_modules: list[ModuleCohesion] = field(default_factory=list)
    suggestions: list[MoveSuggestion] = field(default_factory=list)
    average_cohesion: float = 0.0

    def get_module(self, name: str) -> ModuleCohesion | None:
        """Get a module by name."""
        for module in self.modules:
            if module.name == name:
                return module
        return None

    @property
    def summary(self) -> dict:
        return {
            "total_modules": len(self.modules),
            "average_cohesion": self.average_cohesion,
            "low_cohesion_count": len(self.low_cohesion),
            "isolated_module_count": len(self.isolated_modules),
        }

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "modules": [m.to_dict() for m in self.modules],
            "low_cohesion": [m.to_dict() for m in self.low_cohesion],
            "isolated_modules": [m.name for m in self.isolated_modules],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "summary": self.summary,
        }


# =============================================================================
# SERVICE BOUNDARIES
# =============================================================================

@dataclass
class ServiceCluster:
    """A candidate independently deployable service."""

    name: str
    files: list[str] = field(default_factory=list)  # absolute paths
    file_names: list[str] = field(default_factory=list)  # relative paths
    dependencies: list[str] = field(default_factory=list)  # other service names
    quality: int = 0  # 0-100

    # Boundary metrics
    cohesion: float = 0.0
    internal_edges: int = 0
    external_edges: int = 0
    instability: float = 0.0
    hub_files: list[str] = field(default_factory=list)
    source_modules: list[str] = field(default_factory=list)
    context: str = "unknown"  # inferred bounded context

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "files": list(self.file_names),
            "file_count": self.file_count,
            "dependencies": list(self.dependencies),
            "quality": self.quality,
            "cohesion": self.cohesion,
            "internal_edges": self.internal_edges,
            "external_edges": self.external_edges,
            "instability": round(self.instability, 3),
            "hub_files": list(self.hub_files),
            "source_modules": list(self.source_modules),
            "context": self.context,
        }


@dataclass(frozen=True)
class BoundarySuggestion:
    """A derived observation about the proposed boundaries."""

    type: str  # merge-services, extract-shared, split-service, improve-boundary
    message: str
    services: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    # split-service only: the independent file groups, by relative path
    groups: tuple[tuple[str, ...], ...] = ()

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {
            "type": self.type,
            "message": self.message,
            "services": list(self.services),
            "files": list(self.files),
        }
        if self.groups:
            data["suggested_split"] = [list(group) for group in self.groups]
        return data


@dataclass
class BoundaryReport:
    """Result of service boundary detection."""

    services: list[ServiceCluster] = field(default_factory=list)
    shared: list[str] = field(default_factory=list)  # relative paths
    shared_usage: dict[str, list[str]] = field(default_factory=dict)  # file -> services
    suggestions: list[BoundarySuggestion] = field(default_factory=list)
    merges_performed: int = 0

    def get_service(self, name: str) -> ServiceCluster | None:
        """Get a service by name."""
        for service in self.services:
            if service.name == name:
                return service
        return None

    @property
    def stats(self) -> dict:
        qualities = [s.quality for s in self.services]
        return {
            "total_services": len(self.services),
            "total_shared": len(self.shared),
            "merges_performed": self.merges_performed,
            "average_quality": round(sum(qualities) / len(qualities), 1) if qualities else 0.0,
        }

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "services": [s.to_dict() for s in self.services],
            "shared": list(self.shared),
            "shared_usage": {k: list(v) for k, v in self.shared_usage.items()},
            "suggestions": [s.to_dict() for s in self.suggestions],
            "stats": self.stats,
        }
