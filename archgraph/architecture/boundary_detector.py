"""
Service Boundary Detector
=========================

Proposes candidate service boundaries by clustering the cohesion modules of a
dependency graph.

1. Seed one cluster per directory module.
2. Repeatedly merge the most entangled pair of clusters, as long as at least
   one of the two is not already cohesive and the edges between them
   outweigh their internal edges by more than the merge ratio.
3. Pull files that are imported from two or more clusters into a shared
   kernel.
4. Score every remaining cluster and derive suggestions.

Every merge removes one cluster, so the loop ends after at most n - 1 merges.
"""

from __future__ import annotations

import logging
import posixpath
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import combinations

from ..config import AnalysisConfig
from ..models.analysis_models import (
    BoundaryReport,
    BoundarySuggestion,
    CohesionReport,
    CouplingReport,
    ServiceCluster,
)
from ..models.graph_models import DependencyGraph

logger = logging.getLogger(__name__)


# context -> keywords looked up in directory and file names
BOUNDED_CONTEXTS = {
    "auth": ["login", "logout", "session", "token", "jwt", "password", "auth"],
    "users": ["user", "profile", "account", "member"],
    "billing": ["payment", "invoice", "subscription", "billing", "charge"],
    "notification": ["email", "sms", "notification", "alert", "message"],
    "data": ["model", "entity", "schema", "repository", "dao"],
    "api": ["route", "handler", "controller", "endpoint"],
    "core": ["utils", "helper", "common", "shared", "lib"],
}

MAX_SUGGESTED_FILES = 5
LOW_QUALITY = 30


def detect_bounded_context(name: str, file_names: list[str]) -> str:
    """Guess the business context of a cluster from its names."""
    name_lower = name.lower()
    combined = name_lower + " " + " ".join(posixpath.basename(f).lower() for f in file_names)

    for context, keywords in BOUNDED_CONTEXTS.items():
        matches = [k for k in keywords if k in combined]
        if len(matches) >= 2 or context in name_lower:
            return context
    return "unknown"


def connected_components(files: set[str], graph: DependencyGraph) -> list[list[str]]:
    """Weakly connected components of the subgraph induced by `files`."""
    visited: set[str] = set()
    components = []

    for start in sorted(files):
        if start in visited:
            continue
        component = []
        queue = [start]
        visited.add(start)
        while queue:
            current = queue.pop()
            component.append(current)
            for neighbor in graph.imports_of(current) | graph.importers_of(current):
                if neighbor in files and neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)
        components.append(sorted(component))

    return components


@dataclass
class _Cluster:
    """Mutable working cluster used while merging."""

    modules: dict[str, int] = field(default_factory=dict)  # seed module -> file count
    files: set[str] = field(default_factory=set)

    @property
    def name(self) -> str:
        # Dominant seed: most files, ties by name
        return min(self.modules.items(), key=lambda item: (-item[1], item[0]))[0]


class BoundaryDetector:
    """Detects candidate service boundaries from graph, coupling and cohesion data."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    def detect(
        self,
        graph: DependencyGraph,
        coupling: CouplingReport,
        cohesion: CohesionReport,
    ) -> BoundaryReport:
        """
        Detect service boundaries.

        Returns:
            BoundaryReport where every graph file is in exactly one service or
            in the shared kernel.
        """
        clusters = [
            _Cluster(modules={module.name: module.file_count}, files={f for f in module.files if f in graph})
            for module in cohesion.modules
        ]
        clusters = [c for c in clusters if c.files]

        merges = self._merge_clusters(clusters, graph)
        shared = self._extract_shared_kernel(clusters, graph)
        clusters = [c for c in clusters if c.files]

        file_service = {path: cluster.name for cluster in clusters for path in cluster.files}
        hub_paths = {hub.file for hub in coupling.hubs}
        total_files = len(graph)

        services = [self._build_service(c, graph, file_service, hub_paths, total_files) for c in clusters]
        services.sort(key=lambda s: (-s.quality, s.name))

        shared_usage = {}
        for path in sorted(shared, key=graph.relative_path):
            users = {file_service[p] for p in graph.importers_of(path) if p in file_service}
            shared_usage[graph.relative_path(path)] = sorted(users)

        report = BoundaryReport(
            services=services,
            shared=list(shared_usage),
            shared_usage=shared_usage,
            merges_performed=merges,
        )
        report.suggestions = self._generate_suggestions(report, graph)

        logger.info(
            "Detected %d candidate services (%d merges, %d shared files)",
            len(services),
            merges,
            len(shared),
        )
        return report

    # ------------------------------------------------------------------
    # Clustering
    # ------------------------------------------------------------------

    def _merge_clusters(self, clusters: list[_Cluster], graph: DependencyGraph) -> int:
        """Merge entangled clusters in place. Returns the number of merges."""
        merges = 0

        while len(clusters) > 1:
            owner = {path: i for i, cluster in enumerate(clusters) for path in cluster.files}
            internal = [0] * len(clusters)
            external = [0] * len(clusters)
            cross: dict[tuple[int, int], int] = defaultdict(int)

            for edge in graph.edges:
                a = owner.get(edge.from_file)
                b = owner.get(edge.to_file)
                if a is None or b is None:
                    continue
                if a == b:
                    internal[a] += 1
                else:
                    external[a] += 1
                    external[b] += 1
                    cross[(min(a, b), max(a, b))] += 1

            cohesion = [
                internal[i] / (internal[i] + external[i]) if internal[i] + external[i] else 0.0
                for i in range(len(clusters))
            ]

            best = None
            for (a, b), count in cross.items():
                if cohesion[a] >= self.config.cohesion_threshold and cohesion[b] >= self.config.cohesion_threshold:
                    continue
                ratio = count / max(1, internal[a] + internal[b])
                if ratio <= self.config.merge_ratio:
                    continue
                key = (-ratio, clusters[a].name, clusters[b].name)
                if best is None or key < best[0]:
                    best = (key, a, b)

            if best is None:
                break

            _, a, b = best
            logger.debug("Merging %s into %s (ratio %.2f)", clusters[b].name, clusters[a].name, -best[0][0])
            clusters[a].files |= clusters[b].files
            clusters[a].modules.update(clusters[b].modules)
            del clusters[b]
            merges += 1

        return merges

    def _extract_shared_kernel(self, clusters: list[_Cluster], graph: DependencyGraph) -> set[str]:
        """Move files imported from two or more other clusters into the shared kernel."""
        owner = {path: i for i, cluster in enumerate(clusters) for path in cluster.files}
        shared = set()

        for path, own in owner.items():
            users = {owner[p] for p in graph.importers_of(path) if p in owner and owner[p] != own}
            if len(users) >= 2:
                shared.add(path)

        for cluster in clusters:
            cluster.files -= shared
        return shared

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _build_service(
        self,
        cluster: _Cluster,
        graph: DependencyGraph,
        file_service: dict[str, str],
        hub_paths: set[str],
        total_files: int,
    ) -> ServiceCluster:
        name = cluster.name
        files = sorted(cluster.files, key=graph.relative_path)
        internal = 0
        afferent = 0
        efferent = 0
        dependencies = set()

        for path in files:
            for target in graph.imports_of(path):
                if target in cluster.files:
                    internal += 1
                else:
                    efferent += 1
                    target_service = file_service.get(target)
                    if target_service is not None:
                        dependencies.add(target_service)
            afferent += len(graph.importers_of(path) - cluster.files)

        external = afferent + efferent
        cohesion = internal / (internal + external) if internal + external else 0.0
        file_names = [graph.relative_path(p) for p in files]

        return ServiceCluster(
            name=name,
            files=files,
            file_names=file_names,
            dependencies=sorted(dependencies),
            quality=self._quality(cohesion, external, len(files), total_files),
            cohesion=round(cohesion, 3),
            internal_edges=internal,
            external_edges=external,
            instability=efferent / external if external else 0.0,
            hub_files=[graph.relative_path(p) for p in files if p in hub_paths],
            source_modules=sorted(cluster.modules),
            context=detect_bounded_context(name, file_names),
        )

    def _quality(self, cohesion: float, external_edges: int, file_count: int, total_files: int) -> int:
        """
        100 * (w_cohesion * cohesion + w_coupling * (1 - min(1, external / files)))
        minus the size penalty for too small or too large services, clamped to 0-100.
        """
        config = self.config
        coupling_score = 1 - min(1.0, external_edges / file_count) if file_count else 0.0
        score = 100 * (config.quality_cohesion_weight * cohesion + config.quality_coupling_weight * coupling_score)

        if file_count < config.min_service_files or file_count > config.max_service_ratio * total_files:
            score -= config.size_penalty

        return int(round(max(0.0, min(100.0, score))))

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def _generate_suggestions(self, report: BoundaryReport, graph: DependencyGraph) -> list[BoundarySuggestion]:
        suggestions = []
        by_name = {service.name: service for service in report.services}

        # Mutually dependent services
        for a, b in combinations(sorted(by_name), 2):
            if b in by_name[a].dependencies and a in by_name[b].dependencies:
                suggestions.append(
                    BoundarySuggestion(
                        type="merge-services",
                        message=f"Services {a} and {b} depend on each other - consider merging them",
                        services=(a, b),
                    )
                )

        small = sorted(s.name for s in report.services if s.file_count < self.config.min_service_files)
        if len(small) >= 2:
            suggestions.append(
                BoundarySuggestion(
                    type="merge-services",
                    message=f"Consider merging small services: {', '.join(small)}",
                    services=tuple(small),
                )
            )

        if report.shared:
            suggestions.append(
                BoundarySuggestion(
                    type="extract-shared",
                    message=f"Consider creating a shared kernel with {len(report.shared)} commonly used files",
                    files=tuple(report.shared[:MAX_SUGGESTED_FILES]),
                )
            )

        for service in report.services:
            if service.file_count <= self.config.split_threshold:
                continue
            components = connected_components(set(service.files), graph)
            if len(components) > 1:
                suggestions.append(
                    BoundarySuggestion(
                        type="split-service",
                        message=(
                            f'Service "{service.name}" has {service.file_count} files in '
                            f"{len(components)} independent groups - consider splitting"
                        ),
                        services=(service.name,),
                        groups=tuple(
                            tuple(graph.relative_path(f) for f in component) for component in components
                        ),
                    )
                )

        for service in report.services:
            if service.quality < LOW_QUALITY and service.file_count >= self.config.min_service_files:
                suggestions.append(
                    BoundarySuggestion(
                        type="improve-boundary",
                        message=f'Service "{service.name}" has low boundary quality ({service.quality}/100)',
                        services=(service.name, *service.dependencies),
                    )
                )

        return suggestions
