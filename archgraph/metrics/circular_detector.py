"""
Circular Dependency Detector
============================

Finds import cycles in a DependencyGraph and suggests where to break them.

Detection is an iterative depth-first search with an explicit on-stack index,
so deep import chains cannot hit the interpreter's recursion limit. Each back
edge to a node still on the stack yields the stack slice from that node to
the top as a candidate cycle, stored in canonical rotation (smallest path
first). Only one representative is reported per strongly connected
component: the smallest candidate in sorted order. Repeated runs
on the same graph return identical results.
"""

from __future__ import annotations

import logging

from ..models.analysis_models import CircularReport, Cycle, CycleBreakSuggestion
from ..models.graph_models import DependencyGraph

logger = logging.getLogger(__name__)


def canonical_rotation(path: list[str]) -> tuple[str, ...]:
    """Rotate a cycle so that its smallest path comes first."""
    start = path.index(min(path))
    return tuple(path[start:] + path[:start])


def strongly_connected_components(graph: DependencyGraph) -> dict[str, int]:
    """
    Map every file to the id of its strongly connected component.

    Kosaraju's algorithm, iterative in both passes: record finish order
    over imports, then sweep importers in reverse finish order.
    """
    order: list[str] = []
    visited: set[str] = set()
    for start in graph.files():
        if start in visited:
            continue
        visited.add(start)
        stack = [(start, iter(sorted(graph.imports_of(start))))]
        while stack:
            node, neighbors = stack[-1]
            neighbor = next(neighbors, None)
            if neighbor is None:
                order.append(node)
                stack.pop()
            elif neighbor not in visited:
                visited.add(neighbor)
                stack.append((neighbor, iter(sorted(graph.imports_of(neighbor)))))

    component: dict[str, int] = {}
    component_id = -1
    for start in reversed(order):
        if start in component:
            continue
        component_id += 1
        component[start] = component_id
        frontier = [start]
        while frontier:
            node = frontier.pop()
            for importer in graph.importers_of(node):
                if importer not in component:
                    component[importer] = component_id
                    frontier.append(importer)
    return component


class CircularDetector:
    """Detects and reports circular dependencies."""

    def detect(self, graph: DependencyGraph) -> CircularReport:
        """
        Detect all circular dependencies in a graph.

        Returns:
            CircularReport with canonical cycles, one break suggestion per
            cycle and node/edge stats.
        """
        cycles = [
            Cycle(path=path, path_names=tuple(graph.relative_path(p) for p in path))
            for path in self._find_cycles(graph)
        ]
        suggestions = [self._suggest_break_point(i, cycle, graph) for i, cycle in enumerate(cycles)]

        nodes_in_cycles = {path for cycle in cycles for path in cycle.path}
        if cycles:
            logger.info("Found %d circular dependencies across %d files", len(cycles), len(nodes_in_cycles))

        return CircularReport(
            cycles=cycles,
            suggestions=suggestions,
            total_nodes=graph.stats.total_files,
            total_edges=graph.stats.total_edges,
            nodes_in_cycles=len(nodes_in_cycles),
        )

    def has_cycles(self, graph: DependencyGraph) -> bool:
        """Quick boolean check."""
        return bool(self._find_cycles(graph))

    def get_cycles(self, graph: DependencyGraph) -> list[tuple[str, ...]]:
        """Canonical cycle paths only."""
        return self._find_cycles(graph)

    def _find_cycles(self, graph: DependencyGraph) -> list[tuple[str, ...]]:
        visited: set[str] = set()
        seen: set[tuple[str, ...]] = set()
        cycles: list[tuple[str, ...]] = []

        for start in graph.files():
            if start in visited:
                continue

            visited.add(start)
            stack = [start]
            on_stack = {start: 0}
            pending = [iter(sorted(graph.imports_of(start)))]

            while pending:
                neighbor = next(pending[-1], None)

                if neighbor is None:
                    del on_stack[stack.pop()]
                    pending.pop()
                    continue

                if neighbor in on_stack:
                    # Back edge: everything from neighbor to the top is a cycle
                    cycle = canonical_rotation(stack[on_stack[neighbor]:])
                    if len(cycle) >= 2 and cycle not in seen:
                        seen.add(cycle)
                        cycles.append(cycle)
                elif neighbor not in visited:
                    visited.add(neighbor)
                    on_stack[neighbor] = len(stack)
                    stack.append(neighbor)
                    pending.append(iter(sorted(graph.imports_of(neighbor))))

        cycles.sort()
        component = strongly_connected_components(graph)
        representatives: dict[int, tuple[str, ...]] = {}
        for cycle in cycles:
            representatives.setdefault(component[cycle[0]], cycle)
        return sorted(representatives.values())

    def _suggest_break_point(self, index: int, cycle: Cycle, graph: DependencyGraph) -> CycleBreakSuggestion:
        """
        Pick the cycle edge whose source has the fewest dependents outside
        the cycle. Ties go to the first edge in canonical order.
        """
        members = set(cycle.path)
        best_edge = None
        best_score = None

        for source, target in cycle.edges():
            score = len(graph.importers_of(source) - members)
            if best_score is None or score < best_score:
                best_score = score
                best_edge = (source, target)

        source, target = best_edge
        source_name = graph.relative_path(source)
        return CycleBreakSuggestion(
            cycle_index=index,
            break_at=source,
            break_at_name=source_name,
            remove_from=source,
            remove_to=target,
            remove_from_name=source_name,
            remove_to_name=graph.relative_path(target),
            external_dependents=best_score,
            reason=f"{source_name} has fewest dependents ({best_score}), making it safer to refactor",
        )

    def visualize(self, report: CircularReport) -> str:
        """ASCII rendering of every cycle, for terminal output."""
        if not report.cycles:
            return "No circular dependencies detected."

        lines = ["=" * 50, "CIRCULAR DEPENDENCIES DETECTED", "=" * 50, ""]
        for i, cycle in enumerate(report.cycles, 1):
            lines.append(f"Cycle {i}:")
            lines.append(f"  {cycle.chain()}")
            lines.append("")

            width = max(len(name) for name in cycle.path_names)
            for j, name in enumerate(cycle.path_names):
                lines.append(f"  +{'-' * (width + 2)}+")
                lines.append(f"  | {name.ljust(width)} |")
                lines.append(f"  +{'-' * (width + 2)}+")
                lines.append("       |")
                if j < cycle.length - 1:
                    lines.append("       v")
                else:
                    lines.append(f"       ^-- (back to {cycle.path_names[0]})")
            lines.append("")

        return "\n".join(lines)
