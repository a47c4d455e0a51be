"""
Mermaid Diagram Generator
=========================

Renders dependency data as Mermaid flowcharts:

- generate_flowchart: files grouped into subgraphs per directory (or per
  detected service), cycle members highlighted, external packages listed
- generate_module_diagram: one module and its direct neighbours
- generate_boundary_diagram: services, shared kernel and service dependencies
"""

from __future__ import annotations

import posixpath
import re
from collections import defaultdict

from ..models.analysis_models import BoundaryReport, Cycle
from ..models.graph_models import DependencyGraph

MAX_EXTERNAL = 20
MAX_FILES_PER_SERVICE = 10

_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9]")
_UNDERSCORES = re.compile(r"_+")


def sanitize_id(value: str) -> str:
    """Turn an arbitrary string into a Mermaid-safe identifier."""
    cleaned = _UNDERSCORES.sub("_", _ID_UNSAFE.sub("_", value)).strip("_")
    return cleaned or "node"


def escape_label(value: str) -> str:
    """Replace characters Mermaid treats as syntax inside [labels]."""
    return (
        value.replace('"', "'")
        .replace("[", "(")
        .replace("]", ")")
        .replace(">", ")")
        .replace("<", "(")
    )


class _IdAllocator:
    """Stable, collision-free ids (a-b.js and a_b.js must not share one)."""

    def __init__(self):
        self._ids: dict[str, str] = {}
        self._used: set[str] = set()

    def __call__(self, key: str, hint: str | None = None) -> str:
        if key not in self._ids:
            base = sanitize_id(hint or key)
            candidate = base
            n = 2
            while candidate in self._used:
                candidate = f"{base}_{n}"
                n += 1
            self._used.add(candidate)
            self._ids[key] = candidate
        return self._ids[key]


class MermaidGenerator:
    """Generates Mermaid diagrams from dependency data."""

    def __init__(
        self,
        direction: str = "TD",
        max_nodes: int = 50,
        show_external: bool = True,
    ):
        self.direction = direction
        self.max_nodes = max_nodes
        self.show_external = show_external

    def generate_flowchart(
        self,
        graph: DependencyGraph,
        cycles: list[Cycle] | None = None,
        boundaries: BoundaryReport | None = None,
    ) -> str:
        """
        Generate a flowchart of the whole graph.

        Only the first max_nodes files are drawn; a comment records the
        truncation. With boundaries, files are grouped by service instead of
        by directory.
        """
        data = graph.to_dict()
        nodes = data["nodes"]
        shown = nodes[: self.max_nodes]
        shown_ids = {node["id"] for node in shown}
        node_id = _IdAllocator()

        lines = [f"flowchart {self.direction}"]
        lines.append("    classDef cycle fill:#f96,stroke:#f00,stroke-width:2px")
        lines.append("    classDef external fill:#ddd,stroke:#999")

        for group, members in self._group_nodes(shown, boundaries).items():
            group_label = group or "Root"
            lines.append(f"    subgraph {node_id('group:' + group_label)}[{escape_label(group_label)}]")
            for node in members:
                label = posixpath.basename(node["name"])
                lines.append(f"        {node_id(node['id'], node['name'])}[{escape_label(label)}]")
            lines.append("    end")

        for edge in data["edges"]:
            if edge["from"] in shown_ids and edge["to"] in shown_ids:
                lines.append(f"    {node_id(edge['from'])} --> {node_id(edge['to'])}")

        cycle_members = sorted({p for cycle in cycles or [] for p in cycle.path if p in shown_ids})
        if cycle_members:
            lines.append("")
            lines.append("    %% Circular dependencies")
            for path in cycle_members:
                lines.append(f"    class {node_id(path)} cycle")

        external = data["external"][:MAX_EXTERNAL]
        if self.show_external and external:
            lines.append("")
            lines.append(f"    subgraph {node_id('group:external')}[External Dependencies]")
            for dep in external:
                lines.append(f"        {node_id('ext:' + dep)}[{escape_label(dep)}]:::external")
            lines.append("    end")

        if len(nodes) > self.max_nodes:
            lines.append("")
            lines.append(f"    %% Showing {self.max_nodes} of {len(nodes)} files")

        return "\n".join(lines) + "\n"

    def generate_module_diagram(self, graph: DependencyGraph, module_path: str) -> str:
        """Flat diagram of the files under module_path and their direct neighbours."""
        prefix = module_path.strip("/") + "/"
        data = graph.to_dict()
        names = {node["id"]: node["name"] for node in data["nodes"]}
        in_module = {path for path, name in names.items() if name.startswith(prefix)}

        edges = [e for e in data["edges"] if e["from"] in in_module or e["to"] in in_module]
        related = sorted(in_module | {e["from"] for e in edges} | {e["to"] for e in edges})
        node_id = _IdAllocator()

        lines = ["flowchart LR"]
        for path in related:
            lines.append(f"    {node_id(path, names[path])}[{escape_label(names[path])}]")
        for edge in edges:
            lines.append(f"    {node_id(edge['from'])} --> {node_id(edge['to'])}")
        return "\n".join(lines) + "\n"

    def generate_boundary_diagram(self, boundaries: BoundaryReport) -> str:
        """Services as subgraphs, the shared kernel and service-level dependencies."""
        if not boundaries.services:
            return "flowchart TD\n    empty[No services detected]\n"

        node_id = _IdAllocator()
        lines = ["flowchart TB"]

        if boundaries.shared:
            lines.append(f"    subgraph {node_id('group:shared')}[Shared Kernel]")
            for name in boundaries.shared[:MAX_FILES_PER_SERVICE]:
                lines.append(f"        {node_id('shared:' + name)}[{escape_label(posixpath.basename(name))}]")
            lines.append("    end")

        for service in boundaries.services:
            lines.append(f"    subgraph {node_id('svc:' + service.name)}[{escape_label(service.name)}]")
            for name in service.file_names[:MAX_FILES_PER_SERVICE]:
                lines.append(f"        {node_id(name)}[{escape_label(posixpath.basename(name))}]")
            lines.append("    end")

        for service in boundaries.services:
            for dep in service.dependencies:
                lines.append(f"    {node_id('svc:' + service.name)} --> {node_id('svc:' + dep)}")

        return "\n".join(lines) + "\n"

    def _group_nodes(self, nodes: list[dict], boundaries: BoundaryReport | None) -> dict[str, list[dict]]:
        groups: dict[str, list[dict]] = defaultdict(list)
        if boundaries is not None:
            owner = {path: s.name for s in boundaries.services for path in s.files}
            for node in nodes:
                groups[owner.get(node["id"], "shared")].append(node)
        else:
            for node in nodes:
                directory = posixpath.dirname(node["name"])
                groups[directory].append(node)
        return dict(groups)
