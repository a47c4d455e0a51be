"""
Report Formatters
=================

Renders an ArchitectureResult as plain text, JSON or Markdown.
"""

from __future__ import annotations

import json

from ..models.analysis_result import ArchitectureResult

FORMATS = ("text", "json", "markdown")

MAX_SERVICES = 10
MAX_CYCLES = 5
MAX_ROWS = 10
MAX_SUGGESTIONS = 5


def _percent(value: float) -> str:
    return f"{value * 100:.1f}%"


def format_report(result: ArchitectureResult, fmt: str = "text", diagram: str | None = None) -> str:
    """
    Render a result in the requested format.

    Args:
        result: Analysis result
        fmt: One of "text", "json", "markdown"
        diagram: Optional Mermaid diagram to embed

    Raises:
        ValueError: If the format is unknown
    """
    if fmt == "json":
        return format_json(result, diagram)
    if fmt == "markdown":
        return format_markdown(result, diagram)
    if fmt == "text":
        return format_text(result, diagram)
    raise ValueError(f"Unknown report format: {fmt} (expected one of {', '.join(FORMATS)})")


def format_json(result: ArchitectureResult, diagram: str | None = None) -> str:
    data = result.to_dict()
    if diagram is not None:
        data["diagram"] = diagram
    return json.dumps(data, indent=2)


def format_text(result: ArchitectureResult, diagram: str | None = None) -> str:
    s = result.summary
    lines = ["ARCHITECTURE ANALYSIS REPORT", "=" * 50, ""]

    lines.append("SUMMARY")
    lines.append("-" * 30)
    lines.append(f"Total Files:           {s.total_files}")
    lines.append(f"Total Dependencies:    {s.total_dependencies}")
    lines.append(f"External Dependencies: {s.external_dependencies}")
    lines.append(f"Suggested Services:    {s.suggested_services}")
    lines.append(f"Circular Dependencies: {s.cycles_found}")
    lines.append(f"Average Cohesion:      {_percent(s.average_cohesion)}")
    lines.append("")

    if result.boundaries is not None and result.boundaries.services:
        lines.append("SERVICE BOUNDARIES")
        lines.append("-" * 30)
        for service in result.boundaries.services[:MAX_SERVICES]:
            lines.append(f"  {service.name} ({service.file_count} files, quality: {service.quality}/100)")
        if result.boundaries.shared:
            lines.append(f"  shared kernel: {', '.join(result.boundaries.shared)}")
        lines.append("")

    if result.circular is not None and result.circular.has_cycles:
        lines.append("CIRCULAR DEPENDENCIES")
        lines.append("-" * 30)
        lines.append(f"Found {result.circular.cycle_count} cycle(s)")
        for cycle in result.circular.cycles[:MAX_CYCLES]:
            lines.append(f"  {cycle.chain()}")
        lines.append("")

    if result.coupling is not None:
        summary = result.coupling.summary
        lines.append("COUPLING SUMMARY")
        lines.append("-" * 30)
        lines.append(f"Hub Files:          {summary['hub_count']}")
        lines.append(f"Dependent Files:    {summary['dependent_count']}")
        lines.append(f"Isolated Files:     {summary['isolated_count']}")
        lines.append(f"Highly Coupled:     {summary['highly_coupled_count']}")
        lines.append("")

    if result.cohesion is not None and result.cohesion.low_cohesion:
        lines.append("LOW COHESION MODULES")
        lines.append("-" * 30)
        for module in result.cohesion.low_cohesion[:MAX_ROWS]:
            lines.append(f"  {module.name}: {_percent(module.cohesion)}")
        lines.append("")

    if result.warnings:
        lines.append("WARNINGS")
        lines.append("-" * 30)
        lines.extend(f"  {warning}" for warning in result.warnings)
        lines.append("")

    if diagram:
        lines.append("MERMAID DIAGRAM")
        lines.append("-" * 30)
        lines.append(diagram)

    return "\n".join(lines)


def format_markdown(result: ArchitectureResult, diagram: str | None = None) -> str:
    s = result.summary
    lines = ["# Architecture Analysis Report", ""]

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Total Files | {s.total_files} |")
    lines.append(f"| Total Dependencies | {s.total_dependencies} |")
    lines.append(f"| External Dependencies | {s.external_dependencies} |")
    lines.append(f"| Suggested Services | {s.suggested_services} |")
    lines.append(f"| Circular Dependencies | {s.cycles_found} |")
    lines.append(f"| Average Cohesion | {_percent(s.average_cohesion)} |")
    lines.append("")

    boundaries = result.boundaries
    if boundaries is not None and boundaries.services:
        lines.append("## Service Boundaries")
        lines.append("")
        lines.append("### Detected Services")
        lines.append("")
        for service in boundaries.services[:MAX_SERVICES]:
            lines.append(f"- **{service.name}** ({service.file_count} files, quality: {service.quality}/100)")
            if service.dependencies:
                lines.append(f"  - Depends on: {', '.join(service.dependencies)}")
        lines.append("")

        if boundaries.shared:
            lines.append("### Shared Kernel")
            lines.append("")
            for name in boundaries.shared:
                lines.append(f"- `{name}` (used by {', '.join(boundaries.shared_usage.get(name, []))})")
            lines.append("")

        if boundaries.suggestions:
            lines.append("### Suggestions")
            lines.append("")
            for suggestion in boundaries.suggestions[:MAX_SUGGESTIONS]:
                lines.append(f"- {suggestion.message}")
            lines.append("")

    coupling = result.coupling
    if coupling is not None:
        lines.append("## Coupling Metrics")
        lines.append("")
        if coupling.hubs:
            lines.append("### Hub Files (Most Depended Upon)")
            lines.append("")
            lines.append("| File | Dependents |")
            lines.append("|------|------------|")
            for hub in coupling.hubs[:MAX_ROWS]:
                lines.append(f"| {hub.name} | {hub.afferent_coupling} |")
            lines.append("")
        if coupling.highly_coupled:
            lines.append("### Highly Coupled Files")
            lines.append("")
            lines.append("| File | Total | In | Out |")
            lines.append("|------|-------|-----|-----|")
            for item in coupling.highly_coupled[:MAX_ROWS]:
                lines.append(
                    f"| {item.name} | {item.total_coupling} | {item.afferent_coupling} | {item.efferent_coupling} |"
                )
            lines.append("")

    cohesion = result.cohesion
    if cohesion is not None:
        lines.append("## Cohesion Metrics")
        lines.append("")
        if cohesion.low_cohesion:
            lines.append("### Low Cohesion Modules")
            lines.append("")
            lines.append("| Module | Cohesion | Internal | External |")
            lines.append("|--------|----------|----------|----------|")
            for module in cohesion.low_cohesion[:MAX_ROWS]:
                lines.append(
                    f"| {module.name} | {_percent(module.cohesion)} | {module.internal_deps} | {module.external_deps} |"
                )
            lines.append("")
        else:
            lines.append("No low cohesion modules.")
            lines.append("")

    circular = result.circular
    if circular is not None and circular.has_cycles:
        lines.append("## Circular Dependencies")
        lines.append("")
        lines.append(f"Found {circular.cycle_count} cycle(s):")
        lines.append("")
        for i, cycle in enumerate(circular.cycles[:MAX_CYCLES]):
            lines.append(f"### Cycle {i + 1}")
            lines.append("```")
            lines.append(cycle.chain())
            lines.append("```")
            if i < len(circular.suggestions):
                lines.append(f"**Suggestion:** {circular.suggestions[i].reason}")
            lines.append("")

    if result.warnings:
        lines.append("## Warnings")
        lines.append("")
        lines.extend(f"- {warning}" for warning in result.warnings)
        lines.append("")

    if diagram:
        lines.append("## Dependency Diagram")
        lines.append("")
        lines.append("```mermaid")
        lines.append(diagram.rstrip("\n"))
        lines.append("```")
        lines.append("")

    return "\n".join(lines)
