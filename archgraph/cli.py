"""
archgraph command line interface.

    archgraph [PATH] [--format text|json|markdown] [--output FILE] [--diagram]
              [--circular] [--metrics] [--boundaries] [--target SUBDIR]
              [--config FILE] [--workers N] [--fail-on-cycles] [--verbose]

Exit codes:
    0  success
    1  fatal error (missing scan root, invalid configuration)
    2  --fail-on-cycles was given and circular dependencies were found
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .analyzer import SECTION_BOUNDARIES, SECTION_CIRCULAR, SECTION_METRICS, ArchitectureAnalyzer
from .config import ConfigLoader, load_config
from .exceptions import ArchGraphError
from .reporting.formatters import FORMATS, format_report
from .reporting.mermaid import MermaidGenerator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CYCLES = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="archgraph",
        description="Analyze a codebase's file dependency graph: cycles, coupling, cohesion and service boundaries.",
    )
    p.add_argument("path", nargs="?", default=".", help="Project root to analyze (default: cwd).")
    p.add_argument("--format", choices=FORMATS, default="text", help="Report format (default: text).")
    p.add_argument(
        "--output",
        type=str,
        default="",
        help="Write the report to this file path. If omitted, prints to stdout.",
    )
    p.add_argument("--diagram", action="store_true", help="Include a Mermaid dependency diagram.")
    p.add_argument("--circular", action="store_true", help="Report circular dependencies.")
    p.add_argument("--metrics", action="store_true", help="Report coupling and cohesion metrics.")
    p.add_argument("--boundaries", action="store_true", help="Report candidate service boundaries.")
    p.add_argument(
        "--target",
        type=str,
        default="",
        help="Only scan this sub-directory of the project (paths stay relative to the project root).",
    )
    p.add_argument(
        "--config",
        type=str,
        default="",
        help="Explicit config file. If omitted, .archgraph/config.{json,yaml,yml} is used when present.",
    )
    p.add_argument("--workers", type=int, default=None, help="Worker threads for graph construction.")
    p.add_argument(
        "--fail-on-cycles",
        action="store_true",
        help="Exit with code 2 if any circular dependency is found.",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _selected_sections(args: argparse.Namespace) -> set[str]:
    sections = set()
    if args.circular:
        sections.add(SECTION_CIRCULAR)
    if args.metrics:
        sections.add(SECTION_METRICS)
    if args.boundaries:
        sections.add(SECTION_BOUNDARIES)
    if not sections:
        sections = {SECTION_CIRCULAR, SECTION_METRICS, SECTION_BOUNDARIES}
    if args.fail_on_cycles or args.diagram:
        sections.add(SECTION_CIRCULAR)
    return sections


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    project_dir = Path(args.path).expanduser()

    try:
        if args.config:
            config = load_config(Path(args.config).expanduser())
        else:
            config = ConfigLoader(project_dir).load()
        if args.workers is not None:
            if args.workers < 1:
                raise ArchGraphError("--workers must be at least 1")
            config.max_workers = args.workers

        analyzer = ArchitectureAnalyzer(project_dir, config)
        result = analyzer.analyze(
            target_path=args.target or None,
            sections=_selected_sections(args),
        )
    except ArchGraphError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    diagram = None
    if args.diagram:
        generator = MermaidGenerator(max_nodes=config.max_diagram_nodes)
        diagram = generator.generate_flowchart(
            result.graph,
            cycles=result.circular.cycles if result.circular else None,
            boundaries=result.boundaries,
        )

    out = format_report(result, args.format, diagram=diagram)
    if args.output:
        try:
            Path(args.output).write_text(out + "\n", encoding="utf-8")
        except OSError as e:
            print(f"error: Failed to write report to {args.output}: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("Report written to %s", args.output)
    else:
        print(out)

    if args.fail_on_cycles and result.has_cycles:
        return EXIT_CYCLES

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
