#!/usr/bin/env python3
"""
Tests for the Architecture Analyzer
===================================

Tests the end-to-end pipeline:
- Full analysis of sample projects
- Section selection
- Target sub-directories
- Error handling
- Result serialization
"""

import json
from pathlib import Path

import pytest

from archgraph.analyzer import ArchitectureAnalyzer
from archgraph.config import AnalysisConfig
from archgraph.exceptions import ScanRootNotFoundError


@pytest.fixture
def cyclic_project(make_project):
    """A→B→C→A plus an isolated D."""
    return make_project({
        "a.js": "import b from './b';",
        "b.js": "import c from './c';",
        "c.js": "import a from './a';",
        "d.js": "export const d = 1;",
    })


class TestFullAnalysis:
    """Tests for a complete run."""

    def test_cycle_and_isolated_file(self, cyclic_project):
        result = ArchitectureAnalyzer(cyclic_project, AnalysisConfig(max_workers=2)).analyze()

        assert result.has_cycles
        assert result.circular.cycle_count == 1
        assert set(result.circular.cycles[0].path_names) == {"a.js", "b.js", "c.js"}

        d = str(cyclic_project / "d.js")
        assert result.coupling.isolated == [d]
        metrics = next(m for m in result.coupling.files if m.file == d)
        assert (metrics.afferent_coupling, metrics.efferent_coupling) == (0, 0)

    def test_summary(self, js_project):
        result = ArchitectureAnalyzer(js_project).analyze()

        assert result.summary.total_files == 6
        assert result.summary.total_dependencies == 5
        assert result.summary.external_dependencies == 3
        assert result.summary.cycles_found == 0
        assert result.summary.suggested_services == len(result.boundaries.services)

    def test_warnings_are_surfaced(self, make_project):
        root = make_project({"ok.js": ""})
        (root / "bad.js").write_bytes(b"\xff\xfe\xfa")

        result = ArchitectureAnalyzer(root).analyze()

        assert len(result.warnings) == 1
        assert result.summary.total_files == 1

    def test_runs_are_independent(self, cyclic_project):
        analyzer = ArchitectureAnalyzer(cyclic_project)

        first = analyzer.analyze()
        (cyclic_project / "c.js").write_text("export const c = 1;")
        second = analyzer.analyze()

        assert first.has_cycles
        assert not second.has_cycles


class TestSections:
    """Tests for running a subset of the passes."""

    def test_circular_only(self, cyclic_project):
        result = ArchitectureAnalyzer(cyclic_project).analyze(sections=["circular"])

        assert result.circular is not None
        assert result.coupling is None
        assert result.cohesion is None
        assert result.boundaries is None
        assert result.summary.suggested_services == 0

    def test_boundaries_without_metrics(self, js_project):
        result = ArchitectureAnalyzer(js_project).analyze(sections=["boundaries"])

        assert result.boundaries is not None
        assert result.coupling is None
        assert result.cohesion is None
        assert result.circular is None
        # Cohesion still ran to feed the boundary pass
        assert result.summary.average_cohesion > 0

    def test_unknown_section(self, cyclic_project):
        with pytest.raises(ValueError, match="Unknown analysis sections"):
            ArchitectureAnalyzer(cyclic_project).analyze(sections=["circular", "bogus"])


class TestTargets:
    """Tests for scanning part of a project."""

    def test_target_subdirectory(self, js_project):
        result = ArchitectureAnalyzer(js_project).analyze(target_path="src/utils")

        names = sorted(result.graph.relative_path(f) for f in result.graph.files())
        assert names == ["src/utils/format.js", "src/utils/index.js"]
        assert result.root == str(js_project.resolve())

    def test_missing_project(self, temp_dir: Path):
        with pytest.raises(ScanRootNotFoundError):
            ArchitectureAnalyzer(temp_dir / "missing")

    def test_missing_target(self, js_project):
        with pytest.raises(ScanRootNotFoundError):
            ArchitectureAnalyzer(js_project).analyze(target_path="nope")


class TestSerialization:
    """Tests for ArchitectureResult.to_dict()."""

    def test_to_dict_is_json_serializable(self, python_project):
        result = ArchitectureAnalyzer(python_project).analyze()

        data = json.loads(json.dumps(result.to_dict()))

        assert set(data) >= {"root", "summary", "graph", "circular", "coupling", "cohesion", "boundaries", "warnings"}
        assert data["summary"]["total_files"] == 4
        assert data["graph"]["stats"]["total_edges"] == 3

    def test_to_dict_without_graph(self, python_project):
        result = ArchitectureAnalyzer(python_project).analyze(sections=["circular"])

        data = result.to_dict(include_graph=False)

        assert "graph" not in data
        assert "coupling" not in data
        assert data["circular"]["has_cycles"] is False
