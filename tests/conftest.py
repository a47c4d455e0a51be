"""
Shared pytest fixtures.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from archgraph.config import AnalysisConfig
from archgraph.dependency.graph_builder import DependencyGraphBuilder
from archgraph.models.graph_models import DependencyGraph, FileNode

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FAKE_ROOT = "/project"


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create temporary directory for tests."""
    return tmp_path


@pytest.fixture
def python_project(tmp_path: Path) -> Path:
    """Copy of the sample Python project."""
    project_path = tmp_path / "python_project"
    shutil.copytree(FIXTURES_DIR / "sample_python_project", project_path)
    return project_path


@pytest.fixture
def js_project(tmp_path: Path) -> Path:
    """Copy of the sample JS/TS project (with a tsconfig path alias)."""
    project_path = tmp_path / "js_project"
    shutil.copytree(FIXTURES_DIR / "sample_js_project", project_path)
    return project_path


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """
    Factory writing {relative path: source} to a fresh project directory.

    Usage:
        root = make_project({"a.js": "import './b';", "b.js": ""})
    """

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root.resolve()

    return _make


@pytest.fixture
def build_graph() -> Callable[..., DependencyGraph]:
    """Build a graph for a directory on disk."""

    def _build(root: Path, config: AnalysisConfig | None = None) -> DependencyGraph:
        return DependencyGraphBuilder(root, config or AnalysisConfig(max_workers=2)).build_from_directory()

    return _build


@pytest.fixture
def make_graph() -> Callable[..., DependencyGraph]:
    """
    Build a graph in memory from an adjacency mapping of relative names.

    Usage:
        graph = make_graph({"a.js": ["b.js"], "b.js": []})
        graph.imports_of(path("a.js"))
    """

    def _make(adjacency: dict[str, list[str]], external: dict[str, list[str]] | None = None) -> DependencyGraph:
        external = external or {}
        names = set(adjacency) | {t for targets in adjacency.values() for t in targets}
        nodes = [
            FileNode(
                path=path(name),
                relative_path=name,
                imports=frozenset(path(t) for t in adjacency.get(name, [])),
                external_imports=frozenset(external.get(name, [])),
            )
            for name in names
        ]
        return DependencyGraph(FAKE_ROOT, nodes)

    return _make


def path(name: str) -> str:
    """Absolute path of a relative name inside the in-memory project."""
    return f"{FAKE_ROOT}/{name}"


@pytest.fixture
def abs_path() -> Callable[[str], str]:
    """Map relative names used with make_graph to node paths."""
    return path
