"""
Dependency Analysis Module
==========================

Extracts imports from Python, JavaScript and TypeScript files, resolves them
against the scanned file set and builds the file-level dependency graph.
"""

from __future__ import annotations

from .graph_builder import DependencyGraphBuilder
from .js_parser import JSDependencyParser
from .python_parser import PythonDependencyParser
from .resolver import ImportKind, ImportResolver, ResolvedImport

__all__ = [
    "DependencyGraphBuilder",
    "ImportResolver",
    "ImportKind",
    "ResolvedImport",
    "PythonDependencyParser",
    "JSDependencyParser",
]
