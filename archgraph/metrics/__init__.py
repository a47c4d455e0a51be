"""
Graph Metrics
=============

Read-only analyses over a DependencyGraph: circular dependencies, coupling
and cohesion. They share no state and can run concurrently on one graph.
"""

from __future__ import annotations

from .circular_detector import CircularDetector
from .cohesion_analyzer import CohesionAnalyzer, module_of
from .coupling_calculator import CouplingCalculator

__all__ = ["CircularDetector", "CouplingCalculator", "CohesionAnalyzer", "module_of"]
