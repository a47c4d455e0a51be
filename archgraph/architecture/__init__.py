"""
Service boundary detection.
"""

from __future__ import annotations

from .boundary_detector import BoundaryDetector, connected_components, detect_bounded_context

__all__ = ["BoundaryDetector", "connected_components", "detect_bounded_context"]
