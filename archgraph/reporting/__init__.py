"""
Report and diagram rendering.
"""

from __future__ import annotations

from .formatters import FORMATS, format_report
from .mermaid import MermaidGenerator

__all__ = ["FORMATS", "format_report", "MermaidGenerator"]
