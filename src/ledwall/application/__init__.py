"""Application layer - use cases and orchestration."""

from .commands import AnalyzeLayoutCommand
from .dtos import LayoutAnalysis

__all__ = [
    "AnalyzeLayoutCommand",
    "LayoutAnalysis",
]
