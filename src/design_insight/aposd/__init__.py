"""APOSD analysis: module depth, cognitive load, pass-through methods."""

from .analyzer import ModuleScore, analyze_aposd, count_implementation_lines, score_module
from .models import (
    AposdAnalysis,
    AposdIssueCounts,
    CognitiveLoadLevel,
    CognitiveLoadMetrics,
    ModuleDepthClass,
    ModuleDepthMetrics,
    PassThroughMethodInfo,
)
from .visitor import AposdVisitor

__all__ = [
    "AposdAnalysis",
    "AposdIssueCounts",
    "AposdVisitor",
    "CognitiveLoadLevel",
    "CognitiveLoadMetrics",
    "ModuleDepthClass",
    "ModuleDepthMetrics",
    "ModuleScore",
    "PassThroughMethodInfo",
    "analyze_aposd",
    "count_implementation_lines",
    "score_module",
]
