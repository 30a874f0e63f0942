"""Temporal coupling: call-order dependencies detected from source text."""

from .analyzer import TemporalAnalyzer
from .extractor import analyze_temporal_patterns, find_builders
from .models import (
    LifecyclePhase,
    LifecycleSequence,
    PairedOperation,
    PairedOperationStats,
    RustAsyncSpawnWithoutJoin,
    RustBuilderPattern,
    RustDropImpl,
    RustGuardPattern,
    RustUnsafeManualResource,
    StateCheck,
    TemporalCouplingInstance,
    TemporalCouplingStats,
    TemporalPattern,
    pattern_label,
)

__all__ = [
    "LifecyclePhase",
    "LifecycleSequence",
    "PairedOperation",
    "PairedOperationStats",
    "RustAsyncSpawnWithoutJoin",
    "RustBuilderPattern",
    "RustDropImpl",
    "RustGuardPattern",
    "RustUnsafeManualResource",
    "StateCheck",
    "TemporalAnalyzer",
    "TemporalCouplingInstance",
    "TemporalCouplingStats",
    "TemporalPattern",
    "analyze_temporal_patterns",
    "find_builders",
    "pattern_label",
]
