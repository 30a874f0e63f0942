"""Connascence: static coupling forms classified by strength."""

from .analyzer import ConnascenceAnalyzer, detect_algorithm_patterns, is_acceptable_literal
from .extractor import extract_connascence_facts
from .models import ConnascenceInstance, ConnascenceStats, ConnascenceType

__all__ = [
    "ConnascenceAnalyzer",
    "ConnascenceInstance",
    "ConnascenceStats",
    "ConnascenceType",
    "detect_algorithm_patterns",
    "extract_connascence_facts",
    "is_acceptable_literal",
]
