"""Exception hierarchy for Design Insight."""

from .analysis import AnalysisError, FileAccessError, ParsingError
from .base import DesignInsightError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "DesignInsightError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "ConfigurationError",
    "InvalidConfigError",
]
