"""Analysis-related exceptions: unreadable and unparsable source units."""

from pathlib import Path
from typing import Union

from .base import DesignInsightError


class AnalysisError(DesignInsightError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source unit cannot be accessed or read."""

    def __init__(self, filepath: Union[Path, str], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when source text cannot be parsed into a syntax tree."""

    def __init__(self, filepath: Union[Path, str], language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason
