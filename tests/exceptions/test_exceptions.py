"""Tests for the exception hierarchy."""

import pytest

from design_insight.exceptions import (
    AnalysisError,
    ConfigurationError,
    DesignInsightError,
    FileAccessError,
    InvalidConfigError,
    ParsingError,
)
from design_insight.scanning import RustParser


class TestHierarchy:
    def test_analysis_errors(self):
        assert issubclass(FileAccessError, AnalysisError)
        assert issubclass(ParsingError, AnalysisError)
        assert issubclass(AnalysisError, DesignInsightError)

    def test_configuration_errors(self):
        assert issubclass(InvalidConfigError, ConfigurationError)
        assert issubclass(ConfigurationError, DesignInsightError)


class TestMessages:
    """Details are kept as attributes and rendered in str()."""

    def test_plain_message(self):
        assert str(DesignInsightError("boom")) == "boom"

    def test_file_access(self):
        error = FileAccessError("src/lib.rs", "permission denied")
        assert error.reason == "permission denied"
        assert str(error) == (
            "Cannot access file: src/lib.rs (filepath=src/lib.rs, reason=permission denied)"
        )

    def test_parsing(self):
        error = ParsingError("src/lib.rs", "rust", "syntax error near line 3")
        assert error.language == "rust"
        assert error.details["reason"] == "syntax error near line 3"
        assert str(error).startswith("Failed to parse rust file: src/lib.rs")

    def test_invalid_config(self):
        error = InvalidConfigError("workers", 0, "must be at least 1")
        assert error.key == "workers"
        assert "workers" in str(error)


class TestParserErrors:
    def test_syntax_error_raises(self, broken_source):
        with pytest.raises(ParsingError) as excinfo:
            RustParser().parse(broken_source, path="src/broken.rs")
        assert excinfo.value.filepath == "src/broken.rs"
        assert "line" in excinfo.value.reason

    def test_valid_source(self, deep_source):
        tree = RustParser().parse(deep_source)
        assert tree.root_node.type == "source_file"

    def test_bytes_input(self):
        tree = RustParser().parse(b"fn main() {}\n")
        assert not tree.root_node.has_error
