"""Lexical temporal fact extraction.

The temporal signals are call and keyword presence, not syntax structure,
so this stage scans raw text with regular expressions instead of parsing.
It only records facts; the caller decides when to run ``analyze``.
"""

from __future__ import annotations

import re
from typing import Optional

from .analyzer import TemporalAnalyzer
from .patterns import (
    CALL_KEYWORDS,
    RUST_ASYNC_JOIN_PATTERNS,
    RUST_ASYNC_SPAWN_PATTERNS,
    RUST_GUARD_TYPES,
    RUST_UNSAFE_ALLOC_PATTERNS,
)

FN_DEF_RE = re.compile(r"fn\s+([a-z_][a-z0-9_]*)\s*[<(]")
METHOD_CALL_RE = re.compile(r"\.([a-z_][a-z0-9_]*)\s*\(")
CALL_RE = re.compile(r"([a-z_][a-z0-9_]*)\s*\(")
DROP_IMPL_RE = re.compile(r"impl\s+Drop\s+for\s+([A-Z][a-zA-Z0-9_]*)")

BUILDER_IMPL_RE = re.compile(
    r"impl(?:\s*<[^>{]*>)?\s+([A-Z][A-Za-z0-9_]*Builder)(?:\s*<[^>{]*>)?\s*\{"
)
BUILDER_METHOD_RE = re.compile(
    r"fn\s+([a-z_][a-z0-9_]*)\s*(?:<[^>]*>)?\s*\(\s*(?:mut\s+)?self\b[^)]*\)\s*->\s*Self\b"
)
BUILDER_EXCLUDED = frozenset({"new", "build"})


def analyze_temporal_patterns(
    content: str,
    module_name: str,
    analyzer: Optional[TemporalAnalyzer] = None,
) -> TemporalAnalyzer:
    """Record the temporal facts of one source unit.

    Args:
        content: Raw Rust source
        module_name: Module the facts are attributed to
        analyzer: Analyzer to accumulate into (a new one if omitted)

    Returns:
        The analyzer holding the recorded facts
    """
    if analyzer is None:
        analyzer = TemporalAnalyzer()
    analyzer.set_module(module_name)

    for match in FN_DEF_RE.finditer(content):
        analyzer.record_function_def(match.group(1))

    for match in METHOD_CALL_RE.finditer(content):
        name = match.group(1)
        analyzer.record_call(name)
        if any(pattern in name for pattern in RUST_ASYNC_SPAWN_PATTERNS):
            analyzer.record_async_spawn(name)
        if any(pattern in name for pattern in RUST_ASYNC_JOIN_PATTERNS):
            analyzer.record_async_join(name)

    # Overlaps the receiver scan: `.close(` also counts as a bare `close(`
    for match in CALL_RE.finditer(content):
        name = match.group(1)
        if name not in CALL_KEYWORDS:
            analyzer.record_call(name)

    for match in DROP_IMPL_RE.finditer(content):
        analyzer.record_drop_impl(match.group(1))

    for guard_type in RUST_GUARD_TYPES:
        if guard_type in content:
            analyzer.record_guard_usage(guard_type)

    for pattern in RUST_UNSAFE_ALLOC_PATTERNS:
        if pattern in content:
            analyzer.record_unsafe_alloc(pattern)

    for type_name, methods in find_builders(content):
        analyzer.record_builder_pattern(type_name, methods)

    return analyzer


def find_builders(content: str) -> list[tuple[str, list[str]]]:
    """Find inherent ``impl XBuilder`` blocks and their chaining methods."""
    builders = []
    for match in BUILDER_IMPL_RE.finditer(content):
        body = _block_body(content, match.end() - 1)
        methods = [
            m.group(1)
            for m in BUILDER_METHOD_RE.finditer(body)
            if m.group(1) not in BUILDER_EXCLUDED
        ]
        builders.append((match.group(1), methods))
    return builders


def _block_body(content: str, open_brace: int) -> str:
    """Text between the brace at ``open_brace`` and its matching close."""
    depth = 0
    for index in range(open_brace, len(content)):
        char = content[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[open_brace + 1 : index]
    return content[open_brace + 1 :]
