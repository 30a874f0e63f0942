"""Connascence classifier.

``ConnascenceAnalyzer`` is a module-scoped recorder: a fact extractor
calls ``set_module`` and then the ``record_*`` methods, and every recorded
fact is classified immediately into one of the five static forms.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import ConnascenceInstance, ConnascenceStats, ConnascenceType

HIGH_STRENGTH_THRESHOLD = 0.6
MIN_POSITIONAL_ARGS = 4

ACCEPTABLE_LITERALS = frozenset(
    {"0", "1", "2", "-1", "0.0", "1.0", "0.5", "100", "1000", "true", "false"}
)

# String contents that carry no domain meaning
ACCEPTABLE_STRINGS = frozenset({" ", "\n", "\\n", ",", ":", "/"})

# Plain, byte (b"..", b'.') and raw (r"..", br#".."#) string or char literals
QUOTED_LITERAL_RE = re.compile(r"^(?:br|b|r)?(#*)([\"'])(.*)\2\1$", re.DOTALL)

# (pattern, advisory, required keywords); each keyword group needs one hit
ALGORITHM_SIGNATURES: tuple[tuple[str, str, tuple[tuple[str, ...], ...]], ...] = (
    ("encode/decode", "Encoding algorithm must match", (("encode",), ("decode",))),
    (
        "serialize/deserialize",
        "Serialization format must match",
        (("serialize",), ("deserialize",)),
    ),
    (
        "hash algorithm",
        "Hash algorithm must be consistent",
        (("hash", "Hash"), ("sha", "md5", "blake")),
    ),
    ("compression", "Compression algorithm must match", (("compress",), ("decompress",))),
    ("encryption", "Encryption algorithm must match", (("encrypt",), ("decrypt",))),
)


def is_acceptable_literal(value: str) -> bool:
    """True if a literal is too common to carry hidden meaning."""
    if value in ACCEPTABLE_LITERALS:
        return True

    quoted = QUOTED_LITERAL_RE.match(value)
    if quoted:
        inner = quoted.group(3)
        return (
            not inner
            or len(inner) == 1
            or inner in ACCEPTABLE_STRINGS
            or inner.startswith("http")
        )

    return False


def detect_algorithm_patterns(content: str) -> list[tuple[str, str]]:
    """Find known algorithm pairs by whole-file keyword presence.

    Each pair is reported at most once, whether or not both keywords
    occur in the same function.
    """
    patterns = []
    for pattern, advisory, groups in ALGORITHM_SIGNATURES:
        if all(any(keyword in content for keyword in group) for group in groups):
            patterns.append((pattern, advisory))
    return patterns


class ConnascenceAnalyzer:
    """Records connascence facts for the current module and aggregates them."""

    def __init__(
        self,
        min_positional_args: int = MIN_POSITIONAL_ARGS,
        high_strength_threshold: float = HIGH_STRENGTH_THRESHOLD,
    ) -> None:
        self.instances: list[ConnascenceInstance] = []
        self.stats = ConnascenceStats()
        self.min_positional_args = min_positional_args
        self.high_strength_threshold = high_strength_threshold
        self.current_module = ""
        self.function_signatures: dict[str, int] = {}
        self.magic_numbers: list[tuple[str, str]] = []

    def set_module(self, module: str) -> None:
        self.current_module = module

    def _record(
        self,
        connascence_type: ConnascenceType,
        target: str,
        context: str,
        line: Optional[int] = None,
    ) -> None:
        instance = ConnascenceInstance(
            connascence_type=connascence_type,
            source=self.current_module,
            target=target,
            context=context,
            line=line,
        )
        self.instances.append(instance)
        self.stats.add(connascence_type)

    def record_name_dependency(self, target: str, context: str, line: Optional[int] = None) -> None:
        self._record(ConnascenceType.NAME, target, context, line)

    def record_type_dependency(
        self, type_name: str, usage_context: str, line: Optional[int] = None
    ) -> None:
        self._record(ConnascenceType.TYPE, type_name, usage_context, line)

    def record_position_dependency(
        self, fn_name: str, arg_count: int, line: Optional[int] = None
    ) -> None:
        """Remember a signature; flag it when it has many positional arguments."""
        if arg_count >= self.min_positional_args:
            self._record(
                ConnascenceType.POSITION,
                fn_name,
                f"Function with {arg_count} positional arguments",
                line,
            )
        self.function_signatures[fn_name] = arg_count

    def record_magic_number(self, location: str, value: str, line: Optional[int] = None) -> None:
        if is_acceptable_literal(value):
            return
        self._record(ConnascenceType.MEANING, location, f"Magic value: {value}", line)
        self.magic_numbers.append((location, value))

    def record_algorithm_dependency(
        self, pattern: str, context: str, line: Optional[int] = None
    ) -> None:
        self._record(ConnascenceType.ALGORITHM, pattern, context, line)

    def merge(self, other: ConnascenceAnalyzer) -> None:
        """Append another analyzer's findings, keeping their source modules."""
        for instance in other.instances:
            self.instances.append(instance)
            self.stats.add(instance.connascence_type)
        self.function_signatures.update(other.function_signatures)
        self.magic_numbers.extend(other.magic_numbers)

    def high_strength_instances(self) -> list[ConnascenceInstance]:
        return [
            i
            for i in self.instances
            if i.connascence_type.strength() >= self.high_strength_threshold
        ]

    def summary(self) -> str:
        """Markdown table of counts per non-zero type, weakest first."""
        lines = [
            "## Connascence Analysis",
            "",
            f"**Total Instances**: {self.stats.total}",
            f"**Average Strength**: {self.stats.average_strength():.2f}",
            "",
            "| Type | Count | % | Strength | Description |",
            "|------|-------|---|----------|-------------|",
        ]
        for conn_type in ConnascenceType:
            count = self.stats.count(conn_type)
            if count > 0:
                lines.append(
                    f"| {conn_type} | {count} | {self.stats.percentage(conn_type):.1f}% "
                    f"| {conn_type.strength():.1f} | {conn_type.description()} |"
                )
        return "\n".join(lines) + "\n"
