"""Temporal coupling models.

Temporal coupling exists when components must be used in a specific
order. Only heuristic signals are visible statically:

    - paired operations that must balance (open/close, lock/unlock)
    - lifecycle methods suggesting an initialization order
    - state checks implying a prerequisite call
    - Rust-specific signals (Drop, guards, async spawn/join, manual
      allocation, builders)

``TemporalPattern`` is a closed union of frozen dataclasses; consumers
dispatch with ``isinstance`` and must handle every variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union


class LifecyclePhase(IntEnum):
    """Lifecycle phases, in call order."""

    CREATE = 0
    CONFIGURE = 1
    INITIALIZE = 2
    START = 3
    ACTIVE = 4
    STOP = 5
    CLEANUP = 6

    def description(self) -> str:
        return _PHASE_DESCRIPTION[self]


_PHASE_DESCRIPTION: dict[LifecyclePhase, str] = {
    LifecyclePhase.CREATE: "Object creation",
    LifecyclePhase.CONFIGURE: "Configuration",
    LifecyclePhase.INITIALIZE: "Initialization",
    LifecyclePhase.START: "Start/Connect",
    LifecyclePhase.ACTIVE: "Active operation",
    LifecyclePhase.STOP: "Stop/Disconnect",
    LifecyclePhase.CLEANUP: "Cleanup/Destroy",
}


@dataclass(frozen=True)
class PairedOperation:
    open_method: str
    close_method: str


@dataclass(frozen=True)
class LifecycleSequence:
    phase: LifecyclePhase
    method_name: str


@dataclass(frozen=True)
class StateCheck:
    check_method: str
    implied_prerequisite: str


@dataclass(frozen=True)
class RustDropImpl:
    type_name: str


@dataclass(frozen=True)
class RustGuardPattern:
    guard_type: str
    resource: str


@dataclass(frozen=True)
class RustAsyncSpawnWithoutJoin:
    pass


@dataclass(frozen=True)
class RustUnsafeManualResource:
    operation: str


@dataclass(frozen=True)
class RustBuilderPattern:
    type_name: str
    required_methods: tuple[str, ...]


TemporalPattern = Union[
    PairedOperation,
    LifecycleSequence,
    StateCheck,
    RustDropImpl,
    RustGuardPattern,
    RustAsyncSpawnWithoutJoin,
    RustUnsafeManualResource,
    RustBuilderPattern,
]


def pattern_label(pattern: TemporalPattern) -> str:
    """Short human-readable name of a pattern variant."""
    if isinstance(pattern, PairedOperation):
        return f"{pattern.open_method}/{pattern.close_method}"
    if isinstance(pattern, LifecycleSequence):
        return f"{pattern.phase.description()}: {pattern.method_name}"
    if isinstance(pattern, StateCheck):
        return f"{pattern.check_method} -> {pattern.implied_prerequisite}"
    if isinstance(pattern, RustDropImpl):
        return f"Drop for {pattern.type_name}"
    if isinstance(pattern, RustGuardPattern):
        return f"{pattern.guard_type} guarding {pattern.resource}"
    if isinstance(pattern, RustAsyncSpawnWithoutJoin):
        return "spawn without join"
    if isinstance(pattern, RustUnsafeManualResource):
        return f"manual resource: {pattern.operation}"
    if isinstance(pattern, RustBuilderPattern):
        return f"builder {pattern.type_name} ({' -> '.join(pattern.required_methods)})"
    raise TypeError(f"Unknown temporal pattern: {pattern!r}")


@dataclass
class TemporalCouplingInstance:
    """One temporal coupling finding."""

    pattern: TemporalPattern
    source: str  # module name, or "project-wide"
    severity: float
    description: str
    suggestion: str

    def __post_init__(self) -> None:
        if not 0.0 <= self.severity <= 1.0:
            raise ValueError(f"severity must be in [0, 1], got {self.severity}")
        if not self.description or not self.suggestion:
            raise ValueError("description and suggestion must be non-empty")

    def severity_label(self) -> str:
        if self.severity >= 0.8:
            return "Critical"
        if self.severity >= 0.6:
            return "High"
        return "Medium"


@dataclass
class PairedOperationStats:
    open_count: int = 0
    close_count: int = 0
    locations: list[str] = field(default_factory=list)

    @property
    def is_balanced(self) -> bool:
        return self.open_count == self.close_count


@dataclass
class TemporalCouplingStats:
    """Derived statistics, rebuilt by every ``TemporalAnalyzer.analyze`` call.

    Entries that name a code location use the ``module::name`` form.
    """

    paired_operations: dict[str, PairedOperationStats] = field(default_factory=dict)
    lifecycle_methods: dict[LifecyclePhase, list[str]] = field(default_factory=dict)
    state_checks: list[str] = field(default_factory=list)
    total_issues: int = 0
    drop_impls: list[str] = field(default_factory=list)
    guard_patterns: list[str] = field(default_factory=list)
    async_spawns: int = 0
    async_joins: int = 0
    unsafe_allocations: list[str] = field(default_factory=list)
    builder_patterns: list[str] = field(default_factory=list)
