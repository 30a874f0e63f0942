"""Temporal coupling detector.

``TemporalAnalyzer`` is a module-scoped recorder like the connascence
classifier: an extractor calls ``set_module`` and the ``record_*`` methods,
which only store owned copies of the facts. ``analyze`` then runs the four
detectors over everything recorded so far:

    1. paired-operation imbalance
    2. lifecycle symmetry (init without cleanup, start without stop)
    3. state checks implying a prerequisite call
    4. Rust signals (RAII positives, orphaned spawns, manual allocation,
       builders)

Note: this is heuristic detection. Runtime call order cannot be fully
determined statically.
"""

from __future__ import annotations

import logging
from collections import defaultdict

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
)
from .patterns import DEALLOC_MARKERS, PAIRED_OPS, implied_prerequisite, lifecycle_phase_of

logger = logging.getLogger(__name__)

PROJECT_WIDE = "project-wide"
HIGH_SEVERITY_THRESHOLD = 0.6
MIN_BUILDER_METHODS = 3


class TemporalAnalyzer:
    """Records temporal facts per module and detects coupling patterns."""

    def __init__(
        self,
        high_severity_threshold: float = HIGH_SEVERITY_THRESHOLD,
        min_builder_methods: int = MIN_BUILDER_METHODS,
    ) -> None:
        self.instances: list[TemporalCouplingInstance] = []
        self.stats = TemporalCouplingStats()
        self.high_severity_threshold = high_severity_threshold
        self.min_builder_methods = min_builder_methods
        self.current_module = ""

        # Raw facts as (module, value) pairs
        self.method_calls: dict[str, list[str]] = defaultdict(list)  # name -> modules
        self.function_defs: list[tuple[str, str]] = []
        self.drop_impls: list[tuple[str, str]] = []
        self.guard_usages: list[tuple[str, str]] = []
        self.async_spawns: list[str] = []
        self.async_joins: list[str] = []
        self.unsafe_allocs: list[tuple[str, str]] = []
        self.builder_types: list[tuple[str, tuple[str, ...]]] = []

    def set_module(self, module: str) -> None:
        self.current_module = module

    # ── fact recording ─────────────────────────────────────────────

    def record_call(self, method_name: str) -> None:
        self.method_calls[method_name.lower()].append(self.current_module)

    def record_function_def(self, function_name: str) -> None:
        self.function_defs.append((self.current_module, function_name.lower()))

    def record_drop_impl(self, type_name: str) -> None:
        self.drop_impls.append((self.current_module, type_name))

    def record_guard_usage(self, guard_type: str) -> None:
        self.guard_usages.append((self.current_module, guard_type))

    def record_async_spawn(self, spawn_type: str) -> None:
        self.async_spawns.append(f"{self.current_module}::{spawn_type}")

    def record_async_join(self, join_type: str) -> None:
        self.async_joins.append(f"{self.current_module}::{join_type}")

    def record_unsafe_alloc(self, operation: str) -> None:
        self.unsafe_allocs.append((self.current_module, operation))

    def record_builder_pattern(self, type_name: str, methods: list[str]) -> None:
        self.builder_types.append((type_name, tuple(methods)))

    def merge(self, other: TemporalAnalyzer) -> None:
        """Append another analyzer's raw facts; call ``analyze`` afterwards."""
        for name, modules in other.method_calls.items():
            self.method_calls[name].extend(modules)
        self.function_defs.extend(other.function_defs)
        self.drop_impls.extend(other.drop_impls)
        self.guard_usages.extend(other.guard_usages)
        self.async_spawns.extend(other.async_spawns)
        self.async_joins.extend(other.async_joins)
        self.unsafe_allocs.extend(other.unsafe_allocs)
        self.builder_types.extend(other.builder_types)

    # ── detection ──────────────────────────────────────────────────

    def analyze(self) -> None:
        """Rebuild findings and statistics from all recorded facts."""
        self.instances = []
        self.stats = TemporalCouplingStats()

        self._detect_paired_operation_imbalance()
        self._detect_lifecycle_patterns()
        self._detect_state_checks()
        self._detect_rust_patterns()

        logger.debug(
            f"Temporal analysis: {len(self.instances)} findings, "
            f"{self.stats.total_issues} issues"
        )

    def _add_issue(self, instance: TemporalCouplingInstance) -> None:
        self.instances.append(instance)
        self.stats.total_issues += 1

    def _detect_paired_operation_imbalance(self) -> None:
        for paired in PAIRED_OPS:
            open_locations = self.method_calls.get(paired.open, [])
            close_locations = self.method_calls.get(paired.close, [])
            open_calls = len(open_locations)
            close_calls = len(close_locations)
            if open_calls == 0 and close_calls == 0:
                continue

            self.stats.paired_operations[f"{paired.open}/{paired.close}"] = PairedOperationStats(
                open_count=open_calls,
                close_count=close_calls,
                locations=open_locations + close_locations,
            )

            if open_calls == close_calls or open_calls == 0 or close_calls == 0:
                continue

            if open_calls > close_calls:
                description = (
                    f"More {paired.open}() calls ({open_calls}) than "
                    f"{paired.close}() calls ({close_calls})"
                )
                suggestion = (
                    f"Ensure every {paired.open}() has a matching {paired.close}(). "
                    "Consider using RAII pattern or Drop trait."
                )
            else:
                description = (
                    f"More {paired.close}() calls ({close_calls}) than "
                    f"{paired.open}() calls ({open_calls})"
                )
                suggestion = f"Check if {paired.close}() is called without prior {paired.open}()"

            self._add_issue(
                TemporalCouplingInstance(
                    pattern=PairedOperation(open_method=paired.open, close_method=paired.close),
                    source=PROJECT_WIDE,
                    severity=paired.severity,
                    description=description,
                    suggestion=suggestion,
                )
            )

    def _detect_lifecycle_patterns(self) -> None:
        for module, func_name in self.function_defs:
            phase = lifecycle_phase_of(func_name)
            if phase is not None:
                self.stats.lifecycle_methods.setdefault(phase, []).append(
                    f"{module}::{func_name}"
                )

        phases = self.stats.lifecycle_methods
        if LifecyclePhase.INITIALIZE in phases and LifecyclePhase.CLEANUP not in phases:
            self._add_issue(
                TemporalCouplingInstance(
                    pattern=LifecycleSequence(LifecyclePhase.INITIALIZE, "init*"),
                    source=PROJECT_WIDE,
                    severity=0.5,
                    description="Initialization methods found but no cleanup/teardown methods",
                    suggestion="Consider adding cleanup methods to properly release resources",
                )
            )

        if LifecyclePhase.START in phases and LifecyclePhase.STOP not in phases:
            self._add_issue(
                TemporalCouplingInstance(
                    pattern=LifecycleSequence(LifecyclePhase.START, "start*"),
                    source=PROJECT_WIDE,
                    severity=0.5,
                    description="Start methods found but no stop methods",
                    suggestion="Consider adding stop/shutdown methods for graceful termination",
                )
            )

    def _detect_state_checks(self) -> None:
        for module, func_name in self.function_defs:
            prerequisite = implied_prerequisite(func_name)
            if prerequisite is None:
                continue
            self.stats.state_checks.append(f"{module}::{func_name}")
            self._add_issue(
                TemporalCouplingInstance(
                    pattern=StateCheck(check_method=func_name, implied_prerequisite=prerequisite),
                    source=module,
                    severity=0.4,
                    description=(
                        f"State check '{func_name}' implies temporal dependency on {prerequisite}"
                    ),
                    suggestion=(
                        "Document the required call order or use type-state pattern "
                        "to enforce it at compile time"
                    ),
                )
            )

    def _detect_rust_patterns(self) -> None:
        # RAII signals are positives: recorded, never scored
        self.stats.drop_impls = [f"{module}::{name}" for module, name in self.drop_impls]
        self.stats.guard_patterns = [f"{module}::{guard}" for module, guard in self.guard_usages]

        self.stats.async_spawns = len(self.async_spawns)
        self.stats.async_joins = len(self.async_joins)
        if self.stats.async_spawns > 0 and self.stats.async_joins == 0:
            self._add_issue(
                TemporalCouplingInstance(
                    pattern=RustAsyncSpawnWithoutJoin(),
                    source=PROJECT_WIDE,
                    severity=0.6,
                    description=(
                        f"Found {self.stats.async_spawns} async spawn(s) but no explicit "
                        "join/await. Tasks may be orphaned."
                    ),
                    suggestion="Ensure spawned tasks are awaited or their JoinHandles are collected",
                )
            )

        # Any deallocation anywhere satisfies every allocation
        has_dealloc = any(
            marker in operation for _, operation in self.unsafe_allocs for marker in DEALLOC_MARKERS
        )
        for module, operation in self.unsafe_allocs:
            self.stats.unsafe_allocations.append(f"{module}::{operation}")
            if "alloc" in operation and not has_dealloc:
                self._add_issue(
                    TemporalCouplingInstance(
                        pattern=RustUnsafeManualResource(operation=operation),
                        source=module,
                        severity=0.9,
                        description=(
                            f"Unsafe allocation '{operation}' detected without "
                            "corresponding deallocation"
                        ),
                        suggestion=(
                            "Ensure manual allocations have corresponding deallocations, "
                            "or use safe wrappers"
                        ),
                    )
                )

        # Builders are ordering risks, not counted as issues
        for type_name, methods in self.builder_types:
            self.stats.builder_patterns.append(f"{type_name} ({' -> '.join(methods)})")
            if len(methods) >= self.min_builder_methods:
                self.instances.append(
                    TemporalCouplingInstance(
                        pattern=RustBuilderPattern(type_name=type_name, required_methods=methods),
                        source=PROJECT_WIDE,
                        severity=0.3,
                        description=(
                            f"Builder pattern for '{type_name}' has {len(methods)} methods "
                            "that may require specific order"
                        ),
                        suggestion=(
                            "Consider using type-state pattern to enforce build order "
                            "at compile time"
                        ),
                    )
                )

    # ── queries ────────────────────────────────────────────────────

    def high_severity_instances(self) -> list[TemporalCouplingInstance]:
        return [i for i in self.instances if i.severity >= self.high_severity_threshold]

    def positive_patterns(self) -> list[RustDropImpl | RustGuardPattern]:
        """RAII signals that reduce temporal coupling risk."""
        positives: list[RustDropImpl | RustGuardPattern] = [
            RustDropImpl(type_name=name) for _, name in self.drop_impls
        ]
        positives.extend(
            RustGuardPattern(guard_type=guard, resource=module)
            for module, guard in self.guard_usages
        )
        return positives

    def summary(self) -> str:
        """Markdown report of the last ``analyze`` run."""
        stats = self.stats
        report = ["## Temporal Coupling Analysis\n\n"]

        if not self.instances and not stats.drop_impls and not stats.guard_patterns:
            report.append("No temporal coupling patterns detected.\n")
            return "".join(report)

        report.append(f"**Total Issues**: {stats.total_issues}\n\n")

        if stats.drop_impls or stats.guard_patterns:
            report.append("### Rust RAII Patterns (Positive)\n\n")
            report.append("These patterns help prevent temporal coupling issues:\n\n")
            if stats.drop_impls:
                report.append(
                    f"- **Drop implementations**: {len(stats.drop_impls)} types "
                    "with automatic cleanup\n"
                )
            if stats.guard_patterns:
                report.append(
                    f"- **Guard patterns**: {len(stats.guard_patterns)} auto-release guards used\n"
                )
            report.append("\n")

        if stats.paired_operations:
            report.append("### Paired Operations\n\n")
            report.append("| Operation | Open | Close | Status |\n")
            report.append("|-----------|------|-------|--------|\n")
            for op, op_stats in stats.paired_operations.items():
                status = "Balanced" if op_stats.is_balanced else "Imbalanced"
                report.append(
                    f"| {op} | {op_stats.open_count} | {op_stats.close_count} | {status} |\n"
                )
            report.append("\n")

        if stats.async_spawns > 0 or stats.async_joins > 0:
            report.append("### Async Task Management\n\n")
            report.append("| Metric | Count |\n")
            report.append("|--------|-------|\n")
            report.append(f"| Spawns | {stats.async_spawns} |\n")
            report.append(f"| Joins/Awaits | {stats.async_joins} |\n")
            if stats.async_spawns > stats.async_joins:
                report.append("\n**Warning**: More spawns than joins detected.\n")
            report.append("\n")

        if stats.lifecycle_methods:
            report.append("### Lifecycle Methods\n\n")
            report.append("| Phase | Methods |\n")
            report.append("|-------|--------|\n")
            for phase in sorted(stats.lifecycle_methods):
                methods = stats.lifecycle_methods[phase]
                if len(methods) > 3:
                    method_list = f"{', '.join(methods[:3])}, ... ({len(methods)} total)"
                else:
                    method_list = ", ".join(methods)
                report.append(f"| {phase.description()} | {method_list} |\n")
            report.append("\n")

        if stats.unsafe_allocations:
            report.append("### Unsafe Manual Resource Management\n\n")
            report.append(
                "**Warning**: Manual memory management detected. Ensure proper cleanup.\n\n"
            )
            for alloc in stats.unsafe_allocations:
                report.append(f"- `{alloc}`\n")
            report.append("\n")

        high_severity = self.high_severity_instances()
        if high_severity:
            report.append("### Issues Detected\n\n")
            for instance in high_severity:
                report.append(f"- **[{instance.severity_label()}]** {instance.description}\n")
                report.append(f"  - Suggestion: {instance.suggestion}\n")
            report.append("\n")

        return "".join(report)
