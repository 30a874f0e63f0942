"""Module depth, cognitive load and pass-through models.

Based on John Ousterhout's "A Philosophy of Software Design" (APOSD):
    - Deep modules hide a complex implementation behind a simple interface
    - Shallow modules expose an interface about as complex as what it hides
    - Pass-through methods only forward their call to another callable

Depth ratio = implementation complexity / interface complexity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

# Ratio floor below which the interface is treated as absent
MIN_INTERFACE_COMPLEXITY = 0.01

PASSTHROUGH_CONFIDENCE_THRESHOLD = 0.7


class ModuleDepthClass(Enum):
    """Classification of module depth ratio."""

    VERY_DEEP = "Very Deep"  # ratio >= 10
    DEEP = "Deep"  # ratio >= 5
    MODERATE = "Moderate"  # ratio >= 2
    SHALLOW = "Shallow"  # ratio >= 1
    VERY_SHALLOW = "Very Shallow"  # interface more complex than implementation
    UNKNOWN = "Unknown"  # no public interface

    def __str__(self) -> str:
        return self.value


SHALLOW_CLASSES = frozenset({ModuleDepthClass.SHALLOW, ModuleDepthClass.VERY_SHALLOW})


class CognitiveLoadLevel(Enum):
    """Classification of cognitive load score."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"

    def __str__(self) -> str:
        return self.value


HIGH_LOAD_LEVELS = frozenset({CognitiveLoadLevel.HIGH, CognitiveLoadLevel.VERY_HIGH})


def classify_depth_ratio(ratio: Optional[float]) -> ModuleDepthClass:
    """Map a depth ratio (None = undefined) to its depth class."""
    if ratio is None:
        return ModuleDepthClass.UNKNOWN
    if ratio >= 10.0:
        return ModuleDepthClass.VERY_DEEP
    if ratio >= 5.0:
        return ModuleDepthClass.DEEP
    if ratio >= 2.0:
        return ModuleDepthClass.MODERATE
    if ratio >= 1.0:
        return ModuleDepthClass.SHALLOW
    return ModuleDepthClass.VERY_SHALLOW


def classify_cognitive_load(score: float) -> CognitiveLoadLevel:
    """Map a cognitive load score to its level."""
    if score < 5.0:
        return CognitiveLoadLevel.LOW
    if score < 15.0:
        return CognitiveLoadLevel.MODERATE
    if score < 30.0:
        return CognitiveLoadLevel.HIGH
    return CognitiveLoadLevel.VERY_HIGH


@dataclass
class ModuleDepthMetrics:
    """Interface vs implementation counts for one module."""

    module_name: str

    # Interface
    pub_function_count: int = 0
    pub_type_count: int = 0
    total_pub_params: int = 0
    generic_param_count: int = 0
    trait_bound_count: int = 0
    pub_const_count: int = 0

    # Implementation
    implementation_loc: int = 0
    private_function_count: int = 0
    private_type_count: int = 0
    complexity_estimate: int = 0

    def interface_complexity(self) -> float:
        """Weighted size of the public surface. Higher = more complex interface."""
        return (
            self.pub_function_count * 1.0
            + self.pub_type_count * 0.5
            + self.total_pub_params * 0.3
            + self.generic_param_count * 0.5
            + self.trait_bound_count * 0.3
            + self.pub_const_count * 0.1
        )

    def implementation_complexity(self) -> float:
        """Weighted size of what the interface hides."""
        return (
            self.implementation_loc * 0.1
            + self.private_function_count * 1.0
            + self.private_type_count * 0.5
            + self.complexity_estimate * 0.5
        )

    def depth_ratio(self) -> Optional[float]:
        """Implementation / interface complexity, None without an interface.

        - > 5.0: deep module (hides complexity)
        - < 2.0: shallow module
        """
        interface = self.interface_complexity()
        if interface < MIN_INTERFACE_COMPLEXITY:
            return None
        return self.implementation_complexity() / interface

    def depth_classification(self) -> ModuleDepthClass:
        return classify_depth_ratio(self.depth_ratio())

    def is_shallow(self) -> bool:
        return self.depth_classification() in SHALLOW_CLASSES

    def avg_params_per_function(self) -> float:
        if self.pub_function_count == 0:
            return 0.0
        return self.total_pub_params / self.pub_function_count


@dataclass
class CognitiveLoadMetrics:
    """Inputs to the cognitive load score of one module."""

    module_name: str
    public_api_count: int = 0
    dependency_count: int = 0
    avg_param_count: float = 0.0
    type_variety: int = 0
    generics_count: int = 0
    trait_bounds_count: int = 0
    max_nesting_depth: int = 0
    branch_count: int = 0

    def cognitive_load_score(self) -> float:
        """Weighted load score. Higher = harder to understand."""
        return (
            self.public_api_count * 0.25
            + self.dependency_count * 0.20
            + self.avg_param_count * 0.15
            + self.type_variety * 0.10
            + self.generics_count * 0.10
            + self.trait_bounds_count * 0.10
            + self.max_nesting_depth * 0.05
            + self.branch_count * 0.05
        )

    def load_classification(self) -> CognitiveLoadLevel:
        return classify_cognitive_load(self.cognitive_load_score())

    def is_high_load(self) -> bool:
        return self.load_classification() in HIGH_LOAD_LEVELS


@dataclass
class PassThroughMethodInfo:
    """A method whose body is a single delegating call.

    ``params_passed_through`` is the arity of the delegating call, not a
    check that the forwarded arguments are the method's own parameters.
    A method calling something with unrelated arguments of the same count
    is reported the same way as a true pass-through.
    """

    method_name: str
    module_name: str
    delegated_to: str
    params_passed_through: int
    total_params: int
    is_passthrough: bool
    confidence: float

    def passthrough_ratio(self) -> float:
        if self.total_params == 0:
            return 1.0
        return self.params_passed_through / self.total_params


@dataclass
class AposdIssueCounts:
    """Summary counts of APOSD issues."""

    shallow_modules: int = 0
    passthrough_methods: int = 0
    high_cognitive_load: int = 0

    def total(self) -> int:
        return self.shallow_modules + self.passthrough_methods + self.high_cognitive_load

    def has_issues(self) -> bool:
        return self.total() > 0


@dataclass
class AposdAnalysis:
    """APOSD results for a project: per-module metrics plus pass-throughs."""

    module_depths: dict[str, ModuleDepthMetrics] = field(default_factory=dict)
    cognitive_loads: dict[str, CognitiveLoadMetrics] = field(default_factory=dict)
    passthrough_methods: list[PassThroughMethodInfo] = field(default_factory=list)
    confirmed_threshold: float = PASSTHROUGH_CONFIDENCE_THRESHOLD

    def shallow_modules(self) -> list[ModuleDepthMetrics]:
        return [m for m in self.module_depths.values() if m.is_shallow()]

    def high_load_modules(self) -> list[CognitiveLoadMetrics]:
        return [m for m in self.cognitive_loads.values() if m.is_high_load()]

    def confirmed_passthroughs(self) -> list[PassThroughMethodInfo]:
        """Pass-throughs whose confidence is above the confirmation threshold."""
        return [
            m
            for m in self.passthrough_methods
            if m.is_passthrough and m.confidence > self.confirmed_threshold
        ]

    def average_depth_ratio(self) -> Optional[float]:
        """Mean depth ratio over modules with a defined ratio."""
        ratios = [r for r in (m.depth_ratio() for m in self.module_depths.values()) if r is not None]
        if not ratios:
            return None
        return float(np.mean(ratios))

    def average_cognitive_load(self) -> float:
        if not self.cognitive_loads:
            return 0.0
        return float(np.mean([m.cognitive_load_score() for m in self.cognitive_loads.values()]))

    def issue_counts(self) -> AposdIssueCounts:
        return AposdIssueCounts(
            shallow_modules=len(self.shallow_modules()),
            passthrough_methods=len(self.confirmed_passthroughs()),
            high_cognitive_load=len(self.high_load_modules()),
        )

    def summary(self) -> str:
        """Markdown summary of module depth, cognitive load and pass-throughs."""
        lines = ["## Module Depth Analysis", ""]
        avg_ratio = self.average_depth_ratio()
        ratio_text = f"{avg_ratio:.2f}" if avg_ratio is not None else "n/a"
        counts = self.issue_counts()
        lines.append(f"**Modules**: {len(self.module_depths)}")
        lines.append(f"**Average Depth Ratio**: {ratio_text}")
        lines.append(f"**Average Cognitive Load**: {self.average_cognitive_load():.2f}")
        lines.append(f"**Total Issues**: {counts.total()}")
        lines.append("")

        shallow = sorted(self.shallow_modules(), key=lambda m: m.module_name)
        if shallow:
            lines.append("### Shallow Modules")
            lines.append("")
            lines.append("| Module | Depth Ratio | Class |")
            lines.append("|--------|-------------|-------|")
            for m in shallow:
                lines.append(
                    f"| {m.module_name} | {m.depth_ratio():.2f} | {m.depth_classification()} |"
                )
            lines.append("")

        high_load = sorted(self.high_load_modules(), key=lambda m: m.module_name)
        if high_load:
            lines.append("### High Cognitive Load")
            lines.append("")
            lines.append("| Module | Score | Level |")
            lines.append("|--------|-------|-------|")
            for m in high_load:
                lines.append(
                    f"| {m.module_name} | {m.cognitive_load_score():.2f} | {m.load_classification()} |"
                )
            lines.append("")

        confirmed = self.confirmed_passthroughs()
        if confirmed:
            lines.append("### Pass-through Methods")
            lines.append("")
            for pt in confirmed:
                lines.append(
                    f"- `{pt.module_name}::{pt.method_name}` -> `{pt.delegated_to}` "
                    f"({pt.params_passed_through}/{pt.total_params} args, "
                    f"confidence {pt.confidence:.2f})"
                )
            lines.append("")

        return "\n".join(lines) + "\n"
