"""Module depth and cognitive load scoring.

``score_module`` turns one source unit plus its structural record into
``ModuleDepthMetrics``, ``CognitiveLoadMetrics`` and pass-through findings.
A unit that does not parse yields zero parse-derived metrics instead of
an exception, so one bad file never loses results for the rest of a batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..config import AposdConfig
from ..exceptions import ParsingError
from ..models import ModuleStructure
from ..scanning import RustParser
from .models import (
    AposdAnalysis,
    CognitiveLoadMetrics,
    ModuleDepthMetrics,
    PassThroughMethodInfo,
)
from .visitor import AposdVisitor, FileAposdMetrics

logger = logging.getLogger(__name__)


@dataclass
class ModuleScore:
    """Per-module result of ``score_module``."""

    depth: ModuleDepthMetrics
    cognitive: CognitiveLoadMetrics
    passthroughs: list[PassThroughMethodInfo] = field(default_factory=list)
    parsed: bool = True


def count_implementation_lines(source: str) -> int:
    """Count non-empty lines of a source unit."""
    return sum(1 for line in source.splitlines() if line.strip())


def score_module(
    source: str,
    structure: ModuleStructure,
    config: Optional[AposdConfig] = None,
    parser: Optional[RustParser] = None,
) -> ModuleScore:
    """Score one module's depth and cognitive load.

    Args:
        source: Raw Rust source of the module
        structure: Structural counts supplied by the module scanner
        config: Pass-through exclusion settings
        parser: Parser to reuse (one per thread)

    Returns:
        ModuleScore; ``parsed`` is False when the source did not parse
    """
    config = config or AposdConfig()
    parser = parser or RustParser()

    parsed = True
    try:
        tree = parser.parse(source, path=structure.path)
    except ParsingError as e:
        logger.warning(f"Scoring {structure.name} with zero metrics: {e}")
        file_metrics = FileAposdMetrics()
        loc = 0
        parsed = False
    else:
        file_metrics = AposdVisitor(config).visit(tree.root_node)
        loc = count_implementation_lines(source)

    depth = build_depth_metrics(structure, file_metrics, loc)
    cognitive = build_cognitive_metrics(structure, depth, file_metrics)
    passthroughs = [
        PassThroughMethodInfo(
            method_name=c.method_name,
            module_name=structure.name,
            delegated_to=c.delegated_to,
            params_passed_through=c.params_passed_through,
            total_params=c.total_params,
            is_passthrough=c.is_passthrough,
            confidence=c.confidence,
        )
        for c in file_metrics.passthrough_candidates
    ]

    logger.debug(
        f"{structure.name}: depth={depth.depth_classification()} "
        f"load={cognitive.load_classification()} passthroughs={len(passthroughs)}"
    )
    return ModuleScore(depth=depth, cognitive=cognitive, passthroughs=passthroughs, parsed=parsed)


def build_depth_metrics(
    structure: ModuleStructure, file_metrics: FileAposdMetrics, loc: int
) -> ModuleDepthMetrics:
    """Combine parse-derived counts with the structural record."""
    return ModuleDepthMetrics(
        module_name=structure.name,
        pub_function_count=file_metrics.pub_function_count,
        pub_type_count=structure.public_type_count,
        total_pub_params=file_metrics.total_pub_params,
        generic_param_count=file_metrics.generic_param_count,
        trait_bound_count=file_metrics.trait_bound_count,
        pub_const_count=file_metrics.pub_const_count,
        implementation_loc=loc,
        private_function_count=file_metrics.private_function_count,
        private_type_count=structure.private_type_count,
        complexity_estimate=file_metrics.complexity_estimate,
    )


def build_cognitive_metrics(
    structure: ModuleStructure, depth: ModuleDepthMetrics, file_metrics: FileAposdMetrics
) -> CognitiveLoadMetrics:
    return CognitiveLoadMetrics(
        module_name=structure.name,
        public_api_count=depth.pub_function_count + depth.pub_type_count + depth.pub_const_count,
        dependency_count=structure.dependency_count,
        avg_param_count=depth.avg_params_per_function(),
        type_variety=file_metrics.type_variety,
        generics_count=depth.generic_param_count,
        trait_bounds_count=depth.trait_bound_count,
        max_nesting_depth=file_metrics.max_nesting_depth,
        branch_count=depth.complexity_estimate,
    )


def empty_score(structure: ModuleStructure) -> ModuleScore:
    """Score for a module whose source could not be read."""
    file_metrics = FileAposdMetrics()
    depth = build_depth_metrics(structure, file_metrics, 0)
    cognitive = build_cognitive_metrics(structure, depth, file_metrics)
    return ModuleScore(depth=depth, cognitive=cognitive, parsed=False)


def add_score(analysis: AposdAnalysis, score: ModuleScore) -> None:
    """Merge one module's score into a project analysis."""
    name = score.depth.module_name
    analysis.module_depths[name] = score.depth
    analysis.cognitive_loads[name] = score.cognitive
    analysis.passthrough_methods.extend(score.passthroughs)


def analyze_aposd(
    sources: Mapping[str, str],
    structures: Mapping[str, ModuleStructure],
    config: Optional[AposdConfig] = None,
) -> AposdAnalysis:
    """Score every module with a structural record.

    Args:
        sources: Module name -> source text (missing = unreadable)
        structures: Module name -> structural counts
        config: Pass-through settings

    Returns:
        AposdAnalysis covering every module in ``structures``
    """
    config = config or AposdConfig()
    analysis = AposdAnalysis(confirmed_threshold=config.passthrough_confidence_threshold)
    parser = RustParser()

    for name in sorted(structures):
        structure = structures[name]
        source = sources.get(name)
        if source is None:
            logger.warning(f"No source for module {name}; scoring with zero metrics")
            add_score(analysis, empty_score(structure))
            continue
        add_score(analysis, score_module(source, structure, config, parser))

    return analysis
