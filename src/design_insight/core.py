"""Project driver: runs every analyzer over a set of modules.

Usage:
    analyzer = DesignAnalyzer(load_config())
    report = analyzer.analyze(modules)   # dict[name, ModuleStructure]
    print(report.summary())

Per-module work is independent. With ``workers > 1`` it runs on a thread
pool where every task owns fresh accumulators; results are merged in
module-name order afterwards, so the report matches a sequential run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .aposd import AposdAnalysis, ModuleScore, score_module
from .aposd.analyzer import add_score, empty_score
from .config import AnalysisConfig
from .connascence import ConnascenceAnalyzer, extract_connascence_facts
from .exceptions import FileAccessError
from .models import ModuleStructure
from .scanning import RustParser
from .temporal import TemporalAnalyzer, analyze_temporal_patterns

logger = logging.getLogger(__name__)


@dataclass
class ModuleResult:
    """Everything one module contributes to a report."""

    name: str
    score: ModuleScore
    connascence: Optional[ConnascenceAnalyzer] = None
    temporal: Optional[TemporalAnalyzer] = None
    skipped_reason: Optional[str] = None


@dataclass
class DesignReport:
    """Merged results of a project analysis."""

    aposd: AposdAnalysis
    connascence: ConnascenceAnalyzer
    temporal: TemporalAnalyzer
    skipped: list[str] = field(default_factory=list)

    def summary(self) -> str:
        sections = [self.aposd.summary(), self.connascence.summary(), self.temporal.summary()]
        if self.skipped:
            skipped = "\n".join(f"- `{name}`" for name in self.skipped)
            sections.append(f"## Skipped Modules\n\n{skipped}\n")
        return "\n".join(sections)


class DesignAnalyzer:
    """Runs depth scoring, connascence and temporal detection per module."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()

    def analyze(self, modules: Mapping[str, ModuleStructure]) -> DesignReport:
        """Analyze every module and merge the results.

        Args:
            modules: Module name -> structural record (``path`` is read)

        Returns:
            DesignReport with the temporal detectors already run
        """
        names = sorted(modules)
        workers = self.config.workers or 1
        logger.debug(f"Analyzing {len(names)} modules with {workers} worker(s)")

        if workers > 1 and len(names) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(lambda n: self._analyze_module(modules[n]), names))
        else:
            results = [self._analyze_module(modules[name]) for name in names]

        return self._merge(results)

    def _analyze_module(self, structure: ModuleStructure) -> ModuleResult:
        """Analyze one module with accumulators owned by this call."""
        try:
            source = self._read_source(structure)
        except FileAccessError as e:
            logger.warning(f"Skipping module {structure.name}: {e}")
            return ModuleResult(
                name=structure.name,
                score=empty_score(structure),
                skipped_reason=e.reason,
            )

        # tree-sitter parsers are not shared across threads
        parser = RustParser()
        score = score_module(source, structure, self.config.aposd, parser)

        connascence = ConnascenceAnalyzer(
            min_positional_args=self.config.connascence.min_positional_args,
            high_strength_threshold=self.config.connascence.high_strength_threshold,
        )
        extract_connascence_facts(connascence, source, structure.name, parser)

        temporal = analyze_temporal_patterns(source, structure.name, self._new_temporal())

        return ModuleResult(
            name=structure.name, score=score, connascence=connascence, temporal=temporal
        )

    def _read_source(self, structure: ModuleStructure) -> str:
        path = Path(structure.path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise FileAccessError(path, str(e))

        if size > self.config.max_file_size_bytes:
            raise FileAccessError(
                path, f"file size {size} exceeds limit of {self.config.max_file_size_bytes} bytes"
            )

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(path, str(e))

    def _new_temporal(self) -> TemporalAnalyzer:
        return TemporalAnalyzer(
            high_severity_threshold=self.config.temporal.high_severity_threshold,
            min_builder_methods=self.config.temporal.min_builder_methods,
        )

    def _merge(self, results: list[ModuleResult]) -> DesignReport:
        aposd = AposdAnalysis(confirmed_threshold=self.config.aposd.passthrough_confidence_threshold)
        connascence = ConnascenceAnalyzer(
            min_positional_args=self.config.connascence.min_positional_args,
            high_strength_threshold=self.config.connascence.high_strength_threshold,
        )
        temporal = self._new_temporal()
        skipped: list[str] = []

        for result in sorted(results, key=lambda r: r.name):
            add_score(aposd, result.score)
            if result.skipped_reason is not None:
                skipped.append(result.name)
                continue
            if result.connascence is not None:
                connascence.merge(result.connascence)
            if result.temporal is not None:
                temporal.merge(result.temporal)

        temporal.analyze()

        if skipped:
            logger.warning(f"{len(skipped)} module(s) skipped; see report for details")
        return DesignReport(aposd=aposd, connascence=connascence, temporal=temporal, skipped=skipped)
