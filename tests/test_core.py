"""Tests for the project driver."""

import logging

from design_insight import AnalysisConfig, DesignAnalyzer
from design_insight.config import AposdConfig, ConnascenceConfig
from design_insight.connascence import ConnascenceType
from design_insight.temporal import LifecyclePhase


class TestDesignAnalyzer:
    """End-to-end analysis over modules on disk."""

    def test_every_module_is_scored(self, rust_project):
        report = DesignAnalyzer().analyze(rust_project)

        assert list(report.aposd.module_depths) == ["cache", "lifecycle", "missing", "service"]
        assert report.aposd.module_depths["cache"].pub_function_count == 2
        assert report.aposd.cognitive_loads["service"].dependency_count == 2

    def test_unreadable_module_is_skipped(self, rust_project, caplog):
        with caplog.at_level(logging.WARNING):
            report = DesignAnalyzer().analyze(rust_project)

        assert report.skipped == ["missing"]
        missing = report.aposd.module_depths["missing"]
        assert missing.pub_function_count == 0
        assert missing.implementation_loc == 0
        assert missing.pub_type_count == 3
        assert "Skipping module missing" in caplog.text

    def test_oversized_modules_are_skipped(self, rust_project):
        config = AnalysisConfig(max_file_size_mb=0.0001)
        report = DesignAnalyzer(config).analyze(rust_project)

        assert report.skipped == ["cache", "lifecycle", "missing", "service"]
        assert report.connascence.instances == []

    def test_connascence_is_merged_in_module_order(self, rust_project):
        report = DesignAnalyzer().analyze(rust_project)

        sources = [i.source for i in report.connascence.instances]
        assert sources == sorted(sources)
        assert set(sources) == {"cache", "service"}
        names = [
            i.target
            for i in report.connascence.instances
            if i.connascence_type == ConnascenceType.NAME
        ]
        assert names == ["std::collections::HashMap"]

    def test_temporal_is_analyzed_once_over_all_modules(self, rust_project):
        report = DesignAnalyzer().analyze(rust_project)

        phases = report.temporal.stats.lifecycle_methods
        assert "lifecycle::initialize" in phases[LifecyclePhase.INITIALIZE]
        assert "lifecycle::cleanup" in phases[LifecyclePhase.CLEANUP]
        assert "cache::new" in phases[LifecyclePhase.CREATE]

    def test_parallel_matches_sequential(self, rust_project):
        sequential = DesignAnalyzer(AnalysisConfig(workers=1)).analyze(rust_project)
        parallel = DesignAnalyzer(AnalysisConfig(workers=4)).analyze(rust_project)

        assert parallel.summary() == sequential.summary()
        assert parallel.skipped == sequential.skipped
        assert [
            (i.source, i.target) for i in parallel.connascence.instances
        ] == [(i.source, i.target) for i in sequential.connascence.instances]

    def test_config_reaches_analyzers(self, rust_project):
        config = AnalysisConfig(
            connascence=ConnascenceConfig(min_positional_args=2),
            aposd=AposdConfig(passthrough_confidence_threshold=0.5),
        )
        report = DesignAnalyzer(config).analyze(rust_project)

        positions = [
            i.target
            for i in report.connascence.instances
            if i.connascence_type == ConnascenceType.POSITION
        ]
        assert positions == ["insert", "save", "fetch", "partial"]
        assert report.aposd.confirmed_threshold == 0.5

    def test_summary_sections(self, rust_project):
        summary = DesignAnalyzer().analyze(rust_project).summary()

        for heading in (
            "## Module Depth Analysis",
            "## Connascence Analysis",
            "## Temporal Coupling Analysis",
            "## Skipped Modules",
        ):
            assert heading in summary
        assert "- `missing`" in summary
        assert summary.index("## Module Depth Analysis") < summary.index("## Connascence Analysis")
