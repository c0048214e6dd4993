"""Public API for codeshape.

This module provides the main entry point for analysis. Users should call
analyze() instead of wiring discovery, parsing and analyzers by hand.

Example:
    >>> from codeshape import analyze
    >>>
    >>> # Simple usage
    >>> report = analyze(["src"])
    >>> report.exit_code
    0
    >>>
    >>> # With customization
    >>> report = analyze(["src"], workers=4, fail_on="high")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .analyzers import AnalyzerManager
from .config import AnalysisConfig, load_config
from .logging_config import get_logger
from .models import AnalyzerResult, Issue, Status
from .scanning import load_sources

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Report:
    """Outcome of one analysis run.

    Attributes:
        results: One AnalyzerResult per analyzer that completed, in registry order
        files_analyzed: Number of files read
        parse_failures: Files that had no syntax tree (tree rules skipped them)
        analyzer_failures: Ids of analyzers that raised and produced no result
        config: The configuration the run used
    """

    results: tuple[AnalyzerResult, ...] = ()
    files_analyzed: int = 0
    parse_failures: tuple[str, ...] = ()
    analyzer_failures: tuple[str, ...] = ()
    config: AnalysisConfig = field(default_factory=AnalysisConfig)

    @property
    def issues(self) -> list[Issue]:
        return [issue for result in self.results for issue in result.issues]

    @property
    def failing_results(self) -> list[AnalyzerResult]:
        """Blocking, reported results with an issue at or above ``fail_on``."""
        floor = self.config.fail_severity.rank
        return [
            result
            for result in self.results
            if result.status is Status.FAILED
            and self.config.is_reported(result.analyzer_id)
            and any(issue.severity.rank >= floor for issue in result.issues)
        ]

    @property
    def failed(self) -> bool:
        return bool(self.failing_results)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in Status}
        for result in self.results:
            counts[result.status.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_analyzed": self.files_analyzed,
            "parse_failures": list(self.parse_failures),
            "analyzer_failures": list(self.analyzer_failures),
            "summary": {
                **self.count_by_status(),
                "issues": len(self.issues),
                "failed": self.failed,
            },
            "results": [result.to_dict() for result in self.results],
        }


def analyze(
    paths: Union[PathLike, Sequence[PathLike]] = ".",
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> Report:
    """Analyze source files and return a Report.

    Orchestrates the full pipeline:
    1. Load configuration (auto-discover TOML + apply overrides), unless
       ``config`` is given
    2. Discover, read and parse files under ``paths``
    3. Run every enabled analyzer over the parsed files
    4. Collect the per-analyzer results

    Args:
        paths: A file or directory, or several of them
        config: Ready configuration; ``config_file`` and overrides are then ignored
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. workers=4, fail_on="high")

    Returns:
        Report with one result per enabled analyzer

    Raises:
        CodeshapeError: If configuration is invalid or a path does not exist
    """
    if isinstance(paths, (str, Path)):
        paths = [paths]
    targets = [Path(p) for p in paths]

    if config is None:
        config = load_config(config_file=config_file, **overrides)

    logger.info(f"Starting analysis of {', '.join(str(t) for t in targets)}")
    manager = AnalyzerManager(config)
    loaded = load_sources(targets, config)
    run = manager.run(loaded.sources)

    report = Report(
        results=tuple(run.results),
        files_analyzed=len(loaded.sources),
        parse_failures=tuple(loaded.parse_failures),
        analyzer_failures=tuple(run.failed),
        config=config,
    )
    logger.info(
        f"Analysis complete: {len(report.issues)} issues from {len(report.results)} analyzers"
    )
    return report
