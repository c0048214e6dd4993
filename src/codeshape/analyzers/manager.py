"""Analyzer registry lookups and the manager that runs enabled analyzers."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import AnalyzerNotFoundError
from ..logging_config import get_logger
from ..models import AnalyzerResult
from ..rules import ALL_ANALYZERS
from ..scanning.syntax import SourceFile
from .base import Analyzer

logger = get_logger(__name__)


def get_analyzer_classes() -> list[type[Analyzer]]:
    """Return every registered analyzer class in report order."""
    return list(ALL_ANALYZERS)


def get_analyzer_class(analyzer_id: str) -> type[Analyzer]:
    """Look up one analyzer class by id.

    Raises:
        AnalyzerNotFoundError: If no analyzer has this id
    """
    for cls in ALL_ANALYZERS:
        if cls.id == analyzer_id:
            return cls
    raise AnalyzerNotFoundError(analyzer_id, [cls.id for cls in ALL_ANALYZERS])


@dataclass
class ManagerRun:
    """Results of one manager run.

    Attributes:
        results: One result per analyzer that completed, in registry order
        failed: Ids of analyzers that raised and produced no result
    """

    results: list[AnalyzerResult] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class AnalyzerManager:
    """Instantiates the enabled analyzers and runs them over a corpus.

    Every analyzer id named in the configuration (disabled, dont_report or a
    rules table) must be registered.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        self.config = config
        self._validate_ids()
        self.analyzers: list[Analyzer] = [
            cls(config.rule(cls.id)) for cls in ALL_ANALYZERS if config.is_enabled(cls.id)
        ]
        logger.debug(f"Enabled analyzers: {', '.join(a.id for a in self.analyzers)}")

    def _validate_ids(self) -> None:
        named = [
            *self.config.disabled_analyzers,
            *self.config.dont_report,
            *self.config.rules,
        ]
        for analyzer_id in named:
            get_analyzer_class(analyzer_id)

    def run(self, sources: Sequence[SourceFile], workers: Optional[int] = None) -> ManagerRun:
        """Run every enabled analyzer.

        Analyzers share nothing but the immutable sources, so with more than
        one worker they run in a thread pool. An analyzer that raises is
        logged and left out; the others still run.
        """
        workers = workers if workers is not None else self.config.workers
        outcome: dict[str, AnalyzerResult] = {}
        failed: list[str] = []

        if not workers or workers <= 1 or len(self.analyzers) < 2:
            for analyzer in self.analyzers:
                result = self._run_one(analyzer, sources)
                if result is None:
                    failed.append(analyzer.id)
                else:
                    outcome[analyzer.id] = result
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._run_one, analyzer, sources): analyzer
                    for analyzer in self.analyzers
                }
                for future in as_completed(futures):
                    analyzer = futures[future]
                    result = future.result()
                    if result is None:
                        failed.append(analyzer.id)
                    else:
                        outcome[analyzer.id] = result

        order = [a.id for a in self.analyzers]
        return ManagerRun(
            results=[outcome[i] for i in order if i in outcome],
            failed=[i for i in order if i in failed],
        )

    def _run_one(self, analyzer: Analyzer, sources: Sequence[SourceFile]) -> Optional[AnalyzerResult]:
        try:
            result = analyzer.run(sources)
        except Exception as e:
            logger.warning(f"Analyzer {analyzer.id} failed: {e}")
            logger.debug(f"{analyzer.id} traceback", exc_info=True)
            return None
        logger.debug(f"{analyzer.id}: {result.status.value} ({len(result.issues)} issues)")
        return result
