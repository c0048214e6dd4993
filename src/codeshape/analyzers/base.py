"""Base classes for analyzers.

An analyzer is one rule run over the whole corpus. It declares its metadata
as class attributes, reads thresholds from its RuleSettings and returns one
AnalyzerResult.

Most rules are TreeAnalyzers: they create one RuleVisitor per file and let
the traversal engine drive it. Rules that work on raw lines override
``analyze_file``; rules that compare files with each other override
``analyze``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Optional, Sequence

from ..config import DEFAULT_RULE_SETTINGS, RuleSettings
from ..engine import ScopeContext, Visitor, traverse
from ..logging_config import get_logger
from ..models import AnalyzerResult, Issue, Location, Severity
from ..scanning.discovery import matches_any
from ..scanning.languages import LanguageSpec, get_language_spec
from ..scanning.syntax import SourceFile
from .aggregation import build_result
from .suppression import apply_suppressions

logger = get_logger(__name__)


class Analyzer(ABC):
    """One rule.

    Class attributes:
        id: Stable identifier used in configuration and suppressions
        name: Display name
        description: One-line description
        severity: Typical severity of this rule's issues
        blocking: Whether issues fail the run (else the result is a warning)
        tags: Free-form labels
        defaults: Threshold name -> documented default
        passed_message: Summary when nothing is found
        failed_message: Summary template, ``{count}`` is the issue count
    """

    id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    severity: ClassVar[Severity] = Severity.MEDIUM
    blocking: ClassVar[bool] = True
    tags: ClassVar[tuple[str, ...]] = ()
    defaults: ClassVar[Mapping[str, Any]] = {}
    passed_message: ClassVar[str] = "No issues found"
    failed_message: ClassVar[str] = "Found {count} issue(s)"

    def __init__(self, settings: RuleSettings = DEFAULT_RULE_SETTINGS) -> None:
        self.settings = settings
        self._thresholds: dict[str, Any] = {}

    def threshold(self, name: str) -> Any:
        """Configured threshold, or the rule's default when unset or invalid.

        Resolved once per analyzer, so an invalid value is reported once.
        """
        if name not in self._thresholds:
            self._thresholds[name] = self.settings.threshold(name, self.defaults[name])
        return self._thresholds[name]

    def run(self, sources: Sequence[SourceFile]) -> AnalyzerResult:
        selected = [s for s in sources if not matches_any(s.path, self.settings.exclude)]
        issues = self.analyze(selected)
        issues = apply_suppressions(issues, self.id, {s.path: s for s in sources})
        return build_result(
            self.id,
            self.name,
            issues,
            self.passed_message,
            self.summarize(issues),
            blocking=self.blocking,
        )

    def analyze(self, sources: Sequence[SourceFile]) -> list[Issue]:
        """Analyze files one by one; a failing file is logged and skipped."""
        issues: list[Issue] = []
        for source in sources:
            try:
                issues.extend(self.analyze_file(source))
            except Exception as e:
                logger.warning(f"{self.id}: failed on {source.path}: {e}")
                logger.debug(f"{self.id} traceback", exc_info=True)
        return issues

    def analyze_file(self, source: SourceFile) -> list[Issue]:
        raise NotImplementedError

    def summarize(self, issues: Sequence[Issue]) -> str:
        return self.failed_message.format(count=len(issues))

    def issue(
        self,
        source: SourceFile,
        line: int,
        message: str,
        severity: Severity,
        recommendation: str = "",
        column: Optional[int] = None,
        **metadata: Any,
    ) -> Issue:
        return Issue(
            message=message,
            location=Location(source.path, line, column),
            severity=severity,
            recommendation=recommendation,
            metadata=metadata,
        )

    @classmethod
    def describe(cls) -> dict[str, Any]:
        return {
            "id": cls.id,
            "name": cls.name,
            "description": cls.description,
            "severity": cls.severity.value,
            "blocking": cls.blocking,
            "tags": list(cls.tags),
        }


class RuleVisitor(Visitor):
    """Visitor that belongs to one analyzer and one file, collecting issues."""

    def __init__(self, analyzer: Analyzer, source: SourceFile) -> None:
        self.analyzer = analyzer
        self.source = source
        self.language: LanguageSpec = get_language_spec(source.language)
        self.issues: list[Issue] = []

    def report(
        self,
        line: int,
        message: str,
        severity: Severity,
        recommendation: str = "",
        **metadata: Any,
    ) -> Issue:
        issue = self.analyzer.issue(self.source, line, message, severity, recommendation, **metadata)
        self.issues.append(issue)
        return issue


class TreeAnalyzer(Analyzer):
    """Analyzer driven by one RuleVisitor per syntax tree."""

    def analyze_file(self, source: SourceFile) -> list[Issue]:
        if source.root is None:
            logger.debug(f"{self.id}: no syntax tree for {source.path}, skipping")
            return []
        visitor = self.create_visitor(source)
        completed = traverse(source, [visitor], ScopeContext(source.path))
        if visitor not in completed:
            return []
        return visitor.issues

    @abstractmethod
    def create_visitor(self, source: SourceFile) -> RuleVisitor:
        """Fresh visitor for one file."""
