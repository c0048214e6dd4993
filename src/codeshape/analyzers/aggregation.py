"""Severity tables and per-analyzer result aggregation."""

from __future__ import annotations

from typing import Optional, Sequence

from ..models import AnalyzerResult, Issue, Metric, Severity, Status


def severity_by_ratio(
    metric: Metric,
    high: Optional[float] = 2.0,
    medium: Optional[float] = 1.5,
    floor: Severity = Severity.LOW,
) -> Severity:
    """Map value / threshold onto a severity. A None step is never reached.

    >>> severity_by_ratio(Metric("cyclomatic", 20, 10))
    <Severity.HIGH: 'high'>
    """
    ratio = metric.ratio
    if high is not None and ratio >= high:
        return Severity.HIGH
    if medium is not None and ratio >= medium:
        return Severity.MEDIUM
    return floor


def severity_by_excess(metric: Metric, high: float, medium: float) -> Severity:
    """Map value - threshold onto a severity."""
    excess = metric.excess
    if excess >= high:
        return Severity.HIGH
    if excess >= medium:
        return Severity.MEDIUM
    return Severity.LOW


def classify(issues: Sequence[Issue], blocking: bool) -> Status:
    if not issues:
        return Status.PASSED
    return Status.FAILED if blocking else Status.WARNING


def build_result(
    analyzer_id: str,
    name: str,
    issues: Sequence[Issue],
    passed_message: str,
    failed_message: str,
    blocking: bool = True,
) -> AnalyzerResult:
    """Wrap one analyzer's issues into its result.

    ``failed_message`` may use ``{count}`` for the number of issues.
    """
    status = classify(issues, blocking)
    message = passed_message if status is Status.PASSED else failed_message.format(count=len(issues))
    return AnalyzerResult(
        analyzer_id=analyzer_id,
        name=name,
        status=status,
        message=message,
        issues=tuple(issues),
        blocking=blocking,
    )
