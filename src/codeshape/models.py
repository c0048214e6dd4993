"""Report data models: issues, analyzer results, similarity pairs.

Everything here is immutable once built. Analyzers create Issues, the
aggregator wraps them in an AnalyzerResult, and the reporting layer only
reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class Severity(str, Enum):
    """Ordinal issue severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> "Severity":
        try:
            return cls(value.lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown severity '{value}' (expected one of: {choices})")


_SEVERITY_RANK = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class Status(str, Enum):
    """Outcome of one analyzer run."""

    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


def _freeze(value: Any) -> Any:
    """Recursively turn lists into tuples and dicts into read-only mappings."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class Location:
    """Where an issue was found. Lines are 1-indexed."""

    file: str
    line: int
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.column is not None:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class Issue:
    """One reported finding.

    Attributes:
        message: Human-readable description of the problem
        location: File and line of the offending construct
        severity: Ordinal severity
        recommendation: Remediation text
        metadata: Rule-specific values (read-only)
    """

    message: str
    location: Location
    severity: Severity
    recommendation: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(dict(self.metadata)))

    @property
    def file(self) -> str:
        return self.location.file

    @property
    def line(self) -> int:
        return self.location.line

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "file": self.location.file,
            "line": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
            "metadata": _thaw(self.metadata),
        }


@dataclass(frozen=True)
class AnalyzerResult:
    """Outcome of one analyzer over the whole corpus."""

    analyzer_id: str
    name: str
    status: Status
    message: str
    issues: tuple[Issue, ...] = ()
    blocking: bool = True

    @property
    def passed(self) -> bool:
        return self.status is Status.PASSED

    @property
    def max_severity(self) -> Optional[Severity]:
        if not self.issues:
            return None
        return max((issue.severity for issue in self.issues), key=lambda s: s.rank)

    def to_dict(self) -> dict[str, Any]:
        return {
            "analyzer": self.analyzer_id,
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class SimilarityPair:
    """Two callables whose normalized bodies are alike."""

    unit_a: str
    unit_b: str
    similarity: float
    line_count: int


@dataclass(frozen=True)
class Metric:
    """A measured value and the threshold it is judged against."""

    name: str
    value: float
    threshold: float

    @property
    def excess(self) -> float:
        return self.value - self.threshold

    @property
    def ratio(self) -> float:
        if self.threshold <= 0:
            return float("inf") if self.value > 0 else 0.0
        return self.value / self.threshold

    @property
    def exceeded(self) -> bool:
        return self.value > self.threshold
