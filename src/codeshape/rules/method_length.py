"""METHOD_LENGTH: functions and methods spanning too many lines.

Threshold: 50 physical lines. Accessors matching ``exclude_patterns``
(get*, set*, is*, has*) are not measured.
"""

from __future__ import annotations

from ..analyzers.aggregation import severity_by_ratio
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import SourceFile, SyntaxNode
from .helpers import matches_name, recommendation

_ACTIONS = (
    "Extract cohesive blocks into well-named helper methods",
    "Move setup and validation into dedicated functions",
    "Replace long conditional chains with lookup tables or polymorphism",
)


class MethodLengthVisitor(RuleVisitor):
    def enter_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = ctx.current.name
        if matches_name(name, self.analyzer.threshold("exclude_patterns")):
            return
        threshold = self.analyzer.threshold("threshold")
        metric = Metric("lines", node.line_count, threshold)
        if not metric.exceeded:
            return
        self.report(
            node.start_line,
            f"Method '{name}' has {node.line_count} lines (threshold: {threshold})",
            severity_by_ratio(metric, high=None, medium=2.0),
            recommendation(
                f"This method is {int(metric.excess)} line(s) longer than recommended. ",
                _ACTIONS,
            ),
            method=name,
            lines=node.line_count,
            threshold=threshold,
            file=self.source.path,
        )

    enter_method = enter_function


class MethodLengthAnalyzer(TreeAnalyzer):
    id = "method-length"
    name = "Method Length"
    description = "Flags functions and methods longer than a line threshold"
    severity = Severity.LOW
    tags = ("size", "readability")
    defaults = {"threshold": 50, "exclude_patterns": ["get*", "set*", "is*", "has*"]}
    passed_message = "No methods exceeding length threshold detected"
    failed_message = "Found {count} method(s) exceeding recommended length"

    def create_visitor(self, source: SourceFile) -> MethodLengthVisitor:
        return MethodLengthVisitor(self, source)
