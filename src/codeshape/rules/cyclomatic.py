"""CYCLOMATIC_COMPLEXITY: functions and methods with too many decision points.

Threshold: 10
Severity: ratio to threshold (>= 2.0 high, >= 1.5 medium, else low)

Every named callable starts at 1 and gains one point per decision:
if, else-if, each loop, switch, each non-default case, catch, ternary,
and each boolean and / or / null-coalescing operator. Decisions inside
lambdas count towards the named callable that contains them; code at file
level is not measured.
"""

from __future__ import annotations

from ..analyzers.aggregation import severity_by_ratio
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import BOOLEAN_OPERATORS, NodeKind, SourceFile, SyntaxNode
from .helpers import recommendation

DECISION_KINDS = frozenset(
    {
        NodeKind.IF,
        NodeKind.ELSE_IF,
        NodeKind.WHILE,
        NodeKind.FOR,
        NodeKind.FOREACH,
        NodeKind.DO_WHILE,
        NodeKind.SWITCH,
        NodeKind.CASE,
        NodeKind.CATCH,
        NodeKind.TERNARY,
    }
) | BOOLEAN_OPERATORS

_ACTIONS = (
    "Break this method into smaller, focused functions",
    "Extract conditional logic into well-named helper methods",
    "Use early returns to reduce nesting",
    "Consider using polymorphism to replace complex conditionals",
    "Apply the Single Responsibility Principle",
)


def decision_points(node: SyntaxNode) -> int:
    """Points a single node adds to its callable's complexity."""
    if node.kind not in DECISION_KINDS:
        return 0
    if node.is_default_case:
        return 0
    return 1


class CyclomaticVisitor(RuleVisitor):
    def enter(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        points = decision_points(node)
        if points:
            frame = ctx.callable
            if frame is not None:
                frame.accumulate("cyclomatic", points)

    def leave_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        complexity = 1 + int(ctx.current.value("cyclomatic"))
        threshold = self.analyzer.threshold("threshold")
        metric = Metric("cyclomatic", complexity, threshold)
        if not metric.exceeded:
            return

        name = ctx.current.name
        intro = (
            f"This method has {int(metric.excess)} decision points above the "
            "recommended threshold. "
        )
        if metric.ratio >= 2:
            intro += "This is critically complex and should be refactored immediately. "
        elif metric.ratio >= 1.5:
            intro += "This requires significant refactoring. "
        self.report(
            node.start_line,
            f"Method '{name}' has cyclomatic complexity of {complexity} (threshold: {threshold})",
            severity_by_ratio(metric),
            recommendation(intro, _ACTIONS),
            method=name,
            complexity=complexity,
            threshold=threshold,
            file=self.source.path,
        )

    leave_method = leave_function


class CyclomaticComplexityAnalyzer(TreeAnalyzer):
    id = "cyclomatic-complexity"
    name = "Cyclomatic Complexity"
    description = "Flags functions and methods with too many independent paths"
    severity = Severity.MEDIUM
    tags = ("complexity", "maintainability", "testability")
    defaults = {"threshold": 10}
    passed_message = "No methods with high cyclomatic complexity detected"
    failed_message = "Found {count} method(s) with high cyclomatic complexity"

    def create_visitor(self, source: SourceFile) -> CyclomaticVisitor:
        return CyclomaticVisitor(self, source)
