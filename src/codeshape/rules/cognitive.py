"""COGNITIVE_COMPLEXITY: how hard a callable is to read, weighted by nesting.

Threshold: 15
Severity: excess over threshold (>= 15 high, >= 10 medium, else low)

Increments:
    if, loops, switch, catch, ternary   1 + nesting level
    else-if                             1
    boolean and / or / ??               1
    break / continue inside a loop      1

Only the structures in the first row open a nesting level; case labels
and try bodies do not. A lambda opens one extra level for its body and its
score is charged to the named callable around it.
"""

from __future__ import annotations

from typing import Optional

from ..analyzers.aggregation import severity_by_excess
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import (
    BOOLEAN_OPERATORS,
    LOOPS,
    NAMED_CALLABLES,
    NodeKind,
    SourceFile,
    SyntaxNode,
)
from .helpers import class_name, qualified_name

NESTED_INCREMENTS = LOOPS | {NodeKind.IF, NodeKind.SWITCH, NodeKind.CATCH, NodeKind.TERNARY}
FLAT_INCREMENTS = BOOLEAN_OPERATORS | {NodeKind.ELSE_IF}
JUMPS = frozenset({NodeKind.BREAK, NodeKind.CONTINUE})

_STRATEGIES = (
    "Extract nested conditions and loops into well-named private methods",
    "Use early returns (guard clauses) to reduce nesting",
    "Replace complex conditionals with polymorphism or strategy pattern",
    "Simplify boolean expressions using De Morgan's laws",
    "Break down long methods into smaller, focused methods",
    "Use descriptive method names that reveal intent",
)


def effective_nesting(ctx: ScopeContext) -> Optional[int]:
    """Nesting level as seen by the enclosing named callable.

    Counts the if, loop, switch, catch and ternary ancestors of the current
    node, plus one per lambda, up to that callable. Case labels and try
    bodies add nothing. None outside any named callable.
    """
    total = 0
    for ancestor in ctx.ancestors():
        if ancestor.kind in NESTED_INCREMENTS or ancestor.kind is NodeKind.LAMBDA:
            total += 1
        elif ancestor.kind in NAMED_CALLABLES:
            return total
        elif ancestor.kind is NodeKind.CLASS:
            return None
    return None


def increment(node: SyntaxNode, ctx: ScopeContext) -> int:
    """Points ``node`` adds at the current position."""
    if node.kind in NESTED_INCREMENTS:
        nesting = effective_nesting(ctx)
        return 0 if nesting is None else 1 + nesting
    if node.kind in FLAT_INCREMENTS:
        return 1
    if node.kind in JUMPS and ctx.in_loop:
        return 1
    return 0


class CognitiveVisitor(RuleVisitor):
    def enter(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        frame = ctx.callable
        if frame is None:
            return
        points = increment(node, ctx)
        if points:
            frame.accumulate("cognitive", points)

    def leave_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        complexity = int(ctx.current.value("cognitive"))
        threshold = self.analyzer.threshold("threshold")
        metric = Metric("cognitive", complexity, threshold)
        if not metric.exceeded:
            return

        label = qualified_name(ctx, ctx.current.name)
        self.report(
            node.start_line,
            f"Method '{label}' has cognitive complexity of {complexity} (threshold: {threshold})",
            severity_by_excess(metric, high=15, medium=10),
            f"Method '{label}' has cognitive complexity of {complexity}, which is "
            f"{int(metric.excess)} point(s) above the threshold. High cognitive complexity "
            "makes code difficult to understand and maintain. Refactoring strategies: "
            + "; ".join(_STRATEGIES),
            method=label,
            **{"class": class_name(ctx) or "global"},
            complexity=complexity,
            threshold=threshold,
            file=self.source.path,
        )

    leave_method = leave_function


class CognitiveComplexityAnalyzer(TreeAnalyzer):
    id = "cognitive-complexity"
    name = "Cognitive Complexity"
    description = "Flags callables whose control flow is hard to follow"
    severity = Severity.MEDIUM
    tags = ("complexity", "readability", "maintainability")
    defaults = {"threshold": 15}
    passed_message = "All methods have acceptable cognitive complexity"
    failed_message = "Found {count} method(s) with high cognitive complexity"

    def create_visitor(self, source: SourceFile) -> CognitiveVisitor:
        return CognitiveVisitor(self, source)
