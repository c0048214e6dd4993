"""NESTING_DEPTH: control structures nested too deeply.

Threshold: 4
Severity: excess over threshold (>= 3 high, >= 2 medium, else low)

A structure that starts at depth N (1 for a top-level ``if`` in a
function) is reported when N exceeds the threshold. Each declaration unit
starts again from 0. Only the deepest structure per line is reported.
"""

from __future__ import annotations

from ..analyzers.aggregation import severity_by_excess
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import NESTING_STRUCTURES, SourceFile, SyntaxNode
from .helpers import recommendation

_ACTIONS = (
    "Use early returns (guard clauses) to handle edge cases first",
    "Extract nested blocks into well-named helper methods",
    "Invert conditions to reduce nesting",
    "Replace nested loops with collection operations",
)


class NestingVisitor(RuleVisitor):
    def begin(self, source: SourceFile, ctx: ScopeContext) -> None:
        self.limit = self.analyzer.threshold("threshold")
        # line -> (depth, context)
        self.deepest: dict[int, tuple[int, str]] = {}

    def enter(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if node.kind not in NESTING_STRUCTURES:
            return
        depth = ctx.nesting + 1
        if depth <= self.limit:
            return
        line = node.start_line
        previous = self.deepest.get(line)
        if previous is None or depth > previous[0]:
            self.deepest[line] = (depth, ctx.context_name)

    def end(self, source: SourceFile, ctx: ScopeContext) -> None:
        threshold = self.limit
        for line, (depth, context) in self.deepest.items():
            metric = Metric("nesting", depth, threshold)
            self.report(
                line,
                f"Code block has nesting depth of {depth} (threshold: {threshold}) in '{context}'",
                severity_by_excess(metric, high=3, medium=2),
                recommendation(
                    f"This code is nested {int(metric.excess)} level(s) deeper than "
                    "recommended, which makes it hard to follow. ",
                    _ACTIONS,
                ),
                depth=depth,
                threshold=threshold,
                context=context,
                file=self.source.path,
            )


class NestingDepthAnalyzer(TreeAnalyzer):
    id = "nesting-depth"
    name = "Nesting Depth"
    description = "Flags control structures nested beyond a maximum depth"
    severity = Severity.MEDIUM
    tags = ("complexity", "readability")
    defaults = {"threshold": 4}
    passed_message = "No deeply nested code blocks detected"
    failed_message = "Found {count} deeply nested code block(s)"

    def create_visitor(self, source: SourceFile) -> NestingVisitor:
        return NestingVisitor(self, source)
