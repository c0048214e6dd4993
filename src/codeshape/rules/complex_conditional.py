"""COMPLEX_CONDITIONAL: conditions with too many logical operators.

Threshold: 3 operators (and, or, ??, not) in the condition of an if,
else-if, loop or ternary. Any ternary that contains another ternary is
flagged regardless of the threshold.

Severity: excess over threshold (>= 4 high, >= 2 medium, else low).
"""

from __future__ import annotations

from typing import Optional

from ..analyzers.aggregation import severity_by_excess
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import BOOLEAN_OPERATORS, CALLABLES, NodeKind, SourceFile, SyntaxNode
from .helpers import own_nodes, recommendation

CONDITIONAL_KINDS = {
    NodeKind.IF: "if_condition",
    NodeKind.ELSE_IF: "if_condition",
    NodeKind.WHILE: "while_condition",
    NodeKind.DO_WHILE: "while_condition",
    NodeKind.FOR: "for_condition",
}

_ACTIONS = (
    "Extract parts of the condition into well-named boolean variables",
    "Move compound conditions into methods with descriptive names",
    "Use guard clauses to split the condition",
    "Apply De Morgan's laws to simplify negations",
    "Replace nested ternaries with if / else statements",
)


def is_negation(node: SyntaxNode) -> bool:
    if node.kind is not NodeKind.UNARY_OP:
        return False
    return node.operator == "!" or "not" in node.attrs.get("keywords", ())


def count_operators(node: Optional[SyntaxNode]) -> int:
    """Logical operators in an expression, not looking into nested callables."""
    if node is None:
        return 0
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind in BOOLEAN_OPERATORS or is_negation(current):
            count += 1
        if current is not node and current.kind in CALLABLES:
            continue
        stack.extend(current.children)
    return count


class ComplexConditionalVisitor(RuleVisitor):
    def enter(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if node.kind is NodeKind.TERNARY:
            self.check_ternary(node, ctx)
        elif node.kind in CONDITIONAL_KINDS:
            self.check(node, ctx, count_operators(node.child("condition")), CONDITIONAL_KINDS[node.kind])

    def check_ternary(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        operators = count_operators(node.child("condition"))
        if own_nodes(node, NodeKind.TERNARY):
            self.check(node, ctx, operators + 1, "nested_ternary", always=True)
        else:
            self.check(node, ctx, operators, "ternary_condition")

    def check(
        self, node: SyntaxNode, ctx: ScopeContext, operators: int, kind: str, always: bool = False
    ) -> None:
        threshold = self.analyzer.threshold("threshold")
        metric = Metric("operators", operators, threshold)
        if not (always or metric.exceeded):
            return
        context = ctx.context_name
        self.report(
            node.start_line,
            f"Complex conditional with {operators} logical operators in '{context}'",
            severity_by_excess(metric, high=4, medium=2),
            recommendation(
                f"This conditional expression contains {operators} logical operators, "
                "which makes it hard to understand. ",
                _ACTIONS,
            ),
            operators=operators,
            threshold=threshold,
            context=context,
            type=kind,
            file=self.source.path,
        )


class ComplexConditionalAnalyzer(TreeAnalyzer):
    id = "complex-conditional"
    name = "Complex Conditionals"
    description = "Flags conditions with many logical operators and nested ternaries"
    severity = Severity.MEDIUM
    tags = ("complexity", "readability")
    defaults = {"threshold": 3}
    passed_message = "No complex conditionals detected"
    failed_message = "Found {count} complex conditional(s)"

    def create_visitor(self, source: SourceFile) -> ComplexConditionalVisitor:
        return ComplexConditionalVisitor(self, source)
