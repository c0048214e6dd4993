"""MAGIC_NUMBER: unexplained numeric literals.

Allowed by default: 0, 1, -1, 2, 10, 100, 1000

Not reported:
    - collection indices (``items[3]``)
    - ``+=`` / ``-=`` adjustments and ``+ 1`` / ``- 1`` arithmetic
    - default parameter values
    - constant declarations

Occurrences are grouped per file by value: one issue per value, at its
first occurrence, with ``usage_count``. Medium once a value is used more
than twice, else low.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Severity
from ..scanning.syntax import NodeKind, SourceFile, SyntaxNode

_CONTEXTS = {
    NodeKind.BINARY_OP: "binary operation",
    NodeKind.LOGICAL_AND: "binary operation",
    NodeKind.LOGICAL_OR: "binary operation",
    NodeKind.COALESCE: "binary operation",
    NodeKind.CALL: "function/method call",
    NodeKind.ASSIGNMENT: "assignment",
    NodeKind.AUGMENTED_ASSIGNMENT: "assignment",
    NodeKind.RETURN: "return statement",
    NodeKind.TERNARY: "ternary expression",
}


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)


def usage_context(parent: Optional[SyntaxNode]) -> str:
    if parent is None:
        return "expression"
    return _CONTEXTS.get(parent.kind, "expression")


def is_exempt(node: SyntaxNode, parent: Optional[SyntaxNode], ctx: ScopeContext) -> bool:
    """Positions where a literal does not need a name."""
    if parent is not None:
        if parent.kind is NodeKind.INDEX and node.role == "index":
            return True
        if parent.kind is NodeKind.AUGMENTED_ASSIGNMENT and parent.operator in ("+=", "-="):
            return True
        if (
            parent.kind is NodeKind.BINARY_OP
            and parent.operator in ("+", "-")
            and node.value in (1, -1)
        ):
            return True
    return ctx.has_ancestor(NodeKind.PARAMETER, NodeKind.CONSTANT)


@dataclass
class _Usage:
    text: str
    line: int
    context: str
    count: int = 1


class MagicNumberVisitor(RuleVisitor):
    def begin(self, source: SourceFile, ctx: ScopeContext) -> None:
        allowed = self.analyzer.threshold("allowed")
        self.allowed = {float(v) for v in allowed if isinstance(v, (int, float))}
        self.usages: dict[float, _Usage] = {}

    def enter_number(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if node.value is None or float(node.value) in self.allowed:
            return
        parent = ctx.parent
        if is_exempt(node, parent, ctx):
            return
        key = float(node.value)
        usage = self.usages.get(key)
        if usage is None:
            self.usages[key] = _Usage(format_number(node.value), node.start_line, usage_context(parent))
        else:
            usage.count += 1

    def end(self, source: SourceFile, ctx: ScopeContext) -> None:
        for usage in self.usages.values():
            advice = "Replace this magic number with a named constant. "
            if usage.count > 2:
                advice += (
                    f"This number appears {usage.count} times in the file, making it "
                    "especially important to use a constant. "
                )
            advice += (
                f"Example: MAX_RETRIES = {usage.text}. A named constant documents intent "
                "and changes in one place."
            )
            self.report(
                usage.line,
                f"Magic number '{usage.text}' found in {usage.context}",
                Severity.MEDIUM if usage.count > 2 else Severity.LOW,
                advice,
                value=usage.text,
                context=usage.context,
                usage_count=usage.count,
                file=self.source.path,
            )


class MagicNumberAnalyzer(TreeAnalyzer):
    id = "magic-number"
    name = "Magic Numbers"
    description = "Flags numeric literals that should be named constants"
    severity = Severity.LOW
    tags = ("readability", "maintainability")
    defaults = {"allowed": [0, 1, -1, 2, 10, 100, 1000]}
    passed_message = "No magic numbers detected"
    failed_message = "Found {count} magic number(s) that should be constants"

    def create_visitor(self, source: SourceFile) -> MagicNumberVisitor:
        return MagicNumberVisitor(self, source)
