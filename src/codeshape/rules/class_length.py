"""CLASS_LENGTH: classes with too many lines, methods or properties.

Limits (a count must be strictly greater to violate):
    max_lines       300
    max_methods     20
    max_properties  15

Severity:
    high    3 violations, or more than 300 lines over, or more than 15 methods over
    medium  2 violations, or more than 150 lines over, or more than 10 methods over
    low     otherwise
"""

from __future__ import annotations

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Severity
from ..scanning.syntax import NodeKind, SourceFile, SyntaxNode
from .helpers import recommendation

_ACTIONS = (
    "Extract related methods into separate, focused classes",
    "Move data-only members into value objects",
    "Apply the Single Responsibility Principle",
    "Prefer composition over inheritance for shared behaviour",
)


def class_severity(violations: int, line_excess: int, method_excess: int) -> Severity:
    if violations >= 3 or line_excess > 300 or method_excess > 15:
        return Severity.HIGH
    if violations >= 2 or line_excess > 150 or method_excess > 10:
        return Severity.MEDIUM
    return Severity.LOW


class ClassLengthVisitor(RuleVisitor):
    def enter_class(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        lines = node.line_count
        methods = len(node.children_of_kind(NodeKind.METHOD))
        properties = len(node.children_of_kind(NodeKind.PROPERTY))

        max_lines = self.analyzer.threshold("max_lines")
        max_methods = self.analyzer.threshold("max_methods")
        max_properties = self.analyzer.threshold("max_properties")

        violations = []
        if lines > max_lines:
            violations.append(f"{lines} lines (max: {max_lines})")
        if methods > max_methods:
            violations.append(f"{methods} methods (max: {max_methods})")
        if properties > max_properties:
            violations.append(f"{properties} properties (max: {max_properties})")
        if not violations:
            return

        name = ctx.current.name
        self.report(
            node.start_line,
            f"Class '{name}' is too large: {', '.join(violations)} "
            f"(lines: {lines}, methods: {methods}, properties: {properties})",
            class_severity(
                len(violations),
                max(0, lines - max_lines),
                max(0, methods - max_methods),
            ),
            recommendation(
                f"Class '{name}' has grown beyond a size that is easy to understand and test. ",
                _ACTIONS,
            ),
            **{"class": name},
            lines=lines,
            methods=methods,
            properties=properties,
            violations=violations,
            file=self.source.path,
        )


class ClassLengthAnalyzer(TreeAnalyzer):
    id = "class-length"
    name = "Class Length"
    description = "Flags classes with too many lines, methods or properties"
    severity = Severity.MEDIUM
    tags = ("size", "maintainability", "single-responsibility")
    defaults = {"max_lines": 300, "max_methods": 20, "max_properties": 15}
    passed_message = "All classes are within recommended size limits"
    failed_message = "Found {count} oversized class(es)"

    def create_visitor(self, source: SourceFile) -> ClassLengthVisitor:
        return ClassLengthVisitor(self, source)
