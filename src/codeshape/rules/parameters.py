"""Parameter list rules.

PARAMETER_COUNT
    Threshold: 4 (constructors: 6). Implicit receivers (self, cls) are not
    counted. Severity by excess: >= 5 high, >= 3 medium, else low.

LONG_PARAMETER_LIST
    Threshold: 3 parameters sharing one declared type (untyped parameters
    share the type ``mixed``). Magic methods are skipped. Always low.
"""

from __future__ import annotations

from collections import defaultdict

from ..analyzers.aggregation import severity_by_excess
from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Metric, Severity
from ..scanning.syntax import SourceFile, SyntaxNode
from .helpers import class_name, is_magic, qualified_name, recommendation

UNTYPED = "mixed"

_COUNT_ACTIONS = (
    "Introduce a parameter object that groups related parameters",
    "Use data transfer objects to carry related values",
    "Pass the whole object instead of several of its fields",
    "Use a builder for objects with many optional parameters",
    "Review whether the method is doing too much and should be split",
)
_CONSTRUCTOR_ACTIONS = (
    "For constructors, consider a factory or builder",
    "Move optional dependencies into setters or a configuration object",
)
_SAME_TYPE_ACTIONS = (
    "Create a data transfer object to group related parameters",
    "Use value objects for parameters that belong together",
    "Consider whether the method is doing too much and should be split",
    "Use keyword or named arguments if the parameters must stay separate",
)


class ParameterCountVisitor(RuleVisitor):
    def enter_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        count = len(node.parameters)
        constructor = node.is_constructor
        threshold = self.analyzer.threshold(
            "constructor_threshold" if constructor else "threshold"
        )
        metric = Metric("parameters", count, threshold)
        if not metric.exceeded:
            return

        label = qualified_name(ctx, ctx.current.name)
        actions = _COUNT_ACTIONS + (_CONSTRUCTOR_ACTIONS if constructor else ())
        self.report(
            node.start_line,
            f"Method '{label}' has {count} parameters (threshold: {threshold})",
            severity_by_excess(metric, high=5, medium=3),
            recommendation(
                f"Method '{label}' has {count} parameters. Long parameter lists are "
                "difficult to understand, remember and maintain. ",
                actions,
            ),
            method=label,
            **{"class": class_name(ctx) or "global"},
            count=count,
            threshold=threshold,
            isConstructor=constructor,
            file=self.source.path,
        )

    enter_method = enter_function


class ParameterCountAnalyzer(TreeAnalyzer):
    id = "parameter-count"
    name = "Parameter Count"
    description = "Flags functions and methods that take too many parameters"
    severity = Severity.MEDIUM
    tags = ("complexity", "api-design")
    defaults = {"threshold": 4, "constructor_threshold": 6}
    passed_message = "All methods have reasonable parameter counts"
    failed_message = "Found {count} method(s) with too many parameters"

    def create_visitor(self, source: SourceFile) -> ParameterCountVisitor:
        return ParameterCountVisitor(self, source)


class SameTypeParameterVisitor(RuleVisitor):
    def enter_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = ctx.current.name
        if is_magic(name):
            return
        threshold = self.analyzer.threshold("threshold")

        groups: dict[str, list[str]] = defaultdict(list)
        for parameter in node.parameters:
            declared = parameter.attrs.get("declared_type") or UNTYPED
            groups[declared].append(parameter.name or "?")

        for declared, names in groups.items():
            if len(names) <= threshold:
                continue
            listed = ", ".join(names)
            self.report(
                node.start_line,
                f"Method '{name}' has {len(names)} parameters of type '{declared}' "
                f"(threshold: {threshold})",
                Severity.LOW,
                recommendation(
                    f"Method '{name}' has {len(names)} parameters of type '{declared}': "
                    f"{listed}. Multiple parameters of the same type are easy to mix up. ",
                    _SAME_TYPE_ACTIONS,
                ),
                method=name,
                type=declared,
                count=len(names),
                parameters=names,
                threshold=threshold,
                file=self.source.path,
            )

    enter_method = enter_function


class LongParameterListAnalyzer(TreeAnalyzer):
    id = "long-parameter-list"
    name = "Same-Type Parameters"
    description = "Flags methods taking many parameters of the same declared type"
    severity = Severity.LOW
    tags = ("api-design", "readability")
    defaults = {"threshold": 3}
    passed_message = "No methods with excessive same-type parameters detected"
    failed_message = "Found {count} method(s) with multiple same-type parameters"

    def create_visitor(self, source: SourceFile) -> SameTypeParameterVisitor:
        return SameTypeParameterVisitor(self, source)
