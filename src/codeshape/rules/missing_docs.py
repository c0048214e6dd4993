"""MISSING_DOCS: public methods without (complete) documentation.

A public, non-magic method that is not a constructor or a simple accessor
(get*, set*, is*, has*) needs a docstring or doc comment. When that
documentation spans several lines it must also:

    - name every parameter that has no type or only a generic type
    - mention the return value if the method returns one
    - mention exceptions if the method raises outside a try block

Issue types: missing (medium), missing_param, missing_return,
missing_throws (low).
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Issue, Severity
from ..scanning.syntax import CALLABLES, NodeKind, SourceFile, SyntaxNode
from .helpers import class_name, is_magic, matches_name, own_nodes

GENERIC_TYPES = frozenset(
    {
        "any",
        "unknown",
        "mixed",
        "object",
        "array",
        "list",
        "dict",
        "tuple",
        "set",
        "iterable",
        "callable",
        "map",
        "collection",
    }
)
RETURN_MENTION = re.compile(r"@returns?\b|\bReturns?\b|:returns?:|:rtype:|\bYields?\b")
RAISE_MENTION = re.compile(r"@throws\b|@exception\b|\bRaises?\b|:raises\b|\bThrows?\b")

_GUIDELINES = (
    "Describe what the method does in the first line",
    "Document every parameter that is not self-explanatory",
    "Document the return value",
    "Document the exceptions the method can raise",
)
_INTROS = {
    "missing": "The method '{method}' has no documentation. ",
    "missing_param": "The method '{method}' does not document all of its parameters. ",
    "missing_return": "The method '{method}' does not document its return value. ",
    "missing_throws": "The method '{method}' may raise exceptions that are not documented. ",
}


def needs_description(declared: Optional[str]) -> bool:
    """Whether a parameter's declared type leaves its meaning open."""
    if not declared:
        return True
    declared = declared.strip().lstrip("?")
    if declared.lower() in GENERIC_TYPES:
        return True
    return any(c in declared for c in "[<|&")


def returns_value(node: SyntaxNode) -> bool:
    for ret in own_nodes(node, NodeKind.RETURN):
        if any(c.kind is not NodeKind.COMMENT for c in ret.children):
            return True
    return False


def raises_unhandled(node: SyntaxNode) -> bool:
    """A throw / raise that is not inside the body of a try statement."""
    stack = [(child, False) for child in node.children]
    while stack:
        current, guarded = stack.pop()
        if current.kind is NodeKind.THROW and not guarded:
            return True
        if current.kind in CALLABLES or current.kind is NodeKind.CLASS:
            continue
        for child in current.children:
            in_try_body = current.kind is NodeKind.TRY and child.role == "body"
            stack.append((child, guarded or in_try_body))
    return False


class MissingDocsVisitor(RuleVisitor):
    def enter_method(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = node.name
        if not name or is_magic(name) or node.is_constructor or node.visibility != "public":
            return
        if matches_name(name, self.analyzer.threshold("exclude_patterns")):
            return

        doc = (node.doc or "").strip()
        if not doc:
            self.flag(node, ctx, "missing", Severity.MEDIUM, f"Public method '{name}' has no documentation")
            return
        if "\n" not in doc:
            return

        undocumented = [
            p.name
            for p in node.parameters
            if p.name
            and needs_description(p.attrs.get("declared_type"))
            and not re.search(rf"\b{re.escape(p.name)}\b", doc)
        ]
        if undocumented:
            self.flag(
                node,
                ctx,
                "missing_param",
                Severity.LOW,
                f"Public method '{name}' has {len(undocumented)} parameter(s) missing from its "
                f"documentation: {', '.join(undocumented)}",
            )
        if returns_value(node) and not RETURN_MENTION.search(doc):
            self.flag(
                node,
                ctx,
                "missing_return",
                Severity.LOW,
                f"Public method '{name}' does not document its return value",
            )
        if raises_unhandled(node) and not RAISE_MENTION.search(doc):
            self.flag(
                node,
                ctx,
                "missing_throws",
                Severity.LOW,
                f"Public method '{name}' may raise exceptions but does not document them",
            )

    def flag(self, node: SyntaxNode, ctx: ScopeContext, kind: str, severity: Severity, message: str) -> None:
        method = node.name or ""
        self.report(
            node.start_line,
            message,
            severity,
            _INTROS[kind].format(method=method) + "Guidelines: " + "; ".join(_GUIDELINES),
            method=method,
            **{"class": class_name(ctx) or "global"},
            issue_type=kind,
            file=self.source.path,
        )


class MissingDocsAnalyzer(TreeAnalyzer):
    id = "missing-docs"
    name = "Missing Documentation"
    description = "Flags public methods without complete docstrings or doc comments"
    severity = Severity.LOW
    tags = ("documentation", "maintainability")
    defaults = {"exclude_patterns": ["get*", "set*", "is*", "has*"]}
    passed_message = "All public methods have proper documentation"

    def create_visitor(self, source: SourceFile) -> MissingDocsVisitor:
        return MissingDocsVisitor(self, source)

    def summarize(self, issues: Sequence[Issue]) -> str:
        methods = {(i.file, i.metadata["class"], i.metadata["method"]) for i in issues}
        return f"Found {len(issues)} documentation issue(s) across {len(methods)} public method(s)"
