"""NAMING_CONVENTION: declarations that break the language's naming style.

    classes, interfaces, enums   PascalCase
    methods, properties          camelCase (snake_case in Python)
    public constants             SCREAMING_SNAKE_CASE
    storage table name           plural snake_case

Leading underscores (and ``#`` for private JavaScript members) are ignored
when checking, so ``_helper`` is a valid snake_case method. Magic names and
constructors are skipped. Every issue suggests a concrete replacement.
"""

from __future__ import annotations

import re
from typing import Optional

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Severity
from ..scanning.syntax import NodeKind, SourceFile, SyntaxNode
from .casing import (
    STYLE_LABELS,
    convert,
    is_plural,
    is_snake,
    matches_style,
    pluralize,
    to_snake,
)
from .helpers import is_magic

_PRIVATE_PREFIX = re.compile(r"^[_#]+")
_QUOTED = re.compile(r"^[a-zA-Z]*([\"'`])(.*)\1$", re.DOTALL)

_CONVENTIONS = {
    "class": "Types should use PascalCase (e.g. UserController, OrderService)",
    "interface": "Types should use PascalCase (e.g. UserRepository, Comparable)",
    "enum": "Types should use PascalCase (e.g. OrderStatus)",
    "method": "Methods should follow the language's member style",
    "property": "Properties should follow the language's member style",
    "constant": "Public constants should use SCREAMING_SNAKE_CASE (e.g. MAX_RETRIES, API_KEY); "
    "private constants may use any style",
    "table": "Table names should be plural snake_case (e.g. users, order_items)",
}


def strip_private(name: str) -> str:
    return _PRIVATE_PREFIX.sub("", name)


def type_label(node: SyntaxNode) -> str:
    if node.attrs.get("interface") or "interface" in node.type_name:
        return "Interface"
    if "enum" in node.type_name:
        return "Enum"
    return "Class"


def string_value(node: Optional[SyntaxNode]) -> Optional[str]:
    """Content of a plain string literal, or None."""
    if node is None or node.kind is not NodeKind.STRING or node.text is None:
        return None
    match = _QUOTED.match(node.text.strip())
    return match.group(2) if match else None


class NamingVisitor(RuleVisitor):
    def flag(self, node: SyntaxNode, kind: str, message: str, name: str, suggestion: str) -> None:
        self.report(
            node.start_line,
            message,
            Severity.LOW,
            f"{_CONVENTIONS[kind]}. Current name '{name}' should be renamed to "
            f"'{suggestion}'. Consistent naming makes code easier to read.",
            type=kind,
            name=name,
            suggestion=suggestion,
            file=self.source.path,
        )

    def enter_class(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if not node.name:
            return
        bare = strip_private(node.name)
        if not bare or matches_style(bare, "pascal"):
            return
        label = type_label(node)
        self.flag(
            node,
            label.lower(),
            f"{label} '{node.name}' does not follow PascalCase convention",
            node.name,
            convert(bare, "pascal"),
        )

    def enter_method(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = node.name
        if not name or is_magic(name) or node.is_constructor:
            return
        self.check_member(node, "method", "Method", name)

    def enter_property(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = node.name
        if not name:
            return
        if name == self.language.storage_field:
            self.check_table(node)
            return
        if is_magic(name):
            return
        self.check_member(node, "property", "Property", name)

    def enter_constant(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = node.name
        if not name or node.visibility != "public" or is_magic(name):
            return
        bare = strip_private(name)
        if not bare or matches_style(bare, "screaming"):
            return
        self.flag(
            node,
            "constant",
            f"Public constant '{name}' does not follow SCREAMING_SNAKE_CASE convention",
            name,
            convert(bare, "screaming"),
        )

    def check_member(self, node: SyntaxNode, kind: str, label: str, name: str) -> None:
        style = self.language.member_case
        bare = strip_private(name)
        if not bare or matches_style(bare, style):
            return
        prefix = name[: len(name) - len(bare)]
        self.flag(
            node,
            kind,
            f"{label} '{name}' does not follow {STYLE_LABELS[style]} convention",
            name,
            prefix + convert(bare, style),
        )

    def check_table(self, node: SyntaxNode) -> None:
        table = string_value(node.child("value"))
        if not table:
            return
        if not is_snake(table):
            self.flag(
                node,
                "table",
                f"Table name '{table}' should use snake_case convention",
                table,
                to_snake(table),
            )
        elif not is_plural(table):
            self.flag(
                node,
                "table",
                f"Table name '{table}' should be plural",
                table,
                pluralize(table),
            )


class NamingConventionAnalyzer(TreeAnalyzer):
    id = "naming-convention"
    name = "Naming Conventions"
    description = "Checks type, member, constant and table names against naming conventions"
    severity = Severity.LOW
    tags = ("conventions", "readability")
    passed_message = "All names follow naming conventions"
    failed_message = "Found {count} naming convention violation(s)"

    def create_visitor(self, source: SourceFile) -> NamingVisitor:
        return NamingVisitor(self, source)
