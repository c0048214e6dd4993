"""INCONSISTENT_NAMING: method names within one class that disagree.

Per class:
    - snake_case and camelCase method names mixed together
    - different verbs used for the same action, e.g. ``getUser`` next to
      ``fetchOrders``

A verb only counts as a prefix when a word boundary follows it, so
``settle`` is not a ``set`` method and ``issue`` is not an ``is`` check.
Magic methods are ignored. Always low.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext
from ..models import Issue, Severity
from ..scanning.syntax import NodeKind, SourceFile, SyntaxNode
from .helpers import is_magic, recommendation

ACTION_SYNONYMS: dict[str, tuple[str, ...]] = {
    "retrieve": ("get", "fetch", "find", "retrieve", "load"),
    "modify": ("set", "update", "modify", "change", "edit"),
    "remove": ("delete", "remove", "destroy", "clear"),
    "create": ("create", "add", "insert", "make", "new"),
    "check": ("is", "has", "can", "should", "check", "verify"),
}

_CAMEL_HUMP = re.compile(r"[a-z]+[A-Z]")

_ACTIONS = (
    "Choose one naming convention and apply it consistently",
    "Use one verb per action: get/set, create/delete, add/remove",
    "Record the naming conventions in the team's style guide",
    "Rename similar methods to follow the same pattern",
)


def is_snake_style(name: str) -> bool:
    return "_" in name and name == name.lower()


def is_camel_style(name: str) -> bool:
    return "_" not in name and bool(_CAMEL_HUMP.search(name))


def action_prefix(name: str) -> Optional[tuple[str, str]]:
    """(action, verb) for the first verb ``name`` starts with, if any."""
    for action, verbs in ACTION_SYNONYMS.items():
        for verb in verbs:
            if not name.startswith(verb):
                continue
            rest = name[len(verb):]
            if not rest or rest[0] == "_" or rest[0].isupper():
                return action, verb
    return None


class InconsistentNamingVisitor(RuleVisitor):
    def enter_class(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        methods = [
            m for m in node.children_of_kind(NodeKind.METHOD) if m.name and not is_magic(m.name)
        ]
        if not methods:
            return
        owner = ctx.current.name
        first_line = methods[0].start_line
        names = [m.name.lstrip("_#") for m in methods if m.name.lstrip("_#")]

        snake = [n for n in names if is_snake_style(n)]
        camel = [n for n in names if is_camel_style(n)]
        if snake and camel:
            self.report(
                first_line,
                f"Class '{owner}' mixes snake_case and camelCase method names",
                Severity.LOW,
                recommendation(
                    "Mixing snake_case and camelCase within the same class makes the code "
                    "harder to read and predict. ",
                    _ACTIONS,
                ),
                type="mixed_case_style",
                methods=snake + camel,
                pattern="",
                file=self.source.path,
            )

        groups: dict[str, dict[str, list[str]]] = {}
        for name in names:
            found = action_prefix(name)
            if found is not None:
                action, verb = found
                groups.setdefault(action, {}).setdefault(verb, []).append(name)

        for action, verbs in groups.items():
            if len(verbs) < 2:
                continue
            self.report(
                first_line,
                f"Class '{owner}' uses inconsistent prefixes for '{action}' actions: "
                + ", ".join(verbs),
                Severity.LOW,
                recommendation(
                    "Using different prefixes for the same action creates confusion about "
                    "method behaviour. ",
                    _ACTIONS,
                ),
                type="inconsistent_prefix",
                methods=[name for grouped in verbs.values() for name in grouped],
                pattern=action,
                file=self.source.path,
            )


class InconsistentNamingAnalyzer(TreeAnalyzer):
    id = "inconsistent-naming"
    name = "Inconsistent Naming"
    description = "Flags classes mixing naming styles or verbs for the same action"
    severity = Severity.LOW
    tags = ("conventions", "readability")
    passed_message = "Naming patterns are consistent across the codebase"
    failed_message = "Found {count} naming {noun}"

    def summarize(self, issues: Sequence[Issue]) -> str:
        noun = "inconsistency" if len(issues) == 1 else "inconsistencies"
        return self.failed_message.format(count=len(issues), noun=noun)

    def create_visitor(self, source: SourceFile) -> InconsistentNamingVisitor:
        return InconsistentNamingVisitor(self, source)
