"""Shared helpers for rule modules."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable, Optional, Sequence

from ..engine import ScopeContext
from ..scanning.syntax import CALLABLES, NodeKind, SyntaxNode


def is_magic(name: Optional[str]) -> bool:
    """Dunder / magic names (``__init__``, ``__call__``)."""
    return bool(name) and name.startswith("__")  # type: ignore[union-attr]


def matches_name(name: str, patterns: Iterable[str]) -> bool:
    """Case-insensitive glob match of a bare identifier."""
    lowered = name.lower()
    return any(fnmatchcase(lowered, pattern.lower()) for pattern in patterns)


def class_name(ctx: ScopeContext) -> Optional[str]:
    frame = ctx.enclosing_class
    return frame.name if frame is not None else None


def qualified_name(ctx: ScopeContext, name: str) -> str:
    """``Class::method`` inside a class, ``global::function`` outside."""
    return f"{class_name(ctx) or 'global'}::{name}"


def recommendation(intro: str, actions: Sequence[str]) -> str:
    return f"{intro}Recommended actions: {'; '.join(actions)}"


def own_nodes(root: SyntaxNode, *kinds: NodeKind) -> list[SyntaxNode]:
    """Descendants of ``root`` of ``kinds`` that are not inside a nested callable."""
    found: list[SyntaxNode] = []
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        if node.kind in kinds:
            found.append(node)
        if node.kind in CALLABLES or node.kind is NodeKind.CLASS:
            continue
        stack.extend(reversed(node.children))
    return found
