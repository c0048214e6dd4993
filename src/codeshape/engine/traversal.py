"""Visitor framework: one walk over a syntax tree, many visitors.

For every node the engine calls each visitor's ``enter`` in pre-order and
``leave`` in post-order. Around the hooks it maintains the ScopeContext:

    - declaration units (class, function, method, lambda) get a fresh
      frame that is already on the stack when their enter hooks run
    - control structures deepen the current frame for their children only,
      so a structure's own hooks still see the depth it starts at

A visitor returning SKIP_CHILDREN from ``enter`` stops seeing that subtree
(its ``leave`` for the node itself is still called). Other visitors are not
affected. A visitor that raises is logged and dropped for the rest of the
file; the remaining visitors keep going.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from enum import Enum
from typing import Any, ClassVar, Optional, Sequence

from ..scanning.syntax import (
    DECLARATION_UNITS,
    NESTING_STRUCTURES,
    NodeKind,
    SourceFile,
    SyntaxNode,
)
from .scope import ScopeContext

logger = logging.getLogger(__name__)


class VisitAction(Enum):
    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"


SKIP_CHILDREN = VisitAction.SKIP_CHILDREN


class Visitor:
    """Base class for tree visitors.

    Subclasses either override ``enter`` / ``leave`` or define per-kind
    handlers named ``enter_<kind>`` / ``leave_<kind>`` (e.g. ``enter_if``,
    ``leave_method``), which the default hooks dispatch to.
    """

    _enter_handlers: ClassVar[dict[NodeKind, str]] = {}
    _leave_handlers: ClassVar[dict[NodeKind, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._enter_handlers = {
            kind: f"enter_{kind.value}" for kind in NodeKind if hasattr(cls, f"enter_{kind.value}")
        }
        cls._leave_handlers = {
            kind: f"leave_{kind.value}" for kind in NodeKind if hasattr(cls, f"leave_{kind.value}")
        }

    def begin(self, source: SourceFile, ctx: ScopeContext) -> None:
        """Called once before the walk."""

    def enter(self, node: SyntaxNode, ctx: ScopeContext) -> Optional[VisitAction]:
        handler = self._enter_handlers.get(node.kind)
        if handler is None:
            return None
        result: Optional[VisitAction] = getattr(self, handler)(node, ctx)
        return result

    def leave(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        handler = self._leave_handlers.get(node.kind)
        if handler is not None:
            getattr(self, handler)(node, ctx)

    def end(self, source: SourceFile, ctx: ScopeContext) -> None:
        """Called once after the walk."""


class _Pass:
    """Book-keeping for one traversal: live visitors and their skip marks."""

    def __init__(self, visitors: Sequence[Visitor], path: str) -> None:
        self.path = path
        self.live: list[Visitor] = list(visitors)
        self.failed: list[Visitor] = []
        # visitor -> node whose subtree it is skipping
        self.skipping: dict[int, SyntaxNode] = {}

    def call(self, visitor: Visitor, hook: str, *args: Any) -> Any:
        try:
            return getattr(visitor, hook)(*args)
        except Exception as e:
            node = args[0] if args and isinstance(args[0], SyntaxNode) else None
            where = f"{self.path}:{node.start_line}" if node is not None else self.path
            logger.warning(f"{type(visitor).__name__} failed at {where}: {e}")
            logger.debug(f"{type(visitor).__name__} traceback", exc_info=True)
            self.live.remove(visitor)
            self.skipping.pop(id(visitor), None)
            self.failed.append(visitor)
            return None

    def entering(self) -> list[Visitor]:
        return [v for v in self.live if id(v) not in self.skipping]

    def leaving(self, node: SyntaxNode) -> list[Visitor]:
        result = []
        for visitor in self.live:
            mark = self.skipping.get(id(visitor))
            if mark is None:
                result.append(visitor)
            elif mark is node:
                del self.skipping[id(visitor)]
                result.append(visitor)
        return result


def traverse(
    source: SourceFile,
    visitors: Sequence[Visitor],
    ctx: Optional[ScopeContext] = None,
) -> list[Visitor]:
    """Walk ``source.root`` with ``visitors``.

    Returns:
        The visitors that completed the walk without raising. Empty when
        the file has no syntax tree, since nothing was visited.
    """
    if source.root is None or not visitors:
        return []

    ctx = ctx or ScopeContext(source.path)
    run = _Pass(visitors, source.path)

    for visitor in list(run.live):
        run.call(visitor, "begin", source, ctx)

    # (node, None) = not yet entered; (node, (outer, inner)) = awaiting leave.
    # outer holds ancestry and scope frame, inner the nesting level.
    stack: list[tuple[SyntaxNode, Optional[tuple[ExitStack, ExitStack]]]] = [
        (source.root, None)
    ]
    try:
        while stack and run.live:
            node, resources = stack.pop()

            if resources is not None:
                outer, inner = resources
                inner.close()
                for visitor in run.leaving(node):
                    run.call(visitor, "leave", node, ctx)
                outer.close()
                continue

            outer, inner = ExitStack(), ExitStack()
            outer.enter_context(ctx.visiting(node))
            if node.kind in DECLARATION_UNITS:
                outer.enter_context(ctx.scope(node))

            for visitor in run.entering():
                if run.call(visitor, "enter", node, ctx) is SKIP_CHILDREN and visitor in run.live:
                    run.skipping[id(visitor)] = node

            if node.kind in NESTING_STRUCTURES:
                inner.enter_context(ctx.nested(node))

            stack.append((node, (outer, inner)))
            stack.extend((child, None) for child in reversed(node.children))
    finally:
        # unwind whatever is still open if the walk stopped early
        for _, resources in reversed(stack):
            if resources is not None:
                resources[1].close()
                resources[0].close()

    for visitor in list(run.live):
        run.call(visitor, "end", source, ctx)

    return run.live
