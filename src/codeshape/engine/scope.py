"""Scope tracking shared by every traversal.

A ScopeContext is a stack of ScopeFrames, one per enclosing declaration unit
(class, function, method, lambda). The bottom frame is the file itself and
is named "global scope".

Frames are immutable. Entering a control structure replaces the top frame
with a copy one nesting level deeper and puts the original back on exit, so
a nesting level can never survive the structure that opened it or cross
into another frame. Per-metric accumulators live in the frame's ``metrics``
dict, which all copies of a frame share.

Usage:
    ctx = ScopeContext("src/app.py")
    with ctx.scope(function_node):
        with ctx.nested(if_node):
            ctx.current.nesting  # 1
"""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..scanning.syntax import LOOPS, NAMED_CALLABLES, NodeKind, SyntaxNode

GLOBAL_SCOPE = "global scope"
CLOSURE = "{closure}"
ANONYMOUS_CLASS = "{anonymous class}"


def scope_name(node: SyntaxNode) -> str:
    """Human-readable name of a declaration unit."""
    if node.kind is NodeKind.LAMBDA:
        return CLOSURE
    if node.name:
        return node.name
    if node.kind is NodeKind.CLASS:
        return ANONYMOUS_CLASS
    return CLOSURE


@dataclass(frozen=True)
class ScopeFrame:
    """One declaration unit on the scope stack.

    Attributes:
        name: Declared name, "{closure}" or "global scope"
        kind: MODULE for the file frame, else the unit's node kind
        node: The declaration node (None for the file frame)
        nesting: Control-structure depth inside this unit
        loop_depth: How many of those structures are loops
        metrics: Running per-metric values for this unit
    """

    name: str
    kind: NodeKind
    node: Optional[SyntaxNode] = None
    nesting: int = 0
    loop_depth: int = 0
    metrics: dict[str, float] = field(default_factory=dict, compare=False, repr=False)

    def accumulate(self, metric: str, amount: float = 1) -> None:
        self.metrics[metric] = self.metrics.get(metric, 0) + amount

    def value(self, metric: str, default: float = 0) -> float:
        return self.metrics.get(metric, default)

    @property
    def is_callable(self) -> bool:
        return self.kind in (NodeKind.FUNCTION, NodeKind.METHOD, NodeKind.LAMBDA)


class ScopeContext:
    """Scope stack for one traversal of one file. Not thread-safe."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        self._frames: list[ScopeFrame] = [ScopeFrame(GLOBAL_SCOPE, NodeKind.MODULE)]
        self._ancestors: list[SyntaxNode] = []

    @property
    def current(self) -> ScopeFrame:
        return self._frames[-1]

    @property
    def frames(self) -> tuple[ScopeFrame, ...]:
        return tuple(self._frames)

    @property
    def depth(self) -> int:
        """Number of declaration units entered (0 at file level)."""
        return len(self._frames) - 1

    @property
    def nesting(self) -> int:
        return self._frames[-1].nesting

    @property
    def in_loop(self) -> bool:
        return self._frames[-1].loop_depth > 0

    def nearest(self, *kinds: NodeKind) -> Optional[ScopeFrame]:
        """Innermost frame of one of ``kinds``."""
        for frame in reversed(self._frames):
            if frame.kind in kinds:
                return frame
        return None

    @property
    def callable(self) -> Optional[ScopeFrame]:
        """Innermost named function or method; lambdas accrue to it."""
        return self.nearest(*NAMED_CALLABLES)

    @property
    def enclosing_class(self) -> Optional[ScopeFrame]:
        return self.nearest(NodeKind.CLASS)

    @property
    def context_name(self) -> str:
        """Name of the innermost callable frame, or "global scope"."""
        for frame in reversed(self._frames):
            if frame.is_callable:
                return frame.name
        return GLOBAL_SCOPE

    # ── Node ancestry ──────────────────────────────────────────────

    @property
    def node(self) -> Optional[SyntaxNode]:
        """The node currently being visited."""
        return self._ancestors[-1] if self._ancestors else None

    @property
    def parent(self) -> Optional[SyntaxNode]:
        return self._ancestors[-2] if len(self._ancestors) > 1 else None

    def ancestors(self) -> Iterator[SyntaxNode]:
        """Ancestors of the current node, innermost first."""
        return reversed(self._ancestors[:-1])

    def has_ancestor(self, *kinds: NodeKind) -> bool:
        return any(node.kind in kinds for node in self.ancestors())

    # ── Scoped acquisition ─────────────────────────────────────────

    @contextmanager
    def visiting(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        self._ancestors.append(node)
        try:
            yield node
        finally:
            self._ancestors.pop()

    @contextmanager
    def scope(self, node: SyntaxNode) -> Iterator[ScopeFrame]:
        """Push a fresh frame (nesting 0) for a declaration unit."""
        frame = ScopeFrame(name=scope_name(node), kind=node.kind, node=node)
        self._frames.append(frame)
        size = len(self._frames)
        try:
            yield frame
        finally:
            del self._frames[size - 1 :]

    @contextmanager
    def nested(self, node: SyntaxNode) -> Iterator[ScopeFrame]:
        """Deepen the current frame by one level for a control structure."""
        index = len(self._frames) - 1
        outer = self._frames[index]
        inner = dataclasses.replace(
            outer,
            nesting=outer.nesting + 1,
            loop_depth=outer.loop_depth + (1 if node.kind in LOOPS else 0),
        )
        self._frames[index] = inner
        try:
            yield inner
        finally:
            self._frames[index] = outer
