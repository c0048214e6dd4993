"""Language-neutral syntax tree consumed by the analysis engine.

The normalizer turns every tree-sitter tree into SyntaxNodes whose ``kind``
comes from one closed enumeration, so visitors match on NodeKind instead of
on grammar-specific node type names.

Each node keeps:
    - kind / type_name: normalized kind and the grammar's own type name
    - span: 1-indexed start/end line, 0-indexed start column
    - role: what the node is to its parent ("condition", "body", ...)
    - name / text / value: declared name, leaf text, parsed literal value
    - attrs: extra facts (operator, visibility, docstring, declared type, ...)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional


class NodeKind(str, Enum):
    """Normalized node kinds."""

    MODULE = "module"

    # Declaration units
    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"
    LAMBDA = "lambda"

    # Declarations
    PARAMETER = "parameter"
    PROPERTY = "property"
    CONSTANT = "constant"
    DECORATOR = "decorator"

    # Control flow
    IF = "if"
    ELSE_IF = "else_if"
    ELSE = "else"
    SWITCH = "switch"
    CASE = "case"
    FOR = "for"
    FOREACH = "foreach"
    WHILE = "while"
    DO_WHILE = "do_while"
    TRY = "try"
    CATCH = "catch"
    FINALLY = "finally"
    TERNARY = "ternary"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"
    THROW = "throw"

    # Expressions
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    COALESCE = "coalesce"
    BINARY_OP = "binary_op"
    UNARY_OP = "unary_op"
    ASSIGNMENT = "assignment"
    AUGMENTED_ASSIGNMENT = "augmented_assignment"
    CALL = "call"
    INDEX = "index"
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"

    COMMENT = "comment"
    STATEMENT = "statement"
    OTHER = "other"


DECLARATION_UNITS = frozenset({NodeKind.CLASS, NodeKind.FUNCTION, NodeKind.METHOD, NodeKind.LAMBDA})
CALLABLES = frozenset({NodeKind.FUNCTION, NodeKind.METHOD, NodeKind.LAMBDA})
NAMED_CALLABLES = frozenset({NodeKind.FUNCTION, NodeKind.METHOD})

# Control structures that open one nesting level. Continuations of the same
# statement (else, else-if, catch, finally) stay at the statement's level.
NESTING_STRUCTURES = frozenset(
    {
        NodeKind.IF,
        NodeKind.FOR,
        NodeKind.FOREACH,
        NodeKind.WHILE,
        NodeKind.DO_WHILE,
        NodeKind.SWITCH,
        NodeKind.CASE,
        NodeKind.TRY,
    }
)
LOOPS = frozenset({NodeKind.FOR, NodeKind.FOREACH, NodeKind.WHILE, NodeKind.DO_WHILE})
BOOLEAN_OPERATORS = frozenset({NodeKind.LOGICAL_AND, NodeKind.LOGICAL_OR, NodeKind.COALESCE})

_EMPTY_ATTRS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """One node of a normalized syntax tree. Identity-compared."""

    kind: NodeKind
    type_name: str
    start_line: int
    end_line: int
    start_col: int = 0
    children: tuple[SyntaxNode, ...] = ()
    role: str = ""
    name: Optional[str] = None
    text: Optional[str] = None
    value: Optional[float] = None
    attrs: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_ATTRS)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.attrs, MappingProxyType):
            object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<SyntaxNode {self.kind.value}{label} L{self.start_line}-{self.end_line}>"

    @property
    def line_count(self) -> int:
        """Physical line count of the node's span."""
        return self.end_line - self.start_line + 1

    @property
    def operator(self) -> Optional[str]:
        return self.attrs.get("operator")

    @property
    def visibility(self) -> str:
        return self.attrs.get("visibility", "public")

    @property
    def doc(self) -> Optional[str]:
        return self.attrs.get("doc")

    @property
    def is_default_case(self) -> bool:
        return self.kind is NodeKind.CASE and bool(self.attrs.get("default"))

    @property
    def is_constructor(self) -> bool:
        return bool(self.attrs.get("constructor"))

    def with_role(self, role: str) -> SyntaxNode:
        if role == self.role:
            return self
        return SyntaxNode(
            kind=self.kind,
            type_name=self.type_name,
            start_line=self.start_line,
            end_line=self.end_line,
            start_col=self.start_col,
            children=self.children,
            role=role,
            name=self.name,
            text=self.text,
            value=self.value,
            attrs=self.attrs,
        )

    def children_with_role(self, *roles: str) -> list[SyntaxNode]:
        return [c for c in self.children if c.role in roles]

    def child(self, role: str) -> Optional[SyntaxNode]:
        for c in self.children:
            if c.role == role:
                return c
        return None

    def children_of_kind(self, *kinds: NodeKind) -> list[SyntaxNode]:
        return [c for c in self.children if c.kind in kinds]

    @property
    def parameters(self) -> list[SyntaxNode]:
        """Declared parameters, excluding an implicit receiver (self/cls)."""
        return [
            c
            for c in self.children
            if c.kind is NodeKind.PARAMETER and not c.attrs.get("receiver")
        ]

    @property
    def statements(self) -> list[SyntaxNode]:
        """Top-level statements of a callable or block-bearing node's body."""
        return [
            c
            for c in self.children
            if c.role == "body" and c.kind not in (NodeKind.COMMENT, NodeKind.DECORATOR)
        ]

    def walk(self) -> Iterator[SyntaxNode]:
        """Pre-order iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, *kinds: NodeKind) -> Iterator[SyntaxNode]:
        return (n for n in self.walk() if n.kind in kinds)


@dataclass(frozen=True)
class SourceFile:
    """A source file and its syntax tree.

    Attributes:
        path: File path (relative to the analysis root, "/" separated)
        language: Language name (e.g. "python")
        text: Decoded file content
        root: Normalized syntax tree, or None if the file could not be parsed
    """

    path: str
    language: str
    text: str
    root: Optional[SyntaxNode] = None

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    @property
    def parsed(self) -> bool:
        return self.root is not None
