"""Normalizer: converts tree-sitter parse trees into SyntaxNode trees.

The conversion is driven by the LanguageSpec tables. Generic steps:
    - map every grammar type to a NodeKind (unknown types become OTHER)
    - splice "transparent" wrappers (blocks, argument lists, ...) into
      their parent, handing down the wrapper's role
    - derive child roles from grammar field names
    - remember operator tokens, declared names and declared types

A handful of hooks then fix up shapes that differ between grammars:
else-if chains, parameters, member declarations, constants, docstrings
and doc comments, folded negative literals.

The walk is iterative so deeply nested expressions cannot hit the
interpreter recursion limit.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import re
from typing import Any, Callable, Iterator, Optional

from .languages import LanguageSpec, get_language_spec
from .syntax import NodeKind as K
from .syntax import SourceFile, SyntaxNode
from .treesitter_parser import TREE_SITTER_AVAILABLE, TreeSitterParser

logger = logging.getLogger(__name__)

LEAF_KINDS = frozenset({K.IDENTIFIER, K.NUMBER, K.STRING, K.COMMENT})
MEMBER_KINDS = frozenset({K.CLASS, K.FUNCTION, K.METHOD, K.PROPERTY, K.CONSTANT})

# Grammar fields whose source text is kept on the frame for the hooks.
_TEXT_FIELDS = frozenset({"name", "type", "property", "left", "pattern", "kind", "operator"})

_SCREAMING = re.compile(r"^_*[A-Z][A-Z0-9_]*$")
_STRING_LITERAL = re.compile(r"^[rRbBuUfF]*(\"\"\"|'''|\"|')(.*)\1$", re.DOTALL)
_OCTAL_LEGACY = re.compile(r"^0[0-7]+$")


class _Frame:
    """Conversion state for one tree-sitter node."""

    __slots__ = ("node", "role", "inherit", "children", "fields", "keywords", "operator")

    def __init__(self, node: Any, role: str, inherit: str) -> None:
        self.node = node
        self.role = role
        self.inherit = inherit
        self.children: list[SyntaxNode] = []
        self.fields: dict[str, str] = {}
        self.keywords: set[str] = set()
        self.operator: Optional[str] = None


def parse_number(text: str) -> Optional[float]:
    """Parse a numeric literal as written in any supported language.

    Returns an int where the literal is integral, a float otherwise, and
    None for literals that are not real numbers (e.g. ``3j``).
    """
    literal = text.replace("_", "").strip().lower()
    negative = literal.startswith("-")
    literal = literal.lstrip("+-")
    try:
        if literal.startswith(("0x", "0o", "0b")):
            value: float = int(literal.rstrip("ln"), 0)
        elif literal.endswith("j"):
            return None
        else:
            literal = literal.rstrip("ln")
            if literal.endswith(("f", "d")):
                literal = literal[:-1]
            if _OCTAL_LEGACY.match(literal):
                value = int(literal, 8)
            elif any(c in literal for c in ".e"):
                value = float(literal)
            else:
                value = int(literal)
    except ValueError:
        return None
    return -value if negative else value


def _replace(node: SyntaxNode, **changes: Any) -> SyntaxNode:
    if "attrs" in changes:
        attrs = dict(node.attrs)
        attrs.update(changes["attrs"])
        changes["attrs"] = attrs
    return dataclasses.replace(node, **changes)


def _strip_string(text: str) -> str:
    match = _STRING_LITERAL.match(text.strip())
    body = match.group(2) if match else text
    return inspect.cleandoc(body)


def _strip_doc_comment(text: str) -> str:
    body = text.strip()
    body = re.sub(r"^/\*+", "", body)
    body = re.sub(r"\*+/$", "", body)
    lines = [re.sub(r"^\s*\*\s?", "", line) for line in body.splitlines()]
    return "\n".join(lines).strip()


class TreeSitterNormalizer:
    """Converts source text into SourceFile objects with SyntaxNode trees.

    Usage:
        normalizer = TreeSitterNormalizer()
        source = normalizer.parse_file(content, "pkg/mod.py", "python")
        if source.root is None:
            # unsupported language or parse failure
    """

    def __init__(self) -> None:
        self._parser = TreeSitterParser() if TREE_SITTER_AVAILABLE else None

    def is_language_supported(self, language: str) -> bool:
        return self._parser is not None and self._parser.is_language_supported(language)

    def parse_file(self, content: str, path: str, language: str) -> SourceFile:
        """Parse file content; ``root`` is None when no tree can be built."""
        if not self.is_language_supported(language):
            return SourceFile(path=path, language=language, text=content)

        code = content.encode("utf-8", errors="replace")
        tree = self._parser.parse(code, language)  # type: ignore[union-attr]
        if tree is None:
            return SourceFile(path=path, language=language, text=content)

        if tree.root_node.has_error:
            logger.debug(f"{path}: syntax errors present, analyzing the recoverable tree")

        root = _Conversion(get_language_spec(language), code).run(tree.root_node)
        return SourceFile(path=path, language=language, text=content, root=root)


class _Conversion:
    """One tree-sitter tree -> SyntaxNode tree."""

    def __init__(self, spec: LanguageSpec, code: bytes) -> None:
        self.spec = spec
        self.code = code
        self._type_hooks: dict[str, Callable[[_Frame], list[SyntaxNode]]] = {
            "lexical_declaration": self._variable_declaration,
            "variable_declaration": self._variable_declaration,
            "local_variable_declaration": self._variable_declaration,
            "export_statement": self._export_statement,
            "field_declaration": self._field_declaration,
            "constant_declaration": self._field_declaration,
        }
        self._kind_hooks: dict[K, Callable[[SyntaxNode, _Frame], list[SyntaxNode]]] = {
            K.MODULE: self._module,
            K.CLASS: self._class,
            K.FUNCTION: self._callable,
            K.METHOD: self._callable,
            K.LAMBDA: self._callable,
            K.PARAMETER: self._parameter,
            K.PROPERTY: self._property,
            K.CONSTANT: self._property,
            K.IF: self._if,
            K.ELSE_IF: self._if,
            K.ELSE: self._else,
            K.CASE: self._case,
            K.TERNARY: self._ternary,
            K.UNARY_OP: self._unary,
            K.ASSIGNMENT: self._assignment,
        }

    # ── Walk ───────────────────────────────────────────────────────

    def run(self, root: Any) -> Optional[SyntaxNode]:
        top = _Frame(root, "", "")
        stack: list[tuple[_Frame, Iterator[tuple[Any, Optional[str]]]]] = [
            (top, self._fields_of(root))
        ]
        result: list[SyntaxNode] = []

        while stack:
            frame, children = stack[-1]
            item = next(children, None)
            if item is not None:
                child_frame = self._visit_child(frame, *item)
                if child_frame is not None:
                    stack.append((child_frame, self._fields_of(child_frame.node)))
                continue

            stack.pop()
            built = self._build(frame)
            if stack:
                stack[-1][0].children.extend(built)
            else:
                result = built

        return result[0] if result else None

    @staticmethod
    def _fields_of(node: Any) -> Iterator[tuple[Any, Optional[str]]]:
        cursor = node.walk()
        if not cursor.goto_first_child():
            return
        while True:
            yield cursor.node, cursor.field_name
            if not cursor.goto_next_sibling():
                return

    def _visit_child(self, frame: _Frame, child: Any, field: Optional[str]) -> Optional[_Frame]:
        """Record or convert one child; returns a frame when it must be descended."""
        spec = self.spec

        if not child.is_named:
            token = self._text(child)
            if field in _TEXT_FIELDS:
                frame.fields.setdefault(field, token)
            if field == "operator":
                frame.operator = token
            elif token.isidentifier():
                frame.keywords.add(token)
            return None

        if field in _TEXT_FIELDS:
            frame.fields.setdefault(field, self._text(child))

        if child.type in spec.modifier_types:
            words = self._text(child).split()
            frame.keywords.update(w for w in words if not w.startswith("@"))
            return None

        if child.type in spec.dropped or field in spec.dropped_fields:
            return None

        if field is None:
            role = frame.inherit
        elif field in spec.field_roles:
            mapped = spec.field_roles[field]
            role = frame.inherit if mapped is None else mapped
        else:
            role = field

        kind = spec.kind_of(child.type)
        if kind in LEAF_KINDS:
            frame.children.append(self._leaf(child, kind, role))
            return None

        inherit = role if child.type in spec.transparent else ""
        return _Frame(child, role, inherit)

    # ── Node construction ──────────────────────────────────────────

    def _text(self, node: Any) -> str:
        return self.code[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def _span(node: Any) -> tuple[int, int, int]:
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        end_line = end_row + 1 if (end_col > 0 or end_row == start_row) else end_row
        return start_row + 1, end_line, start_col

    def _leaf(self, node: Any, kind: K, role: str) -> SyntaxNode:
        start, end, col = self._span(node)
        text = self._text(node)
        value = parse_number(text) if kind is K.NUMBER else None
        return SyntaxNode(
            kind=kind,
            type_name=node.type,
            start_line=start,
            end_line=end,
            start_col=col,
            role=role,
            text=text,
            value=value,
        )

    def _make(self, frame: _Frame, kind: Optional[K] = None) -> SyntaxNode:
        start, end, col = self._span(frame.node)
        kind = kind or self.spec.kind_of(frame.node.type)
        attrs: dict[str, Any] = {}
        if frame.operator:
            attrs["operator"] = frame.operator
            if kind is K.BINARY_OP:
                kind = self.spec.boolean_operators.get(frame.operator, K.BINARY_OP)
            elif kind is K.ASSIGNMENT and frame.operator != "=":
                kind = K.AUGMENTED_ASSIGNMENT
        if frame.keywords:
            attrs["keywords"] = frozenset(frame.keywords)
        return SyntaxNode(
            kind=kind,
            type_name=frame.node.type,
            start_line=start,
            end_line=end,
            start_col=col,
            children=tuple(frame.children),
            role=frame.role,
            name=frame.fields.get("name"),
            attrs=attrs,
        )

    def _build(self, frame: _Frame) -> list[SyntaxNode]:
        type_hook = self._type_hooks.get(frame.node.type)
        if type_hook is not None:
            return type_hook(frame)
        if frame.node.type in self.spec.transparent:
            return frame.children
        node = self._make(frame)
        kind_hook = self._kind_hooks.get(node.kind)
        if kind_hook is not None:
            return kind_hook(node, frame)
        return [node]

    # ── Visibility and docs ────────────────────────────────────────

    def _visibility(self, name: Optional[str], keywords: Any) -> str:
        for word in ("private", "protected", "public"):
            if word in keywords:
                return word
        if name:
            if self.spec.name == "python":
                if name.startswith("_") and not (name.startswith("__") and name.endswith("__")):
                    return "private"
                return "public"
            if name.startswith("#"):
                return "private"
        return self.spec.default_visibility

    def _docstring(self, node: SyntaxNode) -> SyntaxNode:
        """Lift a leading string statement into the ``doc`` attribute."""
        if self.spec.doc_comment_prefix is not None:
            return node
        for index, child in enumerate(node.children):
            if child.kind in (K.COMMENT, K.PARAMETER, K.DECORATOR):
                continue
            if child.role in ("body", "") and child.kind is K.STRING and child.text is not None:
                children = list(node.children)
                children[index] = _replace(child, role="doc")
                return _replace(
                    node,
                    children=tuple(children),
                    attrs={"doc": _strip_string(child.text)},
                )
            break
        return node

    def _attach_doc_comments(self, children: list[SyntaxNode]) -> list[SyntaxNode]:
        """Give each member declaration the doc comment right above it."""
        prefix = self.spec.doc_comment_prefix
        if prefix is None:
            return children
        result: list[SyntaxNode] = []
        pending: Optional[SyntaxNode] = None
        for child in children:
            if child.kind is K.COMMENT:
                text = child.text or ""
                pending = child if text.startswith(prefix) else None
                result.append(child)
                continue
            if child.kind is K.DECORATOR:
                result.append(child)
                continue
            if (
                pending is not None
                and child.kind in MEMBER_KINDS
                and pending.end_line >= child.start_line - 1
            ):
                child = _replace(child, attrs={"doc": _strip_doc_comment(pending.text or "")})
            pending = None
            result.append(child)
        return result

    # ── Kind hooks ─────────────────────────────────────────────────

    def _module(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        children = [self._python_member(c, in_class=False) for c in node.children]
        node = _replace(node, children=tuple(self._attach_doc_comments(children)))
        return [self._docstring(node)]

    def _class(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        interface = "interface" in node.type_name
        members: list[SyntaxNode] = []
        for child in node.children:
            if child.kind is K.FUNCTION:
                child = self._as_method(child)
            child = self._python_member(child, in_class=True)
            if interface and child.kind in (K.METHOD, K.CONSTANT, K.PROPERTY):
                if "keywords" not in child.attrs or not (
                    {"private", "protected"} & child.attrs["keywords"]
                ):
                    child = _replace(child, attrs={"visibility": "public"})
            members.append(child)
        node = _replace(
            node,
            children=tuple(self._attach_doc_comments(members)),
            attrs={
                "visibility": self._visibility(node.name, frame.keywords),
                "interface": interface,
            },
        )
        return [self._docstring(node)]

    def _as_method(self, node: SyntaxNode) -> SyntaxNode:
        children = list(node.children)
        if self.spec.receiver_names:
            for index, child in enumerate(children):
                if child.kind is K.PARAMETER:
                    if child.name in self.spec.receiver_names:
                        children[index] = _replace(child, attrs={"receiver": True})
                    break
        return _replace(
            node,
            kind=K.METHOD,
            children=tuple(children),
            attrs={"constructor": node.name in self.spec.constructor_names},
        )

    def _python_member(self, node: SyntaxNode, in_class: bool) -> SyntaxNode:
        """Class-level assignments become properties; SCREAMING or Final names constants."""
        if self.spec.name != "python" or node.kind is not K.ASSIGNMENT:
            return node
        name = node.name
        if not name:
            return node
        declared = node.attrs.get("declared_type") or ""
        is_constant = bool(_SCREAMING.match(name) or re.match(r"^(typing\.)?Final\b", declared))
        if not is_constant and not in_class:
            return node
        value = [_replace(c, role="value") for c in node.children if c.role == "right"]
        return _replace(
            node,
            kind=K.CONSTANT if is_constant else K.PROPERTY,
            children=tuple(value),
            attrs={"visibility": self._visibility(name, ())},
        )

    def _callable(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        children: list[SyntaxNode] = []
        for child in node.children:
            if child.role == "parameter" and child.kind not in (K.PARAMETER, K.COMMENT):
                child = SyntaxNode(
                    kind=K.PARAMETER,
                    type_name=child.type_name,
                    start_line=child.start_line,
                    end_line=child.end_line,
                    start_col=child.start_col,
                    role="parameter",
                    name=child.text if child.kind is K.IDENTIFIER else None,
                )
            children.append(child)

        name = node.name
        constructor = (
            node.type_name in ("constructor_declaration", "compact_constructor_declaration")
            or (node.kind is K.METHOD and name in self.spec.constructor_names)
        )
        node = _replace(
            node,
            children=tuple(children),
            attrs={
                "visibility": self._visibility(name, frame.keywords),
                "static": "static" in frame.keywords,
                "constructor": constructor,
            },
        )
        return [node if node.kind is K.LAMBDA else self._docstring(node)]

    def _parameter(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        name = frame.fields.get("name") or frame.fields.get("pattern") or frame.fields.get("left")
        if name is None:
            for child in node.children:
                if child.kind is K.IDENTIFIER:
                    name = child.text
                    break
                if child.name:
                    name = child.name
                    break
        declared = frame.fields.get("type")
        if declared is not None:
            declared = declared.lstrip(":").strip() or None
        defaults = tuple(
            _replace(c, role="default") for c in node.children if c.role in ("value", "right")
        )
        variadic = node.type_name in (
            "list_splat_pattern",
            "dictionary_splat_pattern",
            "rest_pattern",
            "spread_parameter",
        )
        return [
            _replace(
                node,
                name=name.lstrip("*.") if name else name,
                children=defaults,
                attrs={"declared_type": declared, "variadic": variadic},
            )
        ]

    def _property(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        name = frame.fields.get("name") or frame.fields.get("property")
        keywords = frame.keywords
        kind = node.kind
        if kind is K.PROPERTY and "static" in keywords and ({"readonly", "final"} & keywords):
            kind = K.CONSTANT
        visibility = self._visibility(name, keywords)
        if node.type_name == "enum_constant":
            visibility = "public"
        values = tuple(_replace(c, role="value") for c in node.children if c.role == "value")
        return [
            _replace(
                node,
                kind=kind,
                name=name,
                children=values,
                attrs={"visibility": visibility, "static": "static" in keywords},
            )
        ]

    def _if(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        children = [
            _replace(c, kind=K.ELSE_IF) if c.kind is K.IF and c.role == "alternative" else c
            for c in node.children
        ]
        return [_replace(node, children=tuple(children))]

    def _else(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        code = [c for c in node.children if c.kind is not K.COMMENT]
        # "else if" on one line continues the chain; an if inside an else block nests
        if (
            len(code) == 1
            and code[0].kind in (K.IF, K.ELSE_IF)
            and code[0].start_line == node.start_line
        ):
            return [_replace(code[0], kind=K.ELSE_IF, role=node.role or "alternative")]
        return [node]

    def _case(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        default = node.type_name == "switch_default" or "default" in frame.keywords
        for child in node.children:
            if child.type_name in ("switch_label", "case_pattern"):
                keywords = child.attrs.get("keywords", frozenset())
                if "default" in keywords or (
                    child.type_name == "case_pattern" and "_" in keywords
                ):
                    default = True
                elif child.type_name == "case_pattern" and any(
                    c.kind is K.IDENTIFIER and c.text == "_" for c in child.children
                ):
                    default = True
        if any(c.role == "guard" for c in node.children):
            default = False
        return [_replace(node, attrs={"default": default})]

    def _ternary(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        if node.type_name != "conditional_expression":
            return [node]
        # value if condition else alternative
        roles = iter(("body", "condition", "alternative"))
        children = [
            c if c.kind is K.COMMENT else _replace(c, role=next(roles, c.role))
            for c in node.children
        ]
        return [_replace(node, children=tuple(children))]

    def _unary(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        operands = [c for c in node.children if c.kind is not K.COMMENT]
        if (
            node.operator == "-"
            and len(operands) == 1
            and operands[0].kind is K.NUMBER
            and operands[0].value is not None
        ):
            literal = operands[0]
            return [
                SyntaxNode(
                    kind=K.NUMBER,
                    type_name=literal.type_name,
                    start_line=node.start_line,
                    end_line=node.end_line,
                    start_col=node.start_col,
                    role=node.role,
                    text=f"-{literal.text}",
                    value=-literal.value,
                )
            ]
        return [node]

    def _assignment(self, node: SyntaxNode, frame: _Frame) -> list[SyntaxNode]:
        target = frame.fields.get("name") or frame.fields.get("left")
        if target is not None and not target.isidentifier():
            target = None
        attrs = {"declared_type": frame.fields.get("type")}
        return [_replace(node, name=target, attrs=attrs)]

    # ── Type hooks ─────────────────────────────────────────────────

    def _variable_declaration(self, frame: _Frame) -> list[SyntaxNode]:
        """Split declarations into one node per declarator.

        Declarators bound to a function become named functions; ``const``
        and ``final`` declarators holding a literal become constants.
        """
        constant = bool({"const", "final"} & frame.keywords)
        result: list[SyntaxNode] = []
        for child in frame.children:
            if child.kind is not K.ASSIGNMENT:
                result.append(child)
                continue
            values = [c for c in child.children if c.role == "value"]
            role = frame.role or child.role
            if len(values) == 1 and values[0].kind is K.LAMBDA and child.name:
                function = values[0]
                result.append(
                    _replace(
                        function,
                        kind=K.FUNCTION,
                        name=child.name,
                        role=role,
                        start_line=frame.node.start_point[0] + 1,
                    )
                )
            elif constant and (
                self.spec.name == "java"
                or (values and all(v.kind in (K.NUMBER, K.STRING) for v in values))
            ):
                result.append(
                    _replace(child, kind=K.CONSTANT, role=role, attrs={"visibility": "private"})
                )
            else:
                result.append(_replace(child, role=role))
        return result

    def _export_statement(self, frame: _Frame) -> list[SyntaxNode]:
        result = []
        for child in frame.children:
            if child.kind in MEMBER_KINDS:
                child = _replace(child, attrs={"visibility": "public", "exported": True})
            result.append(child)
        return result

    def _field_declaration(self, frame: _Frame) -> list[SyntaxNode]:
        """Java fields: one PROPERTY or CONSTANT per declarator."""
        keywords = frame.keywords
        interface_constant = frame.node.type == "constant_declaration"
        constant = interface_constant or ("static" in keywords and "final" in keywords)
        if interface_constant:
            visibility = "public"
        else:
            visibility = self._visibility(None, keywords)
        result: list[SyntaxNode] = []
        for child in frame.children:
            if child.kind is not K.ASSIGNMENT:
                result.append(child)
                continue
            values = tuple(_replace(c, role="value") for c in child.children if c.role == "value")
            result.append(
                _replace(
                    child,
                    kind=K.CONSTANT if constant else K.PROPERTY,
                    role=frame.role or child.role,
                    children=values,
                    attrs={
                        "visibility": visibility,
                        "static": "static" in keywords,
                        "keywords": frozenset(keywords),
                    },
                )
            )
        return result
