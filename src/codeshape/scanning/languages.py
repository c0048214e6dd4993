"""Language specs: the single source of truth for grammar-specific names.

Adding a language:
  1. Add a LanguageSpec entry to LANGUAGES below.
  2. Register its grammar module in treesitter_parser.py.
The normalizer and every rule pick it up through these tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from .syntax import NodeKind as K


@dataclass(frozen=True)
class LanguageSpec:
    """Everything the normalizer and the rules need to know about a language.

    Attributes:
        name: Language name, also the grammar key in treesitter_parser
        extensions: File suffixes (lower case, with dot)
        kinds: Grammar node type -> normalized kind
        transparent: Node types whose children are spliced into the parent
        dropped: Node types removed with their whole subtree
        dropped_fields: Grammar fields whose subtrees are removed
        field_roles: Grammar field -> role; None means "inherit the parent's role"
        modifier_types: Node types whose words become declaration keywords
        boolean_operators: Operator text -> LOGICAL_AND / LOGICAL_OR / COALESCE
        line_comment: Single-line comment markers
        block_comment: (open, close) markers for block comments, if any
        doc_comment_prefix: Block comments starting with this document the
            next declaration (None when docs live in docstrings)
        member_case: "camel" or "snake" for method and field names
        storage_field: Field that names a backing storage table
        constructor_names: Method names that are constructors
        receiver_names: First-parameter names that are implicit receivers
        default_visibility: Member visibility without an explicit modifier
    """

    name: str
    extensions: tuple[str, ...]
    kinds: Mapping[str, K]
    transparent: frozenset[str] = frozenset()
    dropped: frozenset[str] = frozenset()
    dropped_fields: frozenset[str] = frozenset()
    field_roles: Mapping[str, Optional[str]] = field(default_factory=dict)
    modifier_types: frozenset[str] = frozenset()
    boolean_operators: Mapping[str, K] = field(default_factory=dict)
    line_comment: tuple[str, ...] = ("//",)
    block_comment: Optional[tuple[str, str]] = ("/*", "*/")
    doc_comment_prefix: Optional[str] = "/**"
    member_case: str = "camel"
    storage_field: str = "table"
    constructor_names: frozenset[str] = frozenset({"constructor"})
    receiver_names: frozenset[str] = frozenset()
    default_visibility: str = "public"

    def kind_of(self, type_name: str) -> K:
        return self.kinds.get(type_name, K.OTHER)


# ── Re-usable building blocks ──────────────────────────────────────

_COMMON_FIELD_ROLES: dict[str, Optional[str]] = {
    "condition": "condition",
    "consequence": "body",
    "body": "body",
    "alternative": "alternative",
    "parameters": "parameter",
    "parameter": "parameter",
    "value": "value",
    "left": "left",
    "right": "right",
    "subscript": "index",
    "index": "index",
    "arguments": "argument",
    "argument": "argument",
    "handler": "handler",
    "finalizer": "finalizer",
    "guard": "guard",
    "definition": None,
    "declaration": None,
}

_COMMON_DROPPED_FIELDS = frozenset(
    {
        "name",
        "type",
        "return_type",
        "type_parameters",
        "superclasses",
        "superclass",
        "interfaces",
        "decorator_name",
    }
)

_C_BOOLEANS = {"&&": K.LOGICAL_AND, "||": K.LOGICAL_OR}

_JS_KINDS: dict[str, K] = {
    "program": K.MODULE,
    "class_declaration": K.CLASS,
    "class": K.CLASS,
    "function_declaration": K.FUNCTION,
    "generator_function_declaration": K.FUNCTION,
    "method_definition": K.METHOD,
    "arrow_function": K.LAMBDA,
    "function_expression": K.LAMBDA,
    "function": K.LAMBDA,
    "generator_function": K.LAMBDA,
    "identifier": K.IDENTIFIER,
    "property_identifier": K.IDENTIFIER,
    "shorthand_property_identifier": K.IDENTIFIER,
    "private_property_identifier": K.IDENTIFIER,
    "assignment_pattern": K.PARAMETER,
    "rest_pattern": K.PARAMETER,
    "field_definition": K.PROPERTY,
    "decorator": K.DECORATOR,
    "if_statement": K.IF,
    "else_clause": K.ELSE,
    "switch_statement": K.SWITCH,
    "switch_case": K.CASE,
    "switch_default": K.CASE,
    "for_statement": K.FOR,
    "for_in_statement": K.FOREACH,
    "while_statement": K.WHILE,
    "do_statement": K.DO_WHILE,
    "try_statement": K.TRY,
    "catch_clause": K.CATCH,
    "finally_clause": K.FINALLY,
    "ternary_expression": K.TERNARY,
    "break_statement": K.BREAK,
    "continue_statement": K.CONTINUE,
    "return_statement": K.RETURN,
    "throw_statement": K.THROW,
    "binary_expression": K.BINARY_OP,
    "unary_expression": K.UNARY_OP,
    "assignment_expression": K.ASSIGNMENT,
    "variable_declarator": K.ASSIGNMENT,
    "augmented_assignment_expression": K.AUGMENTED_ASSIGNMENT,
    "call_expression": K.CALL,
    "new_expression": K.CALL,
    "subscript_expression": K.INDEX,
    "number": K.NUMBER,
    "string": K.STRING,
    "template_string": K.STRING,
    "regex": K.STRING,
    "comment": K.COMMENT,
}
_JS_TRANSPARENT = frozenset(
    {
        "statement_block",
        "class_body",
        "switch_body",
        "parenthesized_expression",
        "arguments",
        "formal_parameters",
        "expression_statement",
    }
)

_TS_KINDS: dict[str, K] = dict(_JS_KINDS)
_TS_KINDS.update(
    {
        "abstract_class_declaration": K.CLASS,
        "interface_declaration": K.CLASS,
        "method_signature": K.METHOD,
        "abstract_method_signature": K.METHOD,
        "public_field_definition": K.PROPERTY,
        "property_signature": K.PROPERTY,
        "required_parameter": K.PARAMETER,
        "optional_parameter": K.PARAMETER,
    }
)


# ── Language definitions ───────────────────────────────────────────

PYTHON = LanguageSpec(
    name="python",
    extensions=(".py", ".pyi"),
    kinds={
        "module": K.MODULE,
        "class_definition": K.CLASS,
        "function_definition": K.FUNCTION,
        "lambda": K.LAMBDA,
        "typed_parameter": K.PARAMETER,
        "default_parameter": K.PARAMETER,
        "typed_default_parameter": K.PARAMETER,
        "list_splat_pattern": K.PARAMETER,
        "dictionary_splat_pattern": K.PARAMETER,
        "decorator": K.DECORATOR,
        "if_statement": K.IF,
        "elif_clause": K.ELSE_IF,
        "else_clause": K.ELSE,
        "match_statement": K.SWITCH,
        "case_clause": K.CASE,
        "for_statement": K.FOREACH,
        "while_statement": K.WHILE,
        "try_statement": K.TRY,
        "except_clause": K.CATCH,
        "except_group_clause": K.CATCH,
        "finally_clause": K.FINALLY,
        "conditional_expression": K.TERNARY,
        "break_statement": K.BREAK,
        "continue_statement": K.CONTINUE,
        "return_statement": K.RETURN,
        "raise_statement": K.THROW,
        "boolean_operator": K.BINARY_OP,
        "binary_operator": K.BINARY_OP,
        "comparison_operator": K.BINARY_OP,
        "not_operator": K.UNARY_OP,
        "unary_operator": K.UNARY_OP,
        "assignment": K.ASSIGNMENT,
        "augmented_assignment": K.AUGMENTED_ASSIGNMENT,
        "call": K.CALL,
        "subscript": K.INDEX,
        "identifier": K.IDENTIFIER,
        "integer": K.NUMBER,
        "float": K.NUMBER,
        "string": K.STRING,
        "concatenated_string": K.STRING,
        "comment": K.COMMENT,
    },
    transparent=frozenset(
        {
            "block",
            "parameters",
            "lambda_parameters",
            "argument_list",
            "parenthesized_expression",
            "expression_statement",
            "decorated_definition",
            "keyword_argument",
            "slice",
        }
    ),
    dropped=frozenset(
        {
            "keyword_separator",
            "positional_separator",
            "import_statement",
            "import_from_statement",
            "future_import_statement",
        }
    ),
    dropped_fields=_COMMON_DROPPED_FIELDS,
    field_roles=_COMMON_FIELD_ROLES,
    boolean_operators={"and": K.LOGICAL_AND, "or": K.LOGICAL_OR},
    line_comment=("#",),
    block_comment=None,
    doc_comment_prefix=None,
    member_case="snake",
    storage_field="__tablename__",
    constructor_names=frozenset({"__init__"}),
    receiver_names=frozenset({"self", "cls"}),
)

JAVASCRIPT = LanguageSpec(
    name="javascript",
    extensions=(".js", ".jsx", ".mjs", ".cjs"),
    kinds=_JS_KINDS,
    transparent=_JS_TRANSPARENT,
    dropped=frozenset({"import_statement", "class_heritage"}),
    dropped_fields=_COMMON_DROPPED_FIELDS,
    field_roles=_COMMON_FIELD_ROLES,
    boolean_operators={**_C_BOOLEANS, "??": K.COALESCE},
)

TYPESCRIPT = LanguageSpec(
    name="typescript",
    extensions=(".ts", ".mts", ".cts"),
    kinds=_TS_KINDS,
    transparent=_JS_TRANSPARENT | {"interface_body", "object_type"},
    dropped=frozenset(
        {"import_statement", "class_heritage", "type_annotation", "type_alias_declaration"}
    ),
    dropped_fields=_COMMON_DROPPED_FIELDS,
    field_roles=_COMMON_FIELD_ROLES,
    modifier_types=frozenset({"accessibility_modifier", "override_modifier"}),
    boolean_operators={**_C_BOOLEANS, "??": K.COALESCE},
)

TSX = LanguageSpec(
    name="tsx",
    extensions=(".tsx",),
    kinds=_TS_KINDS,
    transparent=TYPESCRIPT.transparent,
    dropped=TYPESCRIPT.dropped,
    dropped_fields=_COMMON_DROPPED_FIELDS,
    field_roles=_COMMON_FIELD_ROLES,
    modifier_types=TYPESCRIPT.modifier_types,
    boolean_operators=TYPESCRIPT.boolean_operators,
)

JAVA = LanguageSpec(
    name="java",
    extensions=(".java",),
    kinds={
        "program": K.MODULE,
        "class_declaration": K.CLASS,
        "interface_declaration": K.CLASS,
        "enum_declaration": K.CLASS,
        "record_declaration": K.CLASS,
        "method_declaration": K.METHOD,
        "constructor_declaration": K.METHOD,
        "compact_constructor_declaration": K.METHOD,
        "lambda_expression": K.LAMBDA,
        "formal_parameter": K.PARAMETER,
        "spread_parameter": K.PARAMETER,
        "enum_constant": K.CONSTANT,
        "constant_declaration": K.CONSTANT,
        "field_declaration": K.PROPERTY,
        "if_statement": K.IF,
        "switch_expression": K.SWITCH,
        "switch_statement": K.SWITCH,
        "switch_block_statement_group": K.CASE,
        "switch_rule": K.CASE,
        "for_statement": K.FOR,
        "enhanced_for_statement": K.FOREACH,
        "while_statement": K.WHILE,
        "do_statement": K.DO_WHILE,
        "try_statement": K.TRY,
        "try_with_resources_statement": K.TRY,
        "catch_clause": K.CATCH,
        "finally_clause": K.FINALLY,
        "ternary_expression": K.TERNARY,
        "break_statement": K.BREAK,
        "continue_statement": K.CONTINUE,
        "return_statement": K.RETURN,
        "throw_statement": K.THROW,
        "binary_expression": K.BINARY_OP,
        "unary_expression": K.UNARY_OP,
        "assignment_expression": K.ASSIGNMENT,
        "variable_declarator": K.ASSIGNMENT,
        "method_invocation": K.CALL,
        "object_creation_expression": K.CALL,
        "array_access": K.INDEX,
        "identifier": K.IDENTIFIER,
        "decimal_integer_literal": K.NUMBER,
        "hex_integer_literal": K.NUMBER,
        "octal_integer_literal": K.NUMBER,
        "binary_integer_literal": K.NUMBER,
        "decimal_floating_point_literal": K.NUMBER,
        "hex_floating_point_literal": K.NUMBER,
        "string_literal": K.STRING,
        "character_literal": K.STRING,
        "text_block": K.STRING,
        "line_comment": K.COMMENT,
        "block_comment": K.COMMENT,
    },
    transparent=frozenset(
        {
            "block",
            "class_body",
            "interface_body",
            "enum_body",
            "enum_body_declarations",
            "constructor_body",
            "switch_block",
            "formal_parameters",
            "argument_list",
            "parenthesized_expression",
            "expression_statement",
        }
    ),
    dropped=frozenset(
        {"import_declaration", "package_declaration", "receiver_parameter", "dimensions"}
    ),
    dropped_fields=_COMMON_DROPPED_FIELDS,
    field_roles=_COMMON_FIELD_ROLES,
    modifier_types=frozenset({"modifiers"}),
    boolean_operators=_C_BOOLEANS,
    constructor_names=frozenset(),
    default_visibility="package",
)

LANGUAGES: dict[str, LanguageSpec] = {
    spec.name: spec for spec in (PYTHON, JAVASCRIPT, TYPESCRIPT, TSX, JAVA)
}

# Extension to language mapping (built from LANGUAGES)
_EXTENSION_TO_LANGUAGE: dict[str, str] = {}
for _lang_name, _spec in LANGUAGES.items():
    for _ext in _spec.extensions:
        _EXTENSION_TO_LANGUAGE[_ext] = _lang_name


def get_language_spec(name: str) -> LanguageSpec:
    """Look up a language by name. Raises UnsupportedLanguageError if unknown."""
    try:
        return LANGUAGES[name]
    except KeyError:
        from ..exceptions import UnsupportedLanguageError

        raise UnsupportedLanguageError(name, sorted(LANGUAGES))


def detect_language(filepath: Union[str, Path]) -> str:
    """Detect language from file extension.

    Returns:
        Language name (e.g., "python", "java") or "unknown"
    """
    path = Path(filepath)
    return _EXTENSION_TO_LANGUAGE.get(path.suffix.lower(), "unknown")
