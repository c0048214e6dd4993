"""Tree-sitter parser wrapper.

Grammars are listed in one table and loaded lazily: the first parse of a
language imports its grammar package and builds a Parser. A missing
tree-sitter install or grammar package leaves the language unsupported
instead of failing.

Usage:
    if TREE_SITTER_AVAILABLE:
        parser = TreeSitterParser()
        tree = parser.parse(code_bytes, "python")
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from typing import TYPE_CHECKING, Any, Optional

logger = logging.getLogger(__name__)

try:
    import tree_sitter as _tree_sitter_module

    TREE_SITTER_AVAILABLE = True
except ImportError:
    _tree_sitter_module = None
    TREE_SITTER_AVAILABLE = False

# language -> (grammar package, function returning the language pointer)
GRAMMARS: dict[str, tuple[str, str]] = {
    "python": ("tree_sitter_python", "language"),
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "java": ("tree_sitter_java", "language"),
}


if TYPE_CHECKING:

    class Node:
        type: str
        is_named: bool
        has_error: bool
        start_point: tuple[int, int]
        end_point: tuple[int, int]
        start_byte: int
        end_byte: int
        children: list[Node]

    class Tree:
        root_node: Node


def get_supported_languages() -> list[str]:
    """Languages whose grammar package is installed."""
    if not TREE_SITTER_AVAILABLE:
        return []
    return [
        name
        for name, (package, _) in GRAMMARS.items()
        if importlib.util.find_spec(package) is not None
    ]


def _load_language(name: str) -> Optional[Any]:
    package, entry = GRAMMARS[name]
    try:
        module = importlib.import_module(package)
    except ImportError:
        return None
    pointer = getattr(module, entry, None)
    if pointer is None:
        return None
    # tree-sitter >= 0.23 grammars hand out a PyCapsule; Language wraps it
    return _tree_sitter_module.Language(pointer())


class TreeSitterParser:
    """One lazily built tree-sitter Parser per language.

    Check TREE_SITTER_AVAILABLE before using, or check if parse() returns None.
    A parser instance is not thread-safe; use one per thread.
    """

    def __init__(self) -> None:
        # language -> Parser, or None once loading has failed
        self._parsers: dict[str, Optional[Any]] = {}

    def _parser_for(self, language: str) -> Optional[Any]:
        if not TREE_SITTER_AVAILABLE or language not in GRAMMARS:
            return None
        if language not in self._parsers:
            parser = None
            try:
                grammar = _load_language(language)
                if grammar is not None:
                    parser = _tree_sitter_module.Parser(grammar)
            except Exception as e:
                logger.debug(f"Grammar for {language} unavailable: {e}")
            self._parsers[language] = parser
        return self._parsers[language]

    def parse(self, code: bytes, language: str) -> Tree | None:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            language: Language name (e.g., "python")

        Returns:
            Tree object if successful, None if the language has no grammar
        """
        parser = self._parser_for(language)
        if parser is None:
            return None

        try:
            result: Tree | None = parser.parse(code)
            return result
        except Exception as e:
            logger.debug(f"tree-sitter failed on {language} input: {e}")
            return None

    def is_language_supported(self, language: str) -> bool:
        return self._parser_for(language) is not None
