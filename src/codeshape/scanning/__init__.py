"""Parsing layer: tree-sitter grammars, normalized syntax trees, file discovery."""

from .discovery import DiscoveredFile, LoadResult, discover_files, load_sources, matches_any
from .languages import LANGUAGES, LanguageSpec, detect_language, get_language_spec
from .normalizer import TreeSitterNormalizer, parse_number
from .syntax import NodeKind, SourceFile, SyntaxNode
from .treesitter_parser import TREE_SITTER_AVAILABLE, TreeSitterParser, get_supported_languages

__all__ = [
    "DiscoveredFile",
    "LANGUAGES",
    "LanguageSpec",
    "LoadResult",
    "NodeKind",
    "SourceFile",
    "SyntaxNode",
    "TREE_SITTER_AVAILABLE",
    "TreeSitterNormalizer",
    "TreeSitterParser",
    "detect_language",
    "discover_files",
    "get_language_spec",
    "get_supported_languages",
    "load_sources",
    "matches_any",
    "parse_number",
]
