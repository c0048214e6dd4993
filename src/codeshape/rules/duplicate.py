"""DUPLICATE_CODE: near-identical function and method bodies across files.

Collection:
    every function / method (magic names excluded) with at least
    ``min_collected_statements`` (3) top-level statements, normalized to a token sequence
    in which identifiers, numbers and strings are placeholders and comments
    are gone. Renaming variables therefore does not hide a copy.

Comparison (only after every file has been collected):
    all pairs i < j, skipping same-named units in the same file.
    similarity = 100 * (1 - edit distance / longer length) when both forms
    have at most ``max_edit_tokens`` tokens, else the difflib matching ratio.
    Rounded to two decimals.

Flagged: similarity >= 85 and the first unit has >= 6 statements.
Severity: high at >= 95% and >= 20 statements; medium at >= 90% or >= 30
statements; else low.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Sequence

from ..analyzers.base import RuleVisitor, TreeAnalyzer
from ..engine import ScopeContext, traverse
from ..logging_config import get_logger
from ..models import Issue, Location, Severity, SimilarityPair
from ..scanning.syntax import NodeKind, SourceFile, SyntaxNode
from .helpers import class_name, is_magic, recommendation

logger = get_logger(__name__)

_ACTIONS = (
    "Extract the common logic into a shared function",
    "Move shared behaviour into a base class or mixin if the classes are related",
    "Use composition or a strategy object for the parts that vary",
    "Use a template method if only some steps differ",
)

Tokens = tuple[str, ...]


def normalize(statements: Sequence[SyntaxNode]) -> Tokens:
    """Shape of a body as a token sequence, independent of names and literals."""
    tokens: list[str] = []
    for statement in statements:
        for node in statement.walk():
            if node.kind is NodeKind.COMMENT:
                continue
            if node.kind is NodeKind.IDENTIFIER:
                tokens.append("$var")
            elif node.kind is NodeKind.NUMBER:
                tokens.append("0")
            elif node.kind is NodeKind.STRING:
                tokens.append("str")
            elif node.kind is NodeKind.OTHER:
                tokens.append(node.type_name)
            elif node.operator:
                tokens.append(f"{node.kind.value}:{node.operator}")
            else:
                tokens.append(node.kind.value)
    return tuple(tokens)


def edit_distance(a: Tokens, b: Tokens) -> int:
    """Levenshtein distance between two token sequences."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, token_a in enumerate(a, start=1):
        current = [i]
        for j, token_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (token_a != token_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: Tokens, b: Tokens, max_edit_tokens: int = 255) -> float:
    """Percentage similarity (0-100) of two normalized bodies."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    if len(a) <= max_edit_tokens and len(b) <= max_edit_tokens:
        score = (1 - edit_distance(a, b) / longest) * 100
    else:
        score = SequenceMatcher(None, a, b, autojunk=False).ratio() * 100
    return round(score, 2)


def duplicate_severity(score: float, statements: int) -> Severity:
    if score >= 95 and statements >= 20:
        return Severity.HIGH
    if score >= 90 or statements >= 30:
        return Severity.MEDIUM
    return Severity.LOW


@dataclass(frozen=True)
class CodeUnit:
    """One collected function or method."""

    name: str
    file: str
    line: int
    statements: int
    tokens: Tokens


class UnitCollector(RuleVisitor):
    def begin(self, source: SourceFile, ctx: ScopeContext) -> None:
        self.units: list[CodeUnit] = []

    def enter_function(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        name = ctx.current.name
        if is_magic(name):
            return
        statements = node.statements
        if len(statements) < self.analyzer.threshold("min_collected_statements"):
            return
        owner = class_name(ctx)
        self.units.append(
            CodeUnit(
                name=f"{owner}::{name}" if owner else name,
                file=self.source.path,
                line=node.start_line,
                statements=len(statements),
                tokens=normalize(statements),
            )
        )

    enter_method = enter_function


class DuplicateCodeAnalyzer(TreeAnalyzer):
    id = "duplicate-code"
    name = "Duplicate Code"
    description = "Detects near-identical function and method bodies"
    severity = Severity.MEDIUM
    tags = ("duplication", "dry", "maintainability")
    defaults = {
        "similarity": 85.0,
        "min_statements": 6,
        "min_collected_statements": 3,
        "max_edit_tokens": 255,
    }
    passed_message = "No duplicate code blocks detected"
    failed_message = "Found {count} duplicate code block(s)"

    def create_visitor(self, source: SourceFile) -> UnitCollector:
        return UnitCollector(self, source)

    def collect(self, sources: Sequence[SourceFile]) -> list[CodeUnit]:
        units: list[CodeUnit] = []
        for source in sources:
            if source.root is None:
                continue
            collector = self.create_visitor(source)
            if collector in traverse(source, [collector], ScopeContext(source.path)):
                units.extend(collector.units)
        return units

    def find_pairs(self, units: Sequence[CodeUnit]) -> list[tuple[CodeUnit, CodeUnit, SimilarityPair]]:
        min_similarity = self.threshold("similarity")
        min_statements = self.threshold("min_statements")
        max_edit_tokens = self.threshold("max_edit_tokens")

        pairs = []
        for i, unit_a in enumerate(units):
            if unit_a.statements < min_statements:
                continue
            for unit_b in units[i + 1 :]:
                if unit_a.file == unit_b.file and unit_a.name == unit_b.name:
                    continue
                score = similarity(unit_a.tokens, unit_b.tokens, max_edit_tokens)
                if score >= min_similarity:
                    pairs.append(
                        (unit_a, unit_b, SimilarityPair(unit_a.name, unit_b.name, score, unit_a.statements))
                    )
        return pairs

    def analyze(self, sources: Sequence[SourceFile]) -> list[Issue]:
        units = self.collect(sources)
        logger.debug(f"{self.id}: comparing {len(units)} collected units")

        issues = []
        for unit_a, unit_b, pair in self.find_pairs(units):
            issues.append(
                Issue(
                    message=(
                        f"Duplicate code detected: '{pair.unit_a}' and '{pair.unit_b}' "
                        f"are {pair.similarity}% similar"
                    ),
                    location=Location(unit_a.file, unit_a.line),
                    severity=duplicate_severity(pair.similarity, pair.line_count),
                    recommendation=recommendation(
                        f"Methods '{pair.unit_a}' and '{pair.unit_b}' share {pair.line_count} "
                        f"statements of {pair.similarity}% similar code. ",
                        _ACTIONS,
                    ),
                    metadata={
                        "method1": pair.unit_a,
                        "method2": pair.unit_b,
                        "file1": unit_a.file,
                        "file2": unit_b.file,
                        "line1": unit_a.line,
                        "line2": unit_b.line,
                        "similarity": pair.similarity,
                        "lineCount": pair.line_count,
                    },
                )
            )
        return issues
