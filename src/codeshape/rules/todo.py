"""TODO_COMMENT: TODO / FIXME / HACK / XXX / BUG markers left in comments.

Non-blocking: findings make the result a warning, never a failure.

Keywords are matched case-sensitively as whole words, in table order; only
the first keyword on a line is reported. Comments come from the syntax
tree, so markers inside string literals are ignored. Files without a tree
fall back to whole-line comments.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterator, NamedTuple, Optional, Sequence

from ..analyzers.base import Analyzer
from ..models import Issue, Severity
from ..scanning.languages import get_language_spec
from ..scanning.syntax import NodeKind, SourceFile


class Keyword(NamedTuple):
    name: str
    severity: Severity
    description: str
    actions: tuple[str, ...]


_URGENT = (
    "This requires immediate attention",
    "Create a high-priority issue",
    "Do not ship code with known bugs",
    "Add tests to prevent regression",
)

KEYWORDS: tuple[Keyword, ...] = (
    Keyword(
        "TODO",
        Severity.LOW,
        "Pending task or planned improvement",
        (
            "Create an issue to track this work",
            "Reference the issue in the comment if keeping it",
            "Remove TODO comments for completed work",
        ),
    ),
    Keyword(
        "FIXME",
        Severity.MEDIUM,
        "Code that needs to be fixed",
        (
            "Prioritize fixing this before release",
            "Create an issue with high priority",
            "Document why it needs fixing and the impact",
        ),
    ),
    Keyword(
        "HACK",
        Severity.HIGH,
        "Temporary workaround that should be refactored",
        (
            "Schedule time to implement a proper solution",
            "Document why the workaround was necessary",
        ),
    ),
    Keyword("XXX", Severity.HIGH, "Warning or important note", _URGENT),
    Keyword("BUG", Severity.HIGH, "Known bug that needs attention", _URGENT),
)

_PATTERNS = [(keyword, re.compile(rf"\b{keyword.name}\b")) for keyword in KEYWORDS]
_MARKERS = re.compile(r"^\s*(//+|#+|/\*+|\*+)\s*")
_CLOSER = re.compile(r"\s*\*+/\s*$")


def clean_comment(line: str) -> str:
    return _CLOSER.sub("", _MARKERS.sub("", line)).strip()


def first_keyword(line: str) -> Optional[Keyword]:
    for keyword, pattern in _PATTERNS:
        if pattern.search(line):
            return keyword
    return None


def comment_lines(source: SourceFile) -> Iterator[tuple[int, str]]:
    """(line number, text) of every physical line that is part of a comment."""
    if source.root is not None:
        for node in source.root.find_all(NodeKind.COMMENT):
            for offset, line in enumerate((node.text or "").splitlines()):
                yield node.start_line + offset, line
        return
    markers = get_language_spec(source.language).line_comment
    for number, line in enumerate(source.lines, start=1):
        if line.strip().startswith(markers):
            yield number, line


class TodoCommentAnalyzer(Analyzer):
    id = "todo-comment"
    name = "TODO Comments"
    description = "Finds TODO/FIXME/HACK comments that should be resolved or tracked"
    severity = Severity.LOW
    blocking = False
    tags = ("maintainability", "technical-debt", "comments")
    passed_message = "No TODO/FIXME/HACK comments detected"
    failed_message = "Found {count} TODO/FIXME/HACK comment(s)"

    def analyze_file(self, source: SourceFile) -> list[Issue]:
        issues = []
        for number, line in comment_lines(source):
            keyword = first_keyword(line)
            if keyword is None:
                continue
            context = clean_comment(line)
            issues.append(
                self.issue(
                    source,
                    number,
                    f"{keyword.name} comment found: {context}",
                    keyword.severity,
                    f"{keyword.description}. Actions: {'; '.join(keyword.actions)}.",
                    keyword=keyword.name,
                    comment=context,
                    type=keyword.description,
                    file=source.path,
                )
            )
        return issues

    def summarize(self, issues: Sequence[Issue]) -> str:
        counts = Counter(issue.metadata["keyword"] for issue in issues)
        parts = ", ".join(f"{count} {keyword}" for keyword, count in counts.items())
        return f"{self.failed_message.format(count=len(issues))}: {parts}"
