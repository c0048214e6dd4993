"""Inline suppression comments.

A comment containing ``codeshape-ignore`` silences every rule for the line
it is on and the line below it. ``codeshape-ignore: magic-number, nesting-depth``
silences only the named rules.

Only comment text counts: comments come from the syntax tree, so a string
literal holding the marker suppresses nothing. Files without a tree fall
back to everything after the first line-comment marker on each line.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from ..models import Issue
from ..scanning.languages import get_language_spec
from ..scanning.syntax import NodeKind, SourceFile

_IGNORE = re.compile(r"codeshape-ignore(?:\s*:\s*([\w-]+(?:\s*,\s*[\w-]+)*))?")


def ignored_rules(line: str) -> Optional[frozenset[str]]:
    """Rules a line suppresses: None for none, an empty set for all."""
    match = _IGNORE.search(line)
    if match is None:
        return None
    if match.group(1) is None:
        return frozenset()
    return frozenset(part.strip() for part in match.group(1).split(","))


def comment_text(source: SourceFile) -> dict[int, str]:
    """Comment text per physical line number."""
    found: dict[int, str] = {}
    if source.root is not None:
        for node in source.root.find_all(NodeKind.COMMENT):
            for offset, line in enumerate((node.text or "").splitlines()):
                number = node.start_line + offset
                found[number] = f"{found[number]} {line}" if number in found else line
        return found

    markers = get_language_spec(source.language).line_comment
    for number, line in enumerate(source.lines, start=1):
        starts = [line.find(marker) for marker in markers if marker in line]
        if starts:
            found[number] = line[min(starts):]
    return found


def is_suppressed(analyzer_id: str, line: int, comments: Mapping[int, str]) -> bool:
    for number in (line, line - 1):
        rules = ignored_rules(comments.get(number, ""))
        if rules is not None and (not rules or analyzer_id in rules):
            return True
    return False


def apply_suppressions(
    issues: Sequence[Issue],
    analyzer_id: str,
    sources: Mapping[str, SourceFile],
) -> list[Issue]:
    """Drop issues silenced by a codeshape-ignore comment."""
    comments_by_file: dict[str, dict[int, str]] = {}
    kept = []
    for issue in issues:
        source = sources.get(issue.file)
        if source is not None:
            if issue.file not in comments_by_file:
                comments_by_file[issue.file] = comment_text(source)
            if is_suppressed(analyzer_id, issue.line, comments_by_file[issue.file]):
                continue
        kept.append(issue)
    return kept
