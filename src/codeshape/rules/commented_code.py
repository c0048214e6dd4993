"""COMMENTED_CODE: code left behind in comments.

Each comment line is scored against two declarative signal tables. A line
looks like code when its code score reaches MIN_CODE_SCORE and beats its
documentation score; ties go to documentation.

Flagged:
    - runs of single-line comments with at least ``min_lines`` code lines,
      allowing up to ``max_neutral_lines`` prose comment lines in between
    - block comments (not doc comments) of at least ``min_lines`` lines
      where at least half of the lines look like code

Severity: medium for blocks of 20 lines or more, else low.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from ..analyzers.base import Analyzer
from ..logging_config import get_logger
from ..models import Issue, Severity
from ..scanning.languages import LanguageSpec, get_language_spec
from ..scanning.syntax import NodeKind, SourceFile

logger = get_logger(__name__)

MIN_CODE_SCORE = 2
MEDIUM_BLOCK_LINES = 20

# (pattern, weight). Strong: declarations and imports. Medium: statements
# and control flow. Weak: tokens that also show up in prose about code.
CODE_SIGNALS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"\b(def|function|func)\s+[A-Za-z_$]\w*\s*\("), 4),
    (re.compile(r"^(export\s+)?(abstract\s+)?class\s+[A-Z]\w*.*[:{]\s*$"), 4),
    (re.compile(r"\b(public|private|protected)\s+(static\s+|final\s+|async\s+)*[\w<>\[\],]+(\s+\w+)?\s*[(;=]"), 4),
    (re.compile(r"^(import\s+[\w.{*]|from\s+[\w.]+\s+import\s|package\s+[\w.]+;)"), 4),
    (re.compile(r"\b(if|elif|while|for|switch|catch)\s*\("), 2),
    (re.compile(r"^(if|elif|else|while|for|with|try|except|finally|def|async)\b.*:$"), 2),
    (re.compile(r"^return\b"), 2),
    (re.compile(r"^(const|let|var)\s+\w+\s*="), 2),
    (re.compile(r"^[\w.\[\]'\"]+\s*([-+*/%|&]|\*\*|//)?=\s*\S"), 2),
    (re.compile(r"^(await\s+)?[\w.$]+\(.*\)\s*;?$"), 2),
    (re.compile(r"\bnew\s+[A-Z]\w*\s*\("), 2),
    (re.compile(r"\b[A-Z]\w*(::|\.)[a-z_]\w*\s*\("), 2),
    (re.compile(r"\$[A-Za-z_]|\b(self|this)\.\w+"), 1),
    (re.compile(r"->|=>"), 1),
    (re.compile(r"==|!=|&&|\|\|"), 1),
    (re.compile(r";\s*$"), 1),
    (re.compile(r"[{}]\s*$"), 1),
)

DOC_SIGNALS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"^(TODO|FIXME|NOTE|XXX|HACK|BUG)\b"), 10),
    (re.compile(r"^@(param|return|returns|throws|see|var|type|example)\b"), 10),
    (re.compile(r"^\*"), 10),
    (re.compile(r"^(Description|Example|Usage|Args|Arguments|Returns|Raises|Note|See):"), 10),
    (re.compile(r"codeshape-ignore"), 10),
)
PROSE_WORDS = re.compile(r"\b(the|this|that|with|from|should|will|can|may)\b", re.IGNORECASE)
_LONE_PUNCTUATION = re.compile(r"^[{};\[\]()]$")


def code_score(content: str) -> int:
    return sum(weight for pattern, weight in CODE_SIGNALS if pattern.search(content))


def doc_score(content: str) -> int:
    score = sum(weight for pattern, weight in DOC_SIGNALS if pattern.search(content))
    return score + len(PROSE_WORDS.findall(content))


def looks_like_code(content: str) -> bool:
    """Classify the text of one comment line (markers already removed)."""
    content = content.strip()
    if not content:
        return False
    if len(content) < 5:
        return bool(_LONE_PUNCTUATION.match(content))
    code = code_score(content)
    return code >= MIN_CODE_SCORE and code > doc_score(content)


def comment_content(line: str, language: LanguageSpec) -> Optional[str]:
    """Text of a whole-line comment, or None if the line is not one."""
    stripped = line.strip()
    for marker in language.line_comment:
        if stripped.startswith(marker):
            body = stripped[len(marker):]
            return body.lstrip(marker[-1]).strip()
    return None


@dataclass
class CodeBlock:
    start: int
    end: int
    lines: list[str] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        """Code lines only; bridged prose lines are not counted."""
        return len(self.lines)


def preview(lines: Sequence[str]) -> str:
    text = "\n".join(lines[:3])
    if len(lines) > 3:
        text += f"\n... ({len(lines) - 3} more lines)"
    return text


def line_comment_blocks(
    lines: Sequence[str], language: LanguageSpec, min_lines: int, max_neutral: int
) -> Iterator[CodeBlock]:
    """Runs of commented-out code in single-line comments."""
    block: Optional[CodeBlock] = None
    neutral = 0

    for number, line in enumerate(lines, start=1):
        content = comment_content(line, language)
        if content is not None and looks_like_code(content):
            if block is None:
                block = CodeBlock(number, number)
            block.end = number
            block.lines.append(content)
            neutral = 0
            continue
        if block is not None and content is not None and neutral < max_neutral:
            neutral += 1
            continue
        if block is not None and len(block.lines) >= min_lines:
            yield block
        block = None
        neutral = 0

    if block is not None and len(block.lines) >= min_lines:
        yield block


def _block_comments(source: SourceFile, language: LanguageSpec) -> Iterator[tuple[int, str]]:
    """(start line, text) of every block comment that is not a doc comment."""
    opener, closer = language.block_comment  # type: ignore[misc]
    doc_prefix = language.doc_comment_prefix
    if source.root is not None:
        for node in source.root.find_all(NodeKind.COMMENT):
            text = node.text or ""
            if text.startswith(opener) and not (doc_prefix and text.startswith(doc_prefix)):
                yield node.start_line, text
        return
    pattern = re.compile(re.escape(opener) + r".*?" + re.escape(closer), re.DOTALL)
    for match in pattern.finditer(source.text):
        text = match.group(0)
        if not (doc_prefix and text.startswith(doc_prefix)):
            yield source.text.count("\n", 0, match.start()) + 1, text


def block_comment_blocks(source: SourceFile, language: LanguageSpec, min_lines: int) -> Iterator[CodeBlock]:
    if language.block_comment is None:
        return
    opener, closer = language.block_comment
    for start, text in _block_comments(source, language):
        body = text[len(opener):]
        if body.endswith(closer):
            body = body[: -len(closer)]
        content = [re.sub(r"^\s*\*?\s?", "", line).rstrip() for line in body.splitlines()]
        content = [line for line in content if line.strip()]
        if len(content) < min_lines:
            continue
        code = [line for line in content if looks_like_code(line)]
        if len(code) >= max(1, int(len(content) * 0.5)):
            yield CodeBlock(start, start + text.count("\n"), content)


class CommentedCodeAnalyzer(Analyzer):
    id = "commented-code"
    name = "Commented-Out Code"
    description = "Detects commented-out code that should be deleted in favour of version control"
    severity = Severity.LOW
    tags = ("maintainability", "dead-code")
    defaults = {"min_lines": 3, "max_neutral_lines": 2}
    passed_message = "No commented-out code blocks detected"
    failed_message = "Found {count} block(s) of commented-out code"

    def analyze_file(self, source: SourceFile) -> list[Issue]:
        language = get_language_spec(source.language)
        min_lines = self.threshold("min_lines")
        max_neutral = self.threshold("max_neutral_lines")

        blocks = list(line_comment_blocks(source.lines, language, min_lines, max_neutral))
        blocks.extend(block_comment_blocks(source, language, min_lines))
        blocks.sort(key=lambda b: b.start)

        issues = []
        for block in blocks:
            count = block.line_count
            issues.append(
                self.issue(
                    source,
                    block.start,
                    f"Found {count} lines of commented-out code",
                    Severity.MEDIUM if count >= MEDIUM_BLOCK_LINES else Severity.LOW,
                    f"Found {count} lines of commented-out code. Commented code "
                    "clutters the codebase and confuses maintainers. Delete it; version "
                    "control preserves history.",
                    startLine=block.start,
                    endLine=block.end,
                    lineCount=count,
                    preview=preview(block.lines),
                    file=source.path,
                )
            )
        if issues:
            logger.debug(f"{source.path}: {len(issues)} commented-out code block(s)")
        return issues
