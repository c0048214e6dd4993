"""Tests for commented-code and todo-comment rules, and inline suppression."""

import textwrap

import pytest
from builders import function, module, node, number, run, source

from codeshape.analyzers.suppression import comment_text, ignored_rules, is_suppressed
from codeshape.models import Severity, Status
from codeshape.rules import CommentedCodeAnalyzer, MagicNumberAnalyzer, TodoCommentAnalyzer
from codeshape.rules.commented_code import code_score, doc_score, looks_like_code
from codeshape.scanning.syntax import NodeKind as K


def text_source(code, language="python", path="src/app.py"):
    return source(None, path=path, language=language, text=textwrap.dedent(code))


class TestLooksLikeCode:
    """Single-line classification."""

    @pytest.mark.parametrize(
        "line",
        [
            "def compute(a, b):",
            "total = a + b",
            "return total",
            "foo(bar, 1);",
            "import os",
            "if (x > 1) {",
            "}",
        ],
    )
    def test_code(self, line):
        assert looks_like_code(line)

    @pytest.mark.parametrize(
        "line",
        [
            "This function computes the total",
            "TODO: return early when the cache is warm",
            "@param value the value to store",
            "Note: see the README",
            "",
            "ok",
        ],
    )
    def test_prose(self, line):
        assert not looks_like_code(line)

    def test_tie_goes_to_documentation(self):
        line = "return the result with care"
        assert code_score(line) == doc_score(line) == 2
        assert not looks_like_code(line)


class TestCommentedCode:
    """Runs of commented-out code in line and block comments."""

    def test_line_comment_block(self):
        code = """\
        # def compute(a, b):
        #     total = a + b
        #     return total
        value = 1
        """
        result = run(CommentedCodeAnalyzer, text_source(code))
        issue = result.issues[0]
        assert issue.metadata["startLine"] == 1
        assert issue.metadata["endLine"] == 3
        assert issue.metadata["lineCount"] == 3
        assert issue.severity is Severity.LOW
        assert issue.metadata["preview"].startswith("def compute")

    def test_prose_comments_pass(self):
        code = """\
        # This module keeps the cache warm.
        # It should be imported once at startup
        # and never reloaded.
        """
        assert run(CommentedCodeAnalyzer, text_source(code)).passed

    def test_neutral_lines_bridge_a_block(self):
        code = """\
        # total = a + b
        # the old version
        # count = total + 1
        # return count
        """
        issue = run(CommentedCodeAnalyzer, text_source(code)).issues[0]
        assert (issue.metadata["startLine"], issue.metadata["endLine"]) == (1, 4)
        assert issue.metadata["lineCount"] == 3
        assert issue.message == "Found 3 lines of commented-out code"

    def test_short_runs_ignored(self):
        code = """\
        # total = a + b
        # return total
        """
        assert run(CommentedCodeAnalyzer, text_source(code)).passed

    def test_long_block_is_medium(self):
        code = "\n".join(f"// value{i} = compute({i});" for i in range(22))
        issue = run(CommentedCodeAnalyzer, text_source(code, "javascript", "app.js")).issues[0]
        assert issue.severity is Severity.MEDIUM

    def test_block_comment(self):
        code = """\
        /*
        foo(1);
        bar(2);
        baz(3);
        */
        const x = 1;
        """
        result = run(CommentedCodeAnalyzer, text_source(code, "javascript", "app.js"))
        assert [i.metadata["startLine"] for i in result.issues] == [1]

    def test_doc_comment_not_flagged(self):
        code = """\
        /**
         * foo(1);
         * bar(2);
         * baz(3);
         */
        """
        assert run(CommentedCodeAnalyzer, text_source(code, "javascript", "app.js")).passed


class TestTodoComments:
    """Marker keywords in comments."""

    def test_keywords_and_severities(self):
        code = """\
        # TODO: cache this
        value = 1
        # FIXME broken on windows
        # HACK around the driver bug
        # todo lowercase is ignored
        """
        result = run(TodoCommentAnalyzer, text_source(code))
        found = [(i.line, i.metadata["keyword"], i.severity) for i in result.issues]
        assert found == [
            (1, "TODO", Severity.LOW),
            (3, "FIXME", Severity.MEDIUM),
            (4, "HACK", Severity.HIGH),
        ]
        assert result.issues[0].metadata["comment"] == "TODO: cache this"

    def test_non_blocking(self):
        result = run(TodoCommentAnalyzer, text_source("# XXX check\n"))
        assert result.status is Status.WARNING
        assert result.message.endswith(": 1 XXX")

    def test_first_keyword_per_line(self):
        result = run(TodoCommentAnalyzer, text_source("# TODO and FIXME\n"))
        assert [i.metadata["keyword"] for i in result.issues] == ["TODO"]

    def test_tree_comments_only(self):
        tree = module(
            node(K.STRING, line=1, text='"TODO not a comment"'),
            node(K.COMMENT, line=2, text="# BUG off by one"),
        )
        text = 'x = "TODO not a comment"\n# BUG off by one\n'
        result = run(TodoCommentAnalyzer, source(tree, text=text))
        assert [(i.line, i.metadata["keyword"]) for i in result.issues] == [(2, "BUG")]


class TestSuppression:
    """codeshape-ignore comments."""

    def test_parse_rule_list(self):
        assert ignored_rules("x = 1") is None
        assert ignored_rules("x = 1  # codeshape-ignore") == frozenset()
        assert ignored_rules("# codeshape-ignore: magic-number, nesting-depth") == frozenset(
            {"magic-number", "nesting-depth"}
        )

    def test_same_line_and_line_above(self):
        comments = {1: "# codeshape-ignore: magic-number"}
        assert is_suppressed("magic-number", 2, comments)
        assert is_suppressed("magic-number", 1, comments)
        assert not is_suppressed("magic-number", 3, comments)
        assert not is_suppressed("todo-comment", 2, comments)

    def test_applied_to_results(self):
        text = "def f():\n    x = 42  # codeshape-ignore\n    pass\n    y = 77\n"
        tree = module(
            function(
                "f",
                node(K.ASSIGNMENT, number(42, line=2), line=2),
                node(K.COMMENT, line=2, text="# codeshape-ignore"),
                node(K.ASSIGNMENT, number(77, line=4), line=4),
                line=1,
                end=4,
            )
        )
        result = run(MagicNumberAnalyzer, source(tree, text=text))
        assert [i.metadata["value"] for i in result.issues] == ["77"]

    def test_marker_in_string_does_not_suppress(self):
        text = 'def f():\n    x = 42 + len("codeshape-ignore")\n'
        tree = module(
            function(
                "f",
                node(
                    K.ASSIGNMENT,
                    node(
                        K.BINARY_OP,
                        number(42, line=2),
                        node(K.CALL, node(K.STRING, line=2, text='"codeshape-ignore"'), line=2),
                        line=2,
                    ),
                    line=2,
                ),
                line=1,
                end=2,
            )
        )
        result = run(MagicNumberAnalyzer, source(tree, text=text))
        assert [i.metadata["value"] for i in result.issues] == ["42"]

    def test_comment_text_sources(self):
        tree = module(node(K.COMMENT, line=3, text="# codeshape-ignore"))
        text = 'x = "# codeshape-ignore"\ny = 1\n# codeshape-ignore\n'
        assert comment_text(source(tree, text=text)) == {3: "# codeshape-ignore"}
        unparsed = comment_text(source(None, text="y = 1  # codeshape-ignore\nz = 2\n"))
        assert unparsed == {1: "# codeshape-ignore"}
