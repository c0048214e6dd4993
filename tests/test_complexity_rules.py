"""Tests for cyclomatic, cognitive, nesting-depth and complex-conditional rules."""

import logging

import pytest
from builders import (
    and_,
    function,
    ident,
    if_,
    klass,
    lam,
    loop,
    method,
    module,
    node,
    or_,
    run,
    source,
    statement,
)

from codeshape.models import Severity, Status
from codeshape.rules import (
    CognitiveComplexityAnalyzer,
    ComplexConditionalAnalyzer,
    CyclomaticComplexityAnalyzer,
    NestingDepthAnalyzer,
)
from codeshape.rules.cognitive import increment
from codeshape.rules.cyclomatic import decision_points
from codeshape.scanning.syntax import NodeKind as K


def nested_ifs(depth, start_line=2):
    """``depth`` ifs, each inside the previous one, one per line."""
    inner = None
    for offset in reversed(range(depth)):
        children = (inner,) if inner is not None else ()
        inner = if_(*children, line=start_line + offset)
    return inner


class TestCyclomaticComplexity:
    """Decision counting per named callable."""

    def test_baseline_is_one(self):
        tree = module(function("noop"))
        result = run(CyclomaticComplexityAnalyzer, source(tree), threshold=0)
        assert len(result.issues) == 1
        assert result.issues[0].metadata["complexity"] == 1

    def test_counts_decisions(self):
        body = [if_(line=2), loop(line=3), node(K.WHILE, line=4), and_(ident(), ident())]
        tree = module(function("decide", *body))
        result = run(CyclomaticComplexityAnalyzer, source(tree), threshold=0)
        assert result.issues[0].metadata["complexity"] == 5

    def test_default_case_not_counted(self):
        switch = node(
            K.SWITCH,
            node(K.CASE, line=2),
            node(K.CASE, line=3),
            node(K.CASE, line=4, default=True),
        )
        assert decision_points(switch.children[2]) == 0
        tree = module(function("route", switch))
        result = run(CyclomaticComplexityAnalyzer, source(tree), threshold=0)
        assert result.issues[0].metadata["complexity"] == 4

    def test_lambda_decisions_charged_to_enclosing_callable(self):
        tree = module(function("outer", lam(if_(), if_())))
        result = run(CyclomaticComplexityAnalyzer, source(tree), threshold=0)
        assert [i.metadata["method"] for i in result.issues] == ["outer"]
        assert result.issues[0].metadata["complexity"] == 3

    def test_threshold_is_strict(self):
        tree = module(function("f", *[if_(line=i) for i in range(2, 11)]))
        assert run(CyclomaticComplexityAnalyzer, source(tree)).status is Status.PASSED

    @pytest.mark.parametrize(
        "ifs,expected",
        [(10, Severity.LOW), (14, Severity.MEDIUM), (19, Severity.HIGH)],
    )
    def test_severity_by_ratio(self, ifs, expected):
        tree = module(function("f", *[if_(line=i) for i in range(2, ifs + 2)]))
        result = run(CyclomaticComplexityAnalyzer, source(tree))
        assert result.status is Status.FAILED
        assert result.issues[0].severity is expected

    def test_file_level_code_not_measured(self):
        tree = module(*[if_(line=i) for i in range(1, 30)])
        assert run(CyclomaticComplexityAnalyzer, source(tree)).passed


class TestCognitiveComplexity:
    """Nesting-weighted increments."""

    def score(self, *statements):
        tree = module(function("f", *statements))
        result = run(CognitiveComplexityAnalyzer, source(tree), threshold=0)
        return result.issues[0].metadata["complexity"] if result.issues else 0

    def test_flat_if(self):
        assert self.score(if_()) == 1

    def test_nesting_weight(self):
        assert self.score(loop(if_())) == 3

    def test_monotonic_in_nesting(self):
        scores = [self.score(nested_ifs(depth)) for depth in range(1, 6)]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)

    def test_else_if_and_boolean_operators_are_flat(self):
        chain = if_(node(K.ELSE_IF, role="alternative"), condition=and_(ident(), ident()))
        assert self.score(loop(chain)) == 1 + 2 + 1 + 1

    def test_jump_counts_only_inside_loop(self):
        assert self.score(loop(node(K.BREAK))) == 2
        assert self.score(node(K.BREAK)) == 0

    def test_lambda_adds_a_level(self):
        assert self.score(lam(if_())) == 2

    def test_case_label_adds_no_level(self):
        assert self.score(node(K.SWITCH, node(K.CASE, if_()))) == 1 + 2

    def test_try_body_adds_no_level(self):
        assert self.score(node(K.TRY, if_())) == 1

    def test_catch_opens_a_level(self):
        assert self.score(node(K.TRY, statement(), node(K.CATCH))) == 1
        assert self.score(node(K.TRY, statement(), node(K.CATCH, if_()))) == 1 + 2

    def test_nested_ternary(self):
        inner = node(K.TERNARY, ident("c"), ident("d"), ident("e"))
        assert self.score(node(K.TERNARY, ident("a"), ident("b"), inner)) == 1 + 2

    def test_parsed_try_except(self, parse):
        code = "def f():\n    try:\n        x()\n    except E:\n        pass\n"
        result = run(CognitiveComplexityAnalyzer, parse(code), threshold=0)
        assert result.issues[0].metadata["complexity"] == 1

    def test_parsed_if_in_except(self, parse):
        code = (
            "def f():\n"
            "    try:\n"
            "        x()\n"
            "    except E:\n"
            "        if y:\n"
            "            pass\n"
        )
        result = run(CognitiveComplexityAnalyzer, parse(code), threshold=0)
        assert result.issues[0].metadata["complexity"] == 3

    def test_reports_qualified_name(self):
        tree = module(klass("Parser", method("parse", *[nested_ifs(4)])))
        result = run(CognitiveComplexityAnalyzer, source(tree), threshold=5)
        issue = result.issues[0]
        assert issue.metadata["method"] == "Parser::parse"
        assert issue.metadata["class"] == "Parser"
        assert issue.metadata["complexity"] == 10

    def test_no_increment_outside_callable(self):
        from codeshape.engine import ScopeContext

        assert increment(if_(), ScopeContext()) == 0


class TestNestingDepth:
    """Depth per structure, deduplicated per line."""

    def test_within_threshold_passes(self):
        tree = module(function("f", nested_ifs(4)))
        assert run(NestingDepthAnalyzer, source(tree)).passed

    def test_reports_structures_beyond_threshold(self):
        tree = module(function("f", nested_ifs(6)))
        result = run(NestingDepthAnalyzer, source(tree))
        assert [i.metadata["depth"] for i in result.issues] == [5, 6]
        assert result.issues[0].metadata["context"] == "f"

    def test_deduplicates_by_line(self):
        deep = if_(if_(if_(if_(if_(loop(line=6), line=6), line=5), line=4), line=3), line=2)
        tree = module(function("f", deep))
        result = run(NestingDepthAnalyzer, source(tree))
        lines = [i.line for i in result.issues]
        assert lines == sorted(set(lines))
        assert {i.line: i.metadata["depth"] for i in result.issues}[6] == 6

    def test_invalid_threshold_warns_once(self, caplog):
        tree = module(function("f", nested_ifs(6)), function("g", nested_ifs(6, 10)))
        with caplog.at_level(logging.WARNING, logger="codeshape"):
            result = run(NestingDepthAnalyzer, source(tree), threshold="deep")
        assert [i.metadata["depth"] for i in result.issues] == [5, 6, 5, 6]
        assert caplog.text.count("Ignoring threshold threshold='deep'") == 1

    def test_severity_by_excess(self):
        tree = module(function("f", nested_ifs(7)))
        result = run(NestingDepthAnalyzer, source(tree))
        by_depth = {i.metadata["depth"]: i.severity for i in result.issues}
        assert by_depth == {5: Severity.LOW, 6: Severity.MEDIUM, 7: Severity.HIGH}

    def test_each_callable_starts_from_zero(self):
        tree = module(function("outer", if_(if_(if_(lam(nested_ifs(4, 10), line=5), line=4), line=3), line=2)))
        assert run(NestingDepthAnalyzer, source(tree)).passed


class TestComplexConditional:
    """Operator counting in conditions and nested ternaries."""

    def negation(self):
        return node(K.UNARY_OP, ident(), operator="!")

    def test_at_threshold_passes(self):
        condition = and_(or_(ident(), ident()), and_(ident(), ident()))
        tree = module(function("f", if_(condition=condition)))
        assert run(ComplexConditionalAnalyzer, source(tree)).passed

    def test_negation_counts(self):
        condition = and_(or_(ident(), self.negation()), and_(ident(), ident()))
        tree = module(function("f", if_(condition=condition, line=3)))
        result = run(ComplexConditionalAnalyzer, source(tree))
        issue = result.issues[0]
        assert issue.metadata["operators"] == 4
        assert issue.metadata["type"] == "if_condition"
        assert issue.severity is Severity.LOW
        assert issue.line == 3

    def test_python_not_keyword_counts(self):
        negation = node(K.UNARY_OP, ident(), keywords=("not",))
        condition = and_(or_(ident(), negation), and_(ident(), ident()))
        tree = module(function("f", node(K.WHILE, condition.with_role("condition"))))
        result = run(ComplexConditionalAnalyzer, source(tree))
        assert result.issues[0].metadata["type"] == "while_condition"

    def test_nested_ternary_always_reported(self):
        inner = node(K.TERNARY, ident().with_role("condition"), role="alternative")
        outer = node(K.TERNARY, ident().with_role("condition"), inner)
        tree = module(function("f", outer))
        result = run(ComplexConditionalAnalyzer, source(tree))
        assert len(result.issues) == 1
        assert result.issues[0].metadata["type"] == "nested_ternary"
        assert result.issues[0].metadata["operators"] == 1

    def test_operators_in_nested_callable_not_counted(self):
        callback = lam(and_(ident(), and_(ident(), and_(ident(), ident()))))
        condition = and_(ident(), node(K.CALL, callback))
        tree = module(function("f", if_(condition=condition)))
        assert run(ComplexConditionalAnalyzer, source(tree)).passed
