"""Tests for class-length, method-length and the parameter list rules."""

import pytest
from builders import function, klass, method, module, node, param, run, source

from codeshape.models import Severity
from codeshape.rules import (
    ClassLengthAnalyzer,
    LongParameterListAnalyzer,
    MethodLengthAnalyzer,
    ParameterCountAnalyzer,
)
from codeshape.rules.class_length import class_severity
from codeshape.scanning.syntax import NodeKind as K


def class_with_methods(count, name="Service"):
    methods = [method(f"m{i}", line=i + 2) for i in range(count)]
    return module(klass(name, *methods, end=count + 2))


class TestClassLength:
    """Line, method and property limits."""

    def test_twenty_methods_pass(self):
        assert run(ClassLengthAnalyzer, source(class_with_methods(20))).passed

    def test_twenty_one_methods_low(self):
        result = run(ClassLengthAnalyzer, source(class_with_methods(21)))
        issue = result.issues[0]
        assert issue.severity is Severity.LOW
        assert len(issue.metadata["violations"]) == 1
        assert issue.metadata["methods"] == 21
        assert issue.metadata["class"] == "Service"

    def test_forty_methods_high(self):
        result = run(ClassLengthAnalyzer, source(class_with_methods(40)))
        assert result.issues[0].severity is Severity.HIGH

    def test_nested_class_methods_not_counted(self):
        inner = klass("Inner", *[method(f"m{i}") for i in range(25)])
        tree = module(klass("Outer", inner, method("run")))
        result = run(ClassLengthAnalyzer, source(tree))
        assert [i.metadata["class"] for i in result.issues] == ["Inner"]

    def test_all_three_limits(self):
        members = [method(f"m{i}") for i in range(21)]
        members += [node(K.PROPERTY, name=f"p{i}") for i in range(16)]
        tree = module(klass("Huge", *members, line=1, end=400))
        issue = run(ClassLengthAnalyzer, source(tree)).issues[0]
        assert len(issue.metadata["violations"]) == 3
        assert issue.severity is Severity.HIGH

    @pytest.mark.parametrize(
        "violations,line_excess,method_excess,expected",
        [
            (1, 0, 1, Severity.LOW),
            (1, 151, 0, Severity.MEDIUM),
            (1, 0, 11, Severity.MEDIUM),
            (2, 0, 0, Severity.MEDIUM),
            (1, 301, 0, Severity.HIGH),
        ],
    )
    def test_class_severity(self, violations, line_excess, method_excess, expected):
        assert class_severity(violations, line_excess, method_excess) is expected


class TestMethodLength:
    """Physical line spans of callables."""

    def test_short_method_passes(self):
        tree = module(function("short", line=1, end=50))
        assert run(MethodLengthAnalyzer, source(tree)).passed

    def test_long_method_low(self):
        tree = module(function("process", line=1, end=60))
        issue = run(MethodLengthAnalyzer, source(tree)).issues[0]
        assert issue.metadata["lines"] == 60
        assert issue.severity is Severity.LOW

    def test_twice_threshold_medium(self):
        tree = module(function("process", line=1, end=100))
        assert run(MethodLengthAnalyzer, source(tree)).issues[0].severity is Severity.MEDIUM

    def test_accessors_excluded(self):
        tree = module(klass("Bean", method("getValue", line=1, end=80), method("isReady", line=81, end=200)))
        assert run(MethodLengthAnalyzer, source(tree)).passed

    def test_custom_threshold(self):
        tree = module(function("process", line=1, end=12))
        assert not run(MethodLengthAnalyzer, source(tree), threshold=10).passed


class TestParameterCount:
    """Parameter counting with a separate constructor limit."""

    def test_four_parameters_pass(self):
        tree = module(function("f", params=[param(n) for n in "abcd"]))
        assert run(ParameterCountAnalyzer, source(tree)).passed

    def test_receiver_not_counted(self):
        params = [param("self", receiver=True)] + [param(n) for n in "abcd"]
        tree = module(klass("A", method("f", params=params)))
        assert run(ParameterCountAnalyzer, source(tree)).passed

    def test_excess_severity(self):
        tree = module(function("f", params=[param(n) for n in "abcdefghi"]))
        issue = run(ParameterCountAnalyzer, source(tree)).issues[0]
        assert issue.metadata["count"] == 9
        assert issue.metadata["method"] == "global::f"
        assert issue.severity is Severity.HIGH

    def test_constructor_threshold(self):
        params = [param(n) for n in "abcdef"]
        tree = module(klass("A", method("__init__", params=params, constructor=True)))
        assert run(ParameterCountAnalyzer, source(tree)).passed

        params.append(param("g"))
        tree = module(klass("A", method("__init__", params=params, constructor=True)))
        issue = run(ParameterCountAnalyzer, source(tree)).issues[0]
        assert issue.metadata["isConstructor"] is True
        assert issue.metadata["method"] == "A::__init__"


class TestLongParameterList:
    """Parameters sharing one declared type."""

    def test_three_same_type_pass(self):
        tree = module(function("f", params=[param(n, "int") for n in "abc"]))
        assert run(LongParameterListAnalyzer, source(tree)).passed

    def test_four_same_type_reported(self):
        params = [param(n, "str") for n in "abcd"] + [param("e", "int")]
        tree = module(function("f", params=params))
        issue = run(LongParameterListAnalyzer, source(tree)).issues[0]
        assert issue.metadata["type"] == "str"
        assert issue.metadata["parameters"] == ("a", "b", "c", "d")
        assert issue.severity is Severity.LOW

    def test_untyped_parameters_share_mixed(self):
        tree = module(function("f", params=[param(n) for n in "abcd"]))
        assert run(LongParameterListAnalyzer, source(tree)).issues[0].metadata["type"] == "mixed"

    def test_magic_methods_skipped(self):
        tree = module(klass("A", method("__call__", params=[param(n) for n in "abcd"])))
        assert run(LongParameterListAnalyzer, source(tree)).passed
