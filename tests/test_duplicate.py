"""Tests for the duplicate-code detector."""

import textwrap

from builders import call, function, ident, klass, method, module, node, number, run, source

from codeshape.models import Severity
from codeshape.rules import DuplicateCodeAnalyzer
from codeshape.rules.duplicate import duplicate_severity, edit_distance, normalize, similarity
from codeshape.scanning.syntax import NodeKind as K


def body_of(names, count=6):
    """``count`` assignment statements using ``names`` for the identifiers."""
    first, second = names
    return [
        node(K.ASSIGNMENT, ident(f"{first}{i}"), call(ident(second), number(i)), line=i + 2, operator="=")
        for i in range(count)
    ]


class TestSimilarity:
    """Token-level similarity scoring."""

    def test_edit_distance(self):
        assert edit_distance(("a", "b", "c"), ("a", "c")) == 1
        assert edit_distance((), ("a",)) == 1
        assert edit_distance(("a", "b"), ("a", "b")) == 0

    def test_identical_is_100(self):
        tokens = ("if", "$var", "return")
        assert similarity(tokens, tokens) == 100.0

    def test_empty_is_zero(self):
        assert similarity((), ()) == 0.0

    def test_long_forms_use_matching_ratio(self):
        a = tuple("x" for _ in range(300))
        b = a[:-30] + tuple("y" for _ in range(30))
        assert similarity(a, b, max_edit_tokens=255) == 90.0

    def test_renaming_does_not_change_shape(self):
        assert normalize(body_of(("total", "compute"))) == normalize(body_of(("sum", "calc")))

    def test_comments_ignored(self):
        with_comment = [node(K.COMMENT, text="# note")] + body_of(("a", "b"))
        assert normalize(with_comment) == normalize(body_of(("a", "b")))


class TestDuplicateDetector:
    """Cross-file pairwise comparison."""

    def test_renamed_copy_across_files(self):
        first = source(module(function("load_users", *body_of(("user", "fetch")), line=1)), path="a.py")
        second = source(module(function("load_orders", *body_of(("order", "get")), line=5)), path="b.py")
        result = run(DuplicateCodeAnalyzer, first, second)

        assert len(result.issues) == 1
        meta = result.issues[0].metadata
        assert meta["similarity"] >= 85
        assert (meta["method1"], meta["method2"]) == ("load_users", "load_orders")
        assert (meta["file1"], meta["file2"]) == ("a.py", "b.py")
        assert (meta["line1"], meta["line2"]) == (1, 5)
        assert meta["lineCount"] == 6
        assert result.issues[0].severity is Severity.MEDIUM

    def test_methods_named_with_class(self):
        tree = module(
            klass("Users", method("load", *body_of(("a", "b")))),
            klass("Orders", method("load", *body_of(("c", "d")))),
        )
        meta = run(DuplicateCodeAnalyzer, source(tree)).issues[0].metadata
        assert (meta["method1"], meta["method2"]) == ("Users::load", "Orders::load")

    def test_too_few_statements_not_flagged(self):
        first = source(module(function("f", *body_of(("a", "b"), count=5))), path="a.py")
        second = source(module(function("g", *body_of(("c", "d"), count=5))), path="b.py")
        assert run(DuplicateCodeAnalyzer, first, second).passed

    def test_different_shapes_not_flagged(self):
        loops = [node(K.FOR, node(K.BREAK, role="body"), line=i) for i in range(6)]
        first = source(module(function("f", *body_of(("a", "b")))), path="a.py")
        second = source(module(function("g", *loops)), path="b.py")
        assert run(DuplicateCodeAnalyzer, first, second).passed

    def test_magic_methods_not_collected(self):
        tree = module(
            klass("A", method("__init__", *body_of(("a", "b")))),
            klass("B", method("__init__", *body_of(("c", "d")))),
        )
        assert run(DuplicateCodeAnalyzer, source(tree)).passed

    def test_severity_table(self):
        assert duplicate_severity(96.0, 20) is Severity.HIGH
        assert duplicate_severity(96.0, 10) is Severity.MEDIUM
        assert duplicate_severity(86.0, 30) is Severity.MEDIUM
        assert duplicate_severity(86.0, 10) is Severity.LOW

    def test_results_are_idempotent(self):
        first = source(module(function("f", *body_of(("a", "b")))), path="a.py")
        second = source(module(function("g", *body_of(("c", "d")))), path="b.py")
        assert run(DuplicateCodeAnalyzer, first, second) == run(DuplicateCodeAnalyzer, first, second)


class TestDuplicateOnParsedCode:
    """End to end on real grammars."""

    ITERATIVE = textwrap.dedent(
        """\
        def total_price(items, tax):
            total = 0
            for item in items:
                total += item.price * item.quantity
            discount = compute_discount(total)
            total -= discount
            taxed = total * tax
            log_total(taxed)
            return taxed
        """
    )

    RENAMED = textwrap.dedent(
        """\
        def order_amount(lines, rate):
            amount = 0
            for line in lines:
                amount += line.price * line.quantity
            reduction = compute_discount(amount)
            amount -= reduction
            charged = amount * rate
            log_total(charged)
            return charged
        """
    )

    RECURSIVE = textwrap.dedent(
        """\
        def total_recursive(items, tax):
            if not items:
                return 0
            head = items[0]
            rest = total_recursive(items[1:], tax)
            subtotal = head.price * head.quantity
            result = (subtotal + rest) * tax
            return result
        """
    )

    def test_renamed_copy_flagged(self, parse):
        first = parse(self.ITERATIVE, path="a.py")
        second = parse(self.RENAMED, path="b.py")
        result = run(DuplicateCodeAnalyzer, first, second)
        assert len(result.issues) == 1
        assert result.issues[0].metadata["similarity"] >= 85

    def test_loop_versus_recursion_not_flagged(self, parse):
        first = parse(self.ITERATIVE, path="a.py")
        second = parse(self.RECURSIVE, path="b.py")
        assert run(DuplicateCodeAnalyzer, first, second).passed
