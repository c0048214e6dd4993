"""Tests for the traversal engine and ScopeContext."""

from builders import function, if_, klass, lam, loop, method, module, node, source

from codeshape.engine import GLOBAL_SCOPE, SKIP_CHILDREN, ScopeContext, Visitor, traverse
from codeshape.scanning.syntax import NodeKind as K


class Recorder(Visitor):
    """Records (event, kind, nesting, scope name) for every hook call."""

    def __init__(self):
        self.events = []

    def enter(self, node, ctx):
        self.events.append(("enter", node.kind, ctx.nesting, ctx.current.name))

    def leave(self, node, ctx):
        self.events.append(("leave", node.kind, ctx.nesting, ctx.current.name))


class TestScopeContext:
    """Frame stack and nesting bookkeeping."""

    def test_starts_at_global_scope(self):
        ctx = ScopeContext("a.py")
        assert ctx.current.name == GLOBAL_SCOPE
        assert ctx.depth == 0
        assert ctx.nesting == 0
        assert ctx.context_name == GLOBAL_SCOPE

    def test_scope_pushes_and_pops_frame(self):
        ctx = ScopeContext()
        fn = function("handle")
        with ctx.scope(fn) as frame:
            assert ctx.current is frame
            assert ctx.depth == 1
            assert ctx.context_name == "handle"
        assert ctx.depth == 0

    def test_nested_restores_outer_level(self):
        ctx = ScopeContext()
        with ctx.scope(function("f")):
            with ctx.nested(if_()):
                with ctx.nested(loop()):
                    assert ctx.nesting == 2
                    assert ctx.in_loop
                assert ctx.nesting == 1
                assert not ctx.in_loop
            assert ctx.nesting == 0

    def test_new_scope_starts_at_zero_nesting(self):
        ctx = ScopeContext()
        with ctx.scope(function("outer")):
            with ctx.nested(if_()):
                with ctx.scope(lam()):
                    assert ctx.nesting == 0
                    assert ctx.context_name == "{closure}"
                assert ctx.nesting == 1

    def test_metrics_shared_across_nested_copies(self):
        ctx = ScopeContext()
        with ctx.scope(function("f")) as frame:
            with ctx.nested(if_()):
                ctx.current.accumulate("points", 2)
            assert frame.value("points") == 2

    def test_callable_skips_lambdas(self):
        ctx = ScopeContext()
        with ctx.scope(klass("Service")):
            with ctx.scope(method("run")):
                with ctx.scope(lam()):
                    assert ctx.callable.name == "run"
                    assert ctx.enclosing_class.name == "Service"


class TestTraversal:
    """Hook order, scope visibility and failure isolation."""

    def test_structure_hooks_see_outer_nesting(self):
        tree = module(function("f", if_(node(K.RETURN))))
        recorder = Recorder()
        traverse(source(tree), [recorder])

        by_kind = {(e[0], e[1]): e for e in recorder.events}
        assert by_kind[("enter", K.IF)][2] == 0
        assert by_kind[("enter", K.RETURN)][2] == 1
        assert by_kind[("leave", K.IF)][2] == 0

    def test_scope_frame_present_in_own_hooks(self):
        tree = module(function("f"))
        recorder = Recorder()
        traverse(source(tree), [recorder])

        assert ("enter", K.FUNCTION, 0, "f") in recorder.events
        assert ("leave", K.FUNCTION, 0, "f") in recorder.events
        assert recorder.events[-1] == ("leave", K.MODULE, 0, GLOBAL_SCOPE)

    def test_leave_is_post_order(self):
        tree = module(function("f", if_()))
        recorder = Recorder()
        traverse(source(tree), [recorder])

        kinds = [(e[0], e[1]) for e in recorder.events]
        assert kinds == [
            ("enter", K.MODULE),
            ("enter", K.FUNCTION),
            ("enter", K.IF),
            ("leave", K.IF),
            ("leave", K.FUNCTION),
            ("leave", K.MODULE),
        ]

    def test_skip_children_only_affects_that_visitor(self):
        class Skipper(Recorder):
            def enter(self, node, ctx):
                super().enter(node, ctx)
                if node.kind is K.FUNCTION:
                    return SKIP_CHILDREN

        tree = module(function("f", if_()))
        skipper, recorder = Skipper(), Recorder()
        traverse(source(tree), [skipper, recorder])

        assert not any(e[1] is K.IF for e in skipper.events)
        assert ("leave", K.FUNCTION, 0, "f") in skipper.events
        assert any(e[1] is K.IF for e in recorder.events)

    def test_failing_visitor_is_dropped(self):
        class Broken(Visitor):
            def enter_if(self, node, ctx):
                raise RuntimeError("boom")

        tree = module(function("f", if_(), if_()))
        broken, recorder = Broken(), Recorder()
        completed = traverse(source(tree), [broken, recorder])

        assert completed == [recorder]
        assert recorder.events[-1][0:2] == ("leave", K.MODULE)

    def test_kind_handlers_dispatch(self):
        class Counter(Visitor):
            def __init__(self):
                self.ifs = 0

            def enter_if(self, node, ctx):
                self.ifs += 1

        tree = module(function("f", if_(if_()), loop(if_())))
        counter = Counter()
        traverse(source(tree), [counter])
        assert counter.ifs == 3

    def test_no_tree_visits_nothing(self):
        recorder = Recorder()
        assert traverse(source(None), [recorder]) == []
        assert recorder.events == []
