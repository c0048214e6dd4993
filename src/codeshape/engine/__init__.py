"""Tree traversal engine and scope model."""

from .scope import ANONYMOUS_CLASS, CLOSURE, GLOBAL_SCOPE, ScopeContext, ScopeFrame, scope_name
from .traversal import SKIP_CHILDREN, VisitAction, Visitor, traverse

__all__ = [
    "ANONYMOUS_CLASS",
    "CLOSURE",
    "GLOBAL_SCOPE",
    "SKIP_CHILDREN",
    "ScopeContext",
    "ScopeFrame",
    "VisitAction",
    "Visitor",
    "scope_name",
    "traverse",
]
