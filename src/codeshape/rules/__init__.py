"""Rule implementations.

Structural metrics:
    cyclomatic-complexity, cognitive-complexity, nesting-depth,
    class-length, method-length, parameter-count, long-parameter-list,
    complex-conditional

Patterns:
    magic-number, naming-convention, inconsistent-naming,
    commented-code, todo-comment, missing-docs

Cross-file:
    duplicate-code
"""

from .class_length import ClassLengthAnalyzer
from .cognitive import CognitiveComplexityAnalyzer
from .commented_code import CommentedCodeAnalyzer
from .complex_conditional import ComplexConditionalAnalyzer
from .cyclomatic import CyclomaticComplexityAnalyzer
from .duplicate import DuplicateCodeAnalyzer
from .inconsistent_naming import InconsistentNamingAnalyzer
from .magic_number import MagicNumberAnalyzer
from .method_length import MethodLengthAnalyzer
from .missing_docs import MissingDocsAnalyzer
from .naming import NamingConventionAnalyzer
from .nesting import NestingDepthAnalyzer
from .parameters import LongParameterListAnalyzer, ParameterCountAnalyzer
from .todo import TodoCommentAnalyzer

# Registry order is report order.
ALL_ANALYZERS = (
    CyclomaticComplexityAnalyzer,
    CognitiveComplexityAnalyzer,
    NestingDepthAnalyzer,
    ComplexConditionalAnalyzer,
    ClassLengthAnalyzer,
    MethodLengthAnalyzer,
    ParameterCountAnalyzer,
    LongParameterListAnalyzer,
    MagicNumberAnalyzer,
    NamingConventionAnalyzer,
    InconsistentNamingAnalyzer,
    CommentedCodeAnalyzer,
    DuplicateCodeAnalyzer,
    TodoCommentAnalyzer,
    MissingDocsAnalyzer,
)

__all__ = [cls.__name__ for cls in ALL_ANALYZERS] + ["ALL_ANALYZERS"]
