"""
codeshape - Structural code-quality checks over syntax trees

Parses Python, JavaScript, TypeScript and Java with tree-sitter and runs
rule analyzers over the normalized trees: complexity, nesting, size,
naming, magic numbers, commented-out code and duplicated methods.
"""

__version__ = "0.1.0"

from .api import Report, analyze
from .config import AnalysisConfig, RuleSettings, load_config
from .models import AnalyzerResult, Issue, Location, Severity, Status

__all__ = [
    "analyze",  # Main entry point
    "Report",
    "AnalysisConfig",
    "RuleSettings",
    "load_config",
    "AnalyzerResult",
    "Issue",
    "Location",
    "Severity",
    "Status",
]
