"""Analyzer framework: base classes, aggregation, suppression and the manager."""

from .aggregation import build_result, classify, severity_by_excess, severity_by_ratio
from .base import Analyzer, RuleVisitor, TreeAnalyzer
from .suppression import apply_suppressions
from .manager import AnalyzerManager, ManagerRun, get_analyzer_class, get_analyzer_classes

__all__ = [
    "Analyzer",
    "AnalyzerManager",
    "ManagerRun",
    "RuleVisitor",
    "TreeAnalyzer",
    "apply_suppressions",
    "build_result",
    "classify",
    "get_analyzer_class",
    "get_analyzer_classes",
    "severity_by_excess",
    "severity_by_ratio",
]
