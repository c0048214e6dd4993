"""Exception hierarchy for codeshape."""

from .analysis import AnalysisError, AnalyzerNotFoundError, UnsupportedLanguageError
from .base import CodeshapeError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "CodeshapeError",
    "AnalysisError",
    "AnalyzerNotFoundError",
    "UnsupportedLanguageError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidPathError",
    "InvalidConfigError",
]
