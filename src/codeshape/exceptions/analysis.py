"""Analysis exceptions: languages and the analyzer registry."""

from typing import List

from .base import CodeshapeError


class AnalysisError(CodeshapeError):
    """Base class for analysis-related errors."""

    code = "CS200"


class UnsupportedLanguageError(AnalysisError):
    """No language spec is registered under this name."""

    code = "CS201"

    def __init__(self, language: str, supported_languages: List[str]):
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language, "supported": ", ".join(supported_languages)},
        )
        self.language = language
        self.supported_languages = supported_languages


class AnalyzerNotFoundError(AnalysisError):
    """Configuration names an analyzer id that is not registered."""

    code = "CS202"

    def __init__(self, analyzer_id: str, known: List[str]):
        super().__init__(
            f"Unknown analyzer: {analyzer_id}",
            details={"analyzer": analyzer_id, "known": ", ".join(known)},
        )
        self.analyzer_id = analyzer_id
        self.known = known
