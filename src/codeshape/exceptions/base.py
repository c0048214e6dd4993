"""Base exception for codeshape.

Every error carries a stable code so that logs and JSON output can be
matched without parsing messages:

    CS1xx - configuration files, settings and input paths
    CS2xx - analysis (languages, analyzer registry)
"""

from typing import Any, Dict, Optional


class CodeshapeError(Exception):
    """Base exception for all codeshape errors."""

    code = "CS000"

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": dict(self.details)}
