"""Configuration exceptions: config files, settings and input paths."""

from pathlib import Path
from typing import Any

from .base import CodeshapeError


class ConfigurationError(CodeshapeError):
    """Base class for configuration-related errors."""

    code = "CS100"


class InvalidPathError(ConfigurationError):
    """A path given for analysis does not exist or cannot be read."""

    code = "CS101"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """A setting has a value of the wrong type or out of range."""

    code = "CS102"

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ConfigFileError(ConfigurationError):
    """A config file is missing, unreadable, not TOML or has unknown keys."""

    code = "CS103"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Bad config file: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason
