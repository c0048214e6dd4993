"""Configuration loading and management for codeshape.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.codeshape.toml)
    3. Project config (./codeshape.toml)
    4. Explicit config file
    5. Environment variables (CODESHAPE_* prefix)
    6. Keyword overrides (typically CLI flags)

A config file looks like:

    exclude_patterns = ["migrations/*"]
    dont_report = ["todo-comment"]

    [rules.cyclomatic-complexity]
    threshold = 12

    [rules.magic-number]
    exclude = ["tests/*"]
    thresholds = { allowed = [0, 1, 2, 60] }

Example:
    >>> config = load_config(workers=4)
    >>> config.rule("class-length").threshold("max_methods", 20)
    20
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, get_type_hints

from .exceptions import ConfigFileError, InvalidConfigError
from .models import Severity

logger = logging.getLogger(__name__)

# Reserved rule-table keys; anything else in a [rules.<id>] table is a threshold.
_RULE_KEYS = ("enabled", "exclude", "thresholds")


@dataclass(frozen=True)
class RuleSettings:
    """Per-analyzer settings.

    Attributes:
        enabled: Run this analyzer at all
        thresholds: Named numeric (or list) limits overriding analyzer defaults
        exclude: Glob patterns of files this analyzer skips
    """

    enabled: bool = True
    thresholds: Mapping[str, Any] = field(default_factory=dict)
    exclude: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "thresholds", MappingProxyType(dict(self.thresholds)))
        object.__setattr__(self, "exclude", tuple(self.exclude))

    def threshold(self, name: str, default: Any) -> Any:
        """Return a validated threshold, or ``default`` if unset or invalid.

        Numeric defaults require a finite non-negative number of the same
        kind; list defaults require a list of numbers or strings.
        """
        if name not in self.thresholds:
            return default
        value = self.thresholds[name]

        if isinstance(default, (list, tuple)):
            if isinstance(value, (list, tuple)) and all(
                isinstance(v, (int, float, str)) and not isinstance(v, bool) for v in value
            ):
                return type(default)(value)
            logger.warning(f"Ignoring threshold {name}={value!r}: expected a list")
            return default

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning(f"Ignoring threshold {name}={value!r}: not a number, using {default}")
            return default
        if not math.isfinite(value) or value < 0:
            logger.warning(f"Ignoring threshold {name}={value!r}: must be >= 0, using {default}")
            return default
        if isinstance(default, int) and not isinstance(value, int):
            if not float(value).is_integer():
                logger.warning(
                    f"Ignoring threshold {name}={value!r}: must be a whole number, using {default}"
                )
                return default
            value = int(value)
        return value

    @classmethod
    def from_dict(cls, rule_id: str, data: Mapping[str, Any]) -> "RuleSettings":
        if not isinstance(data, Mapping):
            raise InvalidConfigError(f"rules.{rule_id}", data, "expected a table")
        thresholds = dict(data.get("thresholds", {}))
        for key, value in data.items():
            if key not in _RULE_KEYS:
                thresholds[key] = value
        exclude = data.get("exclude", ())
        if isinstance(exclude, str):
            exclude = (exclude,)
        return cls(
            enabled=bool(data.get("enabled", True)),
            thresholds=thresholds,
            exclude=tuple(exclude),
        )


DEFAULT_RULE_SETTINGS = RuleSettings()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Analyzer selection:
            disabled_analyzers: Analyzer ids that never run
            dont_report: Analyzer ids that run but never fail the run
            fail_on: Lowest severity that makes a blocking result fail the run
            rules: Per-analyzer settings keyed by analyzer id

        File filtering:
            exclude_patterns: Glob patterns excluded for every analyzer
            languages: Restrict analysis to these languages (empty = all)
            max_file_size_mb: Files larger than this are skipped
            allow_hidden_files: Include files and directories starting with "."

        Performance tuning:
            workers: Number of analyzers run in parallel (None = auto-detect)
    """

    disabled_analyzers: list[str] = field(default_factory=list)
    dont_report: list[str] = field(default_factory=list)
    fail_on: str = "low"
    rules: dict[str, RuleSettings] = field(default_factory=dict)

    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "node_modules/*",
            "vendor/*",
            "dist/*",
            "build/*",
            ".git/*",
            "venv/*",
            ".venv/*",
            "__pycache__/*",
            ".tox/*",
            ".mypy_cache/*",
            "*.egg-info/*",
            "*.min.js",
            "*.bundle.js",
        ]
    )
    languages: list[str] = field(default_factory=list)
    max_file_size_mb: float = 5.0
    allow_hidden_files: bool = False

    workers: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        try:
            Severity.parse(self.fail_on)
        except ValueError as e:
            raise InvalidConfigError("fail_on", self.fail_on, str(e))

    @property
    def fail_severity(self) -> Severity:
        return Severity.parse(self.fail_on)

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)

    def rule(self, analyzer_id: str) -> RuleSettings:
        """Settings for one analyzer (defaults when not configured)."""
        return self.rules.get(analyzer_id, DEFAULT_RULE_SETTINGS)

    def is_enabled(self, analyzer_id: str) -> bool:
        if analyzer_id in self.disabled_analyzers:
            return False
        return self.rule(analyzer_id).enabled

    def is_reported(self, analyzer_id: str) -> bool:
        return analyzer_id not in self.dont_report


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigFileError: If a config file is missing or not valid TOML
        InvalidConfigError: If a setting is unknown or has a bad value
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".codeshape.toml"
    if global_config.exists():
        _merge(merged, _load_toml_file(global_config), global_config)

    project_config = Path.cwd() / "codeshape.toml"
    if project_config.exists():
        _merge(merged, _load_toml_file(project_config), project_config)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        _merge(merged, _load_toml_file(config_file), config_file)

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    rules = merged.pop("rules", {})
    if not isinstance(rules, Mapping):
        raise InvalidConfigError("rules", rules, "expected a table of rule settings")
    merged["rules"] = {
        rule_id: data if isinstance(data, RuleSettings) else RuleSettings.from_dict(rule_id, data)
        for rule_id, data in rules.items()
    }

    unknown = sorted(set(merged) - set(AnalysisConfig.__dataclass_fields__))
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown setting")
    return AnalysisConfig(**merged)


def _merge(merged: dict[str, Any], data: dict[str, Any], source: Path) -> None:
    """Merge one file's settings; rule tables merge per rule id."""
    logger.debug(f"Loaded configuration from {source}")
    rules = data.pop("rules", None)
    merged.update(data)
    if rules:
        combined = dict(merged.get("rules", {}))
        for rule_id, settings in rules.items():
            current = dict(combined.get(rule_id, {}))
            current.update(settings)
            combined[rule_id] = current
        merged["rules"] = combined


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODESHAPE_* environment variables.

    Supported environment variables:
        CODESHAPE_WORKERS: int
        CODESHAPE_MAX_FILE_SIZE_MB: float
        CODESHAPE_ALLOW_HIDDEN_FILES: bool (true/false/1/0)
        CODESHAPE_FAIL_ON: low/medium/high/critical
        CODESHAPE_DISABLED_ANALYZERS: comma-separated ids
        CODESHAPE_DONT_REPORT: comma-separated ids
        CODESHAPE_EXCLUDE_PATTERNS: comma-separated globs
        CODESHAPE_LANGUAGES: comma-separated names

    Returns:
        Dict of field_name -> parsed_value for any CODESHAPE_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        if field_name == "rules":
            continue
        env_key = f"CODESHAPE_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string into the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    origin = getattr(type_hint, "__origin__", None)
    if origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict.

    A ``pyproject.toml`` contributes only its ``[tool.codeshape]`` table.
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigFileError(path, "TOML support requires Python 3.11+ or the tomli package")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))

    if path.name == "pyproject.toml":
        return dict(data.get("tool", {}).get("codeshape", {}))
    return data
