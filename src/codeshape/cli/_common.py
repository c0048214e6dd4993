"""Shared CLI helpers."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    fail_on: Optional[str] = None,
    workers: Optional[int] = None,
    disable: Optional[list[str]] = None,
) -> AnalysisConfig:
    """Build configuration from CLI options.

    ``disable`` adds to the analyzers already disabled by config files.
    """
    overrides = {}
    if fail_on is not None:
        overrides["fail_on"] = fail_on
    if workers is not None:
        overrides["workers"] = workers
    settings = load_config(config_file=config, **overrides)
    if disable:
        merged = list(dict.fromkeys([*settings.disabled_analyzers, *disable]))
        settings = replace(settings, disabled_analyzers=merged)
    return settings
