"""Output formatters for codeshape."""

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter


def get_formatter(name: str, **options) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json"
        **options: Passed to the rich formatter (console, verbose)

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    if name == "rich":
        return RichFormatter(**options)
    if name == "json":
        return JsonFormatter()
    raise ValueError(f"Unknown formatter: {name!r}. Choose from: json, rich")


__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "RichFormatter",
    "get_formatter",
]
