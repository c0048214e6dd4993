"""Identifier case styles, conversions and table-name pluralization.

The checks accept acronym runs (``HTTPClient``, ``parseURL``) and single
letter names. Conversions are deterministic so every naming issue can
carry one concrete suggestion.
"""

from __future__ import annotations

import re
from functools import lru_cache

import inflect

PASCAL = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
CAMEL = re.compile(r"^[a-z][a-zA-Z0-9]*$")
SNAKE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")
SCREAMING = re.compile(r"^[A-Z][A-Z0-9_]*$")

_LOWER_TO_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_END = re.compile(r"([A-Z]+)([A-Z][a-z])")


def is_pascal(name: str) -> bool:
    return bool(PASCAL.match(name))


def is_camel(name: str) -> bool:
    return bool(CAMEL.match(name))


def is_snake(name: str) -> bool:
    return bool(SNAKE.match(name))


def is_screaming(name: str) -> bool:
    return bool(SCREAMING.match(name))


def matches_style(name: str, style: str) -> bool:
    """Check ``name`` against "camel", "snake", "pascal" or "screaming"."""
    return bool(_STYLES[style][0](name))


def convert(name: str, style: str) -> str:
    return str(_STYLES[style][1](name))


def to_pascal(name: str) -> str:
    """
    >>> to_pascal("user_service")
    'UserService'
    """
    words = name.replace("_", " ").replace("-", " ").split()
    return "".join(word[:1].upper() + word[1:] for word in words)


def to_camel(name: str) -> str:
    pascal = to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


def to_screaming(name: str) -> str:
    """
    >>> to_screaming("apiKey")
    'API_KEY'
    >>> to_screaming("XMLParser")
    'XML_PARSER'
    """
    name = _LOWER_TO_UPPER.sub(r"\1_\2", name)
    name = _ACRONYM_END.sub(r"\1_\2", name)
    name = name.replace("-", "_").replace(" ", "_")
    return re.sub(r"_+", "_", name).upper()


def to_snake(name: str) -> str:
    return to_screaming(name).lower()


_STYLES = {
    "pascal": (is_pascal, to_pascal),
    "camel": (is_camel, to_camel),
    "snake": (is_snake, to_snake),
    "screaming": (is_screaming, to_screaming),
}

STYLE_LABELS = {
    "pascal": "PascalCase",
    "camel": "camelCase",
    "snake": "snake_case",
    "screaming": "SCREAMING_SNAKE_CASE",
}


# ── Pluralization ──────────────────────────────────────────────────


@lru_cache(maxsize=1)
def _engine() -> inflect.engine:
    return inflect.engine()


def is_plural(table: str) -> bool:
    """Whether the last word of a snake_case table name is plural.

    Uncountable words (``sheep``, ``equipment``) count as plural.
    """
    word = table.rsplit("_", 1)[-1]
    if not word:
        return False
    engine = _engine()
    if engine.singular_noun(word) is not False:
        return True
    return bool(engine.plural_noun(word) == word)


def pluralize(table: str) -> str:
    """
    >>> pluralize("user_profile")
    'user_profiles'
    """
    head, sep, word = table.rpartition("_")
    return f"{head}{sep}{_engine().plural_noun(word)}"
