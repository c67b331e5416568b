"""Literal classification for rule entries.

An entry's text is classified into a closed set of literal kinds, and a
column's typeRef into a closed set of declared types. Consistency is a
lookup in ``COMPATIBLE_KINDS``; typeRefs outside the modeled set are not
judged.
"""

from __future__ import annotations

import re
from enum import Enum


class LiteralKind(str, Enum):
    """Apparent kind of a raw entry literal."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"
    UNKNOWN = "unknown"


class DeclaredType(str, Enum):
    """Column types the classifier has an opinion on."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"


NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"\d{2}:\d{2}:\d{2}(?:Z|[+-]\d{2}:\d{2})?")
DATE_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:Z|[+-]\d{2}:\d{2})?")
DATE_CALL = re.compile(r'date\s*\(\s*".*"\s*\)')
TIME_CALL = re.compile(r'time\s*\(\s*".*"\s*\)')
DATE_TIME_CALL = re.compile(r'(?:dateTime|date and time)\s*\(\s*".*"\s*\)')

TYPE_ALIASES: dict[str, DeclaredType] = {
    "number": DeclaredType.NUMBER,
    "integer": DeclaredType.NUMBER,
    "long": DeclaredType.NUMBER,
    "double": DeclaredType.NUMBER,
    "boolean": DeclaredType.BOOLEAN,
    "string": DeclaredType.STRING,
    "date": DeclaredType.DATE,
    "time": DeclaredType.TIME,
    "datetime": DeclaredType.DATE_TIME,
    "date and time": DeclaredType.DATE_TIME,
}

COMPATIBLE_KINDS: dict[DeclaredType, frozenset[LiteralKind]] = {
    DeclaredType.NUMBER: frozenset({LiteralKind.NUMBER}),
    DeclaredType.BOOLEAN: frozenset({LiteralKind.BOOLEAN}),
    # Anything that is not a bare number or boolean reads as a string
    DeclaredType.STRING: frozenset(LiteralKind) - {LiteralKind.NUMBER, LiteralKind.BOOLEAN},
    DeclaredType.DATE: frozenset({LiteralKind.DATE}),
    DeclaredType.TIME: frozenset({LiteralKind.TIME}),
    DeclaredType.DATE_TIME: frozenset({LiteralKind.DATE_TIME}),
}


def is_quoted(text: str) -> bool:
    return len(text) >= 2 and text.startswith('"') and text.endswith('"')


def parse_number(text: str) -> float | None:
    """Parse a plain decimal literal; ``None`` for anything else."""
    text = text.strip()
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    return float(text)


def classify_literal(text: str) -> LiteralKind:
    """Infer the literal kind of a raw entry."""
    text = text.strip()
    if is_quoted(text):
        return LiteralKind.STRING
    if text.lower() in ("true", "false"):
        return LiteralKind.BOOLEAN
    if NUMBER_PATTERN.fullmatch(text):
        return LiteralKind.NUMBER
    if DATE_PATTERN.fullmatch(text) or DATE_CALL.fullmatch(text):
        return LiteralKind.DATE
    if TIME_PATTERN.fullmatch(text) or TIME_CALL.fullmatch(text):
        return LiteralKind.TIME
    if DATE_TIME_PATTERN.fullmatch(text) or DATE_TIME_CALL.fullmatch(text):
        return LiteralKind.DATE_TIME
    return LiteralKind.UNKNOWN


def normalize_type_ref(type_ref: str | None) -> DeclaredType | None:
    """Map a typeRef onto a modeled type, or ``None`` when it is not modeled."""
    if not type_ref:
        return None
    name = " ".join(type_ref.split()).lower()
    if name.startswith("feel:"):
        name = name[len("feel:"):]
    return TYPE_ALIASES.get(name)


def is_literal_type_consistent(text: str, type_ref: str | None) -> bool:
    """Whether ``text`` looks like a literal of the declared ``type_ref``.

    Unmodeled or missing typeRefs always pass.
    """
    declared = normalize_type_ref(type_ref)
    if declared is None:
        return True
    return classify_literal(text) in COMPATIBLE_KINDS[declared]
