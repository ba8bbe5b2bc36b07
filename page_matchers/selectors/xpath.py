from __future__ import annotations

"""XPath string helpers
-----------------------
Small pieces shared by the selector builders: literal quoting, whitespace
normalization and the common text predicates.
"""

import re

_WS = re.compile(r"\s+")

# string value of the context node with collapsed whitespace
NORMALIZED_TEXT = "normalize-space(string(.))"


def normalize(text: str) -> str:
    """Collapse whitespace the same way XPath normalize-space() does."""
    return _WS.sub(" ", text).strip()


def literal(value: str) -> str:
    """
    Quote `value` as an XPath 1.0 string literal.

    XPath has no escape sequences, so a value holding both quote kinds is
    split and rebuilt with concat().
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    pieces = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f"'{part}'")
        if i < len(parts) - 1:
            pieces.append('"\'"')
    return "concat(" + ", ".join(pieces) + ")"


def text_contains(value: str, expr: str = NORMALIZED_TEXT) -> str:
    return f"contains({expr}, {literal(normalize(value))})"


def text_equals(value: str, expr: str = NORMALIZED_TEXT) -> str:
    return f"{expr}={literal(normalize(value))}"


def attr_equals(name: str, value: str) -> str:
    return f"@{name}={literal(value)}"


def attr_contains(name: str, value: str) -> str:
    return f"contains(@{name}, {literal(value)})"


def any_of(*conditions: str) -> str:
    return " or ".join(conditions)


def union(*paths: str) -> str:
    return " | ".join(paths)
