"""
Text cleanup for display and comparison.

Invisible characters are deleted before splitting on whitespace, so a
zero-width space inside a word never turns into a word boundary.
"""

from __future__ import annotations

from .rules import INVISIBLE_TRANSLATION, WHITESPACE_PATTERN


def _fragments(text: str) -> list[str]:
    cleaned = text.translate(INVISIBLE_TRANSLATION)
    return [part for part in WHITESPACE_PATTERN.split(cleaned) if part]


def remove_duplicate_spaces(text: str) -> str:
    """
    Strip invisible characters and collapse every whitespace run to one space.

    Leading and trailing whitespace disappears as well.
    """
    return " ".join(_fragments(text))


def remove_all_spaces(text: str) -> str:
    """Strip invisible characters and every whitespace character."""
    return "".join(_fragments(text))
