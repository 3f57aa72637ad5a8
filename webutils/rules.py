"""
Shared, read-only tables.

Built once at import time and never mutated afterwards.
"""

import re

ZERO_WIDTH_SPACE = "\u200b"
ZERO_WIDTH_NO_BREAK_SPACE = "\ufeff"  # also the BOM
WORD_JOINER = "\u2060"
ZERO_WIDTH_JOINER = "\u200d"
LEFT_TO_RIGHT_MARK = "\u200e"
RIGHT_TO_LEFT_MARK = "\u200f"
NO_BREAK_SPACE = "\u00a0"

INVISIBLE_CHARACTERS = frozenset({
    ZERO_WIDTH_SPACE,
    ZERO_WIDTH_NO_BREAK_SPACE,
    WORD_JOINER,
    ZERO_WIDTH_JOINER,
    LEFT_TO_RIGHT_MARK,
    RIGHT_TO_LEFT_MARK,
    NO_BREAK_SPACE,
})

# str.translate table: code point -> None deletes the character
INVISIBLE_TRANSLATION = {ord(ch): None for ch in INVISIBLE_CHARACTERS}

# Unicode White_Space (U+00A0 is deleted beforehand). U+001C..U+001F are not in it.
WHITESPACE_PATTERN = re.compile(
    r"[\t\n\v\f\r \x85\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)

ROOT_MESSAGE = "200 OK"
