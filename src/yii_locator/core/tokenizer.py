"""Brace matching over PHP-like source that skips strings and comments."""

import re

from yii_locator.models import UNBOUNDED

_QUOTES = frozenset("\"'")
_ARROW = re.compile(r"\s*=>")


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    j = index - 1
    while j >= 0 and text[j] == "\\":
        backslashes += 1
        j -= 1
    return backslashes % 2 == 1


def find_body_bounds(text: str, start_offset: int) -> tuple[int, int]:
    """Return ``(open_brace_offset, end_offset)`` for the body starting at ``start_offset``.

    ``end_offset`` is one past the closing ``}`` of the first top-level brace
    pair. Either value is ``UNBOUNDED`` when the text runs out first. A ``;``
    before any ``{`` means a declaration without a body: both are ``UNBOUNDED``.
    """
    depth = 0
    open_offset = UNBOUNDED
    quote = ""
    in_line_comment = False
    in_block_comment = False

    i = max(0, start_offset)
    length = len(text)
    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if quote:
            if char == quote and not _is_escaped(text, i):
                quote = ""
        elif in_line_comment:
            if char in "\r\n":
                in_line_comment = False
        elif in_block_comment:
            if char == "*" and next_char == "/":
                in_block_comment = False
                i += 1
        elif char in _QUOTES and not _is_escaped(text, i):
            quote = char
        elif char == "#" or (char == "/" and next_char == "/"):
            in_line_comment = True
        elif char == "/" and next_char == "*":
            in_block_comment = True
            i += 1
        elif char == ";" and open_offset == UNBOUNDED:
            return UNBOUNDED, UNBOUNDED
        elif char == "{":
            if depth == 0 and open_offset == UNBOUNDED:
                open_offset = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                return open_offset, i + 1
        i += 1

    return open_offset, UNBOUNDED


def find_body_end(text: str, start_offset: int) -> int:
    """Exclusive end offset of the method body that starts at ``start_offset``, or ``UNBOUNDED``."""
    return find_body_bounds(text, start_offset)[1]


def find_array_keys(text: str, start_offset: int, end_offset: int = UNBOUNDED) -> list[tuple[str, int]]:
    """Quoted keys at the top level of an array literal, as ``(key, offset)`` pairs.

    ``start_offset`` points just past the opening ``array(`` or ``[``; the scan
    stops at the matching close or at ``end_offset``. Nested arrays are skipped.
    """
    keys: list[tuple[str, int]] = []
    depth = 1
    quote = ""
    string_start = 0
    in_line_comment = False
    in_block_comment = False

    limit = len(text) if end_offset == UNBOUNDED else min(end_offset, len(text))
    i = max(0, start_offset)
    while i < limit and depth > 0:
        char = text[i]
        next_char = text[i + 1] if i + 1 < limit else ""

        if quote:
            if char == quote and not _is_escaped(text, i):
                quote = ""
                if depth == 1 and _ARROW.match(text, i + 1, limit):
                    keys.append((text[string_start:i], string_start))
        elif in_line_comment:
            if char in "\r\n":
                in_line_comment = False
        elif in_block_comment:
            if char == "*" and next_char == "/":
                in_block_comment = False
                i += 1
        elif char in _QUOTES and not _is_escaped(text, i):
            quote = char
            string_start = i + 1
        elif char == "#" or (char == "/" and next_char == "/"):
            in_line_comment = True
        elif char == "/" and next_char == "*":
            in_block_comment = True
            i += 1
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        i += 1

    return keys
