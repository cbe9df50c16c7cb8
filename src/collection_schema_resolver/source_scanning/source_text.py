"""Lexical helpers for scanning schema DSL source without parsing it."""

from __future__ import annotations

QUOTES = frozenset("'\"`")
OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = frozenset(OPENERS.values())


def mask_comments(text: str) -> str:
    """Blank out line and block comments, keeping offsets and newlines intact."""
    chars = list(text)
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in QUOTES:
            index = _skip_string(text, index)
            continue
        if text.startswith("//", index):
            end = text.find("\n", index)
            end = length if end == -1 else end
            _blank(chars, index, end)
            index = end
            continue
        if text.startswith("/*", index):
            end = text.find("*/", index + 2)
            end = length if end == -1 else end + 2
            _blank(chars, index, end)
            index = end
            continue
        index += 1
    return "".join(chars)


def matching_close(text: str, open_index: int) -> int | None:
    """Return the index of the bracket closing the one at ``open_index``."""
    stack: list[str] = []
    index = open_index
    length = len(text)
    while index < length:
        char = text[index]
        if char in QUOTES:
            index = _skip_string(text, index)
            continue
        if char in OPENERS:
            stack.append(OPENERS[char])
        elif char in CLOSERS:
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return index
        index += 1
    return None


def split_top_level(
    text: str, start: int, end: int, separators: str = ","
) -> list[tuple[int, int]]:
    """Split ``text[start:end]`` on separators not nested in brackets or strings."""
    spans: list[tuple[int, int]] = []
    depth = 0
    entry_start = start
    index = start
    while index < end:
        char = text[index]
        if char in QUOTES:
            index = _skip_string(text, index)
            continue
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth = max(0, depth - 1)
        elif char in separators and depth == 0:
            spans.append((entry_start, index))
            entry_start = index + 1
        index += 1
    spans.append((entry_start, end))
    return [(left, right) for left, right in spans if text[left:right].strip()]


def chained_calls(expression: str) -> tuple[str, ...]:
    """Return names of method calls chained at the outermost level of ``expression``.

    ``image().optional()`` yields ``("optional",)``; calls nested inside
    arguments are ignored.
    """
    names: list[str] = []
    depth = 0
    index = 0
    length = len(expression)
    while index < length:
        char = expression[index]
        if char in QUOTES:
            index = _skip_string(expression, index)
            continue
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth = max(0, depth - 1)
        elif char == "." and depth == 0:
            name_end = index + 1
            while name_end < length and (
                expression[name_end].isalnum() or expression[name_end] in "_$"
            ):
                name_end += 1
            rest = expression[name_end:].lstrip()
            if name_end > index + 1 and rest.startswith("("):
                names.append(expression[index + 1 : name_end])
        index += 1
    return tuple(names)


def _skip_string(text: str, index: int) -> int:
    quote = text[index]
    index += 1
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n" and quote != "`":
            return index + 1
        index += 1
    return length


def _blank(chars: list[str], start: int, end: int) -> None:
    for position in range(start, end):
        if chars[position] != "\n":
            chars[position] = " "
