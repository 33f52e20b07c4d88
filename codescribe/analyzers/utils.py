"""Text scanning helpers shared by the pattern-based extractors."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

_JSDOC_BEFORE = re.compile(r"/\*\*([\s\S]*?)\*/\s*$")
_JSDOC_LINE_PREFIX = re.compile(r"^\s*\*\s?")

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def line_of(text: str, index: int) -> int:
    """Return 1-based line number for a character index."""
    return text.count("\n", 0, index) + 1


_CODE, _STRING, _COMMENT = 0, 1, 2


def _char_states(text: str) -> List[int]:
    states = [_CODE] * len(text)
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        nxt = text[index + 1] if index + 1 < length else ""
        if char == "/" and nxt == "/":
            end = text.find("\n", index)
            end = length if end == -1 else end
            states[index:end] = [_COMMENT] * (end - index)
            index = end
            continue
        if char == "/" and nxt == "*":
            end = text.find("*/", index + 2)
            end = length if end == -1 else end + 2
            states[index:end] = [_COMMENT] * (end - index)
            index = end
            continue
        if char in {"'", '"', "`"}:
            end = index + 1
            while end < length and text[end] != char:
                if text[end] == "\\":
                    end += 1
                elif char != "`" and text[end] == "\n":
                    break
                end += 1
            end = min(end + 1, length)
            # Quotes stay code so collapsed skeletons keep literal values intact.
            if end - 1 > index + 1:
                states[index + 1:end - 1] = [_STRING] * (end - 1 - index - 1)
            index = end
            continue
        index += 1
    return states


def code_mask(text: str) -> List[bool]:
    """Flag each character as code (True) or string/comment (False)."""
    return [state == _CODE for state in _char_states(text)]


def find_matching_brace(text: str, open_index: int, mask: Optional[List[bool]] = None) -> int:
    """Return the index of the brace closing ``text[open_index]``.

    Unbalanced input yields the last index of ``text`` so callers always get a bounded slice.
    """
    if open_index < 0 or open_index >= len(text):
        return len(text) - 1
    mask = mask if mask is not None else code_mask(text)
    depth = 0
    for index in range(open_index, len(text)):
        if not mask[index]:
            continue
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return len(text) - 1


def collapse_nested(body: str) -> Tuple[str, List[int]]:
    """Drop everything nested below the first brace level of ``body``.

    Returns the skeleton text and, for each skeleton character, its index in ``body``.
    Nested blocks shrink to ``{}`` and comments become spaces so member
    declarations stay recognisable.
    """
    states = _char_states(body)
    chars: List[str] = []
    positions: List[int] = []
    depth = 0
    for index, char in enumerate(body):
        state = states[index]
        if state == _CODE and char == "{":
            if depth == 0:
                chars.append(char)
                positions.append(index)
            depth += 1
            continue
        if state == _CODE and char == "}":
            depth = max(depth - 1, 0)
            if depth == 0:
                chars.append(char)
                positions.append(index)
            continue
        if depth == 0:
            chars.append(" " if state == _COMMENT and char != "\n" else char)
            positions.append(index)
    return "".join(chars), positions


def split_parameters(raw: str) -> List[str]:
    """Split a parameter list on top-level commas."""
    if not raw or not raw.strip():
        return []
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    closers = set(_OPENERS.values())
    for char in raw:
        if char in _OPENERS:
            depth += 1
        elif char in closers and depth > 0:
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def flatten_doc_comment(raw: str) -> str:
    lines = (_JSDOC_LINE_PREFIX.sub("", line).strip() for line in raw.split("\n"))
    return " ".join(line for line in lines if line)


def preceding_doc_comment(text: str, index: int, *, window: int = 500, limit: int = 100) -> Optional[str]:
    """Return the flattened JSDoc block that ends right before ``index``."""
    before = text[max(0, index - window):index]
    match = _JSDOC_BEFORE.search(before)
    if not match:
        return None
    flattened = flatten_doc_comment(match.group(1))
    return flattened[:limit] or None


def excerpt(text: str, start: int, end: int) -> str:
    return text[max(0, start):max(0, min(len(text), end))].strip()


__all__ = [
    "code_mask",
    "collapse_nested",
    "excerpt",
    "find_matching_brace",
    "flatten_doc_comment",
    "line_of",
    "preceding_doc_comment",
    "split_parameters",
]
