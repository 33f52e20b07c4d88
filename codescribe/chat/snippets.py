"""Code lookup helpers for assistant answers."""

from __future__ import annotations

import re
from typing import Optional

from ..analyzers.utils import find_matching_brace

SNIPPET_FALLBACK_CHARS = 600
DOC_WINDOW = 300

STOP_WORDS = frozenset(
    {
        "show",
        "me",
        "the",
        "find",
        "where",
        "is",
        "are",
        "what",
        "how",
        "file",
        "files",
        "function",
        "functions",
        "a",
        "specific",
        "code",
        "for",
    }
)

_TRAILING_DOC = re.compile(r"/\*\*[\s\S]*?\*/\s*$")
_DECLARATION_PREFIX = re.compile(r"(?:export\s+(?:default\s+)?)?(?:async\s+)?$")


def search_term(query: str) -> str:
    """Drop filler words and anything shorter than three characters."""
    words = [word.strip("?.,!'\"") for word in query.lower().split()]
    return " ".join(word for word in words if word not in STOP_WORDS and len(word) > 2)


def language_for(path: str) -> str:
    return "typescript" if path.endswith((".ts", ".tsx")) else "javascript"


def _definition_patterns(name: str) -> tuple[re.Pattern[str], ...]:
    escaped = re.escape(name)
    return (
        re.compile(rf"function\s+{escaped}\s*\([^)]*\)[^{{]*{{", re.IGNORECASE),
        re.compile(rf"(?:const|let|var)\s+{escaped}\s*=\s*(?:async\s*)?\([^)]*\)[^=]*=>", re.IGNORECASE),
        re.compile(rf"{escaped}\s*:\s*(?:async\s*)?\([^)]*\)\s*=>", re.IGNORECASE),
        re.compile(rf"export\s+(?:default\s+)?(?:async\s+)?function\s+{escaped}", re.IGNORECASE),
    )


def _body_brace(content: str, match: re.Match[str]) -> int:
    if match.group(0).endswith("{"):
        return match.end() - 1
    rest = content[match.end():]
    stripped = rest.lstrip()
    if stripped.startswith("{"):
        return match.end() + len(rest) - len(stripped)
    if match.group(0).endswith("=>"):
        # Expression-bodied arrow: the snippet ends with the line.
        return -1
    return content.find("{", match.end())


def extract_function_code(content: str, name: str) -> Optional[str]:
    """Return the definition of ``name`` with any JSDoc right above it.

    When no definition matches, the head of the file stands in. Empty content yields None.
    """
    if not content:
        return None
    for pattern in _definition_patterns(name):
        match = pattern.search(content)
        if not match:
            continue
        start = match.start()
        prefix = _DECLARATION_PREFIX.search(content, max(0, start - 40), start)
        if prefix:
            start = prefix.start()
        doc = _TRAILING_DOC.search(content[max(0, start - DOC_WINDOW):start])
        open_index = _body_brace(content, match)
        if open_index == -1:
            end = content.find("\n", match.end())
            end = len(content) if end == -1 else end
        else:
            end = find_matching_brace(content, open_index) + 1
        return (doc.group(0) if doc else "") + content[start:end]
    head = content[:SNIPPET_FALLBACK_CHARS]
    if len(content) > SNIPPET_FALLBACK_CHARS:
        head += "\n// ... rest of file"
    return head


__all__ = ["extract_function_code", "language_for", "search_term"]
