"""Records returned by the codebase assistant."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

SOURCE_LOCAL = "local"
SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"


@dataclass
class CodeSnippet:
    language: str
    code: str
    filename: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ChatResponse:
    """Markdown answer plus supporting code, files and follow-up questions."""

    content: str
    snippets: List[CodeSnippet] = field(default_factory=list)
    related_files: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    source: str = SOURCE_LOCAL
    intent: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ChatResponse", "CodeSnippet", "SOURCE_AI", "SOURCE_FALLBACK", "SOURCE_LOCAL"]
