"""Codebase question answering."""

from .assistant import CodebaseAssistant
from .intents import INTENTS, Intent, match_intent
from .models import ChatResponse, CodeSnippet

__all__ = ["ChatResponse", "CodeSnippet", "CodebaseAssistant", "INTENTS", "Intent", "match_intent"]
