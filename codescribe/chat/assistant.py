"""Question answering over an analyzed project."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..models import ProjectAnalysis
from .intents import INTENTS, Intent, match_intent
from .models import SOURCE_AI, SOURCE_FALLBACK, SOURCE_LOCAL, ChatResponse

logger = get_logger("chat")

SYSTEM_PROMPT = (
    "You are a senior software engineer answering questions about one codebase. "
    "Use only the project analysis you are given and answer in markdown."
)
CHAT_DEPENDENCY_LIMIT = 10
AI_SUGGESTIONS = [
    "Tell me more about the architecture",
    "What are the main components?",
    "How can I improve this code?",
]
HELP_SUGGESTIONS = [
    "What components are in this project?",
    "Show me the API endpoints",
    "What dependencies does this project use?",
    "Explain the project structure",
]


def project_summary(project: ProjectAnalysis) -> Dict[str, Any]:
    return {
        "name": project.name,
        "type": project.type,
        "fileCount": len(project.files),
        "components": len(project.files_in_category("component")),
        "services": len(project.files_in_category("service")),
        "dependencies": [dependency.name for dependency in project.dependencies[:CHAT_DEPENDENCY_LIMIT]],
        "architecture": {
            "patterns": list(project.architecture.patterns),
            "technologies": list(project.architecture.technologies),
            "buildTool": project.architecture.build_tool,
        },
        "entryPoints": list(project.entry_points),
    }


def build_chat_prompt(project: ProjectAnalysis, question: str) -> str:
    summary = json.dumps(project_summary(project), indent=2)
    return "\n".join(
        [
            "Project analysis:",
            summary,
            "",
            f"Question: {question}",
            "",
            "Answer specifically for this project. Include short code examples where they help "
            "and name the files involved.",
        ]
    )


def fallback_answer(project: ProjectAnalysis, question: str, reason: str) -> ChatResponse:
    """Canned answer used when no intent matched and the model could not help."""
    lowered = question.lower()
    components = len(project.files_in_category("component"))
    if "help" in lowered or "what can" in lowered:
        content = "\n".join(
            [
                f"## Ask about {project.name}",
                "",
                "I can answer questions about:",
                "- **Components**: which UI components exist and how they are built",
                "- **API & services**: endpoints, HTTP methods and service files",
                "- **Dependencies**: declared libraries grouped by purpose",
                "- **Structure**: how files are organised and which patterns appear",
                "- **Code**: specific functions, files, authentication or data access",
            ]
        )
        suggestions = list(HELP_SUGGESTIONS)
    elif "improve" in lowered or "better" in lowered or "optimi" in lowered:
        content = "\n".join(
            [
                "## Improvement Ideas",
                "",
                f"From the analysis of this {project.type} project ({len(project.files)} files, "
                f"{components} components):",
                "",
                "1. Keep shared logic in services or utilities rather than components",
                "2. Add tests around the most complex files",
                "3. Document exported functions with JSDoc comments",
                "4. Review dependencies for unused or outdated packages",
            ]
        )
        suggestions = ["Show me the most complex components", "What dependencies does this project use?"]
    else:
        content = "\n".join(
            [
                f"## {project.name}",
                "",
                f"This {project.type} project has **{len(project.files)} analyzed files**, "
                f"including {components} components and "
                f"{len(project.files_in_category('service'))} services.",
                "",
                "I could not answer that question from the code analysis alone. "
                "Try asking about components, APIs, dependencies or the project structure.",
            ]
        )
        suggestions = list(HELP_SUGGESTIONS)
    return ChatResponse(content=content, suggestions=suggestions, source=SOURCE_FALLBACK, reason=reason)


class CodebaseAssistant:
    """Answers from the analysis first, then the model, then canned text."""

    def __init__(
        self,
        project: ProjectAnalysis,
        runner: LLMRunner | None = None,
        *,
        max_tokens: int | None = 2048,
        intents: Sequence[Intent] = INTENTS,
    ) -> None:
        self.project = project
        self.runner = runner
        self.max_tokens = max_tokens
        self.intents = intents

    def ask(self, question: str) -> ChatResponse:
        question = question.strip()
        intent = match_intent(question, self.intents) if question else None
        if intent is not None:
            logger.debug("Answering %r locally with intent %s", question, intent.name)
            response = intent.answer(self.project, question)
            response.source = SOURCE_LOCAL
            response.intent = intent.name
            return response

        if self.runner is None or not self.runner.available:
            return self._fallback(question, "No model API key configured")

        prompt = build_chat_prompt(self.project, question)
        try:
            text = self.runner.run(prompt, system=SYSTEM_PROMPT, max_tokens=self.max_tokens)
        except RuntimeError as exc:
            return self._fallback(question, str(exc))
        return ChatResponse(content=text.strip(), suggestions=list(AI_SUGGESTIONS), source=SOURCE_AI)

    def _fallback(self, question: str, reason: Optional[str]) -> ChatResponse:
        logger.warning("Using fallback answer for %s: %s", self.project.name, reason)
        return fallback_answer(self.project, question, reason or "")


__all__ = ["CodebaseAssistant", "build_chat_prompt", "fallback_answer", "project_summary"]
