"""Model-backed workflow generation with a deterministic fallback."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..models import ProjectAnalysis
from ..workflows.models import WorkflowAnalysisData
from .fallback import build_fallback_result
from .parser import extract_json_payload, validate_and_repair
from .prompt import SYSTEM_PROMPT, build_workflow_prompt
from .schema import WorkflowGenerationResult

logger = get_logger("augment")

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class WorkflowGenerationOutcome:
    """Generated result plus where it came from and, for fallbacks, why."""

    result: WorkflowGenerationResult
    source: str
    reason: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


class WorkflowGenerator:
    """Sends one prompt per run; any failure degrades to the fallback result."""

    def __init__(self, runner: LLMRunner | None = None, *, max_tokens: int | None = None) -> None:
        self.runner = runner
        self.max_tokens = max_tokens

    def generate(self, data: WorkflowAnalysisData, project: ProjectAnalysis) -> WorkflowGenerationOutcome:
        if self.runner is None or not self.runner.available:
            return self._fallback(data, project, "No model API key configured")

        prompt = build_workflow_prompt(data, project)
        try:
            text = self.runner.run(prompt, system=SYSTEM_PROMPT, max_tokens=self.max_tokens)
        except RuntimeError as exc:
            return self._fallback(data, project, str(exc))

        payload = extract_json_payload(text)
        if payload is None:
            return self._fallback(data, project, "Model response did not contain a JSON object")

        result = validate_and_repair(payload)
        logger.info(
            "Model produced %d workflows and %d user stories for %s",
            len(result.workflows),
            len(result.stories),
            project.name,
        )
        return WorkflowGenerationOutcome(result=result, source=SOURCE_AI)

    @staticmethod
    def _fallback(data: WorkflowAnalysisData, project: ProjectAnalysis, reason: str) -> WorkflowGenerationOutcome:
        logger.warning("Using fallback workflows for %s: %s", project.name, reason)
        return WorkflowGenerationOutcome(
            result=build_fallback_result(data, project),
            source=SOURCE_FALLBACK,
            reason=reason,
        )


__all__ = ["SOURCE_AI", "SOURCE_FALLBACK", "WorkflowGenerationOutcome", "WorkflowGenerator"]
