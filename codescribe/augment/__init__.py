"""Workflow and user-story generation on top of the extracted workflow analysis."""

from .export import export_workflows
from .fallback import build_fallback_result
from .generator import WorkflowGenerationOutcome, WorkflowGenerator
from .parser import extract_json_payload, validate_and_repair
from .prompt import build_workflow_prompt
from .schema import WorkflowGenerationResult

__all__ = [
    "WorkflowGenerationOutcome",
    "WorkflowGenerationResult",
    "WorkflowGenerator",
    "build_fallback_result",
    "build_workflow_prompt",
    "export_workflows",
    "extract_json_payload",
    "validate_and_repair",
]
