"""Markdown, JSON and CSV renditions of a WorkflowGenerationResult."""

from __future__ import annotations

import csv
import io
import json
from typing import List

from ..documents.templating import create_environment
from ..errors import ExportError
from ..export import ExportPayload
from .schema import UserStory, WorkflowGenerationResult

WORKFLOW_EXPORT_FORMATS: tuple[str, ...] = ("markdown", "json", "csv")

CSV_HEADERS: tuple[str, ...] = (
    "ID",
    "Title",
    "Description",
    "Priority",
    "Effort",
    "Complexity",
    "Acceptance Criteria",
    "Technical Implementation",
    "Test Scenarios",
)


def _csv_row(story: UserStory) -> List[str]:
    implementation = story.technical_implementation
    return [
        story.id,
        story.title,
        story.description,
        story.priority,
        story.estimated_effort,
        story.complexity,
        "; ".join(story.acceptance_criteria),
        (
            f"Endpoints: {', '.join(implementation.endpoints)}; "
            f"Components: {', '.join(implementation.components)}; "
            f"Database: {', '.join(implementation.database)}"
        ),
        "; ".join(story.test_scenarios),
    ]


def render_stories_csv(result: WorkflowGenerationResult) -> str:
    """One row per user story, every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for story in result.stories:
        writer.writerow(_csv_row(story))
    return buffer.getvalue()


def render_workflows_markdown(result: WorkflowGenerationResult) -> str:
    template = create_environment().get_template("workflows.j2")
    return (
        template.render(
            overview=result.overview,
            workflows=result.workflows,
            stories=result.stories,
            capabilities=result.capabilities,
            entities=result.entities,
        ).strip()
        + "\n"
    )


def export_workflows(result: WorkflowGenerationResult, fmt: str) -> ExportPayload:
    key = (fmt or "").lower()
    if key == "markdown":
        return ExportPayload(
            "ai-workflows-and-user-stories.md",
            "text/markdown",
            render_workflows_markdown(result).encode("utf-8"),
        )
    if key == "json":
        text = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        return ExportPayload("workflows-and-user-stories.json", "application/json", text.encode("utf-8"))
    if key == "csv":
        return ExportPayload("user-stories.csv", "text/csv", render_stories_csv(result).encode("utf-8"))
    raise ExportError(
        f"Unsupported workflow export format '{fmt}'. Expected one of: {', '.join(WORKFLOW_EXPORT_FORMATS)}"
    )


__all__ = [
    "CSV_HEADERS",
    "WORKFLOW_EXPORT_FORMATS",
    "export_workflows",
    "render_stories_csv",
    "render_workflows_markdown",
]
