"""Prompt assembly for workflow and user-story generation."""

from __future__ import annotations

import json
from typing import Dict, List, Sequence

from ..models import DependencyRecord, ProjectAnalysis
from ..workflows.models import WorkflowAnalysisData

ROUTE_LIMIT = 15
INTERACTION_LIMIT = 8
DATA_OPERATION_LIMIT = 12
BUSINESS_LOGIC_LIMIT = 8
DEPENDENCY_LIMIT = 8

SYSTEM_PROMPT = (
    "You are an expert product manager, business analyst and software architect. "
    "Base every workflow and story on the code analysis provided and answer with JSON only."
)

RESPONSE_SCHEMA: Dict[str, object] = {
    "projectOverview": {
        "name": "string",
        "description": "what the application does, from the analysis",
        "primaryUsers": ["string"],
        "coreCapabilities": ["string"],
        "applicationTypes": ["Web Application | API | Dashboard | ..."],
        "businessDomain": "string",
    },
    "userWorkflows": [
        {
            "id": "WF001",
            "workflowName": "string",
            "description": "string",
            "userTypes": ["string"],
            "estimatedDuration": "5-10 minutes",
            "steps": [
                {
                    "stepNumber": 1,
                    "action": "user action, from UI components",
                    "trigger": "event handler that causes the step",
                    "systemResponse": "API endpoint behaviour",
                    "dataInvolved": "data operations touched",
                    "userInterface": "component or page",
                    "technicalEndpoint": "METHOD /path",
                }
            ],
            "preconditions": ["string"],
            "postconditions": ["string"],
            "alternativeFlows": ["string"],
            "errorHandling": ["string"],
        }
    ],
    "userStories": [
        {
            "id": "US001",
            "title": "string",
            "description": "As a [user type], I want to [action] so that [benefit]",
            "acceptanceCriteria": ["Given ..., when ..., then ..."],
            "priority": "High | Medium | Low",
            "estimatedEffort": "X story points",
            "complexity": "High | Medium | Low",
            "relatedWorkflow": "workflow name",
            "technicalImplementation": {"endpoints": ["string"], "components": ["string"], "database": ["string"]},
            "testScenarios": ["string"],
        }
    ],
    "capabilities": [
        {
            "category": "string",
            "features": [
                {"name": "string", "description": "string", "technicalEndpoint": "string", "userBenefit": "string"}
            ],
        }
    ],
    "dataEntities": [
        {"entityName": "string", "description": "string", "attributes": ["string"], "relationships": ["string"]}
    ],
}

GUIDELINES: tuple[str, ...] = (
    "Base all analysis on the code facts above, not on assumptions.",
    "Describe what users can accomplish through the detected components and endpoints.",
    "Map end-to-end journeys from UI interactions to API calls and data operations.",
    "Prioritise stories by complexity, dependencies and authentication requirements.",
    "Include error scenarios and edge cases grounded in detected validation logic.",
)


def _joined(values: Sequence[str], empty: str = "None") -> str:
    return ", ".join(values) if values else empty


def _route_lines(data: WorkflowAnalysisData) -> List[str]:
    if not data.routes:
        return ["No routes detected in the codebase."]
    lines: List[str] = []
    for route in data.routes[:ROUTE_LIMIT]:
        lines.append(f"- **{route.method} {route.path}** ({route.kind}) in `{route.file}`")
        lines.append(f"  - Handler: {route.handler or 'Not specified'}")
        lines.append(f"  - Description: {route.description or 'No description'}")
        lines.append(f"  - Middleware: {_joined(route.middleware)}")
    return lines


def _interaction_lines(data: WorkflowAnalysisData) -> List[str]:
    if not data.interactions:
        return ["No user interactions detected in the codebase."]
    lines: List[str] = []
    for interaction in data.interactions[:INTERACTION_LIMIT]:
        lines.append(f"**File: {interaction.file}**")
        for component in interaction.components:
            lines.append(
                f"- Component **{component.name}**: props {_joined(component.props)}; "
                f"hooks {_joined(component.hooks)}; handlers {_joined(component.handlers)}"
            )
        for form in interaction.forms:
            fields = [f"{field.name} ({field.type}{', required' if field.required else ''})" for field in form.fields]
            lines.append(f"- Form {form.name or 'unnamed'}: fields {_joined(fields)}; submit {form.submit_handler or 'None'}")
        for event in interaction.events:
            lines.append(f"- Event {event.event} -> {event.handler}")
        for navigation in interaction.navigation:
            lines.append(f"- Navigation to {navigation.target} ({navigation.kind})")
        lines.append("")
    return lines


def _data_lines(data: WorkflowAnalysisData) -> List[str]:
    if not data.data_operations:
        return ["No data operations detected in the codebase."]
    lines: List[str] = []
    for operation in data.data_operations[:DATA_OPERATION_LIMIT]:
        target = f" on {operation.entity}" if operation.entity else ""
        lines.append(f"- **{operation.technology} {operation.operation}** ({operation.verb}){target} in `{operation.file}`")
        if operation.parameters:
            lines.append(f"  - Parameters: {operation.parameters}")
    return lines


def _auth_lines(data: WorkflowAnalysisData) -> List[str]:
    auth = data.auth_flow
    return [
        f"- **Authentication Methods:** {_joined(auth.methods, 'None detected')}",
        f"- **Providers:** {_joined(auth.providers, 'None detected')}",
        f"- **Flows:** {_joined(auth.flows, 'None detected')}",
    ]


def _business_lines(data: WorkflowAnalysisData) -> List[str]:
    if not data.business_logic:
        return ["No business logic files detected in the codebase."]
    lines: List[str] = []
    for record in data.business_logic[:BUSINESS_LOGIC_LIMIT]:
        lines.append(f"**File: {record.file}**")
        lines.append(f"- Functions: {_joined(record.functions)}")
        lines.append(f"- Validations: {_joined(record.validations)}")
        lines.append(f"- Calculations: {_joined(record.calculations)}")
        lines.append(f"- Workflows: {_joined(record.workflows)}")
        lines.append("")
    return lines


def _dependency_line(dependency: DependencyRecord) -> str:
    return f"- {dependency.name} ({dependency.version}): {dependency.description or dependency.category}"


def _dependency_lines(project: ProjectAnalysis) -> List[str]:
    lines = ["**Production Dependencies:**"]
    lines.extend(_dependency_line(dependency) for dependency in project.dependencies[:DEPENDENCY_LIMIT])
    lines.append("")
    lines.append("**Development Dependencies:**")
    lines.extend(_dependency_line(dependency) for dependency in project.dev_dependencies[:DEPENDENCY_LIMIT])
    lines.append("")
    lines.append(f"**Architecture Technologies:** {_joined(project.architecture.technologies)}")
    lines.append(f"**Entry Points:** {_joined(project.entry_points)}")
    return lines


def build_workflow_prompt(data: WorkflowAnalysisData, project: ProjectAnalysis) -> str:
    """Render the workflow-generation request for a single model call."""
    manifest = project.manifest or {}
    description = manifest.get("description") if isinstance(manifest.get("description"), str) else None
    architecture = project.architecture

    lines: List[str] = [
        "# Code analysis for workflow and user story generation",
        "",
        "## Project information",
        f"- **Name**: {project.name}",
        f"- **Type**: {project.type}",
        f"- **Description**: {description or 'No description available'}",
        f"- **Build Tool**: {architecture.build_tool or 'Not specified'}",
        f"- **Architecture Patterns**: {_joined(architecture.patterns)}",
        "",
        f"## API routes and endpoints ({len(data.routes)} found)",
        *_route_lines(data),
        "",
        f"## User interface interactions ({len(data.interactions)} files)",
        *_interaction_lines(data),
        "",
        f"## Data operations ({len(data.data_operations)} operations)",
        *_data_lines(data),
        "",
        "## Authentication and authorization",
        *_auth_lines(data),
        "",
        f"## Business logic ({len(data.business_logic)} files)",
        *_business_lines(data),
        "",
        "## Dependencies and technologies",
        *_dependency_lines(project),
        "",
        "## Required output",
        "Respond with a single JSON object inside a ```json fence matching this schema:",
        "```json",
        json.dumps(RESPONSE_SCHEMA, indent=2),
        "```",
        "",
        "## Guidelines",
        *(f"{index}. {guideline}" for index, guideline in enumerate(GUIDELINES, start=1)),
    ]
    return "\n".join(lines).strip() + "\n"


__all__ = [
    "BUSINESS_LOGIC_LIMIT",
    "DATA_OPERATION_LIMIT",
    "DEPENDENCY_LIMIT",
    "INTERACTION_LIMIT",
    "RESPONSE_SCHEMA",
    "ROUTE_LIMIT",
    "SYSTEM_PROMPT",
    "build_workflow_prompt",
]
