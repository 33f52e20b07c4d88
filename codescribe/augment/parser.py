"""Turns free-form model output into a complete WorkflowGenerationResult."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Optional

from .schema import (
    PRIORITIES,
    Capability,
    CapabilityFeature,
    DataEntity,
    ProjectOverview,
    TechnicalImplementation,
    UserStory,
    UserWorkflow,
    WorkflowGenerationResult,
    WorkflowStep,
)

_FENCED_JSON = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)


def extract_json_payload(text: str) -> Optional[Dict[str, Any]]:
    """Return the JSON object in a ```json fence, else the whole body, else None."""
    if not text:
        return None
    candidates: List[str] = []
    match = _FENCED_JSON.search(text)
    if match:
        candidates.append(match.group(1))
    candidates.append(text.strip())
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def _value(mapping: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _text(value: Any, default: str = "") -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _strings(value: Any, default: List[str] | None = None) -> List[str]:
    if isinstance(value, list):
        return [_text(item) for item in value if _text(item)]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return list(default or [])


def _mappings(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _level(value: Any) -> str:
    text = _text(value).capitalize()
    return text if text in PRIORITIES else "Medium"


def _overview(raw: Any) -> ProjectOverview:
    defaults = ProjectOverview()
    if not isinstance(raw, Mapping):
        return defaults
    return ProjectOverview(
        name=_text(_value(raw, "name"), defaults.name),
        description=_text(_value(raw, "description"), defaults.description),
        primary_users=_strings(_value(raw, "primaryUsers", "primary_users"), defaults.primary_users),
        core_capabilities=_strings(
            _value(raw, "coreCapabilities", "core_capabilities"), defaults.core_capabilities
        ),
        application_types=_strings(
            _value(raw, "applicationTypes", "application_types"), defaults.application_types
        ),
        business_domain=_text(_value(raw, "businessDomain", "business_domain"), defaults.business_domain),
    )


def _step(raw: Mapping[str, Any], index: int) -> WorkflowStep:
    number = _value(raw, "stepNumber", "step_number")
    if not isinstance(number, int) or isinstance(number, bool) or number < 1:
        number = index + 1
    return WorkflowStep(
        step_number=number,
        action=_text(_value(raw, "action")),
        trigger=_text(_value(raw, "trigger")),
        system_response=_text(_value(raw, "systemResponse", "system_response")),
        data_involved=_text(_value(raw, "dataInvolved", "data_involved")),
        user_interface=_optional_text(_value(raw, "userInterface", "user_interface")),
        technical_endpoint=_optional_text(_value(raw, "technicalEndpoint", "technical_endpoint")),
    )


def _workflow(raw: Mapping[str, Any], index: int) -> UserWorkflow:
    identifier = f"WF{index + 1:03d}"
    return UserWorkflow(
        id=_text(_value(raw, "id"), identifier),
        name=_text(_value(raw, "workflowName", "name"), f"Workflow {index + 1}"),
        description=_text(_value(raw, "description")),
        user_types=_strings(_value(raw, "userTypes", "user_types")),
        estimated_duration=_text(_value(raw, "estimatedDuration", "estimated_duration")),
        steps=[_step(step, position) for position, step in enumerate(_mappings(_value(raw, "steps")))],
        preconditions=_strings(_value(raw, "preconditions")),
        postconditions=_strings(_value(raw, "postconditions")),
        alternative_flows=_strings(_value(raw, "alternativeFlows", "alternative_flows")),
        error_handling=_strings(_value(raw, "errorHandling", "error_handling")),
    )


def _implementation(raw: Any) -> TechnicalImplementation:
    if not isinstance(raw, Mapping):
        return TechnicalImplementation()
    return TechnicalImplementation(
        endpoints=_strings(_value(raw, "endpoints")),
        components=_strings(_value(raw, "components")),
        database=_strings(_value(raw, "database")),
    )


def _story(raw: Mapping[str, Any], index: int) -> UserStory:
    return UserStory(
        id=_text(_value(raw, "id"), f"US{index + 1:03d}"),
        title=_text(_value(raw, "title"), f"User Story {index + 1}"),
        description=_text(_value(raw, "description")),
        acceptance_criteria=_strings(_value(raw, "acceptanceCriteria", "acceptance_criteria")),
        priority=_level(_value(raw, "priority")),
        estimated_effort=_text(_value(raw, "estimatedEffort", "estimated_effort"), "3 story points"),
        complexity=_level(_value(raw, "complexity")),
        related_workflow=_text(_value(raw, "relatedWorkflow", "related_workflow")),
        technical_implementation=_implementation(
            _value(raw, "technicalImplementation", "technical_implementation")
        ),
        test_scenarios=_strings(_value(raw, "testScenarios", "test_scenarios")),
    )


def _capability(raw: Mapping[str, Any], index: int) -> Capability:
    features = [
        CapabilityFeature(
            name=_text(_value(feature, "name"), f"Feature {position + 1}"),
            description=_text(_value(feature, "description")),
            technical_endpoint=_text(_value(feature, "technicalEndpoint", "technical_endpoint")),
            user_benefit=_text(_value(feature, "userBenefit", "user_benefit"), "Provides value to users"),
        )
        for position, feature in enumerate(_mappings(_value(raw, "features")))
    ]
    return Capability(category=_text(_value(raw, "category"), f"Capability {index + 1}"), features=features)


def _entity(raw: Mapping[str, Any], index: int) -> DataEntity:
    defaults = DataEntity(name="")
    return DataEntity(
        name=_text(_value(raw, "entityName", "name"), f"Entity{index + 1}"),
        description=_text(_value(raw, "description")),
        attributes=_strings(_value(raw, "attributes"), defaults.attributes),
        relationships=_strings(_value(raw, "relationships"), defaults.relationships),
    )


def validate_and_repair(payload: Mapping[str, Any] | None) -> WorkflowGenerationResult:
    """Fill every missing field with its default; malformed entries are dropped, never raised."""
    payload = payload if isinstance(payload, Mapping) else {}
    return WorkflowGenerationResult(
        overview=_overview(_value(payload, "projectOverview", "overview")),
        workflows=[
            _workflow(raw, index)
            for index, raw in enumerate(_mappings(_value(payload, "userWorkflows", "workflows")))
        ],
        stories=[
            _story(raw, index) for index, raw in enumerate(_mappings(_value(payload, "userStories", "stories")))
        ],
        capabilities=[
            _capability(raw, index) for index, raw in enumerate(_mappings(_value(payload, "capabilities")))
        ],
        entities=[
            _entity(raw, index) for index, raw in enumerate(_mappings(_value(payload, "dataEntities", "entities")))
        ],
    )


__all__ = ["extract_json_payload", "validate_and_repair"]
