"""Records describing generated workflows, user stories and capabilities."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

PRIORITIES: tuple[str, ...] = ("High", "Medium", "Low")


@dataclass
class ProjectOverview:
    name: str = "Unknown Project"
    description: str = "Project description not available"
    primary_users: List[str] = field(default_factory=lambda: ["End Users", "Administrators"])
    core_capabilities: List[str] = field(default_factory=lambda: ["Core Functionality"])
    application_types: List[str] = field(default_factory=lambda: ["Web Application"])
    business_domain: str = "General Purpose"


@dataclass
class WorkflowStep:
    step_number: int
    action: str = ""
    trigger: str = ""
    system_response: str = ""
    data_involved: str = ""
    user_interface: Optional[str] = None
    technical_endpoint: Optional[str] = None


@dataclass
class UserWorkflow:
    """An end-to-end journey with ordered steps."""

    id: str
    name: str
    description: str = ""
    user_types: List[str] = field(default_factory=list)
    estimated_duration: str = ""
    steps: List[WorkflowStep] = field(default_factory=list)
    preconditions: List[str] = field(default_factory=list)
    postconditions: List[str] = field(default_factory=list)
    alternative_flows: List[str] = field(default_factory=list)
    error_handling: List[str] = field(default_factory=list)


@dataclass
class TechnicalImplementation:
    endpoints: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    database: List[str] = field(default_factory=list)


@dataclass
class UserStory:
    id: str
    title: str
    description: str = ""
    acceptance_criteria: List[str] = field(default_factory=list)
    priority: str = "Medium"
    estimated_effort: str = "3 story points"
    complexity: str = "Medium"
    related_workflow: str = ""
    technical_implementation: TechnicalImplementation = field(default_factory=TechnicalImplementation)
    test_scenarios: List[str] = field(default_factory=list)


@dataclass
class CapabilityFeature:
    name: str
    description: str = ""
    technical_endpoint: str = ""
    user_benefit: str = "Provides value to users"


@dataclass
class Capability:
    category: str
    features: List[CapabilityFeature] = field(default_factory=list)


@dataclass
class DataEntity:
    name: str
    description: str = ""
    attributes: List[str] = field(default_factory=lambda: ["id", "createdAt", "updatedAt"])
    relationships: List[str] = field(default_factory=lambda: ["May relate to other entities"])


@dataclass
class WorkflowGenerationResult:
    """Product-level view of a project: overview, workflows, stories, capabilities, entities."""

    overview: ProjectOverview = field(default_factory=ProjectOverview)
    workflows: List[UserWorkflow] = field(default_factory=list)
    stories: List[UserStory] = field(default_factory=list)
    capabilities: List[Capability] = field(default_factory=list)
    entities: List[DataEntity] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "Capability",
    "CapabilityFeature",
    "DataEntity",
    "PRIORITIES",
    "ProjectOverview",
    "TechnicalImplementation",
    "UserStory",
    "UserWorkflow",
    "WorkflowGenerationResult",
    "WorkflowStep",
]
