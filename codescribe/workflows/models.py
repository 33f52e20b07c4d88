"""Records produced by the workflow extractors."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

ROUTE_KINDS: tuple[str, ...] = ("api", "page")
DATA_TECHNOLOGIES: tuple[str, ...] = ("prisma", "mongoose", "sql", "http")
DATA_VERBS: tuple[str, ...] = ("CREATE", "READ", "UPDATE", "DELETE", "UNKNOWN")


@dataclass
class RouteRecord:
    """One method and path pair recovered from a route-shaped file."""

    method: str
    path: str
    kind: str = "api"
    file: str = ""
    line: int = 0
    handler: str = ""
    middleware: List[str] = field(default_factory=list)
    code: str = ""
    description: str = ""


@dataclass
class ComponentRecord:
    name: str
    props: List[str] = field(default_factory=list)
    jsx_elements: List[str] = field(default_factory=list)
    hooks: List[str] = field(default_factory=list)
    handlers: List[str] = field(default_factory=list)


@dataclass
class FormField:
    name: str
    type: str = "text"
    required: bool = False
    validation: List[str] = field(default_factory=list)


@dataclass
class FormRecord:
    name: str = ""
    fields: List[FormField] = field(default_factory=list)
    submit_handler: str = ""


@dataclass
class EventHandlerRecord:
    event: str
    handler: str


@dataclass
class NavigationRecord:
    target: str
    kind: str = "link"


@dataclass
class InteractionRecord:
    """UI interaction surface of one frontend-shaped file."""

    file: str
    components: List[ComponentRecord] = field(default_factory=list)
    forms: List[FormRecord] = field(default_factory=list)
    events: List[EventHandlerRecord] = field(default_factory=list)
    navigation: List[NavigationRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.components or self.forms or self.events or self.navigation)


@dataclass
class DataOperationRecord:
    file: str
    technology: str
    operation: str
    verb: str = "UNKNOWN"
    entity: str = ""
    parameters: str = ""
    line: int = 0


@dataclass
class AuthFlow:
    """Authentication signals detected anywhere in the project, as sorted sets."""

    methods: List[str] = field(default_factory=list)
    providers: List[str] = field(default_factory=list)
    flows: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def detected(self) -> bool:
        return bool(self.methods or self.flows)


@dataclass
class BusinessLogicRecord:
    file: str
    functions: List[str] = field(default_factory=list)
    validations: List[str] = field(default_factory=list)
    calculations: List[str] = field(default_factory=list)
    workflows: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.functions or self.validations or self.calculations or self.workflows)


@dataclass
class WorkflowAnalysisData:
    routes: List[RouteRecord] = field(default_factory=list)
    interactions: List[InteractionRecord] = field(default_factory=list)
    data_operations: List[DataOperationRecord] = field(default_factory=list)
    auth_flow: AuthFlow = field(default_factory=AuthFlow)
    business_logic: List[BusinessLogicRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "AuthFlow",
    "BusinessLogicRecord",
    "ComponentRecord",
    "DATA_TECHNOLOGIES",
    "DATA_VERBS",
    "DataOperationRecord",
    "EventHandlerRecord",
    "FormField",
    "FormRecord",
    "InteractionRecord",
    "NavigationRecord",
    "ROUTE_KINDS",
    "RouteRecord",
    "WorkflowAnalysisData",
]
