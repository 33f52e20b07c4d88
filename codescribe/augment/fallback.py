"""Deterministic workflow result derived from the extracted analysis alone."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import ProjectAnalysis
from ..workflows.models import DataOperationRecord, WorkflowAnalysisData
from .parser import validate_and_repair
from .schema import WorkflowGenerationResult

DEFAULT_APPLICATION_TYPE = "Web Application"

_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("E-commerce Platform", ("cart", "product", "order", "payment")),
    ("Social Media Application", ("post", "comment", "like", "follow")),
    ("Dashboard/Analytics Tool", ("dashboard", "analytics", "report")),
)

PRIMARY_USERS: Dict[str, List[str]] = {
    "E-commerce Platform": ["Customers", "Store Administrators", "Vendors"],
    "Social Media Application": ["Users", "Content Creators", "Moderators"],
    "Dashboard/Analytics Tool": ["Analysts", "Managers", "Data Scientists"],
    "Web Application": ["End Users", "Administrators", "Moderators"],
}

BUSINESS_DOMAINS: Dict[str, str] = {
    "E-commerce Platform": "E-commerce & Retail",
    "Social Media Application": "Social Networking & Communication",
    "Dashboard/Analytics Tool": "Business Intelligence & Analytics",
    "Web Application": "General Purpose Software",
}


def detect_application_type(data: WorkflowAnalysisData) -> str:
    paths = " ".join(route.path.lower() for route in data.routes)
    for label, keywords in _TYPE_KEYWORDS:
        if any(keyword in paths for keyword in keywords):
            return label
    return DEFAULT_APPLICATION_TYPE


def _core_capabilities(data: WorkflowAnalysisData) -> List[str]:
    capabilities: List[str] = []
    if data.auth_flow.methods:
        capabilities.append("User Authentication & Authorization")
    if any(operation.verb == "CREATE" for operation in data.data_operations):
        capabilities.append("Data Creation & Management")
    if any(route.method == "GET" for route in data.routes):
        capabilities.append("Data Retrieval & Display")
    if any(interaction.forms for interaction in data.interactions):
        capabilities.append("Form Processing & Validation")
    if len(data.routes) > 5:
        capabilities.append("API Integration & Services")
    return capabilities or ["Core Application Functionality"]


def _workflows(data: WorkflowAnalysisData) -> List[Dict[str, Any]]:
    workflows: List[Dict[str, Any]] = []
    if data.auth_flow.methods:
        workflows.append(
            {
                "workflowName": "User Authentication",
                "description": "User registration and login process",
                "userTypes": ["New Users", "Returning Users"],
                "estimatedDuration": "2-5 minutes",
                "steps": [
                    {
                        "action": "User navigates to login page",
                        "trigger": "User clicks login button",
                        "systemResponse": "Display login form",
                        "dataInvolved": "User credentials",
                        "userInterface": "Login Component",
                        "technicalEndpoint": "/api/auth/login",
                    }
                ],
                "preconditions": ["User has internet access"],
                "postconditions": ["User is authenticated"],
                "alternativeFlows": ["Registration for new users"],
                "errorHandling": ["Invalid credentials handling"],
            }
        )
    if data.data_operations:
        workflows.append(
            {
                "workflowName": "Data Management",
                "description": "Create, read, update, and delete data",
                "userTypes": ["Authenticated Users"],
                "estimatedDuration": "3-10 minutes",
                "steps": [
                    {
                        "action": "User accesses data management interface",
                        "trigger": "User navigates to data section",
                        "systemResponse": "Display data list",
                        "dataInvolved": "Application data",
                        "userInterface": "Data Management Component",
                    }
                ],
                "preconditions": ["User is authenticated"],
                "postconditions": ["Data is updated"],
                "alternativeFlows": ["Bulk operations"],
                "errorHandling": ["Validation errors", "Permission errors"],
            }
        )
    return workflows


def _operation_action(operation: DataOperationRecord) -> str:
    if operation.verb != "UNKNOWN":
        return operation.verb.lower()
    return operation.operation.lower()


def _operation_story(operation: DataOperationRecord) -> Dict[str, Any]:
    action = _operation_action(operation)
    entity = operation.entity or "Data"
    return {
        "title": f"{action.capitalize()} {entity}",
        "description": f"As a user, I want to {action} {entity.lower()} so that I can manage my information",
        "acceptanceCriteria": [
            f"User can {action} {entity.lower()}",
            "System validates input data",
            "Success message is displayed",
            "Data is persisted correctly",
        ],
        "priority": "Medium",
        "relatedWorkflow": "Data Management",
        "technicalImplementation": {
            "endpoints": [f"/api/{entity.lower()}"],
            "components": [f"{entity}Form"],
            "database": [f"{entity} {action}"],
        },
        "testScenarios": ["Valid data operation", "Invalid data handling", "Permission validation"],
    }


def _stories(data: WorkflowAnalysisData) -> List[Dict[str, Any]]:
    stories: List[Dict[str, Any]] = []
    if data.auth_flow.methods:
        stories.append(
            {
                "title": "User Registration",
                "description": "As a new user, I want to create an account so that I can access the application",
                "acceptanceCriteria": [
                    "User can enter email and password",
                    "System validates email format",
                    "System creates user account on successful validation",
                    "User receives confirmation of registration",
                ],
                "priority": "High",
                "estimatedEffort": "5 story points",
                "relatedWorkflow": "User Authentication",
                "technicalImplementation": {
                    "endpoints": ["/api/auth/register"],
                    "components": ["RegistrationForm"],
                    "database": ["User creation"],
                },
                "testScenarios": ["Valid registration flow", "Duplicate email handling", "Password validation"],
            }
        )
        stories.append(
            {
                "title": "User Login",
                "description": "As a returning user, I want to log in so that I can access my account",
                "acceptanceCriteria": [
                    "User can enter credentials",
                    "System validates credentials",
                    "User is redirected to dashboard on success",
                    "Error message shown for invalid credentials",
                ],
                "priority": "High",
                "complexity": "Low",
                "relatedWorkflow": "User Authentication",
                "technicalImplementation": {
                    "endpoints": ["/api/auth/login"],
                    "components": ["LoginForm"],
                    "database": ["User authentication"],
                },
                "testScenarios": [
                    "Valid login flow",
                    "Invalid credentials handling",
                    "Account lockout after failed attempts",
                ],
            }
        )
    stories.extend(_operation_story(operation) for operation in data.data_operations[:3])
    return stories


def _capabilities(data: WorkflowAnalysisData) -> List[Dict[str, Any]]:
    capabilities: List[Dict[str, Any]] = []
    if data.auth_flow.methods:
        capabilities.append(
            {
                "category": "Authentication & Security",
                "features": [
                    {
                        "name": "User Authentication",
                        "description": "Secure user login and registration",
                        "technicalEndpoint": "/api/auth",
                        "userBenefit": "Secure access to personalized features",
                    }
                ],
            }
        )
    if data.data_operations:
        capabilities.append(
            {
                "category": "Data Management",
                "features": [
                    {
                        "name": "Data Operations",
                        "description": "Create, read, update, and delete data",
                        "technicalEndpoint": "/api/data",
                        "userBenefit": "Manage and organize information effectively",
                    }
                ],
            }
        )
    if data.routes:
        capabilities.append(
            {
                "category": "API Services",
                "features": [
                    {
                        "name": "RESTful API",
                        "description": "Comprehensive API for data access",
                        "technicalEndpoint": "/api/*",
                        "userBenefit": "Programmatic access to application features",
                    }
                ],
            }
        )
    return capabilities


def _entities(data: WorkflowAnalysisData) -> List[Dict[str, Any]]:
    names: List[str] = []
    for operation in data.data_operations:
        if operation.entity and operation.entity not in names:
            names.append(operation.entity)
    entities: List[Dict[str, Any]] = [
        {"entityName": name, "description": f"Represents {name.lower()} data in the system"} for name in names
    ]
    if data.auth_flow.methods and "User" not in names:
        entities.append(
            {
                "entityName": "User",
                "description": "Represents a system user",
                "attributes": ["id", "email", "password", "profile", "createdAt"],
                "relationships": ["May have associated data records"],
            }
        )
    return entities


def build_fallback_result(data: WorkflowAnalysisData, project: ProjectAnalysis) -> WorkflowGenerationResult:
    """Same inputs always produce the same result; no model involved."""
    application_type = detect_application_type(data)
    payload = {
        "projectOverview": {
            "name": project.name,
            "description": (
                f"A {project.type} application with {len(data.routes)} endpoints and "
                f"{len(data.interactions)} user interface components. Based on code analysis, "
                f"this appears to be a {application_type}."
            ),
            "primaryUsers": PRIMARY_USERS.get(application_type, ["End Users", "Administrators"]),
            "coreCapabilities": _core_capabilities(data),
            "applicationTypes": [application_type],
            "businessDomain": BUSINESS_DOMAINS.get(application_type, "General Purpose Software"),
        },
        "userWorkflows": _workflows(data),
        "userStories": _stories(data),
        "capabilities": _capabilities(data),
        "dataEntities": _entities(data),
    }
    return validate_and_repair(payload)


__all__ = ["build_fallback_result", "detect_application_type"]
