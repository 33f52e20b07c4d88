"""Document-type catalog, standards, output formats and compliance options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

STANDARD_SECTIONS: tuple[str, ...] = (
    "overview",
    "architecture",
    "structure",
    "dependencies",
    "components",
    "data_flow",
    "getting_started",
)

STANDARD_SECTION_TITLES: dict[str, str] = {
    "overview": "Project Overview",
    "architecture": "Architecture",
    "structure": "Project Structure",
    "dependencies": "Dependencies",
    "components": "Components",
    "data_flow": "Data Flow",
    "getting_started": "Getting Started",
}


@dataclass(frozen=True)
class SectionSpec:
    id: str
    title: str
    required: bool = False


@dataclass(frozen=True)
class DocumentType:
    id: str
    name: str
    description: str
    sections: Tuple[SectionSpec, ...]


def _type(identifier: str, name: str, description: str, *sections: Tuple[str, str, bool]) -> DocumentType:
    return DocumentType(
        id=identifier,
        name=name,
        description=description,
        sections=tuple(SectionSpec(id=sid, title=title, required=required) for sid, title, required in sections),
    )


DOCUMENT_TYPES: Dict[str, DocumentType] = {
    doc.id: doc
    for doc in (
        _type(
            "technical-architecture",
            "Technical Architecture Document",
            "System architecture overview with component diagrams and technology stack",
            ("executive-summary", "Executive Summary", True),
            ("system-overview", "System Overview", True),
            ("architecture-diagrams", "Architecture Diagrams", True),
            ("technology-stack", "Technology Stack", True),
            ("data-architecture", "Data Architecture", False),
            ("security-architecture", "Security Architecture", False),
            ("performance-considerations", "Performance Considerations", False),
            ("deployment-architecture", "Deployment Architecture", False),
        ),
        _type(
            "api-documentation",
            "API Documentation",
            "Comprehensive API reference with endpoints, authentication, and examples",
            ("api-overview", "API Overview", True),
            ("authentication", "Authentication", True),
            ("endpoints-reference", "Endpoints Reference", True),
            ("error-handling", "Error Handling", True),
            ("rate-limiting", "Rate Limiting", False),
            ("sdks-examples", "SDKs & Examples", False),
            ("changelog", "Changelog", False),
        ),
        _type(
            "developer-onboarding",
            "Developer Onboarding Guide",
            "Complete setup guide for new developers joining the project",
            ("quick-start", "Quick Start Guide", True),
            ("environment-setup", "Development Environment Setup", True),
            ("code-standards", "Code Standards & Style Guide", True),
            ("git-workflow", "Git Workflow", True),
            ("testing-guidelines", "Testing Guidelines", False),
            ("debugging-handbook", "Debugging Handbook", False),
        ),
        _type(
            "project-requirements",
            "Project Requirements Document",
            "Business objectives, user stories, and functional requirements",
            ("business-objectives", "Business Objectives", True),
            ("user-stories", "User Stories & Use Cases", True),
            ("functional-requirements", "Functional Requirements", True),
            ("non-functional-requirements", "Non-Functional Requirements", True),
            ("acceptance-criteria", "Acceptance Criteria", False),
            ("risk-assessment", "Risk Assessment", False),
        ),
        _type(
            "database-documentation",
            "Database Documentation",
            "Schema documentation, data dictionary, and migration procedures",
            ("schema-documentation", "Schema Documentation", True),
            ("data-dictionary", "Data Dictionary", True),
            ("migration-scripts", "Migration Scripts", False),
            ("backup-recovery", "Backup & Recovery Procedures", False),
            ("performance-optimization", "Performance Optimization", False),
        ),
        _type(
            "deployment-operations",
            "Deployment & Operations Guide",
            "CI/CD pipeline, environment configuration, and monitoring setup",
            ("cicd-pipeline", "CI/CD Pipeline Documentation", True),
            ("environment-configuration", "Environment Configuration", True),
            ("monitoring-logging", "Monitoring & Logging", False),
            ("backup-disaster-recovery", "Backup & Disaster Recovery", False),
            ("troubleshooting-runbook", "Troubleshooting Runbook", False),
        ),
        _type(
            "security-documentation",
            "Security Documentation",
            "Security assessment, compliance measures, and incident response procedures",
            ("security-assessment", "Security Assessment", True),
            ("data-privacy-compliance", "Data Privacy Compliance", True),
            ("access-control-matrix", "Access Control Matrix", False),
            ("incident-response", "Security Incident Response", False),
            ("penetration-testing", "Penetration Testing Results", False),
        ),
        _type(
            "user-documentation",
            "User Documentation",
            "End-user guides, admin documentation, and feature explanations",
            ("user-manual", "User Manual", True),
            ("admin-documentation", "Admin Documentation", False),
            ("faq-section", "FAQ Section", False),
            ("video-tutorials", "Video Tutorials", False),
            ("feature-documentation", "Feature Documentation", False),
        ),
    )
}

DEFAULT_DOCUMENT_TYPE = "technical-architecture"

STANDARDS: dict[str, str] = {
    "enterprise": "Enterprise Standard",
    "engineering": "Engineering Standard",
    "opensource": "Open Source Standard",
    "corporate": "Corporate Standard",
    "startup": "Startup Standard",
}
DEFAULT_STANDARD = "enterprise"

OUTPUT_FORMATS: tuple[str, ...] = ("html", "markdown", "pdf", "confluence", "notion", "sharepoint", "docx")
DEFAULT_OUTPUT_FORMAT = "markdown"

COMPLIANCE_OPTIONS: dict[str, Tuple[str, str]] = {
    "gdpr": ("GDPR", "EU data protection compliance"),
    "hipaa": ("HIPAA", "Healthcare data protection"),
    "sox": ("SOX", "Financial reporting compliance"),
    "iso27001": ("ISO 27001", "Information security management"),
    "pci-dss": ("PCI DSS", "Payment card industry security"),
}

DOCUMENT_VERSION = "1.0.0"
DEFAULT_AUTHOR = "codescribe"
DEFAULT_APPROVAL_STATUS = "draft"


@dataclass(frozen=True)
class DocumentConfig:
    """Caller choices for one professional document."""

    document_type: str = DEFAULT_DOCUMENT_TYPE
    standard: str = DEFAULT_STANDARD
    output_format: str = DEFAULT_OUTPUT_FORMAT
    company_name: Optional[str] = None
    author: str = DEFAULT_AUTHOR
    compliance: Tuple[str, ...] = ()
    include_optional: bool = True
    footer: Optional[str] = None


__all__ = [
    "COMPLIANCE_OPTIONS",
    "DEFAULT_APPROVAL_STATUS",
    "DEFAULT_AUTHOR",
    "DEFAULT_DOCUMENT_TYPE",
    "DEFAULT_OUTPUT_FORMAT",
    "DEFAULT_STANDARD",
    "DOCUMENT_TYPES",
    "DOCUMENT_VERSION",
    "DocumentConfig",
    "DocumentType",
    "OUTPUT_FORMATS",
    "STANDARDS",
    "STANDARD_SECTIONS",
    "STANDARD_SECTION_TITLES",
    "SectionSpec",
]
