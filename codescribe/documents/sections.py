"""Section registry for professional documents.

Each renderer is a pure function ``(project, config) -> markdown``. Renderers
read the analysis and never mutate it; ids without a registered renderer fall
back to :func:`render_default`.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List

from ..models import FileAnalysis, ProjectAnalysis
from . import insights
from .constants import COMPLIANCE_OPTIONS, DocumentConfig

SectionRenderer = Callable[[ProjectAnalysis, DocumentConfig], str]

SECTION_RENDERERS: Dict[str, SectionRenderer] = {}


def section(section_id: str) -> Callable[[SectionRenderer], SectionRenderer]:
    def _register(renderer: SectionRenderer) -> SectionRenderer:
        SECTION_RENDERERS[section_id] = renderer
        return renderer

    return _register


def render_section_body(section_id: str, title: str, project: ProjectAnalysis, config: DocumentConfig) -> str:
    renderer = SECTION_RENDERERS.get(section_id)
    if renderer is None:
        return render_default(title, project, config)
    return renderer(project, config).strip()


def render_default(title: str, project: ProjectAnalysis, config: DocumentConfig) -> str:
    return (
        f"{title} for **{project.name}**, derived from {len(project.files)} analysed files. "
        "Extend this section with team-specific procedures."
    )


def _bullets(items: List[str], empty: str) -> str:
    return "\n".join(f"- {item}" for item in items) if items else empty


def _api_files(project: ProjectAnalysis) -> List[FileAnalysis]:
    return [
        analysis
        for analysis in project.files
        if "api" in analysis.path.lower()
        or "route" in analysis.path.lower()
        or any("api" in fn.name.lower() or "endpoint" in fn.name.lower() for fn in analysis.functions)
    ]


_METHOD_HINTS = (
    ("GET", ("get", "fetch", "find", "list")),
    ("POST", ("post", "create", "add")),
    ("PUT", ("put", "update", "edit")),
    ("DELETE", ("delete", "remove")),
    ("PATCH", ("patch",)),
)


def infer_http_method(function_name: str) -> str:
    name = function_name.lower()
    for method, hints in _METHOD_HINTS:
        if any(hint in name for hint in hints):
            return method
    return "GET"


def infer_endpoint_path(function_name: str) -> str:
    name = function_name.lower()
    if "user" in name:
        return "users"
    if "auth" in name:
        return "auth"
    return re.sub(r"[^a-z0-9]", "", name)


def _has_dependency(project: ProjectAnalysis, *fragments: str) -> bool:
    return any(
        fragment in dependency.name
        for dependency in [*project.dependencies, *project.dev_dependencies]
        for fragment in fragments
    )


@section("executive-summary")
def executive_summary(project: ProjectAnalysis, config: DocumentConfig) -> str:
    components = len(project.files_in_category("component"))
    services = len(project.files_in_category("service"))
    purpose = insights.project_description(project) or "provide modern web functionality"
    lines = [
        "### Project Overview",
        f"{project.name} is a {insights.display_type(project)} application designed to {purpose}.",
        "",
        "### Key Metrics",
        f"- **Project Type**: {insights.display_type(project)} Application",
        f"- **Components**: {components} UI components",
        f"- **Services**: {services} business logic services",
        f"- **Dependencies**: {len(project.dependencies)} production dependencies",
        f"- **Build Tool**: {project.architecture.build_tool or 'Standard build process'}",
        "",
        "### Architecture Highlights",
        _bullets(project.architecture.patterns, "- No specific architectural patterns detected"),
        "",
        "### Technology Stack",
        _bullets(
            [
                f"**{name}**: {insights.technology_description(name)}"
                for name in project.architecture.technologies[:5]
            ],
            "- No framework or UI libraries detected",
        ),
    ]
    if config.company_name:
        lines.extend(["", f"Prepared for {config.company_name}."])
    return "\n".join(lines)


@section("system-overview")
def system_overview(project: ProjectAnalysis, config: DocumentConfig) -> str:
    components = project.files_in_category("component")
    services = project.files_in_category("service")
    component_lines = []
    for analysis in components[:10]:
        main = next((fn for fn in analysis.functions if fn.name[:1].isupper()), None)
        main = main or (analysis.functions[0] if analysis.functions else None)
        component_lines.append(
            f"**{analysis.path}**: {main.name if main else 'Component'} - {len(analysis.functions)} functions"
        )
    service_lines = [
        f"**{analysis.path}**: {len(analysis.functions)} methods, {len(analysis.classes)} classes"
        for analysis in services
    ]
    integration_lines = [
        f"**{dependency.name}**: {dependency.description or 'External service integration'}"
        for dependency in insights.integrations(project)
    ]
    return "\n".join(
        [
            "### Application Architecture",
            f"{project.name} follows a {insights.architecture_style(project)} architecture pattern.",
            "",
            "### Entry Points",
            _bullets([f"**{path}**" for path in project.entry_points], "- Application entry point not detected"),
            "",
            "### Component Structure",
            _bullets(component_lines, "No components detected in the analysis."),
            "",
            "### Service Layer",
            _bullets(service_lines, "No dedicated service layer detected."),
            "",
            "### Data Flow",
            "1. **User Interaction**: user actions trigger events in the UI layer",
            f"2. **State Management**: {insights.state_management(project)}",
            "3. **Service Layer**: business logic is handled by dedicated modules",
            f"4. **Data Persistence**: {insights.data_access(project)}",
            "",
            "### Integration Points",
            _bullets(integration_lines, "No external integrations detected."),
        ]
    )


@section("architecture-diagrams")
def architecture_diagrams(project: ProjectAnalysis, config: DocumentConfig) -> str:
    lines = ["```mermaid", "graph TD"]
    lines.append(f'    app["{project.name}"]')
    for index, entry in enumerate(project.entry_points[:5]):
        lines.append(f'    entry{index}["{entry}"] --> app')
    groups = (("component", "UI Components"), ("service", "Services"), ("utility", "Utilities"))
    for category, label in groups:
        count = len(project.files_in_category(category))
        if count:
            lines.append(f'    app --> {category}["{label} ({count})"]')
    if project.dependencies:
        lines.append(f'    app --> deps["Dependencies ({len(project.dependencies)})"]')
    lines.append("```")
    return "\n".join(lines)


@section("technology-stack")
def technology_stack(project: ProjectAnalysis, config: DocumentConfig) -> str:
    def _group(category: str, empty: str) -> str:
        dependencies = insights.dependencies_in(project, category)
        return _bullets(
            [
                f"**{dep.name}** ({dep.version}): {dep.description or 'No description available'}"
                for dep in dependencies
            ],
            empty,
        )

    frameworks = insights.dependencies_in(project, "framework")
    benefits = [
        f"**{dep.name}**: {insights.FRAMEWORK_BENEFITS.get(dep.name, 'Modern development practices and community support')}"
        for dep in frameworks
    ]
    build_tool = project.architecture.build_tool
    return "\n".join(
        [
            "### Core Framework",
            _group("framework", "No core framework detected"),
            "",
            "### UI Libraries & Components",
            _group("ui", "No UI libraries detected"),
            "",
            "### Utility Libraries",
            _group("utility", "No utility libraries detected"),
            "",
            "### Build & Development Tools",
            _bullets(
                [
                    f"**{dep.name}** ({dep.version}): {insights.BUILD_TOOL_ROLES.get(dep.name, 'Development and build process support')}"
                    for dep in [*insights.dependencies_in(project, "build"), *project.dev_dependencies[:10]]
                    if dep.category == "build"
                ],
                "Standard build tools",
            ),
            "",
            "### Framework Benefits",
            _bullets(benefits, "- Not applicable"),
            "",
            "### Technology Decisions",
            f"- **Framework**: {project.type}. "
            f"{insights.FRAMEWORK_RATIONALE.get(project.type, 'Best fit for project requirements and team expertise')}",
            f"- **Alternatives Considered**: "
            f"{insights.FRAMEWORK_ALTERNATIVES.get(project.type, 'Other modern frameworks in the same category')}",
            f"- **Build Tool**: {build_tool or 'Standard build process'}. "
            + insights.BUILD_TOOL_RATIONALE.get(
                (build_tool or "").lower(), "Standard build process chosen for simplicity and reliability"
            ),
        ]
    )


@section("data-architecture")
def data_architecture(project: ProjectAnalysis, config: DocumentConfig) -> str:
    models = [iface.name for analysis in project.files for iface in analysis.interfaces]
    return "\n".join(
        [
            f"Data is accessed through {insights.data_access(project)} and held in "
            f"{insights.state_management(project)}.",
            "",
            "### Data Models",
            _bullets(models[:20], "No typed data models detected."),
        ]
    )


@section("security-architecture")
def security_architecture(project: ProjectAnalysis, config: DocumentConfig) -> str:
    signals = []
    if _has_dependency(project, "jsonwebtoken", "jwt"):
        signals.append("Token-based authentication (JWT)")
    if _has_dependency(project, "passport"):
        signals.append("Passport.js authentication strategies")
    if _has_dependency(project, "helmet"):
        signals.append("HTTP header hardening via helmet")
    if _has_dependency(project, "cors"):
        signals.append("Cross-origin resource sharing policy")
    if _has_dependency(project, "bcrypt", "argon2"):
        signals.append("Password hashing")
    return "\n".join(
        [
            "### Detected Security Controls",
            _bullets(signals, "No dedicated security libraries detected."),
            "",
            _compliance_block(config),
        ]
    ).strip()


@section("api-overview")
def api_overview(project: ProjectAnalysis, config: DocumentConfig) -> str:
    files = _api_files(project)
    lines = [
        f"{project.name} exposes its functionality through {len(files)} API-related module(s).",
        "",
        "- **Protocol**: HTTPS",
        "- **Data Format**: JSON",
        "- **Character Encoding**: UTF-8",
    ]
    if files:
        lines.extend(["", "### Endpoint Groups"])
        lines.extend(f"- `{analysis.path}` ({len(analysis.functions)} handlers)" for analysis in files)
    return "\n".join(lines)


@section("authentication")
def authentication(project: ProjectAnalysis, config: DocumentConfig) -> str:
    mechanisms = []
    for fragment, label in (
        ("jsonwebtoken", "JWT bearer tokens"),
        ("passport", "Passport.js strategies"),
        ("next-auth", "NextAuth.js sessions"),
        ("express-session", "Server-side sessions"),
        ("firebase", "Firebase Authentication"),
        ("@supabase", "Supabase Auth"),
    ):
        if _has_dependency(project, fragment):
            mechanisms.append(label)
    return _bullets(mechanisms, "No authentication library detected; requests are assumed to be unauthenticated.")


@section("endpoints-reference")
def endpoints_reference(project: ProjectAnalysis, config: DocumentConfig) -> str:
    lines: List[str] = []
    for analysis in _api_files(project):
        if not analysis.functions:
            continue
        lines.append(f"### {analysis.path}")
        for fn in analysis.functions:
            lines.append(
                f"- `{infer_http_method(fn.name)} /{infer_endpoint_path(fn.name)}`: {fn.description or fn.name}"
            )
        lines.append("")
    return "\n".join(lines) or "API endpoints are defined in the application routing logic."


@section("error-handling")
def error_handling(project: ProjectAnalysis, config: DocumentConfig) -> str:
    classes = [
        cls.name
        for analysis in project.files
        for cls in analysis.classes
        if cls.name.endswith(("Error", "Exception")) or (cls.extends or "").endswith("Error")
    ]
    return "\n".join(
        [
            "### Custom Error Types",
            _bullets(classes, "No custom error classes detected."),
            "",
            "### Error Response Format",
            "```json",
            '{"success": false, "error": {"code": "ERROR_CODE", "message": "Human readable error message"}}',
            "```",
        ]
    )


@section("quick-start")
def quick_start(project: ProjectAnalysis, config: DocumentConfig) -> str:
    available = insights.scripts(project)
    lines = [
        "### Prerequisites",
        "- **Node.js**: 16.x or higher (LTS recommended)",
        "- **npm**: 8.x or higher",
        "- **Git**",
        "",
        "### Installation",
        "```bash",
        "git clone <repository-url>",
        f"cd {project.name}",
        "npm install",
        insights.start_command(project),
        "```",
    ]
    if available:
        lines.extend(["", "### Available Scripts"])
        lines.extend(
            f"- `npm run {name}`: {insights.script_purpose(name, command)}" for name, command in available.items()
        )
    return "\n".join(lines)


@section("environment-setup")
def environment_setup(project: ProjectAnalysis, config: DocumentConfig) -> str:
    has_env = any(node.name.startswith(".env") for node in project.structure.walk() if not node.is_directory)
    if has_env:
        return "\n".join(
            [
                "Copy the environment template and configure local settings:",
                "```bash",
                "cp .env.example .env.local",
                "```",
            ]
        )
    return "\n".join(
        [
            "Create a `.env.local` file in the project root with your environment variables:",
            "```bash",
            "# DATABASE_URL=your_database_url",
            "# API_KEY=your_api_key",
            "```",
        ]
    )


@section("code-standards")
def code_standards(project: ProjectAnalysis, config: DocumentConfig) -> str:
    tools = []
    if _has_dependency(project, "typescript"):
        tools.append("**TypeScript** for static typing")
    if _has_dependency(project, "eslint"):
        tools.append("**ESLint** for code quality and style enforcement")
    if _has_dependency(project, "prettier"):
        tools.append("**Prettier** for consistent formatting")
    return _bullets(tools, "No linting or formatting tooling detected; follow the conventions of existing files.")


@section("testing-guidelines")
def testing_guidelines(project: ProjectAnalysis, config: DocumentConfig) -> str:
    frameworks = [dep.name for dep in [*project.dependencies, *project.dev_dependencies] if dep.category == "testing"]
    command = "npm test" if "test" in insights.scripts(project) else "npm run test"
    return "\n".join(
        [
            "### Testing Tools",
            _bullets(frameworks, "No testing framework detected."),
            "",
            f"Run the suite with `{command}`.",
        ]
    )


@section("business-objectives")
def business_objectives(project: ProjectAnalysis, config: DocumentConfig) -> str:
    purpose = insights.project_description(project) or f"deliver the {project.name} application"
    return "\n".join(
        [
            f"The primary objective is to {purpose}.",
            "",
            f"- Deliver {len(project.files_in_category('component'))} user-facing components",
            f"- Maintain {len(project.files_in_category('service'))} service modules",
        ]
    )


@section("functional-requirements")
def functional_requirements(project: ProjectAnalysis, config: DocumentConfig) -> str:
    requirements = []
    for analysis in project.files:
        for component in analysis.components:
            requirements.append(f"The system shall present the **{component.name}** view")
    for analysis in project.files_in_category("service"):
        for fn in analysis.functions[:5]:
            requirements.append(f"The system shall support `{fn.name}` ({analysis.path})")
    numbered = [f"FR-{index:03d}: {text}" for index, text in enumerate(requirements, start=1)]
    return _bullets(numbered, "No functional requirements could be derived from the source.")


@section("schema-documentation")
def schema_documentation(project: ProjectAnalysis, config: DocumentConfig) -> str:
    lines: List[str] = []
    for analysis in project.files:
        for iface in analysis.interfaces:
            extends = f" (extends {', '.join(iface.extends)})" if iface.extends else ""
            lines.append(f"### {iface.name}{extends}")
            lines.append(f"Defined in `{analysis.path}`.")
            lines.append("")
    return "\n".join(lines) or "No schema definitions detected."


@section("data-dictionary")
def data_dictionary(project: ProjectAnalysis, config: DocumentConfig) -> str:
    rows = ["| Entity | Field | Type |", "| --- | --- | --- |"]
    for analysis in project.files:
        for iface in analysis.interfaces:
            for prop in iface.properties:
                rows.append(f"| {iface.name} | {prop.name} | {prop.type or 'unknown'} |")
    return "\n".join(rows) if len(rows) > 2 else "No typed fields detected."


@section("cicd-pipeline")
def cicd_pipeline(project: ProjectAnalysis, config: DocumentConfig) -> str:
    available = insights.scripts(project)
    stages = [f"`npm run {name}`" for name in ("lint", "test", "build") if name in available]
    return "\n".join(
        [
            "### Pipeline Stages",
            "1. Install dependencies with `npm ci`",
            *(f"{index}. Run {stage}" for index, stage in enumerate(stages, start=2)),
        ]
    )


@section("environment-configuration")
def environment_configuration(project: ProjectAnalysis, config: DocumentConfig) -> str:
    configs = [analysis.path for analysis in project.files_in_category("config")]
    return "\n".join(
        [
            "### Configuration Files",
            _bullets([f"`{path}`" for path in configs], "No configuration modules detected."),
        ]
    )


@section("data-privacy-compliance")
def data_privacy_compliance(project: ProjectAnalysis, config: DocumentConfig) -> str:
    return _compliance_block(config) or "No compliance frameworks were selected for this document."


@section("user-manual")
def user_manual(project: ProjectAnalysis, config: DocumentConfig) -> str:
    views = [component.name for analysis in project.files for component in analysis.components]
    return "\n".join(
        [
            f"This manual describes how to use {project.name}.",
            "",
            "### Screens",
            _bullets(views, "No user-facing screens detected."),
        ]
    )


@section("feature-documentation")
def feature_documentation(project: ProjectAnalysis, config: DocumentConfig) -> str:
    features = [f"**{pattern}**" for pattern in project.architecture.patterns]
    return _bullets(features, "No notable features detected.")


def _compliance_block(config: DocumentConfig) -> str:
    if not config.compliance:
        return ""
    lines = ["### Compliance"]
    for key in config.compliance:
        name, description = COMPLIANCE_OPTIONS.get(key, (key.upper(), "Custom compliance requirement"))
        lines.append(f"- **{name}**: {description}")
    return "\n".join(lines)


__all__ = [
    "SECTION_RENDERERS",
    "SectionRenderer",
    "infer_endpoint_path",
    "infer_http_method",
    "render_default",
    "render_section_body",
    "section",
]
