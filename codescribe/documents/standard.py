"""Fixed-section project documentation and its AI-optimized variant."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List

from ..logging import get_logger
from ..models import DocumentMetadata, GeneratedDoc, ProjectAnalysis
from . import insights
from .constants import STANDARD_SECTION_TITLES, STANDARD_SECTIONS
from .templating import create_environment, render_section
from .toc import TableOfContentsBuilder

logger = get_logger("documents.standard")


def compute_metadata(project: ProjectAnalysis) -> DocumentMetadata:
    """Counts derived from the analysis alone, never from a rendered variant."""
    return DocumentMetadata(
        file_count=len(project.files),
        component_count=len(project.files_in_category("component")),
        service_count=len(project.files_in_category("service")),
        total_lines=insights.total_lines(project),
    )


def _overview(project: ProjectAnalysis) -> str:
    metadata = compute_metadata(project)
    description = insights.project_description(project)
    lines = [
        f"**{project.name}** is a {insights.display_type(project)} project"
        + (f": {description}" if description else "."),
        "",
        f"- **Project Type**: {insights.display_type(project)}",
        f"- **Files Analyzed**: {metadata.file_count}",
        f"- **Components**: {metadata.component_count}",
        f"- **Services**: {metadata.service_count}",
        f"- **Lines of Code**: {metadata.total_lines}",
        f"- **Dependencies**: {len(project.dependencies)} runtime, {len(project.dev_dependencies)} development",
    ]
    if project.entry_points:
        lines.append(f"- **Entry Points**: {', '.join(f'`{path}`' for path in project.entry_points)}")
    return "\n".join(lines)


def _architecture(project: ProjectAnalysis) -> str:
    architecture = project.architecture
    lines = [f"The project follows a {insights.architecture_style(project)} architecture.", ""]
    lines.append("### Patterns")
    lines.extend(f"- {pattern}" for pattern in architecture.patterns)
    if not architecture.patterns:
        lines.append("- No specific architectural patterns detected")
    lines.extend(["", "### Technologies"])
    lines.extend(
        f"- **{name}**: {insights.technology_description(name)}" for name in architecture.technologies
    )
    if not architecture.technologies:
        lines.append("- No framework or UI libraries detected")
    lines.extend(["", f"**Build Tool**: {architecture.build_tool or 'Not detected'}"])
    return "\n".join(lines)


def _structure(project: ProjectAnalysis) -> str:
    entries = insights.tree_lines(project.structure)
    if not entries:
        return "No files survived filtering."
    return "\n".join(["```text", f"{project.name}/", *(f"  {entry}" for entry in entries), "```"])


def _dependencies(project: ProjectAnalysis) -> str:
    lines: List[str] = []
    if not project.dependencies and not project.dev_dependencies:
        return "No dependencies declared."
    if project.dependencies:
        lines.append("### Runtime")
        for dependency in project.dependencies:
            detail = f": {dependency.description}" if dependency.description else ""
            lines.append(f"- **{dependency.name}** `{dependency.version}` ({dependency.category}){detail}")
    if project.dev_dependencies:
        if lines:
            lines.append("")
        lines.append("### Development")
        for dependency in project.dev_dependencies:
            lines.append(f"- **{dependency.name}** `{dependency.version}` ({dependency.category})")
    return "\n".join(lines)


def _components(project: ProjectAnalysis) -> str:
    lines: List[str] = []
    for analysis in project.files:
        for component in analysis.components:
            props = ", ".join(component.parameters) or "none"
            summary = f" - {component.description}" if component.description else ""
            lines.append(f"- **{component.name}** (`{analysis.path}`), props: {props}{summary}")
    services = project.files_in_category("service")
    if services:
        if lines:
            lines.append("")
        lines.append("### Services")
        for service in services:
            names = ", ".join(function.name for function in service.functions[:8]) or "no functions"
            lines.append(f"- `{service.path}`: {names}")
    return "\n".join(lines) or "No UI components or services detected."


def _data_flow(project: ProjectAnalysis) -> str:
    entry = project.entry_points[0] if project.entry_points else "the application entry point"
    return "\n".join(
        [
            f"1. **Bootstrap**: execution starts at `{entry}`.",
            f"2. **State**: application state is managed through {insights.state_management(project)}.",
            f"3. **Data Access**: remote data is reached via {insights.data_access(project)}.",
            f"4. **Caching**: {insights.caching_strategy(project)}.",
        ]
    )


def _getting_started(project: ProjectAnalysis) -> str:
    lines = [
        "```bash",
        "npm install",
        insights.start_command(project),
        "```",
    ]
    available = insights.scripts(project)
    if available:
        lines.extend(["", "### Available Scripts"])
        for name, command in available.items():
            lines.append(f"- `npm run {name}`: {insights.script_purpose(name, command)}")
    return "\n".join(lines)


SectionBuilder = Callable[[ProjectAnalysis], str]

SECTION_BUILDERS: Dict[str, SectionBuilder] = {
    "overview": _overview,
    "architecture": _architecture,
    "structure": _structure,
    "dependencies": _dependencies,
    "components": _components,
    "data_flow": _data_flow,
    "getting_started": _getting_started,
}


class DocumentGenerator:
    """Renders the standard document set from a ProjectAnalysis."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = create_environment(templates_dir)
        self._toc = TableOfContentsBuilder()

    def generate(self, project: ProjectAnalysis) -> GeneratedDoc:
        metadata = compute_metadata(project)
        sections = {name: SECTION_BUILDERS[name](project).strip() for name in STANDARD_SECTIONS}
        rendered = [
            {
                "name": name,
                "title": STANDARD_SECTION_TITLES[name],
                "body": render_section(
                    self._env, name, STANDARD_SECTION_TITLES[name], body, {"project": project.name}
                ),
            }
            for name, body in sections.items()
        ]
        content = self._env.get_template("document.j2").render(
            project_name=project.name,
            toc_placeholder=TableOfContentsBuilder.PLACEHOLDER,
            sections=rendered,
        )
        content = self._toc.build(content).strip() + "\n"
        ai_optimized = self.render_ai_optimized(project, metadata)
        logger.debug("Rendered standard document for %s (%d sections)", project.name, len(sections))
        return GeneratedDoc(content=content, ai_optimized=ai_optimized, sections=sections, metadata=metadata)

    def render_ai_optimized(self, project: ProjectAnalysis, metadata: DocumentMetadata | None = None) -> str:
        metadata = metadata or compute_metadata(project)
        template = self._env.get_template("ai_optimized.j2")
        return (
            template.render(
                project=project,
                metadata=metadata,
                project_type=insights.display_type(project),
                description=insights.project_description(project),
                state_management=insights.state_management(project),
                data_access=insights.data_access(project),
            ).strip()
            + "\n"
        )


__all__ = ["DocumentGenerator", "SECTION_BUILDERS", "compute_metadata"]
