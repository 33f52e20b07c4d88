"""Lookup tables and derived facts shared by the document section renderers."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..models import DependencyRecord, FileNode, ProjectAnalysis

TECHNOLOGY_DESCRIPTIONS: Dict[str, str] = {
    "react": "UI library for building user interfaces",
    "vue": "progressive JavaScript framework",
    "angular": "platform for building mobile and desktop web applications",
    "express": "web application framework for Node.js",
    "next": "React framework for production",
    "typescript": "typed superset of JavaScript",
    "tailwindcss": "utility-first CSS framework",
    "vite": "build tool for modern web development",
}

ARCHITECTURE_STYLES: Dict[str, str] = {
    "react": "component-based",
    "vue": "component-based with reactive data",
    "angular": "modular component-based",
    "svelte": "compiled component-based",
    "express": "layered server-side",
    "nextjs": "full-stack component-based",
}

FRAMEWORK_BENEFITS: Dict[str, str] = {
    "react": "Component reusability, virtual DOM performance, large ecosystem",
    "vue": "Gentle learning curve, reactive data binding, excellent tooling",
    "angular": "Full-featured framework, TypeScript integration, enterprise-ready",
    "express": "Minimal and flexible, extensive middleware ecosystem, Node.js integration",
    "next": "Server-side rendering, automatic code splitting, optimized performance",
}

FRAMEWORK_RATIONALE: Dict[str, str] = {
    "react": "Large ecosystem, excellent performance, strong community support",
    "vue": "Gentle learning curve, excellent documentation, progressive adoption",
    "angular": "Enterprise features, TypeScript integration, comprehensive tooling",
    "express": "Minimal overhead, flexible architecture, extensive middleware",
    "nextjs": "Full-stack capabilities, excellent performance, Vercel integration",
}

FRAMEWORK_ALTERNATIVES: Dict[str, str] = {
    "react": "Vue.js, Angular, Svelte",
    "vue": "React, Angular, Svelte",
    "angular": "React, Vue.js, Svelte",
    "express": "Fastify, Koa, NestJS",
    "nextjs": "Nuxt.js, Gatsby, SvelteKit",
}

BUILD_TOOL_RATIONALE: Dict[str, str] = {
    "vite": "Extremely fast development server and optimized production builds",
    "webpack": "Mature ecosystem with extensive plugin support",
    "rollup": "Optimized for library builds and tree-shaking",
    "parcel": "Zero-configuration build tool for rapid development",
}

BUILD_TOOL_ROLES: Dict[str, str] = {
    "vite": "Fast development server and optimized production builds",
    "webpack": "Module bundling and asset optimization",
    "typescript": "Type checking and compilation",
    "eslint": "Code quality and style enforcement",
    "prettier": "Code formatting and consistency",
}

SCRIPT_PURPOSES: Dict[str, str] = {
    "dev": "Start development server with hot reloading",
    "start": "Start production server",
    "build": "Build application for production",
    "test": "Run test suite",
    "lint": "Check code quality and style",
    "preview": "Preview production build locally",
}


def display_type(project: ProjectAnalysis) -> str:
    return project.type[:1].upper() + project.type[1:] if project.type else "Unknown"


def technology_description(name: str) -> str:
    return TECHNOLOGY_DESCRIPTIONS.get(name.lower(), "development tool")


def architecture_style(project: ProjectAnalysis) -> str:
    return ARCHITECTURE_STYLES.get(project.type, "modular")


def project_description(project: ProjectAnalysis) -> Optional[str]:
    manifest = project.manifest or {}
    description = manifest.get("description")
    return description.strip() if isinstance(description, str) and description.strip() else None


def scripts(project: ProjectAnalysis) -> Dict[str, str]:
    manifest = project.manifest or {}
    raw = manifest.get("scripts")
    if not isinstance(raw, dict):
        return {}
    return {str(name): str(command) for name, command in raw.items()}


def script_purpose(name: str, command: str) -> str:
    return SCRIPT_PURPOSES.get(name, f"Execute: {command}")


def start_command(project: ProjectAnalysis) -> str:
    available = scripts(project)
    if "dev" in available:
        return "npm run dev"
    return "npm start"


def _has_dependency(project: ProjectAnalysis, *names: str, partial: bool = False) -> bool:
    for dependency in project.dependencies:
        if partial and any(name in dependency.name for name in names):
            return True
        if dependency.name in names:
            return True
    return False


def state_management(project: ProjectAnalysis) -> str:
    if _has_dependency(project, "redux", partial=True):
        return "Redux for predictable state management"
    if _has_dependency(project, "zustand"):
        return "Zustand for lightweight state management"
    if _has_dependency(project, "mobx"):
        return "MobX for reactive state management"
    if project.type == "react":
        return "React hooks and context"
    return "component-level state management"


def data_access(project: ProjectAnalysis) -> str:
    if _has_dependency(project, "graphql", partial=True):
        return "GraphQL API integration"
    if _has_dependency(project, "axios"):
        return "REST API with Axios HTTP client"
    return "standard HTTP requests"


def caching_strategy(project: ProjectAnalysis) -> str:
    if project.type == "nextjs":
        return "Next.js built-in caching and ISR"
    if project.type == "react":
        return "Browser caching and React Query/SWR"
    return "Standard HTTP caching headers"


def integrations(project: ProjectAnalysis, limit: int = 5) -> List[DependencyRecord]:
    return [
        dependency
        for dependency in project.dependencies
        if dependency.category not in ("framework", "ui", "build", "testing")
    ][:limit]


def dependencies_in(project: ProjectAnalysis, category: str) -> List[DependencyRecord]:
    return [dependency for dependency in project.dependencies if dependency.category == category]


def total_lines(project: ProjectAnalysis) -> int:
    return sum(len(analysis.content.split("\n")) for analysis in project.files if analysis.content)


def tree_lines(root: FileNode, *, max_depth: int = 4, max_entries: int = 200) -> List[str]:
    """Indented listing of the kept tree, directories first at each level."""
    lines: List[str] = []

    def _visit(node: FileNode, depth: int) -> None:
        if len(lines) >= max_entries:
            return
        children = sorted(
            (child for child in node.children if not child.ignored),
            key=lambda child: (not child.is_directory, child.name.lower()),
        )
        for child in children:
            if len(lines) >= max_entries:
                return
            suffix = "/" if child.is_directory else ""
            lines.append(f"{'  ' * depth}{child.name}{suffix}")
            if child.is_directory and depth + 1 < max_depth:
                _visit(child, depth + 1)

    if not root.ignored:
        _visit(root, 0)
    return lines


__all__ = [
    "architecture_style",
    "caching_strategy",
    "data_access",
    "dependencies_in",
    "display_type",
    "integrations",
    "project_description",
    "script_purpose",
    "scripts",
    "start_command",
    "state_management",
    "technology_description",
    "total_lines",
    "tree_lines",
]
