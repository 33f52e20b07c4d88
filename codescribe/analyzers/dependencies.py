"""Dependency categorisation, build-tool detection and architecture patterns."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models import DependencyRecord, FileAnalysis

KNOWN_DEPENDENCIES: Dict[str, Tuple[str, str]] = {
    # Frameworks
    "react": ("framework", "React library for building user interfaces"),
    "vue": ("framework", "Progressive JavaScript framework"),
    "@angular/core": ("framework", "Angular framework core"),
    "svelte": ("framework", "Cybernetically enhanced web apps"),
    "next": ("framework", "React framework for production"),
    "nuxt": ("framework", "Vue.js framework"),
    "express": ("framework", "Fast, unopinionated web framework for Node.js"),
    "fastify": ("framework", "Fast and low overhead web framework for Node.js"),
    # UI libraries
    "@mui/material": ("ui", "Material-UI React components"),
    "antd": ("ui", "Enterprise-class UI design language"),
    "react-bootstrap": ("ui", "Bootstrap components for React"),
    "chakra-ui": ("ui", "Modular and accessible component library"),
    "semantic-ui-react": ("ui", "React integration for Semantic UI"),
    # Styling
    "tailwindcss": ("styling", "Utility-first CSS framework"),
    "styled-components": ("styling", "CSS-in-JS library"),
    "emotion": ("styling", "CSS-in-JS library"),
    "sass": ("styling", "CSS extension language"),
    "less": ("styling", "CSS pre-processor"),
    # State management
    "redux": ("utility", "Predictable state container"),
    "@reduxjs/toolkit": ("utility", "Official Redux toolkit"),
    "zustand": ("utility", "Small, fast state management"),
    "mobx": ("utility", "Reactive state management"),
    "recoil": ("utility", "Experimental state management for React"),
    # Routing
    "react-router-dom": ("utility", "Declarative routing for React"),
    "vue-router": ("utility", "Official router for Vue.js"),
    "@reach/router": ("utility", "Router for React"),
    # HTTP clients
    "axios": ("api", "Promise-based HTTP client"),
    "fetch": ("api", "Fetch API polyfill"),
    "superagent": ("api", "Ajax API"),
    # Utilities
    "lodash": ("utility", "JavaScript utility library"),
    "ramda": ("utility", "Functional programming library"),
    "date-fns": ("utility", "Modern JavaScript date utility library"),
    "moment": ("utility", "Parse, validate, manipulate dates"),
    "uuid": ("utility", "Generate RFC-compliant UUIDs"),
    # Build tools
    "vite": ("build", "Next generation frontend tooling"),
    "webpack": ("build", "Module bundler"),
    "rollup": ("build", "Module bundler for JavaScript"),
    "parcel": ("build", "Zero configuration build tool"),
    "esbuild": ("build", "Extremely fast JavaScript bundler"),
    # Testing
    "jest": ("testing", "JavaScript testing framework"),
    "vitest": ("testing", "Blazing fast unit test framework"),
    "@testing-library/react": ("testing", "React testing utilities"),
    "cypress": ("testing", "End-to-end testing framework"),
    "playwright": ("testing", "Cross-browser automation library"),
    # Development tools
    "typescript": ("build", "TypeScript language"),
    "eslint": ("build", "JavaScript linter"),
    "prettier": ("build", "Code formatter"),
    "@types/node": ("build", "TypeScript definitions for Node.js"),
    "@types/react": ("build", "TypeScript definitions for React"),
}

# Keyword probes applied in order to names missing from the table.
_INFERENCE_RULES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("framework", ("react", "vue", "angular")),
    ("ui", ("ui", "component", "design")),
    ("styling", ("css", "style", "theme")),
    ("testing", ("test", "spec", "mock")),
    ("build", ("build", "webpack", "babel", "eslint")),
    ("api", ("api", "http", "request")),
)

_BUNDLERS: Sequence[Tuple[str, str]] = (
    ("vite", "Vite"),
    ("webpack", "Webpack"),
    ("rollup", "Rollup"),
    ("parcel", "Parcel"),
)


def infer_category(name: str) -> str:
    for category, keywords in _INFERENCE_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    if name.startswith("@types/"):
        return "build"
    return "other"


def categorize(name: str, version: Any) -> DependencyRecord:
    known = KNOWN_DEPENDENCIES.get(name)
    return DependencyRecord(
        name=name,
        version=str(version) if version is not None else "",
        category=known[0] if known else infer_category(name),
        description=known[1] if known else None,
    )


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def categorize_dependencies(
    manifest: Optional[Mapping[str, Any]],
) -> Tuple[List[DependencyRecord], List[DependencyRecord]]:
    """Return (runtime, development) dependency records from a package manifest."""
    if not manifest:
        return [], []
    runtime = [categorize(name, version) for name, version in _as_mapping(manifest.get("dependencies")).items()]
    dev = [categorize(name, version) for name, version in _as_mapping(manifest.get("devDependencies")).items()]
    return runtime, dev


def detect_build_tool(manifest: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not manifest:
        return None
    scripts = [str(value) for value in _as_mapping(manifest.get("scripts")).values()]
    dev = _as_mapping(manifest.get("devDependencies"))

    for key, label in _BUNDLERS:
        if key in dev or any(key in script for script in scripts):
            return label
    if any("react-scripts" in script for script in scripts):
        return "Create React App"
    if any("next" in script for script in scripts):
        return "Next.js"
    return None


def _names(dependencies: Iterable[DependencyRecord]) -> set[str]:
    return {dependency.name for dependency in dependencies}


PatternRule = Callable[[set, Sequence[FileAnalysis]], List[str]]


def _redux(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["Redux Pattern"] if names & {"redux", "@reduxjs/toolkit"} else []


def _zustand(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["Zustand State Management"] if "zustand" in names else []


def _react(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    if "react" not in names:
        return []
    patterns = ["Component-Based Architecture"]
    if any(function.name.startswith("use") for analysis in files for function in analysis.functions):
        patterns.append("React Hooks Pattern")
    return patterns


def _http_client(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["HTTP Client Pattern"] if "axios" in names else []


def _utility_css(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["Utility-First CSS"] if "tailwindcss" in names else []


def _css_in_js(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["CSS-in-JS"] if names & {"styled-components", "@emotion/styled"} else []


def _testing_library(names: set, files: Sequence[FileAnalysis]) -> List[str]:
    return ["Testing Library Pattern"] if any("testing-library" in name for name in names) else []


PATTERN_RULES: Sequence[PatternRule] = (
    _redux,
    _zustand,
    _react,
    _http_client,
    _utility_css,
    _css_in_js,
    _testing_library,
)


def detect_architecture_patterns(
    dependencies: Iterable[DependencyRecord], files: Sequence[FileAnalysis]
) -> List[str]:
    """Apply every pattern rule; rules are independent and their results accumulate."""
    names = _names(dependencies)
    patterns: List[str] = []
    for rule in PATTERN_RULES:
        for pattern in rule(names, files):
            if pattern not in patterns:
                patterns.append(pattern)
    return patterns


def detect_technologies(dependencies: Sequence[DependencyRecord], build_tool: Optional[str]) -> List[str]:
    technologies = [dependency.name for dependency in dependencies if dependency.category == "framework"]
    technologies.extend(dependency.name for dependency in dependencies if dependency.category == "ui")
    if build_tool:
        technologies.append(build_tool)
    return technologies


__all__ = [
    "KNOWN_DEPENDENCIES",
    "PATTERN_RULES",
    "categorize",
    "categorize_dependencies",
    "detect_architecture_patterns",
    "detect_build_tool",
    "detect_technologies",
    "infer_category",
]
