"""Project-level analysis: manifest, project type and the aggregate ProjectAnalysis."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..filtering import FileFilter, find_first, iter_kept
from ..logging import get_logger
from ..models import ArchitectureSummary, FileNode, ProjectAnalysis
from . import dependencies
from .parser import CodeParser

MANIFEST_NAME = "package.json"
UNKNOWN_PROJECT = "Unknown Project"

# Manifest dependency name -> project type, first match wins.
_TYPE_BY_DEPENDENCY = (
    ("react", "react"),
    ("vue", "vue"),
    ("@angular/core", "angular"),
    ("svelte", "svelte"),
    ("next", "nextjs"),
    ("express", "express"),
    ("fastify", "node"),
    ("koa", "node"),
)

logger = get_logger("analyzers.project")


def extract_manifest(root: FileNode) -> Optional[Dict[str, Any]]:
    """Parse the first package manifest in the tree; unreadable manifests yield None."""
    node = find_first(root, MANIFEST_NAME)
    if node is None:
        return None
    try:
        payload = json.loads(node.content)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unparsable manifest %s: %s", node.path, exc)
        return None
    if not isinstance(payload, dict):
        logger.warning("Ignoring manifest %s: expected a JSON object", node.path)
        return None
    return payload


def _has_node(root: FileNode, name: str, *, directory: bool) -> bool:
    return any(
        node.name == name and node.is_directory == directory
        for node in iter_kept(root)
        if node is not root
    )


def detect_project_type(root: FileNode, manifest: Optional[Dict[str, Any]]) -> str:
    if manifest:
        declared: Dict[str, Any] = {}
        for key in ("dependencies", "devDependencies"):
            section = manifest.get(key)
            if isinstance(section, dict):
                declared.update(section)
        for dependency, project_type in _TYPE_BY_DEPENDENCY:
            if dependency in declared:
                return project_type

    if _has_node(root, "pages", directory=True) or _has_node(root, "app", directory=True):
        return "nextjs"
    if _has_node(root, "src", directory=True) and _has_node(root, "index.html", directory=False):
        return "react"
    return "other"


def resolve_project_name(root: FileNode, manifest: Optional[Dict[str, Any]]) -> str:
    if manifest and isinstance(manifest.get("name"), str) and manifest["name"].strip():
        return manifest["name"].strip()
    return root.name or UNKNOWN_PROJECT


class ProjectAnalyzer:
    """Runs the symbol extractor per file and classifies dependencies and architecture."""

    def __init__(self, parser: CodeParser | None = None) -> None:
        self.parser = parser or CodeParser()

    def analyze(self, root: FileNode) -> ProjectAnalysis:
        manifest = extract_manifest(root)
        runtime, dev = dependencies.categorize_dependencies(manifest)
        build_tool = dependencies.detect_build_tool(manifest)

        project = ProjectAnalysis(
            name=resolve_project_name(root, manifest),
            type=detect_project_type(root, manifest),
            structure=root,
            dependencies=runtime,
            dev_dependencies=dev,
            manifest=manifest,
        )

        for node in FileFilter.iter_analyzable(root):
            analysis = self.parser.parse(node.path, node.content)
            project.files.append(analysis)
            if analysis.is_entry_point:
                project.entry_points.append(analysis.path)
        logger.debug("Parsed %d files for %s", len(project.files), project.name)

        project.architecture = ArchitectureSummary(
            patterns=dependencies.detect_architecture_patterns([*runtime, *dev], project.files),
            technologies=dependencies.detect_technologies(runtime, build_tool),
            build_tool=build_tool,
        )
        return project


__all__ = [
    "MANIFEST_NAME",
    "ProjectAnalyzer",
    "UNKNOWN_PROJECT",
    "detect_project_type",
    "extract_manifest",
    "resolve_project_name",
]
