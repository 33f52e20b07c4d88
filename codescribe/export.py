"""Downloadable payloads for generated documents."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Union

from .documents.standard import compute_metadata
from .documents.templating import create_environment
from .errors import ExportError
from .models import GeneratedDoc, ProfessionalDoc, ProjectAnalysis

DOCUMENT_EXPORT_FORMATS: tuple[str, ...] = ("markdown", "ai", "json", "html")

Document = Union[GeneratedDoc, ProfessionalDoc]


@dataclass(frozen=True)
class ExportPayload:
    filename: str
    media_type: str
    data: bytes


def _document_title(doc: Document) -> str:
    if isinstance(doc, ProfessionalDoc):
        return doc.title
    first_line = doc.content.splitlines()[0] if doc.content else ""
    return first_line.lstrip("# ").strip() or "Project Documentation"


def _to_json(doc: Document) -> Dict[str, Any]:
    payload = asdict(doc)
    payload["kind"] = "professional" if isinstance(doc, ProfessionalDoc) else "standard"
    return payload


def analysis_to_dict(project: ProjectAnalysis) -> Dict[str, Any]:
    """JSON-ready view of an analysis without file contents or the raw tree."""
    files = []
    for analysis in project.files:
        entry = asdict(analysis)
        entry.pop("content", None)
        files.append(entry)
    return {
        "name": project.name,
        "type": project.type,
        "entry_points": list(project.entry_points),
        "architecture": asdict(project.architecture),
        "dependencies": [asdict(dependency) for dependency in project.dependencies],
        "dev_dependencies": [asdict(dependency) for dependency in project.dev_dependencies],
        "metadata": asdict(compute_metadata(project)),
        "files": files,
    }


def export_document(doc: Document, fmt: str) -> ExportPayload:
    """Encode a generated document as markdown, AI context, JSON or a standalone HTML page."""
    key = (fmt or "").lower()
    if key == "markdown":
        return ExportPayload("project-documentation.md", "text/markdown", doc.content.encode("utf-8"))
    if key == "ai":
        return ExportPayload("ai-context.md", "text/markdown", doc.ai_optimized.encode("utf-8"))
    if key == "json":
        text = json.dumps(_to_json(doc), indent=2, ensure_ascii=False)
        return ExportPayload("project-documentation.json", "application/json", text.encode("utf-8"))
    if key == "html":
        env = create_environment(autoescape=True)
        page = env.get_template("export.html.j2").render(title=_document_title(doc), content=doc.content)
        return ExportPayload("project-documentation.html", "text/html", page.encode("utf-8"))
    raise ExportError(
        f"Unsupported export format '{fmt}'. Expected one of: {', '.join(DOCUMENT_EXPORT_FORMATS)}"
    )


__all__ = ["DOCUMENT_EXPORT_FORMATS", "ExportPayload", "analysis_to_dict", "export_document"]
