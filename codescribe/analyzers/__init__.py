"""Pattern-based static analysis of ingested projects."""

from __future__ import annotations

from .parser import CodeParser
from .project import ProjectAnalyzer, detect_project_type, extract_manifest

__all__ = ["CodeParser", "ProjectAnalyzer", "detect_project_type", "extract_manifest"]
