"""Core data models shared across codescribe stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

FILE = "file"
DIRECTORY = "directory"

FILE_CATEGORIES: tuple[str, ...] = (
    "component",
    "service",
    "utility",
    "config",
    "type",
    "style",
    "test",
    "other",
)

NODE_CATEGORIES: tuple[str, ...] = ("source", "config", "documentation", "style")

DEPENDENCY_CATEGORIES: tuple[str, ...] = (
    "framework",
    "ui",
    "utility",
    "build",
    "testing",
    "styling",
    "api",
    "other",
)


@dataclass
class FileNode:
    """One file or directory in the reconstructed project tree."""

    name: str
    path: str
    kind: str = FILE
    content: str = ""
    size: Optional[int] = None
    children: List["FileNode"] = field(default_factory=list)
    ignored: Optional[bool] = None
    category: Optional[str] = None

    @property
    def is_directory(self) -> bool:
        return self.kind == DIRECTORY

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()

    def walk(self) -> Iterator["FileNode"]:
        """Yield this node and every descendant depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> Optional["FileNode"]:
        for node in self.walk():
            if node.path == path:
                return node
        return None


@dataclass
class SymbolRecord:
    """A recovered function, method or component declaration."""

    name: str
    parameters: List[str] = field(default_factory=list)
    return_type: Optional[str] = None
    line: int = 0
    is_exported: bool = False
    is_async: bool = False
    description: Optional[str] = None
    is_component: bool = False


@dataclass
class PropertyRecord:
    name: str
    type: Optional[str] = None
    visibility: str = "public"
    is_static: bool = False


@dataclass
class ClassRecord:
    name: str
    line: int = 0
    extends: Optional[str] = None
    implements: List[str] = field(default_factory=list)
    description: Optional[str] = None
    methods: List[SymbolRecord] = field(default_factory=list)
    properties: List[PropertyRecord] = field(default_factory=list)


@dataclass
class InterfaceRecord:
    name: str
    line: int = 0
    extends: List[str] = field(default_factory=list)
    properties: List[PropertyRecord] = field(default_factory=list)
    methods: List[SymbolRecord] = field(default_factory=list)


@dataclass
class ImportRecord:
    source: str
    names: List[str] = field(default_factory=list)
    kind: str = "import"
    is_default: bool = False
    is_namespace: bool = False


@dataclass
class ExportRecord:
    name: str
    kind: str = "variable"
    is_default: bool = False


@dataclass
class FileAnalysis:
    """Symbols and heuristics recovered from a single file."""

    path: str
    category: str = "other"
    functions: List[SymbolRecord] = field(default_factory=list)
    classes: List[ClassRecord] = field(default_factory=list)
    interfaces: List[InterfaceRecord] = field(default_factory=list)
    imports: List[ImportRecord] = field(default_factory=list)
    exports: List[ExportRecord] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    framework: Optional[str] = None
    is_entry_point: bool = False
    complexity: str = "low"
    content: str = ""

    @property
    def components(self) -> List[SymbolRecord]:
        return [function for function in self.functions if function.is_component]


@dataclass
class DependencyRecord:
    name: str
    version: str
    category: str = "other"
    description: Optional[str] = None


@dataclass
class ArchitectureSummary:
    patterns: List[str] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    build_tool: Optional[str] = None


@dataclass
class ProjectAnalysis:
    """Aggregate root handed to document synthesis and workflow extraction."""

    name: str
    type: str
    structure: FileNode
    files: List[FileAnalysis] = field(default_factory=list)
    dependencies: List[DependencyRecord] = field(default_factory=list)
    dev_dependencies: List[DependencyRecord] = field(default_factory=list)
    manifest: Optional[Dict[str, Any]] = None
    entry_points: List[str] = field(default_factory=list)
    architecture: ArchitectureSummary = field(default_factory=ArchitectureSummary)

    def files_in_category(self, category: str) -> List[FileAnalysis]:
        return [analysis for analysis in self.files if analysis.category == category]


@dataclass(frozen=True)
class DocumentMetadata:
    file_count: int = 0
    component_count: int = 0
    service_count: int = 0
    total_lines: int = 0


@dataclass(frozen=True)
class GeneratedDoc:
    """Rendered standard documentation for one analysis run."""

    content: str
    ai_optimized: str
    sections: Dict[str, str]
    metadata: DocumentMetadata


@dataclass(frozen=True)
class DocumentInfo:
    version: str
    author: str
    approval_status: str
    standard: str
    output_format: str
    created_at: str
    tags: tuple[str, ...] = ()
    compliance: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProfessionalDoc:
    """Rendered catalog document for a chosen document type."""

    document_type: str
    title: str
    content: str
    ai_optimized: str
    sections: Dict[str, str]
    metadata: DocumentMetadata
    info: DocumentInfo


__all__ = [
    "ArchitectureSummary",
    "ClassRecord",
    "DEPENDENCY_CATEGORIES",
    "DIRECTORY",
    "DependencyRecord",
    "DocumentInfo",
    "DocumentMetadata",
    "ExportRecord",
    "FILE",
    "FILE_CATEGORIES",
    "FileAnalysis",
    "FileNode",
    "GeneratedDoc",
    "ImportRecord",
    "InterfaceRecord",
    "NODE_CATEGORIES",
    "ProfessionalDoc",
    "ProjectAnalysis",
    "PropertyRecord",
    "SymbolRecord",
]
