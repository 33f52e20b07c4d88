"""Pipeline orchestration: ingest, filter, analyze, then document, generate workflows or export."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .augment.export import export_workflows
from .augment.generator import WorkflowGenerationOutcome, WorkflowGenerator
from .augment.schema import WorkflowGenerationResult
from .chat import ChatResponse, CodebaseAssistant
from .analyzers import ProjectAnalyzer
from .config import CodescribeConfig, DocumentSettings, load_config
from .documents import DocumentConfig, DocumentGenerator, ProfessionalDocumentGenerator
from .documents.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_DOCUMENT_TYPE,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_STANDARD,
)
from .errors import IngestError
from .export import Document, ExportPayload, export_document
from .filtering import FileFilter
from .ingest import Blob, TreeIngestor
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import FileNode, GeneratedDoc, ProfessionalDoc, ProjectAnalysis
from .usage import AllowAllUsageGate, UsageAction, UsageGate, ensure_allowed
from .workflows import WorkflowAnalysisData, WorkflowAnalyzer


@dataclass(frozen=True)
class AnalysisRun:
    project: ProjectAnalysis
    document: GeneratedDoc


@dataclass(frozen=True)
class ProfessionalRun:
    project: ProjectAnalysis
    document: ProfessionalDoc


@dataclass(frozen=True)
class WorkflowRun:
    project: ProjectAnalysis
    data: WorkflowAnalysisData
    outcome: WorkflowGenerationOutcome


@dataclass(frozen=True)
class ChatRun:
    project: ProjectAnalysis
    response: ChatResponse


def resolve_document_config(
    settings: DocumentSettings | None = None,
    *,
    document_type: str | None = None,
    standard: str | None = None,
    output_format: str | None = None,
    company_name: str | None = None,
    author: str | None = None,
    compliance: Sequence[str] | None = None,
    include_optional: bool = True,
) -> DocumentConfig:
    """Explicit arguments win over .codescribe.yml document settings, which win over defaults."""
    settings = settings or DocumentSettings()
    return DocumentConfig(
        document_type=document_type or settings.document_type or DEFAULT_DOCUMENT_TYPE,
        standard=standard or settings.standard or DEFAULT_STANDARD,
        output_format=output_format or settings.output_format or DEFAULT_OUTPUT_FORMAT,
        company_name=company_name or settings.company_name,
        author=author or settings.author or DEFAULT_AUTHOR,
        compliance=tuple(compliance if compliance else settings.compliance),
        include_optional=include_optional,
    )


def _file_count(root: FileNode) -> int:
    return sum(1 for node in root.walk() if not node.is_directory)


class Orchestrator:
    """Coordinates one pipeline run; build a fresh instance per request."""

    def __init__(
        self,
        config: CodescribeConfig | None = None,
        *,
        usage_gate: UsageGate | None = None,
        ingestor: TreeIngestor | None = None,
        project_analyzer: ProjectAnalyzer | None = None,
        workflow_analyzer: WorkflowAnalyzer | None = None,
        workflow_generator: WorkflowGenerator | None = None,
        llm_runner: LLMRunner | None = None,
        document_generator: DocumentGenerator | None = None,
        professional_generator: ProfessionalDocumentGenerator | None = None,
    ) -> None:
        self.config = config or CodescribeConfig(root=Path.cwd())
        self.usage_gate: UsageGate = usage_gate or AllowAllUsageGate()
        self.ingestor = ingestor or TreeIngestor()
        self.project_analyzer = project_analyzer or ProjectAnalyzer()
        self.workflow_analyzer = workflow_analyzer or WorkflowAnalyzer()
        self._workflow_generator = workflow_generator
        self._llm_runner = llm_runner
        self.document_generator = document_generator or DocumentGenerator()
        self.professional_generator = professional_generator or ProfessionalDocumentGenerator()
        self.logger = get_logger("orchestrator")

    @classmethod
    def for_path(cls, path: str | Path, **kwargs: object) -> "Orchestrator":
        """Orchestrator configured from the .codescribe.yml beside a project directory."""
        target = Path(path).expanduser()
        config = load_config(target if target.is_dir() else target.parent)
        return cls(config, **kwargs)  # type: ignore[arg-type]

    def load_path(self, path: str | Path) -> FileNode:
        """Ingest a local directory or ``.zip`` archive."""
        target = Path(path).expanduser()
        try:
            if target.is_file() and target.suffix.lower() == ".zip":
                return self.ingestor.from_archive(target.read_bytes(), name=target.name)
            return self.ingestor.from_directory(target)
        except OSError as exc:
            raise IngestError(str(exc)) from exc

    def load_blobs(self, blobs: Mapping[str, Blob]) -> FileNode:
        return self.ingestor.from_blobs(blobs)

    def load_archive(self, data: bytes, name: str = "archive.zip") -> FileNode:
        return self.ingestor.from_archive(data, name=name)

    def analyze(self, root: FileNode) -> ProjectAnalysis:
        """Gate, filter and analyze a tree; usage is recorded only after success."""
        file_count = _file_count(root)
        ensure_allowed(self.usage_gate, UsageAction.ANALYSIS, project_name=root.name, file_count=file_count)
        project = self._prepare(root, file_count)
        self.usage_gate.record_usage(
            UsageAction.ANALYSIS, project_name=project.name, file_count=len(project.files)
        )
        return project

    def _prepare(self, root: FileNode, file_count: int) -> ProjectAnalysis:
        self.logger.info("Analyzing %s (%d files)", root.name or "<root>", file_count)
        FileFilter(self.config.filter, self.config.minified).apply(root)
        project = self.project_analyzer.analyze(root)
        self.logger.info(
            "Analyzed %s: type %s, %d files, %d dependencies",
            project.name,
            project.type,
            len(project.files),
            len(project.dependencies),
        )
        return project

    def run_analysis(self, root: FileNode) -> AnalysisRun:
        project = self.analyze(root)
        return AnalysisRun(project=project, document=self.document_generator.generate(project))

    def run_professional(self, root: FileNode, document_config: DocumentConfig | None = None) -> ProfessionalRun:
        document_config = document_config or resolve_document_config(self.config.document)
        # Unknown types must fail before the analysis is counted.
        ProfessionalDocumentGenerator.resolve(document_config)
        project = self.analyze(root)
        document = self.professional_generator.generate(project, document_config)
        return ProfessionalRun(project=project, document=document)

    def run_workflows(self, root: FileNode, *, offline: bool = False) -> WorkflowRun:
        project = self.analyze(root)
        data = self.workflow_analyzer.analyze(project)
        generator = WorkflowGenerator() if offline else self.workflow_generator
        outcome = generator.generate(data, project)
        self.logger.info("Workflows for %s produced from %s", project.name, outcome.source)
        return WorkflowRun(project=project, data=data, outcome=outcome)

    def run_chat(self, root: FileNode, question: str, *, offline: bool = False) -> ChatRun:
        """Answer a question about a tree; only the chat action is gated and counted."""
        file_count = _file_count(root)
        ensure_allowed(self.usage_gate, UsageAction.CHAT, project_name=root.name, file_count=file_count)
        project = self._prepare(root, file_count)
        runner = None if offline else self.llm_runner
        response = CodebaseAssistant(project, runner).ask(question)
        self.usage_gate.record_usage(UsageAction.CHAT, project_name=project.name, file_count=len(project.files))
        return ChatRun(project=project, response=response)

    def export(self, doc: Document, fmt: str, *, project_name: Optional[str] = None) -> ExportPayload:
        ensure_allowed(self.usage_gate, UsageAction.EXPORT, project_name=project_name, file_count=0)
        payload = export_document(doc, fmt)
        self.usage_gate.record_usage(UsageAction.EXPORT, project_name=project_name, file_count=0)
        self.logger.debug("Exported %s (%d bytes)", payload.filename, len(payload.data))
        return payload

    def export_workflows(
        self, result: WorkflowGenerationResult, fmt: str, *, project_name: Optional[str] = None
    ) -> ExportPayload:
        ensure_allowed(self.usage_gate, UsageAction.EXPORT, project_name=project_name, file_count=0)
        payload = export_workflows(result, fmt)
        self.usage_gate.record_usage(UsageAction.EXPORT, project_name=project_name, file_count=0)
        self.logger.debug("Exported %s (%d bytes)", payload.filename, len(payload.data))
        return payload

    @property
    def workflow_generator(self) -> WorkflowGenerator:
        if self._workflow_generator is None:
            self._workflow_generator = WorkflowGenerator(self.llm_runner)
        return self._workflow_generator

    @property
    def llm_runner(self) -> LLMRunner:
        if self._llm_runner is None:
            self._llm_runner = LLMRunner.from_config(self.config.llm)
        return self._llm_runner


__all__ = [
    "AnalysisRun",
    "ChatRun",
    "Orchestrator",
    "ProfessionalRun",
    "WorkflowRun",
    "resolve_document_config",
]
