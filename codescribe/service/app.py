"""FastAPI application entrypoint for codescribe service mode."""

from __future__ import annotations

import asyncio
import base64
import binascii
from typing import Any, Callable, Dict, List, Optional, TypeVar

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from ..errors import DocumentError, ExportError, IngestError, UsageDeniedError
from ..export import analysis_to_dict
from ..models import FileNode
from ..orchestrator import Orchestrator, resolve_document_config

T = TypeVar("T")


class ProjectPayload(BaseModel):
    """Either loose files keyed by path or a base64-encoded zip archive."""

    files: Dict[str, str] = Field(default_factory=dict)
    archive_base64: Optional[str] = None
    archive_name: str = "archive.zip"


class AnalyzeRequest(ProjectPayload):
    pass


class AnalyzeResponse(BaseModel):
    content: str
    ai_optimized: str
    sections: Dict[str, str]
    metadata: Dict[str, int]
    analysis: Dict[str, Any]


class ProfessionalRequest(ProjectPayload):
    document_type: Optional[str] = None
    standard: Optional[str] = None
    output_format: Optional[str] = None
    company_name: Optional[str] = None
    author: Optional[str] = None
    compliance: List[str] = Field(default_factory=list)
    include_optional: bool = True


class ProfessionalResponse(BaseModel):
    document_type: str
    title: str
    content: str
    ai_optimized: str
    sections: Dict[str, str]
    metadata: Dict[str, int]
    info: Dict[str, Any]


class WorkflowsRequest(ProjectPayload):
    offline: bool = False


class WorkflowsResponse(BaseModel):
    source: str
    reason: Optional[str] = None
    result: Dict[str, Any]
    analysis: Dict[str, Any]


class ExportRequest(ProjectPayload):
    format: str = "markdown"
    document_type: Optional[str] = None
    workflows: bool = False


class ChatRequest(ProjectPayload):
    question: str = Field(min_length=1)
    offline: bool = False


class ChatAnswer(BaseModel):
    content: str
    snippets: List[Dict[str, Any]]
    related_files: List[str]
    suggestions: List[str]
    source: str
    intent: Optional[str] = None
    reason: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _load_tree(orchestrator: Orchestrator, payload: ProjectPayload) -> FileNode:
    if payload.archive_base64:
        try:
            data = base64.b64decode(payload.archive_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise IngestError("archive_base64 is not valid base64") from exc
        return orchestrator.load_archive(data, payload.archive_name)
    if not payload.files:
        raise IngestError("Request must include files or archive_base64")
    return orchestrator.load_blobs(payload.files)


async def _in_executor(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing codescribe operations."""

    app = FastAPI(title="codescribe", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        run = await _in_executor(lambda: orchestrator.run_analysis(_load_tree(orchestrator, payload)))
        document = run.document
        return AnalyzeResponse(
            content=document.content,
            ai_optimized=document.ai_optimized,
            sections=document.sections,
            metadata=vars(document.metadata).copy(),
            analysis=analysis_to_dict(run.project),
        )

    @app.post("/documents/professional", response_model=ProfessionalResponse)
    async def professional(
        payload: ProfessionalRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ProfessionalResponse:
        document_config = resolve_document_config(
            orchestrator.config.document,
            document_type=payload.document_type,
            standard=payload.standard,
            output_format=payload.output_format,
            company_name=payload.company_name,
            author=payload.author,
            compliance=payload.compliance,
            include_optional=payload.include_optional,
        )
        run = await _in_executor(
            lambda: orchestrator.run_professional(_load_tree(orchestrator, payload), document_config)
        )
        document = run.document
        return ProfessionalResponse(
            document_type=document.document_type,
            title=document.title,
            content=document.content,
            ai_optimized=document.ai_optimized,
            sections=document.sections,
            metadata=vars(document.metadata).copy(),
            info={
                **vars(document.info),
                "tags": list(document.info.tags),
                "compliance": list(document.info.compliance),
            },
        )

    @app.post("/workflows", response_model=WorkflowsResponse)
    async def workflows(
        payload: WorkflowsRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> WorkflowsResponse:
        run = await _in_executor(
            lambda: orchestrator.run_workflows(_load_tree(orchestrator, payload), offline=payload.offline)
        )
        return WorkflowsResponse(
            source=run.outcome.source,
            reason=run.outcome.reason,
            result=run.outcome.result.to_dict(),
            analysis=run.data.to_dict(),
        )

    @app.post("/chat", response_model=ChatAnswer)
    async def chat(
        payload: ChatRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ChatAnswer:
        run = await _in_executor(
            lambda: orchestrator.run_chat(
                _load_tree(orchestrator, payload), payload.question, offline=payload.offline
            )
        )
        return ChatAnswer(**run.response.to_dict())

    @app.post("/export")
    async def export(
        payload: ExportRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Response:
        def _run_export():
            root = _load_tree(orchestrator, payload)
            if payload.workflows:
                run = orchestrator.run_workflows(root, offline=True)
                return orchestrator.export_workflows(
                    run.outcome.result, payload.format, project_name=run.project.name
                )
            if payload.document_type:
                config = resolve_document_config(orchestrator.config.document, document_type=payload.document_type)
                professional_run = orchestrator.run_professional(root, config)
                return orchestrator.export(
                    professional_run.document, payload.format, project_name=professional_run.project.name
                )
            analysis_run = orchestrator.run_analysis(root)
            return orchestrator.export(analysis_run.document, payload.format, project_name=analysis_run.project.name)

        result = await _in_executor(_run_export)
        return Response(
            content=result.data,
            media_type=result.media_type,
            headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
        )

    @app.exception_handler(UsageDeniedError)
    async def usage_denied_handler(_: Any, exc: UsageDeniedError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": str(exc), "action": exc.action})

    @app.exception_handler(IngestError)
    async def ingest_error_handler(_: Any, exc: IngestError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ExportError)
    async def export_error_handler(_: Any, exc: ExportError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(DocumentError)
    async def document_error_handler(_: Any, exc: DocumentError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
