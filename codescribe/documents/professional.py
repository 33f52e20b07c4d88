"""Professional documents assembled from the section catalog."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List

from ..errors import DocumentError
from ..logging import get_logger
from ..models import DocumentInfo, ProfessionalDoc, ProjectAnalysis
from .constants import (
    COMPLIANCE_OPTIONS,
    DEFAULT_APPROVAL_STATUS,
    DOCUMENT_TYPES,
    DOCUMENT_VERSION,
    OUTPUT_FORMATS,
    STANDARDS,
    DocumentConfig,
    DocumentType,
    SectionSpec,
)
from .sections import render_section_body
from .standard import DocumentGenerator, compute_metadata
from .templating import create_environment, render_section
from .toc import TableOfContentsBuilder

logger = get_logger("documents.professional")


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


class ProfessionalDocumentGenerator:
    """Renders one catalog document type for a ProjectAnalysis."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        self._env = create_environment(templates_dir)
        self._toc = TableOfContentsBuilder(numbered=True, max_level=2)
        self._standard = DocumentGenerator(templates_dir)
        self._clock = clock

    @staticmethod
    def resolve(config: DocumentConfig) -> DocumentType:
        doc_type = DOCUMENT_TYPES.get(config.document_type)
        if doc_type is None:
            known = ", ".join(sorted(DOCUMENT_TYPES))
            raise DocumentError(f"Unknown document type '{config.document_type}'. Expected one of: {known}")
        if config.standard not in STANDARDS:
            raise DocumentError(f"Unknown documentation standard '{config.standard}'")
        if config.output_format not in OUTPUT_FORMATS:
            raise DocumentError(f"Unknown output format '{config.output_format}'")
        return doc_type

    def selected_sections(self, doc_type: DocumentType, config: DocumentConfig) -> List[SectionSpec]:
        return [section for section in doc_type.sections if section.required or config.include_optional]

    def generate(self, project: ProjectAnalysis, config: DocumentConfig | None = None) -> ProfessionalDoc:
        config = config or DocumentConfig()
        doc_type = self.resolve(config)

        sections: Dict[str, str] = {}
        rendered: List[Dict[str, str]] = []
        for section in self.selected_sections(doc_type, config):
            body = render_section_body(section.id, section.title, project, config)
            sections[section.id] = body
            rendered.append(
                {
                    "id": section.id,
                    "title": section.title,
                    "body": render_section(self._env, section.id, section.title, body, {"required": section.required}),
                }
            )

        info = DocumentInfo(
            version=DOCUMENT_VERSION,
            author=config.author,
            approval_status=DEFAULT_APPROVAL_STATUS,
            standard=config.standard,
            output_format=config.output_format,
            created_at=self._clock(),
            tags=(project.type, doc_type.id, config.standard),
            compliance=tuple(config.compliance),
        )
        content = self._env.get_template("professional.j2").render(
            title=doc_type.name,
            description=doc_type.description,
            project_name=project.name,
            company_name=config.company_name,
            standard_label=STANDARDS[config.standard],
            info=info,
            compliance=[
                COMPLIANCE_OPTIONS.get(key, (key.upper(), "Custom compliance requirement"))
                for key in config.compliance
            ],
            toc_placeholder=TableOfContentsBuilder.PLACEHOLDER,
            sections=rendered,
            footer=config.footer,
        )
        content = self._toc.build(content).strip() + "\n"
        metadata = compute_metadata(project)
        logger.info("Generated %s for %s with %d sections", doc_type.id, project.name, len(sections))
        return ProfessionalDoc(
            document_type=doc_type.id,
            title=doc_type.name,
            content=content,
            ai_optimized=self._standard.render_ai_optimized(project, metadata),
            sections=sections,
            metadata=metadata,
            info=info,
        )


__all__ = ["ProfessionalDocumentGenerator"]
