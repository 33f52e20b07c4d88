"""Standard and professional document generation tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from codescribe.analyzers import ProjectAnalyzer
from codescribe.documents import (
    DocumentConfig,
    DocumentGenerator,
    ProfessionalDocumentGenerator,
    compute_metadata,
)
from codescribe.documents.constants import DOCUMENT_TYPES, STANDARD_SECTIONS
from codescribe.documents.sections import infer_endpoint_path, infer_http_method
from codescribe.documents.toc import TableOfContentsBuilder
from codescribe.errors import DocumentError
from codescribe.filtering import FileFilter
from codescribe.models import DocumentMetadata
from tests._fixtures.project_builder import REACT_APP

FIXED_CLOCK = "2024-01-02T03:04:05+00:00"


@pytest.fixture
def react_project(project_builder):
    root = project_builder.tree(REACT_APP)
    FileFilter().apply(root)
    return ProjectAnalyzer().analyze(root)


@pytest.fixture
def empty_project(project_builder):
    root = project_builder.tree({})
    FileFilter().apply(root)
    return ProjectAnalyzer().analyze(root)


def _professional() -> ProfessionalDocumentGenerator:
    return ProfessionalDocumentGenerator(clock=lambda: FIXED_CLOCK)


def test_standard_document_sections_and_toc(react_project) -> None:
    doc = DocumentGenerator().generate(react_project)

    assert list(doc.sections) == list(STANDARD_SECTIONS)
    assert doc.content.startswith("# shop-ui Documentation")
    assert "## Table of Contents" in doc.content
    assert "- [Project Overview](#project-overview)" in doc.content
    assert "<!-- codescribe:toc -->" not in doc.content
    assert "**App** (`src/App.tsx`)" in doc.sections["components"]
    assert "- `src/api.ts`: fetchProducts" in doc.sections["components"]
    assert "`npm run dev`" in doc.sections["getting_started"]
    assert doc.content.rstrip().endswith("_Generated by codescribe._")


def test_ai_optimized_variant_is_dense(react_project) -> None:
    doc = DocumentGenerator().generate(react_project)

    assert doc.ai_optimized.startswith("# PROJECT CONTEXT: shop-ui")
    assert "BUILD: Vite" in doc.ai_optimized
    assert "DESCRIPTION: Storefront for the demo shop" in doc.ai_optimized
    assert "### src/App.tsx [component, react, low]" in doc.ai_optimized
    assert "App(): JSX.Element <component>" in doc.ai_optimized


def test_metadata_is_identical_across_variants(react_project) -> None:
    standard = DocumentGenerator().generate(react_project)
    professional = _professional().generate(react_project, DocumentConfig())

    expected = compute_metadata(react_project)
    assert standard.metadata == expected
    assert professional.metadata == expected
    assert expected.file_count == 3
    assert expected.component_count == 1
    assert expected.service_count == 1
    assert expected.total_lines == sum(len(f.content.split("\n")) for f in react_project.files)


def test_empty_project_still_renders(empty_project) -> None:
    doc = DocumentGenerator().generate(empty_project)

    assert doc.metadata == DocumentMetadata()
    assert doc.sections["structure"] == "No files survived filtering."
    assert doc.sections["dependencies"] == "No dependencies declared."
    assert doc.sections["components"] == "No UI components or services detected."
    assert doc.content.startswith("# project Documentation")


def test_professional_document_header_and_numbered_toc(react_project) -> None:
    config = DocumentConfig(
        document_type="api-documentation",
        company_name="Acme",
        compliance=("gdpr",),
    )

    doc = _professional().generate(react_project, config)

    assert doc.document_type == "api-documentation"
    assert doc.title == "API Documentation"
    assert doc.content.startswith("# Acme")
    assert "# API Documentation: shop-ui" in doc.content
    assert "1. [API Overview](#api-overview)" in doc.content
    assert "GDPR (EU data protection compliance)" in doc.content
    assert list(doc.sections) == [section.id for section in DOCUMENT_TYPES["api-documentation"].sections]
    assert doc.info.created_at == FIXED_CLOCK
    assert doc.info.tags == ("react", "api-documentation", "enterprise")
    assert doc.info.compliance == ("gdpr",)
    assert doc.info.author == "codescribe"
    assert doc.ai_optimized.startswith("# PROJECT CONTEXT: shop-ui")


def test_required_only_skips_optional_sections(react_project) -> None:
    config = DocumentConfig(document_type="api-documentation", include_optional=False)

    doc = _professional().generate(react_project, config)

    assert list(doc.sections) == ["api-overview", "authentication", "endpoints-reference", "error-handling"]


def test_sections_without_renderer_use_default_text(react_project) -> None:
    doc = _professional().generate(react_project, DocumentConfig(document_type="api-documentation"))

    assert doc.sections["changelog"].startswith("Changelog for **shop-ui**, derived from 3 analysed files.")


@pytest.mark.parametrize(
    "config",
    [
        DocumentConfig(document_type="novel"),
        DocumentConfig(standard="whimsical"),
        DocumentConfig(output_format="scroll"),
    ],
)
def test_invalid_document_config_raises(react_project, config: DocumentConfig) -> None:
    with pytest.raises(DocumentError):
        _professional().generate(react_project, config)


def test_custom_section_template_overrides_default(tmp_path: Path, react_project) -> None:
    sections_dir = tmp_path / "templates" / "sections"
    sections_dir.mkdir(parents=True)
    (sections_dir / "overview.j2").write_text("## {{ title }} (custom)\n\n{{ body }}\n", encoding="utf-8")

    doc = DocumentGenerator(tmp_path / "templates").generate(react_project)

    assert "## Project Overview (custom)" in doc.content
    assert "## Architecture" in doc.content


def test_toc_builder_skips_code_blocks_and_numbers_top_level() -> None:
    markdown = "\n".join(
        [
            "# Title",
            TableOfContentsBuilder.PLACEHOLDER,
            "## First Part",
            "### Detail",
            "```bash",
            "## not a heading",
            "```",
            "## SDKs & Examples",
        ]
    )

    result = TableOfContentsBuilder(numbered=True).build(markdown)

    assert "1. [First Part](#first-part)" in result
    assert "  - [Detail](#detail)" in result
    assert "2. [SDKs & Examples](#sdks-examples)" in result
    assert "not-a-heading" not in result
    assert TableOfContentsBuilder.PLACEHOLDER not in result


def test_endpoint_hints_from_function_names() -> None:
    assert infer_http_method("createOrder") == "POST"
    assert infer_http_method("removeItem") == "DELETE"
    assert infer_http_method("ping") == "GET"
    assert infer_endpoint_path("getUserProfile") == "users"
    assert infer_endpoint_path("list_items") == "listitems"
