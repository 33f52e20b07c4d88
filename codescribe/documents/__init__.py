"""Document synthesis: standard, AI-optimized and professional documents."""

from __future__ import annotations

from .constants import DOCUMENT_TYPES, OUTPUT_FORMATS, STANDARDS, DocumentConfig
from .professional import ProfessionalDocumentGenerator
from .standard import DocumentGenerator, compute_metadata

__all__ = [
    "DOCUMENT_TYPES",
    "DocumentConfig",
    "DocumentGenerator",
    "OUTPUT_FORMATS",
    "ProfessionalDocumentGenerator",
    "STANDARDS",
    "compute_metadata",
]
