"""Exception hierarchy shared by codescribe stages."""

from __future__ import annotations


class CodescribeError(RuntimeError):
    """Base class for errors surfaced to codescribe callers."""


class IngestError(CodescribeError):
    """Raised when an upload cannot be turned into a file tree at all."""


class ConfigError(CodescribeError):
    """Raised when the configuration file cannot be parsed."""


class UsageDeniedError(CodescribeError):
    """Raised when the usage gate refuses an operation."""

    def __init__(self, action: str, project_name: str | None = None) -> None:
        self.action = action
        self.project_name = project_name
        target = f" for '{project_name}'" if project_name else ""
        super().__init__(f"Usage limit reached: '{action}' is not permitted{target}")


class ExportError(CodescribeError, ValueError):
    """Raised for unsupported export formats."""


class DocumentError(CodescribeError, ValueError):
    """Raised for unknown document types, standards or output formats."""


class LLMError(CodescribeError):
    """Raised when the external model call fails."""


__all__ = [
    "CodescribeError",
    "ConfigError",
    "DocumentError",
    "ExportError",
    "IngestError",
    "LLMError",
    "UsageDeniedError",
]
