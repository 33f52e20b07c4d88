"""Configuration loading for codescribe (.codescribe.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .filtering import FilterOptions, MinifiedThresholds

CONFIG_FILENAME = ".codescribe.yml"


@dataclass
class LLMConfig:
    """External model settings from .codescribe.yml."""

    provider: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    request_timeout: Optional[float] = None


@dataclass
class DocumentSettings:
    """Defaults for professional document synthesis."""

    document_type: Optional[str] = None
    standard: Optional[str] = None
    output_format: Optional[str] = None
    company_name: Optional[str] = None
    author: Optional[str] = None
    compliance: List[str] = field(default_factory=list)


@dataclass
class CodescribeConfig:
    """Represents the settings defined in .codescribe.yml."""

    root: Path
    filter: FilterOptions = field(default_factory=FilterOptions)
    minified: MinifiedThresholds = field(default_factory=MinifiedThresholds)
    llm: Optional[LLMConfig] = None
    document: DocumentSettings = field(default_factory=DocumentSettings)


def load_config(config_path: Path) -> CodescribeConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CodescribeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    options = FilterOptions()
    filter_data = _as_dict(data.get("filter"))
    if filter_data:
        include_tests = _as_bool(filter_data.get("include_tests"))
        include_styles = _as_bool(filter_data.get("include_styles"))
        include_config = _as_bool(filter_data.get("include_config"))
        max_size = _as_int(filter_data.get("max_file_size_kb"))
        options = FilterOptions(
            include_tests=options.include_tests if include_tests is None else include_tests,
            include_styles=options.include_styles if include_styles is None else include_styles,
            include_config=options.include_config if include_config is None else include_config,
            max_file_size_kb=max_size if max_size is not None else options.max_file_size_kb,
            custom_ignore=_as_str_list(filter_data.get("custom_ignore")),
        )

    thresholds = MinifiedThresholds()
    minified_data = _as_dict(data.get("minified"))
    if minified_data:
        max_lines = _as_int(minified_data.get("max_lines"))
        min_characters = _as_int(minified_data.get("min_characters"))
        max_tokens = _as_int(minified_data.get("max_single_letter_tokens"))
        thresholds = MinifiedThresholds(
            max_lines=max_lines if max_lines is not None else thresholds.max_lines,
            min_characters=(
                min_characters if min_characters is not None else thresholds.min_characters
            ),
            max_single_letter_tokens=(
                max_tokens if max_tokens is not None else thresholds.max_single_letter_tokens
            ),
        )

    llm_data = _as_dict(data.get("llm"))
    llm = None
    if llm_data:
        llm = LLMConfig(
            provider=_as_str(llm_data.get("provider")),
            model=_as_str(llm_data.get("model")),
            base_url=_as_str(llm_data.get("base_url")),
            api_key=_as_str(llm_data.get("api_key")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            top_k=_as_int(llm_data.get("top_k")),
            top_p=_as_float(llm_data.get("top_p")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
        )
        if not any(value is not None for value in vars(llm).values()):
            llm = None

    document_data = _as_dict(data.get("document"))
    document = DocumentSettings()
    if document_data:
        document = DocumentSettings(
            document_type=_as_str(document_data.get("type")),
            standard=_as_str(document_data.get("standard")),
            output_format=_as_str(document_data.get("output_format")),
            company_name=_as_str(document_data.get("company_name")),
            author=_as_str(document_data.get("author")),
            compliance=_as_str_list(document_data.get("compliance")),
        )

    return CodescribeConfig(
        root=root,
        filter=options,
        minified=thresholds,
        llm=llm,
        document=document,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CodescribeConfig",
    "ConfigError",
    "DocumentSettings",
    "LLMConfig",
    "load_config",
]
