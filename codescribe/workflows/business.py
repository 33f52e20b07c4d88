"""Shallow business-logic inventories built from keyword-prefix probes."""

from __future__ import annotations

import re
from typing import List

from ..models import FileAnalysis
from .base import Extractor
from .models import BusinessLogicRecord

_DECLARATIONS = (
    re.compile(r"\bfunction\s+(\w+)"),
    re.compile(r"\bconst\s+(\w+)\s*=\s*(?:async\s+)?\("),
)
_VALIDATION = re.compile(r"\b(?:validate|check|verify)\w*", re.IGNORECASE)
_CALCULATION = re.compile(r"\b(?:calculate|compute|sum)\w*", re.IGNORECASE)
_WORKFLOW = re.compile(r"\b(?:process|handle|execute)\w*", re.IGNORECASE)

_PATH_PROBES = ("service", "util", "helper", "lib/", "logic")
_CONTENT_PROBES = ("validate", "calculate")
_MANY_FUNCTIONS = 3


def is_business_file(file: FileAnalysis) -> bool:
    path = file.path.lower()
    content = file.content.lower()
    if file.category in ("service", "utility"):
        return True
    if any(probe in path for probe in _PATH_PROBES) or any(probe in content for probe in _CONTENT_PROBES):
        return True
    return len(file.functions) > _MANY_FUNCTIONS


def _distinct(values) -> List[str]:
    return list(dict.fromkeys(values))


def declared_functions(content: str) -> List[str]:
    names = []
    for pattern in _DECLARATIONS:
        names.extend(match.group(1) for match in pattern.finditer(content) if len(match.group(1)) > 2)
    return _distinct(names)


class BusinessLogicExtractor(Extractor):
    name = "business"

    def supports(self, file: FileAnalysis) -> bool:
        return is_business_file(file)

    def extract(self, file: FileAnalysis) -> List[BusinessLogicRecord]:
        content = file.content
        record = BusinessLogicRecord(
            file=file.path,
            functions=declared_functions(content),
            validations=_distinct(_VALIDATION.findall(content)),
            calculations=_distinct(_CALCULATION.findall(content)),
            workflows=_distinct(_WORKFLOW.findall(content)),
        )
        return [] if record.is_empty else [record]


__all__ = ["BusinessLogicExtractor", "declared_functions", "is_business_file"]
