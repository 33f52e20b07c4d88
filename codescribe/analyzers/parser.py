"""Per-file analysis combining symbol extraction with file heuristics."""

from __future__ import annotations

from typing import Callable, List, TypeVar

from ..logging import get_logger
from ..models import ExportRecord, FileAnalysis
from . import heuristics, symbols

_TYPED_SUFFIXES = (".ts", ".tsx")

T = TypeVar("T")

logger = get_logger("analyzers.parser")


class CodeParser:
    """Builds a FileAnalysis from raw text without ever raising for malformed input."""

    def parse(self, path: str, content: str) -> FileAnalysis:
        typed = path.lower().endswith(_TYPED_SUFFIXES)
        analysis = FileAnalysis(
            path=path,
            category=self._guard(path, "category", lambda: heuristics.categorize_file(path), "other"),
            framework=self._guard(path, "framework", lambda: heuristics.detect_framework(content, path), None),
            is_entry_point=self._guard(
                path, "entry point", lambda: heuristics.is_entry_point(path, content), False
            ),
            complexity=self._guard(path, "complexity", lambda: heuristics.assess_complexity(content), "low"),
            content=content,
        )

        functions = self._guard(
            path,
            "functions",
            lambda: symbols.extract_functions(content, infer_return_types=typed),
            [],
        )
        analysis.functions = self._guard(
            path, "components", lambda: symbols.mark_components(content, functions), functions
        )
        analysis.classes = self._guard(path, "classes", lambda: symbols.extract_classes(content), [])
        analysis.imports = self._guard(path, "imports", lambda: symbols.extract_imports(content), [])
        analysis.exports = self._guard(path, "exports", lambda: symbols.extract_exports(content), [])
        analysis.comments = self._guard(path, "comments", lambda: symbols.extract_comments(content), [])

        if typed:
            analysis.interfaces = self._guard(
                path, "interfaces", lambda: symbols.extract_interfaces(content), []
            )
            aliases = self._guard(path, "type aliases", lambda: symbols.extract_type_aliases(content), [])
            analysis.exports = _merge_exports(analysis.exports, aliases)

        return analysis

    @staticmethod
    def _guard(path: str, facet: str, extract: Callable[[], T], default: T) -> T:
        try:
            return extract()
        except Exception as exc:  # pragma: no cover - extraction is best-effort per facet
            logger.debug("Skipping %s extraction for %s: %s", facet, path, exc)
            return default


def _merge_exports(exports: List[ExportRecord], extra: List[ExportRecord]) -> List[ExportRecord]:
    merged = list(exports)
    seen = {(record.name, record.kind) for record in merged}
    for record in extra:
        key = (record.name, record.kind)
        if key not in seen:
            merged.append(record)
            seen.add(key)
    return merged


__all__ = ["CodeParser"]
