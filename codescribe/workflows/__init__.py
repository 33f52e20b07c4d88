"""Workflow extraction: routes, UI interactions, data operations, auth and business logic."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Set

from ..logging import get_logger
from ..models import FileAnalysis, ProjectAnalysis
from .auth import AuthSignalExtractor, fold_signals
from .base import Extractor
from .business import BusinessLogicExtractor
from .data import DataOperationExtractor
from .interactions import InteractionExtractor
from .models import WorkflowAnalysisData
from .routes import RouteExtractor

_BUILTIN_FACTORIES: dict[str, Callable[[], Extractor]] = {
    "routes": RouteExtractor,
    "interactions": InteractionExtractor,
    "data": DataOperationExtractor,
    "auth": AuthSignalExtractor,
    "business": BusinessLogicExtractor,
}

logger = get_logger("workflows")


def discover_extractors(enabled: Sequence[str] | None = None) -> List[Extractor]:
    """Return instantiated extractors, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}
        unknown = enabled_set - set(_BUILTIN_FACTORIES)
        if unknown:
            raise ValueError(f"Unknown extractors requested: {', '.join(sorted(unknown))}")

    extractors: List[Extractor] = []
    for name, factory in _BUILTIN_FACTORIES.items():
        if enabled_set is not None and name not in enabled_set:
            continue
        instance = factory()
        if not isinstance(instance, Extractor):
            raise TypeError(f"Extractor factory for '{name}' did not return an Extractor instance")
        extractors.append(instance)
    return extractors


class WorkflowAnalyzer:
    """Runs every extractor over the analysed files and folds the results."""

    def __init__(self, extractors: Sequence[Extractor] | None = None) -> None:
        self.extractors = list(extractors) if extractors is not None else discover_extractors()

    def analyze(self, project: ProjectAnalysis) -> WorkflowAnalysisData:
        collected: Dict[str, list] = {extractor.name: [] for extractor in self.extractors}
        for file in project.files:
            if not file.content:
                continue
            for extractor in self.extractors:
                collected[extractor.name].extend(self._run(extractor, file))

        data = WorkflowAnalysisData(
            routes=collected.get("routes", []),
            interactions=collected.get("interactions", []),
            data_operations=collected.get("data", []),
            auth_flow=fold_signals(collected.get("auth", [])),
            business_logic=collected.get("business", []),
        )
        logger.info(
            "Workflow analysis: %d routes, %d interaction files, %d data operations, %d auth methods, "
            "%d business logic files",
            len(data.routes),
            len(data.interactions),
            len(data.data_operations),
            len(data.auth_flow.methods),
            len(data.business_logic),
        )
        return data

    @staticmethod
    def _run(extractor: Extractor, file: FileAnalysis) -> list:
        try:
            if not extractor.supports(file):
                return []
            return list(extractor.extract(file))
        except Exception as exc:  # pragma: no cover - extraction is best-effort per file
            logger.debug("Extractor %s skipped %s: %s", extractor.name, file.path, exc)
            return []


__all__ = [
    "Extractor",
    "WorkflowAnalysisData",
    "WorkflowAnalyzer",
    "discover_extractors",
]
