"""Usage permission checks and usage event recording."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple

from .errors import UsageDeniedError
from .logging import get_logger

logger = get_logger("usage")


class UsageAction(str, Enum):
    ANALYSIS = "analysis"
    EXPORT = "export"
    CHAT = "chat"


class UsageGate(Protocol):
    """Consulted before any work; told about every completed operation."""

    def is_allowed(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> bool:
        ...

    def record_usage(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> None:
        ...


class AllowAllUsageGate:
    """Permits everything and keeps the recorded events in memory."""

    def __init__(self) -> None:
        self.events: List[Tuple[UsageAction, Optional[str], int]] = []

    def is_allowed(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> bool:
        return True

    def record_usage(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> None:
        self.events.append((action, project_name, file_count))


class QuotaUsageGate:
    """Allows at most ``limit`` recorded operations per action."""

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit
        self._counts: Dict[UsageAction, int] = {}
        self._lock = threading.Lock()

    def used(self, action: UsageAction) -> int:
        with self._lock:
            return self._counts.get(action, 0)

    def is_allowed(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> bool:
        return self.used(action) < self.limit

    def record_usage(self, action: UsageAction, *, project_name: Optional[str], file_count: int) -> None:
        with self._lock:
            self._counts[action] = self._counts.get(action, 0) + 1


def ensure_allowed(
    gate: UsageGate,
    action: UsageAction,
    *,
    project_name: Optional[str] = None,
    file_count: int = 0,
) -> None:
    """Raise UsageDeniedError when the gate refuses ``action``."""
    if not gate.is_allowed(action, project_name=project_name, file_count=file_count):
        logger.warning("Usage gate denied %s for %s", action.value, project_name or "<unnamed>")
        raise UsageDeniedError(action.value, project_name)


__all__ = [
    "AllowAllUsageGate",
    "QuotaUsageGate",
    "UsageAction",
    "UsageGate",
    "ensure_allowed",
]
