"""Base classes for workflow extractors."""

from abc import ABC, abstractmethod
from typing import List

from ..models import FileAnalysis


class Extractor(ABC):
    """Contract for extractors that recover workflow signals from one analysed file."""

    name: str = ""

    @abstractmethod
    def supports(self, file: FileAnalysis) -> bool:
        """Return True when the file has the shape this extractor understands."""

    @abstractmethod
    def extract(self, file: FileAnalysis) -> List:
        """Produce records for the file; no match is an empty list, never an error."""
