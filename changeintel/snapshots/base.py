"""Base classes for component snapshot extractors."""

from abc import ABC, abstractmethod
from typing import FrozenSet, List

from ..models import ComponentSnapshot, Framework


class SnapshotExtractor(ABC):
    """Contract for extractors that digest one source file into snapshots."""

    framework: Framework
    extensions: FrozenSet[str] = frozenset()

    def supports(self, ext: str) -> bool:
        """Return True when this extractor handles files with extension *ext*."""
        return ext.lower() in self.extensions

    @abstractmethod
    def extract(self, file_path: str, source: str) -> List[ComponentSnapshot]:
        """Return zero or more component snapshots found in *source*.

        Implementations may raise :class:`~changeintel.errors.ParseError`;
        the registry converts any failure into an empty result.
        """
