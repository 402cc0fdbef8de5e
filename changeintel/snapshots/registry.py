"""Extension-keyed registry of snapshot extractors."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .base import SnapshotExtractor
from .react import ReactSnapshotExtractor
from .vue import VueSnapshotExtractor
from ..errors import InputValidationError
from ..logging import get_logger
from ..models import ComponentSnapshot


class ExtractorRegistry:
    """Maps file extensions to the extractor responsible for them."""

    def __init__(
        self,
        extractors: Sequence[SnapshotExtractor] = (),
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._by_extension: Dict[str, SnapshotExtractor] = {}
        self._logger = logger or get_logger("snapshots")
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: SnapshotExtractor) -> None:
        if not isinstance(extractor, SnapshotExtractor):
            raise TypeError(f"{type(extractor).__name__} is not a SnapshotExtractor")
        for ext in extractor.extensions:
            self._by_extension[ext.lower()] = extractor

    @property
    def extensions(self) -> List[str]:
        return sorted(self._by_extension)

    def for_path(self, file_path: str) -> Optional[SnapshotExtractor]:
        suffix = PurePosixPath(file_path).suffix.lower()
        return self._by_extension.get(suffix)

    def extract(self, file_path: str, source: str) -> List[ComponentSnapshot]:
        """Return snapshots for one file; failures are logged and yield ``[]``."""
        if not isinstance(file_path, str) or not file_path:
            raise InputValidationError("file_path must be a non-empty string")
        if not isinstance(source, str):
            raise InputValidationError(f"{file_path}: source text must be a string")

        extractor = self.for_path(file_path)
        if extractor is None:
            return []
        try:
            return extractor.extract(file_path, source)
        except Exception as exc:  # noqa: BLE001 - one bad file never aborts a batch
            self._logger.warning("Snapshot extraction failed for %s: %s", file_path, exc)
            return []

    def extract_batch(
        self, sources: Mapping[str, str] | Iterable[Tuple[str, str]]
    ) -> List[ComponentSnapshot]:
        items = sources.items() if isinstance(sources, Mapping) else sources
        snapshots: List[ComponentSnapshot] = []
        for file_path, source in items:
            snapshots.extend(self.extract(file_path, source))
        return snapshots


_DEFAULT_REGISTRY: Optional[ExtractorRegistry] = None


def default_registry() -> ExtractorRegistry:
    """Return the shared registry with the built-in React and Vue extractors."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = ExtractorRegistry(
            [ReactSnapshotExtractor(), VueSnapshotExtractor()]
        )
    return _DEFAULT_REGISTRY


def extract_snapshots(file_path: str, source: str) -> List[ComponentSnapshot]:
    return default_registry().extract(file_path, source)


__all__ = ["ExtractorRegistry", "default_registry", "extract_snapshots"]
