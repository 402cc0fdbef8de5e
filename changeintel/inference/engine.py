"""Project inference engine selecting a provider and its source roots."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Iterable, List, Optional, Tuple

from .aggregation import normalize_source_roots
from .providers import Provider, ProviderRegistry, default_registry
from ..config import InferenceConfig
from ..errors import InputValidationError, ProviderError
from ..logging import get_logger
from ..models import DetectionDetail, FileTree, ProjectInferenceResult
from ..validation import require_file_tree


class ProjectInferenceEngine:
    """Runs every provider's detection and asks the winner for source roots.

    Providers are always called one at a time, in registry order, so
    progress logging and detection details stay deterministic.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[InferenceConfig] = None,
    ) -> None:
        self.config = config or InferenceConfig()
        self.registry = registry or default_registry(self.config)
        self._logger = logger or get_logger("inference")

    def infer(self, root_dir: str, tree: FileTree) -> ProjectInferenceResult:
        tree = require_file_tree(tree)
        self._logger.info("Starting project inference for %s", root_dir)
        details: List[Tuple[Provider, float]] = []
        for provider in self.registry.providers:
            score = self._detect(provider, root_dir, tree)
            if score is not None and score > 0:
                details.append((provider, score))

        selected = self._select(details)
        roots = self._infer_roots(selected, root_dir, tree)
        if roots is None and selected is not self.registry.fallback:
            selected = self.registry.fallback
            roots = self._infer_roots(selected, root_dir, tree)
        return self._result(selected, roots or [], details)

    async def infer_async(self, root_dir: str, tree: FileTree) -> ProjectInferenceResult:
        """Same as :meth:`infer`, awaiting each provider call in a worker thread."""
        tree = require_file_tree(tree)
        self._logger.info("Starting project inference for %s", root_dir)
        details: List[Tuple[Provider, float]] = []
        for provider in self.registry.providers:
            score = await asyncio.to_thread(self._detect, provider, root_dir, tree)
            if score is not None and score > 0:
                details.append((provider, score))

        selected = self._select(details)
        roots = await asyncio.to_thread(self._infer_roots, selected, root_dir, tree)
        if roots is None and selected is not self.registry.fallback:
            selected = self.registry.fallback
            roots = await asyncio.to_thread(self._infer_roots, selected, root_dir, tree)
        return self._result(selected, roots or [], details)

    def _detect(self, provider: Provider, root_dir: str, tree: FileTree) -> Optional[float]:
        try:
            score = _checked_score(provider, provider.detect(root_dir, tree))
        except InputValidationError:
            raise
        except Exception as exc:  # noqa: BLE001 - a failing provider is excluded, not fatal
            error = exc if isinstance(exc, ProviderError) else ProviderError(provider.name, "detect", str(exc))
            self._logger.warning("%s", error)
            return None
        self._logger.info("Provider %s score: %s", provider.name, score)
        return score

    def _select(self, details: List[Tuple[Provider, float]]) -> Provider:
        best: Optional[Tuple[Provider, float]] = None
        for provider, score in details:
            if best is None or score > best[1]:
                best = (provider, score)
        selected = best[0] if best is not None else self.registry.fallback
        self._logger.info("Selected provider: %s", selected.name)
        return selected

    def _infer_roots(self, provider: Provider, root_dir: str, tree: FileTree) -> Optional[List[str]]:
        try:
            roots = _checked_roots(provider, provider.infer_source_roots(root_dir, tree))
        except InputValidationError:
            raise
        except Exception as exc:  # noqa: BLE001 - recovered by switching to the fallback provider
            error = (
                exc
                if isinstance(exc, ProviderError)
                else ProviderError(provider.name, "infer_source_roots", str(exc))
            )
            self._logger.warning("%s", error)
            return None
        return roots

    def _result(
        self,
        selected: Provider,
        roots: List[str],
        details: List[Tuple[Provider, float]],
    ) -> ProjectInferenceResult:
        return ProjectInferenceResult(
            project_type=selected.name,
            source_roots=normalize_source_roots(roots, limit=self.config.max_roots),
            detection_details=[DetectionDetail(name=provider.name, score=score) for provider, score in details],
        )


def _checked_score(provider: Provider, score: object) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
        raise ProviderError(provider.name, "detect", f"expected a numeric score, got {score!r}")
    return float(score)


def _checked_roots(provider: Provider, roots: object) -> List[str]:
    if isinstance(roots, str) or not isinstance(roots, Iterable):
        raise ProviderError(provider.name, "infer_source_roots", f"expected a list of paths, got {roots!r}")
    checked = list(roots)
    for root in checked:
        if not isinstance(root, str):
            raise ProviderError(provider.name, "infer_source_roots", f"expected a path string, got {root!r}")
    return checked


__all__ = ["ProjectInferenceEngine"]
