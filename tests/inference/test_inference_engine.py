from __future__ import annotations

import asyncio
import logging
from typing import List

import pytest

from changeintel.errors import InputValidationError
from changeintel.inference import (
    DefaultHeuristicProvider,
    ProjectInferenceEngine,
    Provider,
    ProviderRegistry,
    ViteProvider,
)
from changeintel.models import FileTree
from tests._fixtures.trees import feature, tree


class _StaticProvider(Provider):
    def __init__(self, name: str, score: float, roots: List[str]) -> None:
        self.name = name
        self.score = score
        self.roots = roots

    def detect(self, root_dir: str, tree: FileTree) -> float:
        return self.score

    def infer_source_roots(self, root_dir: str, tree: FileTree) -> List[str]:
        return list(self.roots)


class _BrokenDetect(_StaticProvider):
    def detect(self, root_dir: str, tree: FileTree) -> float:
        raise RuntimeError("cannot read manifest")


class _BrokenRoots(_StaticProvider):
    def infer_source_roots(self, root_dir: str, tree: FileTree) -> List[str]:
        raise OSError("permission denied")


def _engine(*providers: Provider, fallback: Provider = None) -> ProjectInferenceEngine:
    fallback = fallback or _StaticProvider("fallback", 10, ["fallback-root"])
    return ProjectInferenceEngine(
        registry=ProviderRegistry(providers=tuple(providers) + (fallback,), fallback=fallback)
    )


VITE_TREE = tree(feature("vite.config.ts"), feature("src/main.ts"), feature("src/App.tsx"))


def test_default_engine_selects_vite_project() -> None:
    result = ProjectInferenceEngine().infer(".", VITE_TREE)

    assert result.to_dict() == {
        "projectType": "vite",
        "sourceRoots": ["src"],
        "detectionDetails": [
            {"name": "vite", "score": 90.0},
            {"name": "default-heuristic", "score": 10.0},
        ],
    }


def test_without_framework_config_the_heuristic_provider_wins() -> None:
    files = [feature(f"client/C{index}.tsx", ui_signals={"html-tags"}) for index in range(10)]

    result = ProjectInferenceEngine().infer(".", tree(*files))

    assert result.project_type == "default-heuristic"
    assert result.source_roots == ["client"]
    assert [detail.name for detail in result.detection_details] == ["default-heuristic"]


def test_zero_scores_are_left_out_of_details() -> None:
    engine = _engine(_StaticProvider("none", 0, ["x"]), _StaticProvider("some", 50, ["lib"]))

    result = engine.infer(".", tree())

    assert [detail.name for detail in result.detection_details] == ["some", "fallback"]
    assert result.project_type == "some"


def test_first_provider_wins_ties() -> None:
    engine = _engine(_StaticProvider("first", 80, ["a"]), _StaticProvider("second", 80, ["b"]))

    assert engine.infer(".", tree()).project_type == "first"


def test_failing_detection_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(_BrokenDetect("broken", 99, ["x"]), _StaticProvider("ok", 40, ["web"]))

    with caplog.at_level(logging.WARNING, logger="changeintel.inference"):
        result = engine.infer(".", tree())

    assert result.project_type == "ok"
    assert result.source_roots == ["web"]
    assert "broken" not in [detail.name for detail in result.detection_details]
    assert any("cannot read manifest" in record.getMessage() for record in caplog.records)


def test_failing_root_inference_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(_BrokenRoots("flaky", 90, ["x"]))

    with caplog.at_level(logging.WARNING, logger="changeintel.inference"):
        result = engine.infer(".", tree())

    assert result.project_type == "fallback"
    assert result.source_roots == ["fallback-root"]
    assert [detail.name for detail in result.detection_details] == ["flaky", "fallback"]
    assert any("permission denied" in record.getMessage() for record in caplog.records)


def test_provider_roots_are_normalised() -> None:
    roots = ["src", "src", "src/components", "lib", "docs"]
    engine = _engine(_StaticProvider("custom", 60, roots))

    assert engine.infer(".", tree()).source_roots == ["src", "lib"]


def test_registry_without_matches_uses_fallback() -> None:
    fallback = DefaultHeuristicProvider()
    registry = ProviderRegistry(providers=(ViteProvider(),), fallback=fallback)

    result = ProjectInferenceEngine(registry=registry).infer(".", tree(feature("README.md")))

    assert result.project_type == "default-heuristic"
    assert result.source_roots == []
    assert result.detection_details == []


def test_invalid_tree_is_rejected() -> None:
    with pytest.raises(InputValidationError):
        ProjectInferenceEngine().infer(".", {"files": []})  # type: ignore[arg-type]


def test_async_inference_matches_sync() -> None:
    engine = ProjectInferenceEngine()

    result = asyncio.run(engine.infer_async(".", VITE_TREE))

    assert result == engine.infer(".", VITE_TREE)


def test_async_inference_recovers_from_failures() -> None:
    engine = _engine(_BrokenDetect("broken", 99, []), _BrokenRoots("flaky", 70, []))

    result = asyncio.run(engine.infer_async(".", tree()))

    assert result.project_type == "fallback"
    assert result.source_roots == ["fallback-root"]


class _RawProvider(_StaticProvider):
    """Hands back whatever it was built with, unchecked."""

    def __init__(self, name: str, score: object, roots: object) -> None:
        self.name = name
        self.score = score
        self.roots = roots

    def infer_source_roots(self, root_dir: str, tree: FileTree):
        return self.roots


@pytest.mark.parametrize("roots", [None, 42, "src", ["src", 7]])
def test_malformed_roots_fall_back(roots, caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(_RawProvider("odd", 50, roots))

    with caplog.at_level(logging.WARNING, logger="changeintel.inference"):
        result = engine.infer(".", tree())

    assert result.project_type == "fallback"
    assert result.source_roots == ["fallback-root"]
    assert any("infer_source_roots" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize("score", [None, "90", True, float("nan")])
def test_non_numeric_scores_are_skipped(score, caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(_RawProvider("odd", score, ["x"]), _StaticProvider("ok", 40, ["web"]))

    with caplog.at_level(logging.WARNING, logger="changeintel.inference"):
        result = engine.infer(".", tree())

    assert result.project_type == "ok"
    assert [detail.name for detail in result.detection_details] == ["ok", "fallback"]
    assert any("numeric score" in record.getMessage() for record in caplog.records)


def test_async_inference_recovers_from_malformed_roots() -> None:
    engine = _engine(_RawProvider("odd", 50, None))

    result = asyncio.run(engine.infer_async(".", tree()))

    assert result.project_type == "fallback"
    assert result.source_roots == ["fallback-root"]
