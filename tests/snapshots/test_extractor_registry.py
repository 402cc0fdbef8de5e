"""Tests for extractor dispatch and per-file failure recovery."""

from __future__ import annotations

import logging
from typing import List

import pytest

from changeintel.errors import InputValidationError, ParseError
from changeintel.models import ComponentSnapshot, Framework
from changeintel.snapshots import ExtractorRegistry, SnapshotExtractor, default_registry, extract_snapshots
from changeintel.snapshots.react import ReactSnapshotExtractor
from changeintel.snapshots.vue import VueSnapshotExtractor


class _ExplodingExtractor(SnapshotExtractor):
    framework = Framework.REACT
    extensions = frozenset({".jsx"})

    def extract(self, file_path: str, source: str) -> List[ComponentSnapshot]:
        raise ParseError(file_path, "boom")


def test_default_registry_dispatches_by_extension() -> None:
    registry = default_registry()

    assert isinstance(registry.for_path("src/App.tsx"), ReactSnapshotExtractor)
    assert isinstance(registry.for_path("src/util.JS"), ReactSnapshotExtractor)
    assert isinstance(registry.for_path("src/App.vue"), VueSnapshotExtractor)
    assert registry.for_path("styles/site.css") is None
    assert registry.extensions == [".js", ".jsx", ".ts", ".tsx", ".vue"]


def test_unknown_extension_yields_empty_list() -> None:
    assert extract_snapshots("README.md", "# <b>hello</b>") == []


def test_non_string_source_is_rejected() -> None:
    with pytest.raises(InputValidationError):
        default_registry().extract("src/App.tsx", None)  # type: ignore[arg-type]


def test_failures_are_logged_and_recovered(caplog: pytest.LogCaptureFixture) -> None:
    registry = ExtractorRegistry([_ExplodingExtractor()])

    with caplog.at_level(logging.WARNING, logger="changeintel.snapshots"):
        assert registry.extract("src/Broken.jsx", "whatever") == []

    assert any("src/Broken.jsx" in record.getMessage() for record in caplog.records)
    assert any("boom" in record.getMessage() for record in caplog.records)


def test_batch_continues_after_a_broken_file() -> None:
    registry = ExtractorRegistry([_ExplodingExtractor(), VueSnapshotExtractor()])

    snapshots = registry.extract_batch(
        {
            "src/Broken.jsx": "function X() { return <div/> }",
            "src/Unclosed.vue": "<template><div>",
            "src/Ok.vue": "<template><div @click='go'></div></template>",
        }
    )

    assert [snapshot.component_name for snapshot in snapshots] == ["Ok"]


def test_register_rejects_non_extractors() -> None:
    with pytest.raises(TypeError):
        ExtractorRegistry([object()])  # type: ignore[list-item]
