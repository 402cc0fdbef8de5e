"""Tests for file importance scoring."""

from __future__ import annotations

import pytest

from changeintel.classifiers import (
    ImportanceLevel,
    rank_file_importance,
    score_file_importance,
    select_important_files,
)
from changeintel.classifiers.importance import (
    change_weight,
    importance_level,
    nesting_depth,
    technical_centrality,
)
from changeintel.errors import InputValidationError
from changeintel.models import (
    ClassificationResult,
    ComponentSnapshot,
    FileChangeRecord,
    FileImportance,
    Framework,
)

GRAPH = {
    "src/pages/Home.tsx": ["src/components/Card.tsx", "src/utils/api.ts"],
    "src/components/List.tsx": ["src/components/Card.tsx"],
}


def _record(path: str, content: str = "", methods=()) -> FileChangeRecord:
    return FileChangeRecord(relative_path=path, content=content, methods=tuple(methods))


def _classification(path: str, category: str, confidence: float) -> ClassificationResult:
    return ClassificationResult(
        file_path=path,
        category=category,
        category_name=category,
        description="",
        reason="",
        confidence=confidence,
    )


def test_levels_follow_thresholds() -> None:
    assert importance_level(0.6) is ImportanceLevel.CORE
    assert importance_level(0.45) is ImportanceLevel.KEY
    assert importance_level(0.3) is ImportanceLevel.NORMAL
    assert importance_level(0.29) is ImportanceLevel.AUXILIARY


def test_change_weight_scales_with_confidence() -> None:
    assert change_weight(_classification("a.tsx", "F1", 0.5)) == pytest.approx(0.1)
    assert change_weight(_classification("a.tsx", "F3", 1.0)) == pytest.approx(0.05)
    assert change_weight(_classification("a.go", "A1", 1.0)) == 0.0
    assert change_weight(None) == 0.0


def test_technical_centrality_uses_degree_and_path() -> None:
    # Card is imported twice: full in-degree plus the components path weight.
    assert technical_centrality("src/components/Card.tsx", GRAPH) == pytest.approx(0.4 + 0.2 * 0.6)
    # Home imports two files: full out-degree plus the page path weight.
    assert technical_centrality("src/pages/Home.tsx", GRAPH) == pytest.approx(0.4 + 0.2 * 1.0)
    assert technical_centrality("lib/x.ts", {}) == 0.0


def test_nesting_depth_ignores_self_closing_tags() -> None:
    markup = "<div><ul><li>a</li><li><Icon/></li></ul></div>"

    assert nesting_depth(markup) == 3
    assert nesting_depth("<Icon /><Badge count={2} />") == 0


def test_file_without_signals_is_auxiliary() -> None:
    result = score_file_importance(_record("README.md"))

    assert result.to_dict() == {
        "filePath": "README.md",
        "score": 0.0,
        "level": "auxiliary",
        "breakdown": {
            "technical": 0.0,
            "feature": 0.0,
            "render": 0.0,
            "interaction": 0.0,
            "changeWeight": 0.0,
        },
    }


def test_page_with_api_call_and_behaviour_change() -> None:
    record = _record("src/pages/Checkout.tsx", 'fetch("/api/cart")')

    result = score_file_importance(record, classification=_classification(record.relative_path, "F1", 1.0))

    assert result.breakdown["technical"] == pytest.approx(0.2)
    assert result.breakdown["feature"] == pytest.approx(0.5)
    assert result.score == pytest.approx(0.35 * 0.2 + 0.30 * 0.5 + 0.2)
    assert result.level == "key"


def test_snapshot_contributes_to_feature_render_and_interaction() -> None:
    snapshot = ComponentSnapshot(
        component_name="Cart",
        framework=Framework.REACT,
        file_path="src/components/Cart.tsx",
        props=frozenset({"items", "onAdd"}),
        hooks_or_lifecycle=frozenset({"useEffect", "useState"}),
        event_bindings=frozenset({"onClick"}),
        render_elements=frozenset({"ul", "li"}),
    )

    result = score_file_importance(_record("src/components/Cart.tsx", methods=["handleAdd"]), snapshot=snapshot)

    assert result.breakdown["feature"] == pytest.approx(0.5 * 0.2 + 0.3 * 2 / 15)
    assert result.breakdown["render"] == pytest.approx(0.6 * 0.02)
    assert result.breakdown["interaction"] == pytest.approx(0.6 / 30)
    assert result.level == "auxiliary"


def test_score_is_capped_at_one() -> None:
    content = "<div onClick={a}>" * 20 + "useState(0)\n" * 10 + "fetch(x)" + "</div>" * 20
    graph = {
        "src/pages/Home.tsx": ["lib/format.ts", "lib/http.ts"],
        "x.ts": ["src/pages/Home.tsx"],
        "y.ts": ["pages/Home"],
    }
    record = _record("src/pages/Home.tsx", content, methods=[f"m{index}" for index in range(40)])

    result = score_file_importance(record, graph, classification=_classification(record.relative_path, "F1", 1.0))

    assert result.breakdown["technical"] == pytest.approx(1.0)
    assert result.breakdown["interaction"] == pytest.approx(1.0)
    assert result.score == 1.0
    assert result.level == "core"


def test_rank_matches_inputs_by_path_and_sorts_descending() -> None:
    records = [_record("README.md"), _record("docs/notes.md"), _record("src/pages/Checkout.tsx", "fetch(x)")]
    classifications = [_classification("src/pages/Checkout.tsx", "F1", 1.0)]

    ranked = rank_file_importance(records, classifications=classifications)

    assert [item.file_path for item in ranked] == ["src/pages/Checkout.tsx", "README.md", "docs/notes.md"]
    assert ranked[0].breakdown["changeWeight"] == pytest.approx(0.2)


def test_select_important_files() -> None:
    scored = [FileImportance(f"f{index}.ts", score, "x") for index, score in enumerate((0.9, 0.5, 0.35, 0.1))]

    assert [item.score for item in select_important_files(scored)] == [0.9, 0.5, 0.35]
    assert [item.score for item in select_important_files(scored, top_percent=50)] == [0.9, 0.5]
    assert [item.score for item in select_important_files(scored, max_files=1)] == [0.9]
    assert select_important_files(scored, min_score=0.95) == []


def test_invalid_record_is_rejected() -> None:
    with pytest.raises(InputValidationError):
        score_file_importance({"relativePath": "a.tsx"})  # type: ignore[arg-type]
