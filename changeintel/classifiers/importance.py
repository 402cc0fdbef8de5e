"""File importance scoring for changed front-end files.

A file's score blends four centralities, each in ``[0, 1]``:

* technical: in/out degree in the module dependency graph plus a path weight
  (pages and routes outrank components, which outrank utilities);
* feature: props, methods and effects, and whether the file calls an API;
* render: element count and tag nesting depth;
* interaction: event bindings and local state.

The classification of the change adds a bonus scaled by its confidence, and
the total is capped at 1.0.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .base import Category
from ..logging import get_logger
from ..models import ClassificationResult, ComponentSnapshot, FileChangeRecord, FileImportance
from ..validation import require_change_record

DependencyGraph = Mapping[str, Sequence[str]]

TECHNICAL_WEIGHT = 0.35
FEATURE_WEIGHT = 0.30
RENDER_WEIGHT = 0.20
INTERACTION_WEIGHT = 0.15


class ImportanceLevel(Category):
    CORE = ("core", "Core file", "Central to the feature; review first")
    KEY = ("key", "Key file", "Carries significant behaviour or structure")
    NORMAL = ("normal", "Normal file", "Ordinary component or module")
    AUXILIARY = ("auxiliary", "Auxiliary file", "Supporting code with little direct impact")


# Checked top-down; first threshold the score reaches wins.
LEVEL_THRESHOLDS: Tuple[Tuple[float, ImportanceLevel], ...] = (
    (0.6, ImportanceLevel.CORE),
    (0.4, ImportanceLevel.KEY),
    (0.3, ImportanceLevel.NORMAL),
)

# Technical centrality
PATH_WEIGHTS: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("/pages/", "/routes/", "/views/", "/screens/"), 1.0),
    (("/components/", "/widgets/"), 0.6),
    (("/shared/", "/common/"), 0.4),
    (("/utils/", "/helpers/"), 0.2),
    (("/src/",), 0.5),
)
IN_DEGREE_SHARE = 0.4
OUT_DEGREE_SHARE = 0.4
PATH_SHARE = 0.2

# Feature centrality
PROPS_VOLUME = 10
METHOD_VOLUME = 15
UNSNAPSHOTTED_METHOD_VOLUME = 20
EFFECT_MARKERS = ("useEffect", "mounted", "created")
API_HOOK_MARKERS = ("fetch", "axios")
API_CALL_PATTERNS = (
    re.compile(r"fetch\s*\("),
    re.compile(r"axios\.(get|post|put|delete|patch)"),
    re.compile(r"\.get\s*\(|\.post\s*\(|\.put\s*\(|\.delete\s*\("),
    re.compile(r"XMLHttpRequest"),
    re.compile(r"api\s*\."),
    re.compile(r"request\s*\("),
)

# Render centrality
ELEMENT_VOLUME = 50
DEPTH_VOLUME = 8
_OPEN_ELEMENT = re.compile(r"<[A-Za-z][A-Za-z0-9]*[^>]*>")
_TAG = re.compile(r"<(/?)[A-Za-z][A-Za-z0-9.-]*(?:\s[^<>]*?)?(/?)>")

# Interaction centrality
EVENT_VOLUME = 15
STATE_VOLUME = 10
_EVENT_BINDING = re.compile(r"on[A-Z][A-Za-z]+\s*=|@[a-zA-Z0-9_-]+=|\.addEventListener\(")
_STATE_DECLARATION = re.compile(r"useState\s*\(|const\s+\[.*,\s*set.*\]\s*=")

# Bonus per frontend category, scaled by the classification confidence.
CHANGE_CATEGORY_WEIGHTS: Dict[str, float] = {
    "F1": 0.2,
    "F2": 0.1,
    "F3": 0.05,
    "F4": 0.15,
    "F5": 0.1,
}


def _capped(count: float, volume: float) -> float:
    return min(1.0, count / volume)


def _log_scaled(degree: int, max_degree: int) -> float:
    return min(1.0, math.log10(degree + 1) / math.log10(max_degree + 1))


def path_weight(path: str) -> float:
    lowered = "/" + path.lower().lstrip("/")
    for markers, weight in PATH_WEIGHTS:
        if any(marker in lowered for marker in markers):
            return weight
    return 0.0


def has_api_call(content: str) -> bool:
    return any(pattern.search(content) for pattern in API_CALL_PATTERNS)


def nesting_depth(content: str) -> int:
    """Deepest open-tag nesting; self-closing tags do not nest."""
    depth = 0
    deepest = 0
    for match in _TAG.finditer(content):
        closing, self_closing = match.group(1), match.group(2)
        if self_closing:
            continue
        if closing:
            depth = max(0, depth - 1)
            continue
        depth += 1
        deepest = max(deepest, depth)
    return deepest


def technical_centrality(path: str, graph: DependencyGraph) -> float:
    # Import specifiers rarely match paths exactly, so containment either way counts.
    in_degree = sum(
        1 for deps in graph.values() if any(dep in path or path in dep for dep in deps if dep)
    )
    out_degree = len(graph.get(path, ()))
    max_degree = max(1, max((len(deps) for deps in graph.values()), default=0))
    return (
        IN_DEGREE_SHARE * _log_scaled(in_degree, max_degree)
        + OUT_DEGREE_SHARE * _log_scaled(out_degree, max_degree)
        + PATH_SHARE * path_weight(path)
    )


def feature_centrality(record: FileChangeRecord, snapshot: Optional[ComponentSnapshot]) -> float:
    api_call = has_api_call(record.content)
    if snapshot is None:
        return min(1.0, len(record.methods) / UNSNAPSHOTTED_METHOD_VOLUME * 0.5 + (0.5 if api_call else 0.0))

    effects = sum(
        1 for hook in snapshot.hooks_or_lifecycle if any(marker in hook for marker in EFFECT_MARKERS)
    )
    api_call = api_call or any(
        marker in hook for hook in snapshot.hooks_or_lifecycle for marker in API_HOOK_MARKERS
    )
    return (
        0.5 * _capped(len(snapshot.props), PROPS_VOLUME)
        + 0.3 * _capped(len(record.methods) + effects, METHOD_VOLUME)
        + 0.2 * (1.0 if api_call else 0.0)
    )


def render_centrality(content: str, snapshot: Optional[ComponentSnapshot]) -> float:
    elements = _capped(len(_OPEN_ELEMENT.findall(content)), ELEMENT_VOLUME)
    if snapshot is not None:
        elements = (elements + _capped(len(snapshot.render_elements), ELEMENT_VOLUME)) / 2
    return 0.6 * elements + 0.4 * _capped(nesting_depth(content), DEPTH_VOLUME)


def interaction_centrality(content: str, snapshot: Optional[ComponentSnapshot]) -> float:
    events = _capped(len(_EVENT_BINDING.findall(content)), EVENT_VOLUME)
    if snapshot is not None:
        events = (events + _capped(len(snapshot.event_bindings), EVENT_VOLUME)) / 2
    state = _capped(len(_STATE_DECLARATION.findall(content)), STATE_VOLUME)
    return 0.6 * events + 0.4 * state


def change_weight(classification: Optional[ClassificationResult]) -> float:
    if classification is None:
        return 0.0
    return CHANGE_CATEGORY_WEIGHTS.get(classification.category, 0.0) * classification.confidence


def importance_level(score: float) -> ImportanceLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return ImportanceLevel.AUXILIARY


def score_file_importance(
    record: FileChangeRecord,
    graph: Optional[DependencyGraph] = None,
    snapshot: Optional[ComponentSnapshot] = None,
    classification: Optional[ClassificationResult] = None,
) -> FileImportance:
    """Score one changed file. Every input except *record* is optional."""
    record = require_change_record(record)
    breakdown = {
        "technical": technical_centrality(record.relative_path, graph or {}),
        "feature": feature_centrality(record, snapshot),
        "render": render_centrality(record.content, snapshot),
        "interaction": interaction_centrality(record.content, snapshot),
        "changeWeight": change_weight(classification),
    }
    base = (
        TECHNICAL_WEIGHT * breakdown["technical"]
        + FEATURE_WEIGHT * breakdown["feature"]
        + RENDER_WEIGHT * breakdown["render"]
        + INTERACTION_WEIGHT * breakdown["interaction"]
    )
    score = min(base + breakdown["changeWeight"], 1.0)
    return FileImportance(
        file_path=record.relative_path,
        score=score,
        level=importance_level(score).code,
        breakdown=breakdown,
    )


def rank_file_importance(
    records: Iterable[FileChangeRecord],
    graph: Optional[DependencyGraph] = None,
    snapshots: Iterable[ComponentSnapshot] = (),
    classifications: Iterable[ClassificationResult] = (),
    logger: Optional[logging.Logger] = None,
) -> List[FileImportance]:
    """Score every record and sort by score, highest first (stable on ties).

    Snapshots and classifications are matched to records by file path; when
    a file holds several components the first snapshot is used.
    """
    log = logger or get_logger("classifiers.importance")
    by_path: Dict[str, ComponentSnapshot] = {}
    for snapshot in snapshots:
        by_path.setdefault(snapshot.file_path, snapshot)
    classified = {result.file_path: result for result in classifications}

    scored = [
        score_file_importance(
            record,
            graph,
            by_path.get(record.relative_path),
            classified.get(record.relative_path),
        )
        for record in records
    ]
    scored.sort(key=lambda item: -item.score)
    log.debug("Ranked %d files by importance", len(scored))
    return scored


def select_important_files(
    scored: Sequence[FileImportance],
    min_score: float = 0.3,
    max_files: Optional[int] = None,
    top_percent: Optional[float] = None,
) -> List[FileImportance]:
    """Filter a ranked list by score, then optionally by share and count."""
    selected = [item for item in scored if item.score >= min_score]
    if top_percent is not None and 0 < top_percent <= 100:
        selected = selected[: math.ceil(len(scored) * top_percent / 100)]
    if max_files is not None and max_files > 0:
        selected = selected[:max_files]
    return selected


__all__ = [
    "CHANGE_CATEGORY_WEIGHTS",
    "ImportanceLevel",
    "change_weight",
    "feature_centrality",
    "importance_level",
    "interaction_centrality",
    "nesting_depth",
    "rank_file_importance",
    "render_centrality",
    "score_file_importance",
    "select_important_files",
    "technical_centrality",
]
