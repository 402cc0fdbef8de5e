"""Directory feature aggregation and heuristic source-root selection."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..config import InferenceConfig
from ..models import DirectoryFeature, FileFeature, FileTree

ROOT_DIR = "."
FRONTEND_LANGUAGE_TYPES = frozenset({"react", "vue", "ts", "js"})

FILE_TYPE_WEIGHT = 0.4
CONTENT_FEATURE_WEIGHT = 0.3
FRAMEWORK_SIGNAL_WEIGHT = 0.2
UI_COMPONENT_WEIGHT = 0.1
FRAMEWORK_SIGNAL_STEP = 0.5
UI_COMPONENT_VOLUME = 10


def parent_dir(path: str) -> str:
    head, sep, _ = path.rpartition("/")
    return head if sep and head else ROOT_DIR


def is_descendant(path: str, ancestor: str) -> bool:
    """True when *path* sits strictly below *ancestor*.

    ``"."`` only owns top-level files, so nothing counts as its descendant.
    """
    return path.startswith(ancestor + "/")


def _ancestor_dirs(tree: FileTree) -> List[str]:
    seen: Dict[str, None] = {}
    for feature in tree.files:
        current = parent_dir(feature.path)
        while current != ROOT_DIR:
            seen.setdefault(current, None)
            current = parent_dir(current)
        seen.setdefault(ROOT_DIR, None)
    return list(seen)


def _owned_files(directory: str, files: Sequence[FileFeature]) -> List[FileFeature]:
    owned = []
    for feature in files:
        file_dir = parent_dir(feature.path)
        if file_dir == directory or is_descendant(file_dir, directory):
            owned.append(feature)
    return owned


def score_directory(directory: str, files: Sequence[FileFeature]) -> DirectoryFeature:
    total = len(files)
    frontend_files = sum(1 for feature in files if feature.language_type in FRONTEND_LANGUAGE_TYPES)
    ui_files = sum(1 for feature in files if feature.ui_signals)
    framework_signals = set()
    for feature in files:
        framework_signals.update(feature.framework_signal)

    file_type_score = frontend_files / total
    content_feature_score = ui_files / total
    framework_signal_score = min(len(framework_signals) * FRAMEWORK_SIGNAL_STEP, 1.0)
    # Absolute count, rewards directories holding many UI files.
    ui_component_score = min(ui_files / UI_COMPONENT_VOLUME, 1.0)

    # Weights sum to 1.0; the clamp absorbs float drift.
    frontend_score = min(
        FILE_TYPE_WEIGHT * file_type_score
        + CONTENT_FEATURE_WEIGHT * content_feature_score
        + FRAMEWORK_SIGNAL_WEIGHT * framework_signal_score
        + UI_COMPONENT_WEIGHT * ui_component_score,
        1.0,
    )
    return DirectoryFeature(
        dir=directory,
        total_files=total,
        frontend_score=frontend_score,
        depth=len(directory.split("/")),
    )


def aggregate_directory_features(tree: FileTree) -> List[DirectoryFeature]:
    """Score every directory that owns at least one file."""
    features: List[DirectoryFeature] = []
    for directory in _ancestor_dirs(tree):
        owned = _owned_files(directory, tree.files)
        if owned:
            features.append(score_directory(directory, owned))
    return features


def normalize_source_roots(roots: Iterable[str], limit: int = 2) -> List[str]:
    """Dedupe, drop descendants of other roots and cap the list at *limit*."""
    unique: List[str] = []
    for root in roots:
        if root and root not in unique:
            unique.append(root)
    kept = [root for root in unique if not any(is_descendant(root, other) for other in unique)]
    return kept[:limit]


def infer_roots_from_features(
    features: Iterable[DirectoryFeature],
    config: Optional[InferenceConfig] = None,
) -> List[str]:
    config = config or InferenceConfig()
    ranked = sorted(features, key=lambda feature: -feature.frontend_score)
    candidates = [
        feature.dir
        for feature in ranked[: config.max_candidates]
        if feature.depth <= config.max_depth and feature.frontend_score > config.min_score
    ]
    return normalize_source_roots(candidates, limit=config.max_roots)


__all__ = [
    "FRONTEND_LANGUAGE_TYPES",
    "ROOT_DIR",
    "aggregate_directory_features",
    "infer_roots_from_features",
    "is_descendant",
    "normalize_source_roots",
    "parent_dir",
    "score_directory",
]
