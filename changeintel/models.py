"""Core value objects shared across changeintel components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Sequence


class Framework(str, Enum):
    """UI frameworks the snapshot extractors understand."""

    REACT = "react"
    VUE = "vue"


class ChangeType(str, Enum):
    """Kinds of structural change reported by the snapshot differ."""

    COMPONENT_ADDED = "componentAdded"
    COMPONENT_DELETED = "componentDeleted"
    ADDED_PROP = "addedProp"
    REMOVED_PROP = "removedProp"
    ADDED_HOOK = "addedHook"
    REMOVED_HOOK = "removedHook"
    ADDED_EVENT_BINDING = "addedEventBinding"
    REMOVED_EVENT_BINDING = "removedEventBinding"
    ADDED_RENDER_ELEMENT = "addedRenderElement"
    REMOVED_RENDER_ELEMENT = "removedRenderElement"


LANGUAGE_TYPES: FrozenSet[str] = frozenset({"react", "vue", "ts", "js", "other"})


@dataclass(frozen=True)
class FileFeature:
    """Per-file features produced by the repository scanner."""

    path: str
    ext: str
    language_type: str = "other"
    framework_signal: FrozenSet[str] = frozenset()
    ui_signals: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "ext": self.ext,
            "languageType": self.language_type,
            "frameworkSignal": sorted(self.framework_signal),
            "uiSignals": sorted(self.ui_signals),
        }


@dataclass(frozen=True)
class FileTree:
    """Flat list of file features for one repository snapshot."""

    files: Sequence[FileFeature] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"files": [feature.to_dict() for feature in self.files]}


@dataclass(frozen=True)
class FileChangeRecord:
    """One changed file as supplied by the diff provider."""

    relative_path: str
    diff_text: str = ""
    content: str = ""
    methods: Sequence[str] = ()


@dataclass(frozen=True)
class ComponentSnapshot:
    """Structural digest of a single UI component."""

    component_name: str
    framework: Framework
    file_path: str
    props: FrozenSet[str] = frozenset()
    hooks_or_lifecycle: FrozenSet[str] = frozenset()
    event_bindings: FrozenSet[str] = frozenset()
    render_elements: FrozenSet[str] = frozenset()

    @property
    def key(self) -> str:
        return f"{self.framework.value}::{self.file_path}::{self.component_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "componentName": self.component_name,
            "framework": self.framework.value,
            "filePath": self.file_path,
            "props": sorted(self.props),
            "hooksOrLifecycle": sorted(self.hooks_or_lifecycle),
            "eventBindings": sorted(self.event_bindings),
            "renderElements": sorted(self.render_elements),
        }


@dataclass(frozen=True)
class ChangeEvent:
    """A single structural change between two snapshot collections."""

    component: str
    file_path: str
    change_type: ChangeType
    before: Optional[List[str]] = None
    after: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "filePath": self.file_path,
            "changeType": self.change_type.value,
            "before": list(self.before) if self.before is not None else None,
            "after": list(self.after) if self.after is not None else None,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Winning category for one changed file."""

    file_path: str
    category: str
    category_name: str
    description: str
    reason: str
    confidence: float
    indicators: List[str] = field(default_factory=list)
    changed_methods: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "category": self.category,
            "categoryName": self.category_name,
            "description": self.description,
            "reason": self.reason,
            "confidence": self.confidence,
            "indicators": list(self.indicators),
            "changedMethods": list(self.changed_methods),
        }


@dataclass(frozen=True)
class ClassificationSummary:
    """Aggregate view over a batch of classification results."""

    total_files: int
    by_category: Dict[str, int]
    confidence_stats: Dict[str, int]
    average_confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "byCategory": dict(self.by_category),
            "confidenceStats": dict(self.confidence_stats),
            "averageConfidence": self.average_confidence,
        }


@dataclass(frozen=True)
class GranularChange:
    """One fine-grained modification found in a changed file."""

    type: str
    type_name: str
    description: str
    file_path: str
    line_number: Optional[int] = None
    line_kind: Optional[str] = None
    method: Optional[str] = None
    confidence: float = 1.0
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "typeName": self.type_name,
            "description": self.description,
            "filePath": self.file_path,
            "lineNumber": self.line_number,
            "lineKind": self.line_kind,
            "method": self.method,
            "confidence": self.confidence,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class FileImportance:
    """Importance score for one changed front-end file."""

    file_path: str
    score: float
    level: str
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "score": self.score,
            "level": self.level,
            "breakdown": dict(self.breakdown),
        }


@dataclass(frozen=True)
class DirectoryFeature:
    """Aggregated front-end features for one directory."""

    dir: str
    total_files: int
    frontend_score: float
    depth: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dir": self.dir,
            "totalFiles": self.total_files,
            "frontendScore": self.frontend_score,
            "depth": self.depth,
        }


@dataclass(frozen=True)
class DetectionDetail:
    """Score reported by one provider during detection."""

    name: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score}


@dataclass(frozen=True)
class ProjectInferenceResult:
    """Selected project type and its inferred source roots."""

    project_type: str
    source_roots: List[str]
    detection_details: List[DetectionDetail] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectType": self.project_type,
            "sourceRoots": list(self.source_roots),
            "detectionDetails": [detail.to_dict() for detail in self.detection_details],
        }


__all__ = [
    "ChangeEvent",
    "ChangeType",
    "ClassificationResult",
    "ClassificationSummary",
    "ComponentSnapshot",
    "DetectionDetail",
    "DirectoryFeature",
    "FileChangeRecord",
    "FileFeature",
    "FileImportance",
    "FileTree",
    "Framework",
    "GranularChange",
    "LANGUAGE_TYPES",
    "ProjectInferenceResult",
]
