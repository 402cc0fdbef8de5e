"""Coercion of external payloads into changeintel value objects.

Everything in this module raises :class:`InputValidationError` on a
contract violation; callers are expected to let it propagate.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Sequence

from .errors import InputValidationError
from .models import (
    LANGUAGE_TYPES,
    ComponentSnapshot,
    FileChangeRecord,
    FileFeature,
    FileTree,
    Framework,
)


def parse_change_record(payload: Any) -> FileChangeRecord:
    """Build a :class:`FileChangeRecord` from a camelCase mapping."""
    if not isinstance(payload, Mapping):
        raise InputValidationError("file change record must be a mapping")
    relative_path = payload.get("relativePath")
    if not isinstance(relative_path, str) or not relative_path.strip():
        raise InputValidationError("relativePath must be a non-empty string")
    diff_text = _optional_str(payload, "diffText")
    content = _optional_str(payload, "fileContentAtCommit")
    methods = _str_list(payload.get("methods"), "methods")
    return FileChangeRecord(
        relative_path=_normalise_path(relative_path),
        diff_text=diff_text,
        content=content,
        methods=tuple(methods),
    )


def require_change_record(record: Any) -> FileChangeRecord:
    """Return *record* unchanged when it satisfies the record contract."""
    if not isinstance(record, FileChangeRecord):
        raise InputValidationError(
            f"expected FileChangeRecord, got {type(record).__name__}"
        )
    if not isinstance(record.relative_path, str) or not record.relative_path.strip():
        raise InputValidationError("relative_path must be a non-empty string")
    if not isinstance(record.diff_text, str) or not isinstance(record.content, str):
        raise InputValidationError("diff_text and content must be strings")
    if any(not isinstance(name, str) for name in record.methods):
        raise InputValidationError("methods must contain only strings")
    return record


def parse_file_tree(payload: Any) -> FileTree:
    """Build a :class:`FileTree` from ``{"files": [...]}``."""
    if not isinstance(payload, Mapping):
        raise InputValidationError("file tree must be a mapping")
    files = payload.get("files")
    if not isinstance(files, Sequence) or isinstance(files, (str, bytes)):
        raise InputValidationError("file tree 'files' must be a list")
    return FileTree(files=tuple(_parse_file_feature(item, index) for index, item in enumerate(files)))


def require_file_tree(tree: Any) -> FileTree:
    """Return *tree* unchanged when every entry is a well-formed feature."""
    if not isinstance(tree, FileTree):
        raise InputValidationError(f"expected FileTree, got {type(tree).__name__}")
    for index, feature in enumerate(tree.files):
        if not isinstance(feature, FileFeature):
            raise InputValidationError(f"files[{index}] is not a FileFeature")
        if not isinstance(feature.path, str) or not feature.path:
            raise InputValidationError(f"files[{index}].path must be a non-empty string")
        if feature.language_type not in LANGUAGE_TYPES:
            raise InputValidationError(
                f"files[{index}].languageType '{feature.language_type}' is not recognised"
            )
    return tree


def parse_snapshot(payload: Any) -> ComponentSnapshot:
    """Build a :class:`ComponentSnapshot` from its JSON shape."""
    if not isinstance(payload, Mapping):
        raise InputValidationError("component snapshot must be a mapping")
    name = payload.get("componentName")
    file_path = payload.get("filePath")
    if not isinstance(name, str) or not name:
        raise InputValidationError("componentName must be a non-empty string")
    if not isinstance(file_path, str) or not file_path:
        raise InputValidationError("filePath must be a non-empty string")
    try:
        framework = Framework(payload.get("framework"))
    except ValueError as exc:
        raise InputValidationError(
            f"framework must be one of: {', '.join(f.value for f in Framework)}"
        ) from exc
    return ComponentSnapshot(
        component_name=name,
        framework=framework,
        file_path=_normalise_path(file_path),
        props=_str_set(payload.get("props"), "props"),
        hooks_or_lifecycle=_str_set(payload.get("hooksOrLifecycle"), "hooksOrLifecycle"),
        event_bindings=_str_set(payload.get("eventBindings"), "eventBindings"),
        render_elements=_str_set(payload.get("renderElements"), "renderElements"),
    )


def parse_snapshots(payload: Any) -> List[ComponentSnapshot]:
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        raise InputValidationError("snapshot collection must be a list")
    return [parse_snapshot(item) for item in payload]


def parse_dependency_graph(payload: Any) -> Dict[str, List[str]]:
    """Build a ``{file: [imported paths]}`` mapping; ``None`` means no graph."""
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise InputValidationError("dependency graph must be a mapping")
    graph: Dict[str, List[str]] = {}
    for source, deps in payload.items():
        if not isinstance(source, str) or not source.strip():
            raise InputValidationError("dependency graph keys must be non-empty strings")
        graph[_normalise_path(source)] = _str_list(deps, f"dependencies of '{source}'")
    return graph


def _parse_file_feature(item: Any, index: int) -> FileFeature:
    if not isinstance(item, Mapping):
        raise InputValidationError(f"files[{index}] must be a mapping")
    path = item.get("path")
    if not isinstance(path, str) or not path.strip():
        raise InputValidationError(f"files[{index}].path must be a non-empty string")
    path = _normalise_path(path)
    ext = item.get("ext")
    if ext is None:
        name = path.rsplit("/", 1)[-1]
        ext = f".{name.rsplit('.', 1)[-1].lower()}" if "." in name else ""
    if not isinstance(ext, str):
        raise InputValidationError(f"files[{index}].ext must be a string")
    language_type = item.get("languageType", "other")
    if language_type not in LANGUAGE_TYPES:
        raise InputValidationError(
            f"files[{index}].languageType '{language_type}' is not recognised"
        )
    return FileFeature(
        path=path,
        ext=ext,
        language_type=language_type,
        framework_signal=_str_set(item.get("frameworkSignal"), f"files[{index}].frameworkSignal"),
        ui_signals=_str_set(item.get("uiSignals"), f"files[{index}].uiSignals"),
    )


def _normalise_path(path: str) -> str:
    normalised = path.strip().replace("\\", "/")
    while normalised.startswith("./"):
        normalised = normalised[2:]
    return normalised


def _optional_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InputValidationError(f"{key} must be a string")
    return value


def _str_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, Iterable) or isinstance(value, (str, bytes, Mapping)):
        raise InputValidationError(f"{name} must be a list of strings")
    items = list(value)
    if any(not isinstance(item, str) for item in items):
        raise InputValidationError(f"{name} must be a list of strings")
    return items


def _str_set(value: Any, name: str) -> FrozenSet[str]:
    return frozenset(_str_list(value, name))


__all__ = [
    "parse_change_record",
    "parse_dependency_graph",
    "parse_file_tree",
    "parse_snapshot",
    "parse_snapshots",
    "require_change_record",
    "require_file_tree",
]
