"""Structural diff between two collections of component snapshots."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .registry import ExtractorRegistry, default_registry
from ..models import ChangeEvent, ChangeType, ComponentSnapshot

# Field order also fixes the order of per-component events.
_FIELD_CHANGES = (
    ("props", ChangeType.REMOVED_PROP, ChangeType.ADDED_PROP),
    ("hooks_or_lifecycle", ChangeType.REMOVED_HOOK, ChangeType.ADDED_HOOK),
    ("event_bindings", ChangeType.REMOVED_EVENT_BINDING, ChangeType.ADDED_EVENT_BINDING),
    ("render_elements", ChangeType.REMOVED_RENDER_ELEMENT, ChangeType.ADDED_RENDER_ELEMENT),
)


def _index(snapshots: Iterable[ComponentSnapshot]) -> Dict[str, ComponentSnapshot]:
    indexed: Dict[str, ComponentSnapshot] = {}
    for snapshot in snapshots:
        indexed[snapshot.key] = snapshot
    return indexed


def diff_snapshots(
    before: Iterable[ComponentSnapshot], after: Iterable[ComponentSnapshot]
) -> List[ChangeEvent]:
    """Return deletions and modifications first, then additions."""
    before_map = _index(before)
    after_map = _index(after)
    events: List[ChangeEvent] = []

    for key, old in before_map.items():
        new = after_map.get(key)
        if new is None:
            events.append(
                ChangeEvent(
                    component=old.component_name,
                    file_path=old.file_path,
                    change_type=ChangeType.COMPONENT_DELETED,
                )
            )
            continue
        for attribute, removed_type, added_type in _FIELD_CHANGES:
            old_values = getattr(old, attribute)
            new_values = getattr(new, attribute)
            removed = sorted(old_values - new_values)
            added = sorted(new_values - old_values)
            if removed:
                events.append(
                    ChangeEvent(
                        component=old.component_name,
                        file_path=old.file_path,
                        change_type=removed_type,
                        before=removed,
                    )
                )
            if added:
                events.append(
                    ChangeEvent(
                        component=old.component_name,
                        file_path=old.file_path,
                        change_type=added_type,
                        after=added,
                    )
                )

    for key, new in after_map.items():
        if key not in before_map:
            events.append(
                ChangeEvent(
                    component=new.component_name,
                    file_path=new.file_path,
                    change_type=ChangeType.COMPONENT_ADDED,
                )
            )
    return events


def snapshot_changes(
    file_path: str,
    before_text: Optional[str],
    after_text: Optional[str],
    registry: Optional[ExtractorRegistry] = None,
) -> List[ChangeEvent]:
    """Extract both revisions of one file and diff them.

    A missing revision (``None``) stands for a file that was added or
    deleted and contributes no snapshots.
    """
    registry = registry or default_registry()
    before = registry.extract(file_path, before_text) if before_text is not None else []
    after = registry.extract(file_path, after_text) if after_text is not None else []
    return diff_snapshots(before, after)


__all__ = ["diff_snapshots", "snapshot_changes"]
