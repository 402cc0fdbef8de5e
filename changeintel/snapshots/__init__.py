"""Component snapshot extraction and diffing."""

from .base import SnapshotExtractor
from .diff import diff_snapshots, snapshot_changes
from .react import ReactSnapshotExtractor
from .registry import ExtractorRegistry, default_registry, extract_snapshots
from .vue import RegexSfcParser, SfcDescriptor, SfcParser, VueSnapshotExtractor

__all__ = [
    "ExtractorRegistry",
    "ReactSnapshotExtractor",
    "RegexSfcParser",
    "SfcDescriptor",
    "SfcParser",
    "SnapshotExtractor",
    "VueSnapshotExtractor",
    "default_registry",
    "diff_snapshots",
    "extract_snapshots",
    "snapshot_changes",
]
