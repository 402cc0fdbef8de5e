"""Change intelligence for frontend and backend code changes.

The package exposes four independent transforms: component snapshot
extraction, snapshot diffing, weighted change classification and project
source-root inference.
"""

from .classifiers import GranularAnalyzer, WeightedClassifier, classifier_for, summarize_classifications
from .config import ChangeIntelConfig, load_config
from .errors import ChangeIntelError, ConfigError, InputValidationError, ParseError, ProviderError
from .inference import ProjectInferenceEngine, ProviderRegistry
from .models import (
    ChangeEvent,
    ChangeType,
    ClassificationResult,
    ComponentSnapshot,
    FileChangeRecord,
    FileFeature,
    FileTree,
    Framework,
    ProjectInferenceResult,
)
from .repo_scanner import RepoScanner
from .snapshots import diff_snapshots, extract_snapshots, snapshot_changes

__version__ = "0.1.0"

__all__ = [
    "ChangeEvent",
    "ChangeIntelConfig",
    "ChangeIntelError",
    "ChangeType",
    "ClassificationResult",
    "ComponentSnapshot",
    "ConfigError",
    "FileChangeRecord",
    "FileFeature",
    "FileTree",
    "Framework",
    "GranularAnalyzer",
    "InputValidationError",
    "ParseError",
    "ProjectInferenceEngine",
    "ProjectInferenceResult",
    "ProviderError",
    "ProviderRegistry",
    "RepoScanner",
    "WeightedClassifier",
    "classifier_for",
    "diff_snapshots",
    "extract_snapshots",
    "load_config",
    "snapshot_changes",
    "summarize_classifications",
]
