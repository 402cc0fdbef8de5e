"""Directory feature aggregation and project source-root inference."""

from .aggregation import (
    FRONTEND_LANGUAGE_TYPES,
    aggregate_directory_features,
    infer_roots_from_features,
    normalize_source_roots,
)
from .engine import ProjectInferenceEngine
from .providers import (
    ConfigFileProvider,
    DefaultHeuristicProvider,
    NextProvider,
    Provider,
    ProviderRegistry,
    ViteProvider,
    default_registry,
)

__all__ = [
    "ConfigFileProvider",
    "DefaultHeuristicProvider",
    "FRONTEND_LANGUAGE_TYPES",
    "NextProvider",
    "ProjectInferenceEngine",
    "Provider",
    "ProviderRegistry",
    "ViteProvider",
    "aggregate_directory_features",
    "default_registry",
    "infer_roots_from_features",
    "normalize_source_roots",
]
