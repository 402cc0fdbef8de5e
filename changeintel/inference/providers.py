"""Project-type providers used by the root inference engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .aggregation import (
    ROOT_DIR,
    aggregate_directory_features,
    infer_roots_from_features,
    parent_dir,
)
from ..config import InferenceConfig
from ..errors import ConfigError
from ..models import FileTree


def join_dir(base: str, child: str) -> str:
    return child if base == ROOT_DIR else f"{base}/{child}"


def _has_files_under(tree: FileTree, directory: str) -> bool:
    prefix = directory + "/"
    return any(feature.path.startswith(prefix) for feature in tree.files)


class Provider(ABC):
    """Detector and source-root inferrer for one project archetype."""

    name: str = "provider"

    @abstractmethod
    def detect(self, root_dir: str, tree: FileTree) -> float:
        """Return a confidence score in ``[0, 100]``; 0 means not applicable."""

    @abstractmethod
    def infer_source_roots(self, root_dir: str, tree: FileTree) -> List[str]:
        """Return repository-relative source roots."""


class DefaultHeuristicProvider(Provider):
    """Fallback provider scoring directories by their frontend features."""

    name = "default-heuristic"
    DETECT_SCORE = 10

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        self.config = config or InferenceConfig()

    def detect(self, root_dir: str, tree: FileTree) -> float:
        return self.DETECT_SCORE

    def infer_source_roots(self, root_dir: str, tree: FileTree) -> List[str]:
        features = aggregate_directory_features(tree)
        return infer_roots_from_features(features, self.config)


class ConfigFileProvider(Provider):
    """Provider keyed on a framework config file such as ``vite.config.ts``.

    ``conventional_dirs`` lists ``(subdirectory, root)`` pairs relative to
    the config file's directory, most nested first. The first subdirectory
    holding files decides the root; without a match the config directory
    itself is the root when ``fallback_to_config_dir`` is set.
    """

    config_marker: str = ""
    score: float = 0
    conventional_dirs: Tuple[Tuple[str, str], ...] = ()
    fallback_to_config_dir: bool = True

    def _config_files(self, tree: FileTree) -> List[str]:
        return [
            feature.path
            for feature in tree.files
            if feature.path.rsplit("/", 1)[-1].startswith(self.config_marker)
        ]

    def detect(self, root_dir: str, tree: FileTree) -> float:
        return self.score if self._config_files(tree) else 0

    def infer_source_roots(self, root_dir: str, tree: FileTree) -> List[str]:
        roots: List[str] = []
        for config_path in self._config_files(tree):
            config_dir = parent_dir(config_path)
            root = self._root_for(config_dir, tree)
            if root is not None and root not in roots:
                roots.append(root)
        return roots

    def _root_for(self, config_dir: str, tree: FileTree) -> Optional[str]:
        for subdir, root in self.conventional_dirs:
            if _has_files_under(tree, join_dir(config_dir, subdir)):
                return join_dir(config_dir, root) if root != ROOT_DIR else config_dir
        return config_dir if self.fallback_to_config_dir else None


class NextProvider(ConfigFileProvider):
    name = "nextjs"
    config_marker = "next.config."
    score = 95
    conventional_dirs = (
        ("src/app", "src"),
        ("src/pages", "src"),
        ("app", ROOT_DIR),
        ("pages", ROOT_DIR),
    )
    fallback_to_config_dir = False


class ViteProvider(ConfigFileProvider):
    name = "vite"
    config_marker = "vite.config."
    score = 90
    conventional_dirs = (("src", "src"),)


BUILTIN_PROVIDERS: Dict[str, Callable[[InferenceConfig], Provider]] = {
    NextProvider.name: lambda config: NextProvider(),
    ViteProvider.name: lambda config: ViteProvider(),
}


@dataclass(frozen=True)
class ProviderRegistry:
    """Ordered providers plus the fallback used when none of them match."""

    providers: Tuple[Provider, ...]
    fallback: Provider

    def __post_init__(self) -> None:
        if not isinstance(self.fallback, Provider):
            raise TypeError("fallback must be a Provider instance")
        for provider in self.providers:
            if not isinstance(provider, Provider):
                raise TypeError(f"{type(provider).__name__} is not a Provider")

    @property
    def names(self) -> List[str]:
        return [provider.name for provider in self.providers]


def default_registry(config: Optional[InferenceConfig] = None) -> ProviderRegistry:
    """Build the registry of built-in providers, honoring ``config.providers``."""
    config = config or InferenceConfig()
    enabled: Sequence[str] = config.providers or list(BUILTIN_PROVIDERS)
    unknown = [name for name in enabled if name not in BUILTIN_PROVIDERS and name != DefaultHeuristicProvider.name]
    if unknown:
        raise ConfigError(f"Unknown providers requested: {', '.join(sorted(unknown))}")

    fallback = DefaultHeuristicProvider(config)
    providers: List[Provider] = [
        BUILTIN_PROVIDERS[name](config) for name in BUILTIN_PROVIDERS if name in enabled
    ]
    providers.append(fallback)
    return ProviderRegistry(providers=tuple(providers), fallback=fallback)


__all__ = [
    "BUILTIN_PROVIDERS",
    "ConfigFileProvider",
    "DefaultHeuristicProvider",
    "NextProvider",
    "Provider",
    "ProviderRegistry",
    "ViteProvider",
    "default_registry",
    "join_dir",
]
