"""Configuration loading for changeintel (.changeintel.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".changeintel.yml"


@dataclass
class ScanConfig:
    """Repository scanning settings."""

    exclude_paths: List[str] = field(default_factory=list)
    ui_signal_max_bytes: int = 100 * 1024


@dataclass
class InferenceConfig:
    """Source-root inference thresholds and provider selection."""

    max_candidates: int = 10
    max_depth: int = 4
    min_score: float = 0.5
    max_roots: int = 2
    providers: List[str] = field(default_factory=list)


@dataclass
class ClassificationConfig:
    """Confidence buckets used when summarising classifications."""

    high_confidence: float = 0.8
    medium_confidence: float = 0.5


@dataclass
class LoggingConfig:
    """Log level, optional log file and per-component levels."""

    level: str = "INFO"
    file: Optional[Path] = None
    components: Dict[str, str] = field(default_factory=dict)


@dataclass
class ChangeIntelConfig:
    """Represents the settings defined in .changeintel.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path) -> ChangeIntelConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ChangeIntelConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))
        max_bytes = _as_int(scan_data.get("ui_signal_max_bytes"))
        if max_bytes is not None:
            scan.ui_signal_max_bytes = max_bytes
    scan.exclude_paths.extend(_as_str_list(data.get("exclude_paths")))

    inference = InferenceConfig()
    inference_data = _as_dict(data.get("inference"))
    if inference_data:
        inference.max_candidates = _as_int(inference_data.get("max_candidates")) or inference.max_candidates
        inference.max_depth = _as_int(inference_data.get("max_depth")) or inference.max_depth
        inference.max_roots = _as_int(inference_data.get("max_roots")) or inference.max_roots
        min_score = _as_float(inference_data.get("min_score"))
        if min_score is not None:
            if not 0.0 <= min_score <= 1.0:
                raise ConfigError("inference.min_score must be between 0 and 1")
            inference.min_score = min_score
        inference.providers = [name.lower() for name in _as_str_list(inference_data.get("providers"))]

    classification = ClassificationConfig()
    classification_data = _as_dict(data.get("classification"))
    if classification_data:
        high = _as_float(classification_data.get("high_confidence"))
        medium = _as_float(classification_data.get("medium_confidence"))
        if high is not None:
            classification.high_confidence = high
        if medium is not None:
            classification.medium_confidence = medium
        if classification.medium_confidence > classification.high_confidence:
            raise ConfigError("classification.medium_confidence must not exceed high_confidence")

    logging_config = LoggingConfig()
    logging_data = _as_dict(data.get("logging"))
    if logging_data:
        level = logging_data.get("level")
        if isinstance(level, str) and level.strip():
            logging_config.level = level.strip().upper()
        log_file = logging_data.get("file")
        if isinstance(log_file, str) and log_file.strip():
            log_path = Path(log_file.strip()).expanduser()
            logging_config.file = log_path if log_path.is_absolute() else root / log_path
        logging_config.components = {
            str(name): str(value).upper()
            for name, value in _as_dict(logging_data.get("components")).items()
            if isinstance(value, str)
        }

    return ChangeIntelConfig(
        root=root,
        scan=scan,
        inference=inference,
        classification=classification,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ChangeIntelConfig",
    "ClassificationConfig",
    "InferenceConfig",
    "LoggingConfig",
    "ScanConfig",
    "load_config",
]
