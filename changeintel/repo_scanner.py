"""Repository scanning into a flat feature tree."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional, Sequence

from .config import CONFIG_FILENAME, ChangeIntelConfig, ScanConfig, load_config
from .errors import ConfigError
from .logging import get_logger
from .models import FileFeature, FileTree

_EXCLUDED_DIRS = {
    ".git",
    "node_modules",
    "dist",
    "build",
    "coverage",
    ".idea",
    ".vscode",
    "target",
    "out",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_LANGUAGE_BY_SUFFIX = {
    ".tsx": "react",
    ".jsx": "react",
    ".vue": "vue",
    ".ts": "ts",
    ".js": "js",
}

_FRAMEWORK_MARKERS = (
    ("vite.config", "vite"),
    ("next.config", "next"),
)

_HTML_TAG_MARKERS = ("</div>", "<span")
_JSX_ATTRIBUTE_MARKERS = ("className=", "style={{")

logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .changeintel.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, scan: ScanConfig) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in scan.exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS or name.startswith("."):
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


def detect_language_type(ext: str) -> str:
    return _LANGUAGE_BY_SUFFIX.get(ext.lower(), "other")


def detect_framework_signals(file_name: str) -> FrozenSet[str]:
    return frozenset(signal for marker, signal in _FRAMEWORK_MARKERS if marker in file_name)


def detect_ui_signals(content: str) -> FrozenSet[str]:
    signals = set()
    if any(marker in content for marker in _HTML_TAG_MARKERS):
        signals.add("html-tags")
    if any(marker in content for marker in _JSX_ATTRIBUTE_MARKERS):
        signals.add("jsx-attributes")
    return frozenset(signals)


class RepoScanner:
    """Walks the repository to produce a :class:`FileTree`."""

    def __init__(self, config: Optional[ScanConfig] = None) -> None:
        self._config = config

    def scan(self, root: str) -> FileTree:
        """Return per-file features for every non-ignored file under *root*."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        scan_config = self._config or self._load_scan_config(root_path)
        rules = _load_ignore_rules(root_path, scan_config)

        files: List[FileFeature] = []
        for path in _iter_files(root_path, rules):
            rel_path = path.relative_to(root_path).as_posix()
            ext = path.suffix.lower()
            files.append(
                FileFeature(
                    path=rel_path,
                    ext=ext,
                    language_type=detect_language_type(ext),
                    framework_signal=detect_framework_signals(path.name),
                    ui_signals=self._ui_signals(path, scan_config.ui_signal_max_bytes),
                )
            )
        logger.debug("Scanned %d files under %s", len(files), root_path)
        return FileTree(files=tuple(files))

    @staticmethod
    def _load_scan_config(root: Path) -> ScanConfig:
        try:
            config: ChangeIntelConfig = load_config(root / CONFIG_FILENAME)
        except ConfigError as exc:
            logger.warning("Ignoring unreadable %s: %s", CONFIG_FILENAME, exc)
            return ScanConfig()
        return config.scan

    @staticmethod
    def _ui_signals(path: Path, max_bytes: int) -> FrozenSet[str]:
        try:
            if path.stat().st_size > max_bytes:
                return frozenset()
            content = path.read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            logger.debug("Skipping UI signals for %s: %s", path, exc)
            return frozenset()
        return detect_ui_signals(content)


__all__ = [
    "IgnoreRule",
    "RepoScanner",
    "detect_framework_signals",
    "detect_language_type",
    "detect_ui_signals",
]
