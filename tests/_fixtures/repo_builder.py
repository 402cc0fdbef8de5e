"""On-disk project trees for scanner, inference and service tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, List, Mapping

from changeintel.models import FileTree
from changeintel.repo_scanner import RepoScanner


class RepoBuilder:
    """Writes a small front-end project under ``tmp_path/repo``.

    ``scan()`` turns it into the :class:`FileTree` the inference engine
    consumes; ``sources()`` hands the same files to the snapshot
    extractors.
    """

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._scanner = RepoScanner()

    def write(self, files: Mapping[str, str]) -> None:
        for relative, content in files.items():
            target = self.root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def scan(self) -> FileTree:
        return self._scanner.scan(str(self.root))

    def path(self) -> Path:
        return self.root

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")

    def sources(self, *relatives: str) -> List[Dict[str, str]]:
        """``{"filePath", "source"}`` payloads for the extract endpoint."""
        return [{"filePath": relative, "source": self.read(relative)} for relative in relatives]


__all__ = ["RepoBuilder"]
