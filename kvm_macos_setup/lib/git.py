from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    def is_checkout(self, path: Path) -> bool:
        ...

    def clone(self, url: str, path: Path) -> None:
        ...

    def fetch(self, path: Path, branch: str) -> None:
        ...

    def local_head(self, path: Path) -> str:
        ...

    def upstream_head(self, path: Path) -> str:
        ...

    def pull(self, path: Path) -> None:
        ...


class GitClient:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def is_checkout(self, path: Path) -> bool:
        return (path / ".git").is_dir()

    def clone(self, url: str, path: Path) -> None:
        run_cmd(["git", "clone", "--depth", "1", "--recursive", url, str(path)], dry_run=self.dry_run)

    def fetch(self, path: Path, branch: str) -> None:
        # Fetch only; merging is decided after comparing heads.
        run_cmd(["git", "-C", str(path), "fetch", "origin", branch], dry_run=self.dry_run)

    def _rev_parse(self, path: Path, rev: str) -> str:
        return run_cmd(["git", "-C", str(path), "rev-parse", rev]).stdout.strip()

    def local_head(self, path: Path) -> str:
        return self._rev_parse(path, "@")

    def upstream_head(self, path: Path) -> str:
        return self._rev_parse(path, "@{u}")

    def pull(self, path: Path) -> None:
        run_cmd(["git", "-C", str(path), "pull", "--recurse-submodules"], dry_run=self.dry_run)
