from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)

# qemu-img size syntax: a number with an optional binary-prefix suffix.
_SIZE_RE = re.compile(r"^\d+(\.\d+)?[KMGT]?$", re.IGNORECASE)


def is_valid_size(size: str) -> bool:
    return bool(_SIZE_RE.match(size.strip()))


class BaseImageFetcher(Protocol):
    def fetch(self, toolkit_dir: Path) -> None:
        ...


class ImageConverter(Protocol):
    def convert(self, src: Path, dst: Path) -> None:
        ...


class DiskImageBuilder(Protocol):
    def create(self, path: Path, size: str, *, fmt: str) -> None:
        ...


class FetchMacOSScript:
    """Runs the toolkit's own recovery image downloader (it prompts for a release)."""

    script = "fetch-macOS-v2.py"

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def fetch(self, toolkit_dir: Path) -> None:
        run_cmd([f"./{self.script}"], cwd=str(toolkit_dir), interactive=True, dry_run=self.dry_run)


class Dmg2Img:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def convert(self, src: Path, dst: Path) -> None:
        run_cmd(["dmg2img", "-i", str(src), "-o", str(dst)], dry_run=self.dry_run)


class QemuImg:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def create(self, path: Path, size: str, *, fmt: str = "qcow2") -> None:
        run_cmd(["qemu-img", "create", "-f", fmt, str(path), size], dry_run=self.dry_run)
