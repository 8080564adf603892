from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

BOOT_VARIANTS = (
    "OpenCore-Boot.sh",
    "boot-linux-for-debugging.sh",
    "boot-macOS-headless.sh",
    "boot-passthrough-windows.sh",
    "boot-windows.sh",
    "OpenCore-Boot-macOS.sh",
)

RAM_KEY = "ALLOCATED_RAM"
SOCKETS_KEY = "CPU_SOCKETS"
CORES_KEY = "CPU_CORES"
THREADS_KEY = "CPU_THREADS"

RESOURCE_KEYS = (RAM_KEY, SOCKETS_KEY, CORES_KEY, THREADS_KEY)

DEFAULT_RESOURCES = {
    RAM_KEY: "4096",
    SOCKETS_KEY: "1",
    CORES_KEY: "2",
    THREADS_KEY: "4",
}


@dataclass(frozen=True)
class ResourceChange:
    filename: str
    ram: str
    sockets: str
    cores: str
    threads: str

    def as_settings(self) -> Dict[str, str]:
        return {
            RAM_KEY: self.ram,
            SOCKETS_KEY: self.sockets,
            CORES_KEY: self.cores,
            THREADS_KEY: self.threads,
        }


def _assignment_re(key: str) -> re.Pattern:
    # Anchored at line start so comments and longer keys (FOO_ALLOCATED_RAM=) never match.
    return re.compile(rf'^({re.escape(key)}=)"[^"\n]*"', re.MULTILINE)


def _read(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _write(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def read_settings(text: str) -> Dict[str, str]:
    """Extract the resource keys from script text; absent keys map to ''."""

    out: Dict[str, str] = {}
    for key in RESOURCE_KEYS:
        m = re.search(rf'^{re.escape(key)}=(?:"([^"\n]*)"|(\S*))', text, re.MULTILINE)
        if m is None:
            out[key] = ""
        elif m.group(1) is not None:
            out[key] = m.group(1)
        else:
            out[key] = m.group(2)
    return out


def substitute(text: str, settings: Dict[str, str]) -> str:
    """Rewrite the quoted value of each `KEY="..."` assignment line."""

    for key, value in settings.items():
        text = _assignment_re(key).sub(lambda m: f'{m.group(1)}"{value}"', text)
    return text


def scan(toolkit_dir: Path, filenames: Iterable[str] = BOOT_VARIANTS) -> Dict[str, Dict[str, str]]:
    found: Dict[str, Dict[str, str]] = {}
    for name in filenames:
        p = toolkit_dir / name
        if p.is_file():
            found[name] = read_settings(_read(p))
    return found


def apply_changes(toolkit_dir: Path, changes: List[ResourceChange], *, dry_run: bool = False) -> List[str]:
    """Apply pending changes in order; returns the files actually rewritten."""

    written: List[str] = []
    for change in changes:
        p = toolkit_dir / change.filename
        if not p.is_file():
            logger.warning("Skipping %s: file not found in %s", change.filename, str(toolkit_dir))
            continue
        before = _read(p)
        after = substitute(before, change.as_settings())
        if after == before:
            logger.info("No changes needed for %s", change.filename)
            continue
        if dry_run:
            logger.info("Would update %s", str(p))
            continue
        _write(p, after)
        logger.info("Updated %s: %s", change.filename, change.as_settings())
        if change.filename not in written:
            written.append(change.filename)
    return written


def parse_count(answer: str, default: str) -> Optional[str]:
    """Empty -> default; positive integer -> itself; anything else -> None."""

    a = answer.strip()
    if not a:
        return default
    if a.isdecimal() and int(a) > 0:
        return a
    return None
