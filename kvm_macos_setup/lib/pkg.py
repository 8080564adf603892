from __future__ import annotations

import logging
from typing import Protocol, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


class PackageManager(Protocol):
    def is_installed(self, package: str) -> bool:
        ...

    def update(self) -> None:
        ...

    def install(self, packages: Sequence[str]) -> None:
        ...


class AptPackageManager:
    """Host package database access through dpkg-query and apt-get."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def is_installed(self, package: str) -> bool:
        # `dpkg -l` also succeeds for removed-but-configured ("rc") packages.
        r = run_cmd(["dpkg-query", "-W", "-f=${Status}", package], check=False)
        return r.returncode == 0 and r.stdout.strip() == "install ok installed"

    def update(self) -> None:
        run_cmd(["apt-get", "update"], dry_run=self.dry_run)

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        run_cmd(["apt-get", "install", "-y", *packages], dry_run=self.dry_run)


def missing_packages(pm: PackageManager, packages: Sequence[str]) -> list[str]:
    missing = []
    for package in packages:
        if pm.is_installed(package):
            continue
        logger.info("Package %s is not installed", package)
        missing.append(package)
    return missing
