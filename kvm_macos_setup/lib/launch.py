from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Optional, Protocol, Sequence

from ..errors import LaunchError

logger = logging.getLogger(__name__)


def parse_ordinal(answer: str, count: int) -> Optional[int]:
    try:
        n = int(answer.strip())
    except ValueError:
        return None
    if n < 1 or n > count:
        return None
    return n


def select_script(answer: str, scripts: Sequence[str], *, default: int = 1) -> int:
    """Return the 1-based ordinal picked by the operator, or ``default``."""

    n = parse_ordinal(answer, len(scripts))
    return default if n is None else n


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class ProcessLauncher(Protocol):
    def launch(self, script: Path) -> None:
        ...


class ExecLauncher:
    """Replaces the current process with the boot script; does not return."""

    def launch(self, script: Path) -> None:
        logger.info("Handing off to %s", str(script))
        for h in logging.getLogger().handlers:
            h.flush()
        try:
            make_executable(script)
            os.chdir(script.parent)
            os.execv(str(script), [f"./{script.name}"])
        except OSError as e:
            raise LaunchError(f"Cannot run {script}: {e}") from e
