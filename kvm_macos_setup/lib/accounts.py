from __future__ import annotations

import logging
import os
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Set

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvokingUser:
    name: str
    uid: int
    gid: int
    home: Path


def detect_invoking_user(environ: Optional[dict] = None) -> InvokingUser:
    """Identify the user behind sudo, falling back to the effective user."""

    env = os.environ if environ is None else environ
    name = env.get("SUDO_USER")
    entry = pwd.getpwnam(name) if name else pwd.getpwuid(os.geteuid())
    return InvokingUser(name=entry.pw_name, uid=entry.pw_uid, gid=entry.pw_gid, home=Path(entry.pw_dir))


class AccountManager(Protocol):
    def groups_of(self, user: str) -> Set[str]:
        ...

    def add_to_group(self, user: str, group: str) -> None:
        ...

    def give_ownership(self, path: Path, user: InvokingUser) -> None:
        ...


class UserMod:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def groups_of(self, user: str) -> Set[str]:
        return set(run_cmd(["id", "-nG", user]).stdout.split())

    def add_to_group(self, user: str, group: str) -> None:
        # -a appends, so an existing membership is left as is.
        run_cmd(["usermod", "-aG", group, user], dry_run=self.dry_run)

    def give_ownership(self, path: Path, user: InvokingUser) -> None:
        run_cmd(["chown", "-R", f"{user.uid}:{user.gid}", str(path)], dry_run=self.dry_run)
