from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .lib.accounts import AccountManager, InvokingUser, UserMod
from .lib.git import GitClient, VersionControl
from .lib.images import (
    BaseImageFetcher,
    DiskImageBuilder,
    Dmg2Img,
    FetchMacOSScript,
    ImageConverter,
    QemuImg,
)
from .lib.launch import ExecLauncher, ProcessLauncher
from .lib.pkg import AptPackageManager, PackageManager
from .prompts import Operator
from .settings import Settings


@dataclass(frozen=True)
class Tools:
    packages: PackageManager
    vcs: VersionControl
    fetcher: BaseImageFetcher
    converter: ImageConverter
    disks: DiskImageBuilder
    accounts: AccountManager
    launcher: ProcessLauncher


def default_tools(*, dry_run: bool = False) -> Tools:
    return Tools(
        packages=AptPackageManager(dry_run=dry_run),
        vcs=GitClient(dry_run=dry_run),
        fetcher=FetchMacOSScript(dry_run=dry_run),
        converter=Dmg2Img(dry_run=dry_run),
        disks=QemuImg(dry_run=dry_run),
        accounts=UserMod(dry_run=dry_run),
        launcher=ExecLauncher(),
    )


@dataclass(frozen=True)
class RunContext:
    """Everything a step may consult; nothing is looked up from the environment later."""

    user: InvokingUser
    elevated: bool
    settings: Settings
    operator: Operator
    tools: Tools
    dry_run: bool = False

    @property
    def toolkit_dir(self) -> Path:
        return self.user.home / self.settings.toolkit_dir_name
