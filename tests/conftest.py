"""
Pytest configuration and shared fixtures for kvm-macos-setup tests.

External tools are replaced by in-memory fakes that create the same
filesystem artifacts the real tools would, so steps can be run end to end
against a temporary home directory.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest

from kvm_macos_setup.context import RunContext, Tools
from kvm_macos_setup.errors import CommandError
from kvm_macos_setup.lib.accounts import InvokingUser
from kvm_macos_setup.lib.boot_config import BOOT_VARIANTS
from kvm_macos_setup.pipeline import new_state
from kvm_macos_setup.prompts import ScriptedOperator
from kvm_macos_setup.settings import Settings

BOOT_SCRIPT = """#!/usr/bin/env bash

# Special thanks to https://github.com/foxlet/macOS-Simple-KVM
# ALLOCATED_RAM="8192" would also work on bigger hosts

MY_OPTIONS="+ssse3,+sse4.2,+popcnt,+avx,+aes,+xsave,+xsaveopt,check"

ALLOCATED_RAM="7192" # MiB
CPU_SOCKETS="1"
CPU_CORES="2"
CPU_THREADS="4"

REPO_PATH="."
OVMF_DIR="."

args=(
  -m "$ALLOCATED_RAM" -cpu Penryn,kvm=on
  -smp "$CPU_THREADS",cores="$CPU_CORES",sockets="$CPU_SOCKETS"
)
"""


def _fail(argv: Sequence[str]) -> CommandError:
    return CommandError(list(argv), 1, "simulated failure")


class FakePackageManager:
    def __init__(self, installed: Optional[Set[str]] = None, *, fail_install: bool = False) -> None:
        self.installed: Set[str] = set(installed or ())
        self.fail_install = fail_install
        self.queries: List[str] = []
        self.update_calls = 0
        self.install_calls: List[List[str]] = []

    def is_installed(self, package: str) -> bool:
        self.queries.append(package)
        return package in self.installed

    def update(self) -> None:
        self.update_calls += 1

    def install(self, packages: Sequence[str]) -> None:
        self.install_calls.append(list(packages))
        if self.fail_install:
            raise CommandError(["apt-get", "install", "-y", *packages], 100, "E: Unable to locate package")
        self.installed.update(packages)


class FakeVcs:
    """Clones by writing a minimal OSX-KVM tree."""

    def __init__(
        self,
        *,
        local: str = "a" * 40,
        remote: str = "a" * 40,
        fail_clone: bool = False,
        fail_fetch: bool = False,
    ) -> None:
        self.local = local
        self.remote = remote
        self.fail_clone = fail_clone
        self.fail_fetch = fail_fetch
        self.calls: List[str] = []

    def is_checkout(self, path: Path) -> bool:
        return (path / ".git").is_dir()

    def clone(self, url: str, path: Path) -> None:
        self.calls.append("clone")
        if self.fail_clone:
            raise CommandError(["git", "clone", url, str(path)], 128, "fatal: unable to access")
        populate_toolkit(path)
        self.local = self.remote

    def fetch(self, path: Path, branch: str) -> None:
        self.calls.append("fetch")
        if self.fail_fetch:
            raise _fail(["git", "fetch", "origin", branch])

    def local_head(self, path: Path) -> str:
        return self.local

    def upstream_head(self, path: Path) -> str:
        return self.remote

    def pull(self, path: Path) -> None:
        self.calls.append("pull")
        self.local = self.remote


class FakeFetcher:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls = 0

    def fetch(self, toolkit_dir: Path) -> None:
        self.calls += 1
        if self.fail:
            raise _fail(["./fetch-macOS-v2.py"])
        (toolkit_dir / "BaseSystem.dmg").write_bytes(b"dmg")


class FakeConverter:
    """With fail=True it leaves a truncated output behind, like an interrupted dmg2img."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[tuple] = []

    def convert(self, src: Path, dst: Path) -> None:
        self.calls.append((src.name, dst.name))
        if self.fail:
            dst.write_bytes(b"trunc")
            raise _fail(["dmg2img", "-i", str(src), "-o", str(dst)])
        dst.write_bytes(b"img")


class FakeDisks:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[tuple] = []

    def create(self, path: Path, size: str, *, fmt: str) -> None:
        self.calls.append((path.name, size, fmt))
        if self.fail:
            path.write_bytes(b"partial")
            raise _fail(["qemu-img", "create", "-f", fmt, str(path), size])
        path.write_bytes(b"qcow2")


class FakeAccounts:
    def __init__(self, groups: Optional[Set[str]] = None) -> None:
        self.groups: Set[str] = set(groups or ())
        self.added: List[tuple] = []
        self.owned: List[Path] = []

    def groups_of(self, user: str) -> Set[str]:
        return set(self.groups)

    def add_to_group(self, user: str, group: str) -> None:
        self.added.append((user, group))
        self.groups.add(group)

    def give_ownership(self, path: Path, user: InvokingUser) -> None:
        self.owned.append(path)


class FakeLauncher:
    def __init__(self) -> None:
        self.launched: List[Path] = []

    def launch(self, script: Path) -> None:
        self.launched.append(script)


def populate_toolkit(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    (path / ".git").mkdir(exist_ok=True)
    (path / "kvm.conf").write_text("options kvm_intel nested=1\noptions kvm ignore_msrs=1\n", encoding="utf-8")
    (path / "kvm_amd.conf").write_text("options kvm_amd nested=1\noptions kvm ignore_msrs=1\n", encoding="utf-8")
    for name in BOOT_VARIANTS:
        (path / name).write_text(BOOT_SCRIPT, encoding="utf-8")


def make_tools(**overrides) -> Tools:
    parts = dict(
        packages=FakePackageManager(),
        vcs=FakeVcs(),
        fetcher=FakeFetcher(),
        converter=FakeConverter(),
        disks=FakeDisks(),
        accounts=FakeAccounts(),
        launcher=FakeLauncher(),
    )
    parts.update(overrides)
    return Tools(**parts)


def make_ctx(
    home: Path,
    *,
    answers: Sequence[str] = (),
    tools: Optional[Tools] = None,
    raw: Optional[Dict] = None,
    elevated: bool = True,
) -> RunContext:
    settings_raw = {"kvm": {"conf_path": str(home / "etc" / "modprobe.d" / "kvm.conf")}}
    settings_raw.update(raw or {})
    return RunContext(
        user=InvokingUser(name="alice", uid=1000, gid=1000, home=home),
        elevated=elevated,
        settings=Settings(raw=settings_raw),
        operator=ScriptedOperator(answers),
        tools=tools or make_tools(),
    )


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home" / "alice"
    h.mkdir(parents=True)
    return h


@pytest.fixture
def toolkit(home: Path) -> Path:
    """An existing OSX-KVM checkout."""
    path = home / "OSX-KVM"
    populate_toolkit(path)
    return path


@pytest.fixture
def state() -> Dict:
    return new_state()
