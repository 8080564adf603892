from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.boot_config import DEFAULT_RESOURCES

DEFAULT_SETTINGS_PATH = "/etc/kvm-macos-setup.yaml"

DEFAULT_PACKAGES = [
    "qemu",
    "uml-utilities",
    "virt-manager",
    "git",
    "wget",
    "libguestfs-tools",
    "p7zip-full",
    "make",
    "dmg2img",
    "tesseract-ocr",
    "tesseract-ocr-eng",
    "genisoimage",
]

DEFAULT_GROUPS = ["kvm", "libvirt", "input"]


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def repo_url(self) -> str:
        return str(self._section("toolkit").get("repo_url") or "https://github.com/kholia/OSX-KVM.git")

    @property
    def repo_branch(self) -> str:
        return str(self._section("toolkit").get("branch") or "master")

    @property
    def toolkit_dir_name(self) -> str:
        return str(self._section("toolkit").get("dir_name") or "OSX-KVM")

    @property
    def packages(self) -> List[str]:
        return [str(p) for p in (self.raw.get("packages") or DEFAULT_PACKAGES)]

    @property
    def groups(self) -> List[str]:
        return [str(g) for g in (self.raw.get("groups") or DEFAULT_GROUPS)]

    @property
    def kvm_conf_path(self) -> Path:
        return Path(str(self._section("kvm").get("conf_path") or "/etc/modprobe.d/kvm.conf"))

    @property
    def base_image(self) -> str:
        return str(self._section("assets").get("base_image") or "BaseSystem.dmg")

    @property
    def converted_image(self) -> str:
        return str(self._section("assets").get("converted_image") or "BaseSystem.img")

    @property
    def disk_image(self) -> str:
        return str(self._section("assets").get("disk_image") or "mac_hdd_ng.img")

    @property
    def disk_format(self) -> str:
        return str(self._section("assets").get("disk_format") or "qcow2")

    @property
    def default_disk_size(self) -> str:
        return str(self._section("assets").get("default_disk_size") or "64G")

    @property
    def literal_conversion_gate(self) -> bool:
        return bool(self._section("assets").get("literal_conversion_gate", False))

    @property
    def resource_defaults(self) -> Dict[str, str]:
        overrides = self._section("resources").get("defaults") or {}
        return {k: str(overrides.get(k, v)) for k, v in DEFAULT_RESOURCES.items()}

    @property
    def launch_enabled(self) -> bool:
        return bool(self._section("launch").get("enabled", True))

    @property
    def answers(self) -> Optional[List[str]]:
        answers = self.raw.get("answers")
        if answers is None:
            return None
        if not isinstance(answers, list):
            raise ValueError("answers must be a list of strings")
        return ["" if a is None else str(a) for a in answers]


def load_settings(path: Optional[str] = None) -> Settings:
    """Load YAML settings; the default path is optional, an explicit one is not."""

    p = Path(path or DEFAULT_SETTINGS_PATH)
    if not p.exists():
        if path:
            raise FileNotFoundError(path)
        return Settings()

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("settings file must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return Settings(raw=raw)
