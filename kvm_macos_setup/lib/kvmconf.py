from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

INTEL = "intel"
AMD = "amd"
UNKNOWN = "unknown"

# vendor -> (marker in modprobe config, template shipped by the toolkit)
_PROFILES = {
    INTEL: ("options kvm_intel", "kvm.conf"),
    AMD: ("options kvm_amd", "kvm_amd.conf"),
}


def read_conf(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return ""


def detect_vendor(conf_text: str) -> str:
    """Return the vendor whose kvm module options are already configured."""

    for vendor in (INTEL, AMD):
        marker, _ = _PROFILES[vendor]
        if marker in conf_text:
            return vendor
    return UNKNOWN


def parse_vendor(answer: str) -> Optional[str]:
    v = answer.strip().lower()
    return v if v in _PROFILES else None


def template_for(vendor: str, toolkit_dir: Path) -> Path:
    _, template = _PROFILES[vendor]
    return toolkit_dir / template


def install_profile(vendor: str, *, toolkit_dir: Path, conf_path: Path, dry_run: bool = False) -> None:
    src = template_for(vendor, toolkit_dir)
    if dry_run:
        logger.info("Would copy %s -> %s", str(src), str(conf_path))
        return
    conf_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, conf_path)
    logger.info("Installed %s kvm profile: %s -> %s", vendor, str(src), str(conf_path))
