from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import InvalidVendorError
from ..lib.kvmconf import UNKNOWN, detect_vendor, install_profile, parse_vendor, read_conf
from ..pipeline import mark_changed

logger = logging.getLogger(__name__)


class ConfigureKvmStep:
    step_id = "30_configure_kvm"
    title = "Configure KVM for CPU type"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        conf_path = ctx.settings.kvm_conf_path
        vendor = detect_vendor(read_conf(conf_path))

        if vendor != UNKNOWN:
            logger.info("%s CPU configuration detected in %s", vendor.upper(), str(conf_path))
            state["decisions"]["kvm_vendor"] = vendor
            return state

        logger.info("No CPU configuration found in %s", str(conf_path))
        answer = ctx.operator.text("Do you have an Intel or AMD CPU? [Intel/AMD]")
        vendor = parse_vendor(answer)
        if vendor is None:
            raise InvalidVendorError(f"Invalid CPU type selected: {answer!r}")

        install_profile(vendor, toolkit_dir=ctx.toolkit_dir, conf_path=conf_path, dry_run=ctx.dry_run)
        state["decisions"]["kvm_vendor"] = vendor
        mark_changed(state, self.step_id)
        return state
