from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..lib.pkg import missing_packages
from ..pipeline import mark_changed

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "10_install_packages"
    title = "Install packages"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        pm = ctx.tools.packages
        missing = missing_packages(pm, ctx.settings.packages)
        state["decisions"]["missing_packages"] = missing

        if not missing:
            logger.info("All required packages are already installed.")
            return state

        # Failures propagate: nothing later works without these tools.
        pm.update()
        pm.install(missing)
        mark_changed(state, self.step_id)
        logger.info("Installed %d package(s): %s", len(missing), " ".join(missing))
        return state
