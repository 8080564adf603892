from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import DirectoryError
from ..lib.boot_config import BOOT_VARIANTS
from ..lib.launch import parse_ordinal, select_script

logger = logging.getLogger(__name__)


class LaunchStep:
    step_id = "90_launch"
    title = "Launch macOS"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        op = ctx.operator
        op.show("Available scripts:")
        for n, name in enumerate(BOOT_VARIANTS, start=1):
            op.show(f"{n}. {name}")

        answer = op.text("Enter the number of the script you want to run (default: 1)")
        choice = select_script(answer, BOOT_VARIANTS)
        if answer.strip() and parse_ordinal(answer, len(BOOT_VARIANTS)) is None:
            op.show(f"Invalid script number. Using the default ({BOOT_VARIANTS[0]}).")

        script = ctx.toolkit_dir / BOOT_VARIANTS[choice - 1]
        state["decisions"]["launch_script"] = script.name
        if not ctx.dry_run and not script.is_file():
            raise DirectoryError(f"Boot script not found in the toolkit checkout: {script}")

        if ctx.dry_run or not ctx.settings.launch_enabled:
            logger.info("Launch disabled; would run %s", str(script))
            return state

        # Does not return on success.
        ctx.tools.launcher.launch(script)
        return state
