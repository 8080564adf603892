from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import CommandError
from ..lib.images import is_valid_size
from ..pipeline import mark_changed, record_error

logger = logging.getLogger(__name__)


class CreateDiskStep:
    step_id = "60_create_disk"
    title = "Create the macOS disk image"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        disk = ctx.toolkit_dir / ctx.settings.disk_image
        if disk.exists():
            logger.info("Disk image %s already exists. Skipping creation.", disk.name)
            return state

        default = ctx.settings.default_disk_size
        while True:
            size = ctx.operator.text(
                f"Enter the desired size for the macOS disk image (default: {default}, e.g., 64G)"
            ).strip() or default
            if is_valid_size(size):
                break
            ctx.operator.show(f"Invalid size {size!r}; use a number with an optional K/M/G/T suffix.")

        try:
            ctx.tools.disks.create(disk, size, fmt=ctx.settings.disk_format)
        except CommandError as e:
            logger.error("Disk image creation failed: %s", e)
            disk.unlink(missing_ok=True)
            record_error(state, self.step_id, e)
            return state

        state["decisions"]["disk_size"] = size
        mark_changed(state, self.step_id)
        return state
