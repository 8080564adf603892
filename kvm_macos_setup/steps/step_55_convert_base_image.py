from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import CommandError
from ..pipeline import mark_changed, record_error

logger = logging.getLogger(__name__)


class ConvertBaseImageStep:
    step_id = "55_convert_base_image"
    title = "Convert the downloaded dmg to img"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        src = ctx.toolkit_dir / ctx.settings.base_image
        dst = ctx.toolkit_dir / ctx.settings.converted_image

        if dst.exists():
            logger.info("%s already exists. Skipping conversion.", dst.name)
            return state

        if ctx.settings.literal_conversion_gate:
            # Compatibility mode: only converts when the dmg is absent.
            should_convert = not src.exists()
        else:
            should_convert = src.exists()

        if not should_convert:
            logger.info("Skipping conversion of %s (gate not met)", src.name)
            return state

        try:
            ctx.tools.converter.convert(src, dst)
        except CommandError as e:
            logger.error("Image conversion failed: %s", e)
            # A partial image would satisfy the existence gate on the next run.
            dst.unlink(missing_ok=True)
            record_error(state, self.step_id, e)
            return state

        mark_changed(state, self.step_id)
        return state
