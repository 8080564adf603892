from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import CommandError
from ..pipeline import mark_changed, record_error

logger = logging.getLogger(__name__)


class FetchBaseImageStep:
    step_id = "50_fetch_base_image"
    title = "Fetch the macOS base system image"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        base = ctx.toolkit_dir / ctx.settings.base_image
        if base.exists():
            logger.info("%s already exists. Skipping download.", base.name)
            return state

        try:
            ctx.tools.fetcher.fetch(ctx.toolkit_dir)
        except CommandError as e:
            logger.error("Base image download failed: %s", e)
            record_error(state, self.step_id, e)
            return state

        mark_changed(state, self.step_id)
        return state
