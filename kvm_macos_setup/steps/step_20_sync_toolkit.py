from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..errors import CommandError, DirectoryError
from ..pipeline import mark_changed, record_error

logger = logging.getLogger(__name__)


class SyncToolkitStep:
    step_id = "20_sync_toolkit"
    title = "Clone or update the OSX-KVM toolkit"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        if not ctx.dry_run and not ctx.user.home.is_dir():
            raise DirectoryError(f"Home directory of {ctx.user.name} not found: {ctx.user.home}")

        vcs = ctx.tools.vcs
        path = ctx.toolkit_dir

        if not vcs.is_checkout(path):
            logger.info("Cloning %s into %s", ctx.settings.repo_url, str(path))
            # A failed clone is fatal: every later step reads from the checkout.
            vcs.clone(ctx.settings.repo_url, path)
            ctx.tools.accounts.give_ownership(path, ctx.user)
            state["decisions"]["toolkit"] = "cloned"
            mark_changed(state, self.step_id)
        else:
            self._update(ctx, state)

        if not ctx.dry_run and not path.is_dir():
            raise DirectoryError(f"Toolkit directory missing after sync: {path}")
        return state

    def _update(self, ctx: RunContext, state: Dict[str, Any]) -> None:
        vcs = ctx.tools.vcs
        path = ctx.toolkit_dir
        logger.info("Toolkit checkout exists at %s; checking for updates", str(path))
        try:
            vcs.fetch(path, ctx.settings.repo_branch)
            local = vcs.local_head(path)
            remote = vcs.upstream_head(path)
            if local == remote:
                logger.info("Toolkit is up to date (%s)", local[:12])
                state["decisions"]["toolkit"] = "up_to_date"
            else:
                logger.info("Toolkit is behind (%s != %s); pulling", local[:12], remote[:12])
                vcs.pull(path)
                state["decisions"]["toolkit"] = "updated"
                mark_changed(state, self.step_id)
            # fetch and pull run as root and leave root-owned objects in .git
            ctx.tools.accounts.give_ownership(path, ctx.user)
        except CommandError as e:
            # The existing checkout may still be usable.
            logger.warning("Toolkit update failed; continuing with local checkout: %s", e)
            state["decisions"]["toolkit"] = "stale"
            record_error(state, self.step_id, e)
