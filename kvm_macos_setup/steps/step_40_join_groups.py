from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import RunContext
from ..pipeline import mark_changed

logger = logging.getLogger(__name__)


class JoinGroupsStep:
    step_id = "40_join_groups"
    title = "Add the invoking user to the KVM groups"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        accounts = ctx.tools.accounts
        user = ctx.user.name
        current = accounts.groups_of(user)
        missing = [g for g in ctx.settings.groups if g not in current]

        if not missing:
            logger.info("User %s is already in the required groups", user)
            return state

        for group in missing:
            accounts.add_to_group(user, group)
        state["decisions"]["groups_added"] = missing
        mark_changed(state, self.step_id)
        logger.info("User %s added to: %s (takes effect at next login)", user, ", ".join(missing))
        return state
