from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..context import RunContext
from ..lib.boot_config import (
    BOOT_VARIANTS,
    CORES_KEY,
    RAM_KEY,
    SOCKETS_KEY,
    THREADS_KEY,
    ResourceChange,
    apply_changes,
    parse_count,
    scan,
)
from ..pipeline import mark_changed

logger = logging.getLogger(__name__)

_PROMPTS = [
    (RAM_KEY, "Enter the new amount of RAM for this VM in MiB"),
    (SOCKETS_KEY, "Enter the new number of CPU sockets for this VM"),
    (CORES_KEY, "Enter the new number of CPU cores for this VM"),
    (THREADS_KEY, "Enter the new number of CPU threads for this VM"),
]


def format_settings(filename: str, settings: Dict[str, str]) -> str:
    return "\n".join(
        [
            f"File: {filename}",
            f"RAM: {settings[RAM_KEY]} MiB",
            f"CPU Sockets: {settings[SOCKETS_KEY]}",
            f"CPU Cores: {settings[CORES_KEY]}",
            f"CPU Threads: {settings[THREADS_KEY]}",
            "",
        ]
    )


class CustomizeResourcesStep:
    step_id = "70_customize_resources"
    title = "Customize the VM's resources"

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        current = scan(ctx.toolkit_dir)
        ctx.operator.show("Current VM resources for each file:")
        for filename, settings in current.items():
            ctx.operator.show(format_settings(filename, settings))

        changes = self.collect_changes(ctx)
        state["decisions"]["resource_changes"] = [{"file": c.filename, **c.as_settings()} for c in changes]
        if not changes:
            return state

        written = apply_changes(ctx.toolkit_dir, changes, dry_run=ctx.dry_run)
        if written:
            mark_changed(state, self.step_id)
        return state

    def collect_changes(self, ctx: RunContext) -> List[ResourceChange]:
        op = ctx.operator
        defaults = ctx.settings.resource_defaults
        changes: List[ResourceChange] = []

        question = "Do you want to make changes to any of the files?"
        while op.confirm(question, default=False):
            question = "Do you want to make changes to any other files?"
            filename = op.text(f"Enter the name of the file you want to change (e.g., {BOOT_VARIANTS[0]})").strip()
            if filename not in BOOT_VARIANTS:
                op.show("Invalid file name. Please enter a valid file name from the list: " + ", ".join(BOOT_VARIANTS))
                continue

            values = {key: self._ask_count(ctx, prompt, defaults[key]) for key, prompt in _PROMPTS}
            changes.append(
                ResourceChange(
                    filename=filename,
                    ram=values[RAM_KEY],
                    sockets=values[SOCKETS_KEY],
                    cores=values[CORES_KEY],
                    threads=values[THREADS_KEY],
                )
            )
            op.show(f"Settings for {filename} updated.")
        return changes

    def _ask_count(self, ctx: RunContext, prompt: str, default: str) -> str:
        while True:
            value = parse_count(ctx.operator.text(f"{prompt} (default: {default})"), default)
            if value is not None:
                return value
            ctx.operator.show("Please enter a positive whole number.")
