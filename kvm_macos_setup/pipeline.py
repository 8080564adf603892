from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence

from .context import RunContext

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step. It checks current host state before acting."""

    step_id: str
    title: str

    def run(self, ctx: RunContext, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    changed_steps: List[str]
    satisfied_steps: List[str]


def record_error(state: Dict[str, Any], step_id: str, error: Exception) -> None:
    state.setdefault("errors", []).append({"step": step_id, "error": str(error)})


def mark_changed(state: Dict[str, Any], step_id: str) -> None:
    changed = state.setdefault("changed", [])
    if step_id not in changed:
        changed.append(step_id)


def new_state() -> Dict[str, Any]:
    return {"current_step": None, "changed": [], "errors": [], "decisions": {}}


def run_pipeline(*, ctx: RunContext, steps: Sequence[Step], state: Dict[str, Any] | None = None) -> PipelineResult:
    """Run steps in order. State is run-scoped; convergence checks decide what to skip."""

    state = new_state() if state is None else state
    satisfied: List[str] = []

    for n, step in enumerate(steps, start=1):
        state["current_step"] = step.step_id
        logger.info("Step %d/%d: %s", n, len(steps), step.title)
        state = step.run(ctx, state)
        if step.step_id not in state.get("changed", []):
            satisfied.append(step.step_id)

    state["current_step"] = None
    return PipelineResult(state=state, changed_steps=list(state.get("changed", [])), satisfied_steps=satisfied)
