from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

import questionary

from .errors import OperatorInputError

logger = logging.getLogger(__name__)

_YES = {"y", "yes"}


class Operator(Protocol):
    """The person at the terminal. All prompts of a run go through here."""

    def text(self, message: str, *, default: str = "") -> str:
        ...

    def confirm(self, message: str, *, default: bool = False) -> bool:
        ...

    def show(self, message: str) -> None:
        ...


class ConsoleOperator:
    def text(self, message: str, *, default: str = "") -> str:
        # unsafe_ask lets Ctrl-C propagate instead of returning None.
        answer = questionary.text(message, default=default).unsafe_ask()
        return answer or ""

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return bool(questionary.confirm(message, default=default).unsafe_ask())

    def show(self, message: str) -> None:
        print(message)


class ScriptedOperator:
    """Answers prompts from a fixed list, for unattended runs and tests."""

    def __init__(self, answers: Sequence[str]) -> None:
        self._answers: List[str] = [str(a) for a in answers]
        self.prompts: List[str] = []
        self.shown: List[str] = []

    def _next(self, message: str) -> str:
        self.prompts.append(message)
        if not self._answers:
            raise OperatorInputError(f"No scripted answer left for prompt: {message}")
        answer = self._answers.pop(0)
        logger.info("%s -> %r (scripted)", message, answer)
        return answer

    def text(self, message: str, *, default: str = "") -> str:
        return self._next(message)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        answer = self._next(message).strip().lower()
        if not answer:
            return default
        return answer in _YES

    def show(self, message: str) -> None:
        self.shown.append(message)

    @property
    def remaining(self) -> int:
        return len(self._answers)


def operator_for(answers: Optional[Sequence[str]]) -> Operator:
    if answers is not None:
        return ScriptedOperator(answers)
    return ConsoleOperator()
