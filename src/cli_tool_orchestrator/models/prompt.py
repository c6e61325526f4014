"""Prompt detection and relay models."""

import queue
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cli_tool_orchestrator.exceptions import PromptAlreadyAnsweredError


class ActionKind(str, Enum):
    """What the driving loop should do after feeding a line to a detector."""

    CONTINUE = "continue"
    FIRE_PROMPT = "fire_prompt"
    IGNORE = "ignore"


class DetectorAction(BaseModel):
    """Result of feeding one line (or a stall) to a prompt detector."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind = ActionKind.CONTINUE
    question: str = ""
    options: List[str] = Field(default_factory=list)

    @classmethod
    def fire(cls, question: str, options: List[str]) -> "DetectorAction":
        return cls(kind=ActionKind.FIRE_PROMPT, question=question, options=list(options))


CONTINUE = DetectorAction(kind=ActionKind.CONTINUE)
IGNORE = DetectorAction(kind=ActionKind.IGNORE)


class PromptState(BaseModel):
    """Mutable collection state for a question being detected."""

    collecting: bool = False
    question: str = ""
    options: List[str] = Field(default_factory=list)

    def reset(self) -> None:
        self.collecting = False
        self.question = ""
        self.options = []


class InteractivePrompt:
    """A detected question handed to the caller's prompt handler.

    The handler answers by calling :meth:`send` exactly once, from any thread.
    A second answer raises :class:`PromptAlreadyAnsweredError`.
    """

    def __init__(self, question: str, options: List[str]):
        self.question = question
        self.options = list(options)
        self.answer: "queue.Queue[str]" = queue.Queue(maxsize=1)

    def send(self, value: str) -> None:
        try:
            self.answer.put_nowait(value)
        except queue.Full:
            raise PromptAlreadyAnsweredError(
                f"Prompt '{self.question}' has already been answered"
            )

    def option_number(self, option: str) -> Optional[int]:
        """Return the 1-based menu number of an option, or None if absent."""
        try:
            return self.options.index(option) + 1
        except ValueError:
            return None

    def __repr__(self) -> str:
        return f"InteractivePrompt(question={self.question!r}, options={self.options!r})"
