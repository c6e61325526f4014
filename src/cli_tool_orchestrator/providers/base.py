"""Base prompt detector interface."""

from abc import ABC, abstractmethod

from cli_tool_orchestrator.models.prompt import DetectorAction, PromptState


class PromptDetector(ABC):
    """Decides, line by line, whether the external tool is asking a question.

    Tools with different prompting conventions supply their own detector; the
    process supervisor only relies on this interface.
    """

    def __init__(self) -> None:
        self.state = PromptState()

    @abstractmethod
    def feed(self, line: str) -> DetectorAction:
        """Consume one output line and return the action for the driving loop."""
        pass

    def on_stall(self) -> DetectorAction:
        """Called when no line arrived within the stall timeout while awaiting it.

        The default fires the collected prompt.
        """
        if not self.awaiting_stall:
            return DetectorAction()
        action = DetectorAction.fire(self.state.question, self.state.options)
        self.reset()
        return action

    @property
    def collecting(self) -> bool:
        return self.state.collecting

    @property
    def awaiting_stall(self) -> bool:
        """True when a silent stall should fire the prompt."""
        return self.state.collecting and bool(self.state.options)

    def reset(self) -> None:
        self.state.reset()
