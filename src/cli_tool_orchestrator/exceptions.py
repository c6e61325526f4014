"""Exceptions raised by the orchestration engine."""

from typing import Optional


class OrchestratorError(Exception):
    """Base class for orchestration failures."""

    pass


class ResolutionError(OrchestratorError):
    """Raised when the uvx launcher cannot be located or provisioned."""

    pass


class SpawnError(OrchestratorError):
    """Raised when pipes cannot be created or the subprocess fails to start."""

    pass


class ExitFailureError(OrchestratorError):
    """Raised when the subprocess exits with a non-zero status.

    Carries the exit code and the tail of the subprocess output so callers can
    render recent context next to the error.
    """

    def __init__(self, message: str, returncode: int, tail: Optional[str] = None):
        super().__init__(message)
        self.returncode = returncode
        self.tail = tail


class CancelledError(OrchestratorError):
    """Raised when a run is cancelled through its cancel token."""

    pass


class PromptAlreadyAnsweredError(OrchestratorError):
    """Raised when a second answer is sent for the same prompt."""

    pass
