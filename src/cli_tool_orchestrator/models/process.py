"""Process invocation and run result models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessInvocation(BaseModel):
    """Everything needed to spawn the external tool once.

    ``env`` is an overlay merged onto the parent environment at spawn time.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    args: List[str] = Field(default_factory=list)
    working_directory: Optional[str] = None
    env: Dict[str, str] = Field(default_factory=dict)

    def argv(self) -> List[str]:
        return [self.command, *self.args]


class LineEvent(BaseModel):
    """One reassembled output line, or the end-of-stream marker."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    is_terminal: bool = False


class RunResult(BaseModel):
    """Outcome of a run: success with named artifacts, or an error."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    artifacts: Dict[str, str] = Field(default_factory=dict)
    error: Optional[Exception] = None
    tail: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None
