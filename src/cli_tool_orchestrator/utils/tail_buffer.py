"""Bounded buffer of the most recent output lines."""

from collections import deque
from typing import Deque, List

from cli_tool_orchestrator.constants import TAIL_BUFFER_SIZE


class TailBuffer:
    """FIFO of the last ``capacity`` raw lines, used only for diagnostics."""

    def __init__(self, capacity: int = TAIL_BUFFER_SIZE):
        if capacity < 1:
            raise ValueError("TailBuffer capacity must be at least 1")
        self._lines: Deque[str] = deque(maxlen=capacity)

    def append(self, line: str) -> None:
        self._lines.append(line)

    def lines(self) -> List[str]:
        return list(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)
