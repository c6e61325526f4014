"""Reassemble a raw subprocess byte stream into lines.

The subprocess writes arbitrary chunks to its output pipe: a chunk may hold
several lines, part of a line, or end without a trailing newline when the tool
prints a prompt and waits for input. :class:`LineReassembler` turns those
chunks into complete lines, and :func:`pump_lines` is the reader loop that
feeds them to the driving loop through a bounded queue.
"""

import logging
import queue
from typing import BinaryIO, List, Optional

from cli_tool_orchestrator.constants import CANCEL_POLL_INTERVAL, READ_CHUNK_SIZE
from cli_tool_orchestrator.models.process import LineEvent
from cli_tool_orchestrator.utils.cancel import CancelToken

logger = logging.getLogger(__name__)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class LineReassembler:
    """Split byte chunks on ``\\n`` and hold the partial remainder."""

    def __init__(self) -> None:
        self._buffer = b""

    def feed(self, chunk: bytes) -> List[str]:
        """Return the complete lines found once ``chunk`` is appended."""
        data = self._buffer + chunk
        parts = data.split(b"\n")
        # The last part is either empty (chunk ended on a newline) or a partial line.
        self._buffer = parts.pop()
        lines = []
        for part in parts:
            if part.endswith(b"\r"):
                part = part[:-1]
            lines.append(_decode(part))
        return lines

    def flush(self) -> Optional[str]:
        """Return any held partial line and clear the buffer."""
        if not self._buffer:
            return None
        remainder = self._buffer
        self._buffer = b""
        if remainder.endswith(b"\r"):
            remainder = remainder[:-1]
        return _decode(remainder)

    @property
    def pending(self) -> bool:
        return bool(self._buffer)


def _read_chunk(stream: BinaryIO, size: int) -> bytes:
    # read1 returns as soon as any data is available; read() would wait for
    # a full chunk and hide prompts that are printed without a newline.
    read1 = getattr(stream, "read1", None)
    if read1 is not None:
        return read1(size)
    return stream.read(size)


def _put(
    lines: "queue.Queue[LineEvent]",
    event: LineEvent,
    cancel_token: Optional[CancelToken],
) -> bool:
    """Block on a full queue until there is room or the run is cancelled."""
    while True:
        try:
            lines.put(event, timeout=CANCEL_POLL_INTERVAL)
            return True
        except queue.Full:
            if cancel_token is not None and cancel_token.cancelled:
                return False


def pump_lines(
    stream: BinaryIO,
    lines: "queue.Queue[LineEvent]",
    cancel_token: Optional[CancelToken] = None,
    chunk_size: int = READ_CHUNK_SIZE,
) -> None:
    """Read ``stream`` until EOF and push one :class:`LineEvent` per line.

    A trailing partial line is emitted before the terminal event. Read errors
    end the stream the same way EOF does.
    """
    reassembler = LineReassembler()
    try:
        while True:
            try:
                chunk = _read_chunk(stream, chunk_size)
            except (OSError, ValueError) as e:
                logger.debug(f"Output pipe read ended with error: {e}")
                break
            if not chunk:
                break
            for text in reassembler.feed(chunk):
                if not _put(lines, LineEvent(text=text), cancel_token):
                    return
    finally:
        remainder = reassembler.flush()
        if remainder is not None:
            _put(lines, LineEvent(text=remainder), cancel_token)
        _put(lines, LineEvent(is_terminal=True), cancel_token)
