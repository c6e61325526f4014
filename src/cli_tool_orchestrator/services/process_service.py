"""Process supervisor: spawn the tool, drive its prompts, map its exit."""

import logging
import os
import queue
import signal
import subprocess
import threading
import time
from typing import BinaryIO, Callable, List, Optional

from cli_tool_orchestrator.constants import (
    CANCEL_POLL_INTERVAL,
    LINE_QUEUE_SIZE,
    STALL_TIMEOUT_SECONDS,
    TAIL_BUFFER_SIZE,
    TERMINATE_GRACE_SECONDS,
)
from cli_tool_orchestrator.exceptions import CancelledError, ExitFailureError, SpawnError
from cli_tool_orchestrator.models.process import LineEvent, ProcessInvocation, RunResult
from cli_tool_orchestrator.models.prompt import ActionKind, DetectorAction
from cli_tool_orchestrator.providers.base import PromptDetector
from cli_tool_orchestrator.providers.numbered_menu import NumberedMenuDetector
from cli_tool_orchestrator.services.progress_service import ProgressReporter
from cli_tool_orchestrator.services.prompt_relay import PromptHandler, PromptRelay, close_stdin
from cli_tool_orchestrator.utils.cancel import CancelToken
from cli_tool_orchestrator.utils.env import get_float_env, get_int_env
from cli_tool_orchestrator.utils.line_reader import pump_lines
from cli_tool_orchestrator.utils.tail_buffer import TailBuffer

logger = logging.getLogger(__name__)

SECRET_FLAGS = {"--api-key"}

# The tool runs in its own session on POSIX so escalation reaches its children
POSIX = os.name == "posix"
SIGKILL = getattr(signal, "SIGKILL", signal.SIGTERM)


def _signal_group(process: subprocess.Popen, sig: int) -> None:
    """Send ``sig`` to the tool's process group, or to the tool alone off POSIX."""
    try:
        if POSIX:
            os.killpg(process.pid, sig)
        elif sig == signal.SIGTERM:
            process.terminate()
        else:
            process.kill()
    except (ProcessLookupError, PermissionError) as e:
        logger.debug(f"Process group {process.pid} already gone: {e}")


def _read_output(
    stream: BinaryIO, lines: "queue.Queue[LineEvent]", cancel_token: CancelToken
) -> None:
    try:
        pump_lines(stream, lines, cancel_token)
    finally:
        stream.close()


def redact_argv(argv: List[str]) -> str:
    """Join argv for logging with secret flag values masked."""
    redacted = []
    mask_next = False
    for arg in argv:
        if mask_next:
            redacted.append("***")
            mask_next = False
            continue
        redacted.append(arg)
        mask_next = arg in SECRET_FLAGS
    return " ".join(redacted)


class ProcessSupervisor:
    """Runs one external tool invocation per :meth:`run` call.

    Each run gets its own detector, tail buffer, line queue and reader thread,
    so sequential runs never share state. The subprocess is always waited on
    before :meth:`run` returns.
    """

    def __init__(
        self,
        progress: Optional[ProgressReporter] = None,
        prompt_handler: Optional[PromptHandler] = None,
        detector_factory: Callable[[], PromptDetector] = NumberedMenuDetector,
        stall_timeout: Optional[float] = None,
        terminate_grace: Optional[float] = None,
        tail_size: Optional[int] = None,
        line_queue_size: Optional[int] = None,
    ):
        self.progress = progress or ProgressReporter()
        self.prompt_handler = prompt_handler
        self.detector_factory = detector_factory
        self.stall_timeout = (
            stall_timeout
            if stall_timeout is not None
            else get_float_env("CTO_STALL_TIMEOUT_SECONDS", STALL_TIMEOUT_SECONDS)
        )
        self.terminate_grace = (
            terminate_grace
            if terminate_grace is not None
            else get_float_env("CTO_TERMINATE_GRACE_SECONDS", TERMINATE_GRACE_SECONDS)
        )
        self.tail_size = (
            tail_size if tail_size is not None else get_int_env("CTO_TAIL_LINES", TAIL_BUFFER_SIZE)
        )
        self.line_queue_size = (
            line_queue_size
            if line_queue_size is not None
            else get_int_env("CTO_LINE_QUEUE_SIZE", LINE_QUEUE_SIZE)
        )

    def run(
        self, invocation: ProcessInvocation, cancel_token: Optional[CancelToken] = None
    ) -> RunResult:
        """Spawn the tool, relay its prompts until EOF, and map the exit code."""
        cancel_token = cancel_token or CancelToken()
        name = os.path.basename(invocation.command)
        argv = invocation.argv()
        env = {**os.environ, **invocation.env}

        logger.info(f"Starting {redact_argv(argv)} in {invocation.working_directory or os.getcwd()}")
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                cwd=invocation.working_directory,
                env=env,
                start_new_session=POSIX,
            )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to start {name}: {e}")
            return RunResult(error=SpawnError(f"failed to start {name}: {e}"))

        tail = TailBuffer(self.tail_size)
        detector = self.detector_factory()
        lines: "queue.Queue[LineEvent]" = queue.Queue(maxsize=self.line_queue_size)
        reader = threading.Thread(
            target=_read_output,
            args=(process.stdout, lines, cancel_token),
            name=f"{name}-reader-{process.pid}",
            daemon=True,
        )
        reader.start()
        relay = PromptRelay(self.prompt_handler, process.stdin, cancel_token)

        try:
            self._drive(lines, detector, relay, tail, cancel_token)
        except BaseException as e:
            logger.error(f"Run of {name} aborted: {e!r}")
            cancel_token.cancel(f"aborted: {e}")
            raise
        finally:
            close_stdin(process.stdin)
            returncode = self._wait(process, cancel_token)
            reader.join(timeout=self.terminate_grace)
            if reader.is_alive():
                # A background child still holds the output pipe open. The
                # reader closes the pipe itself once it sees EOF.
                logger.warning(f"Output of {name} still open after exit, killing its process group")
                _signal_group(process, SIGKILL)
                reader.join(timeout=self.terminate_grace)

        return self._map_exit(name, returncode, tail, cancel_token)

    def _drive(
        self,
        lines: "queue.Queue[LineEvent]",
        detector: PromptDetector,
        relay: PromptRelay,
        tail: TailBuffer,
        cancel_token: CancelToken,
    ) -> None:
        while True:
            timeout = self.stall_timeout if detector.awaiting_stall else None
            event = self._next_event(lines, cancel_token, timeout)
            if cancel_token.cancelled:
                return

            if event is None:
                logger.debug(f"Output stalled for {self.stall_timeout}s with options pending")
                action = detector.on_stall()
            elif event.is_terminal:
                return
            else:
                tail.append(event.text)
                self.progress.line(event.text)
                action = detector.feed(event.text)

            if not self._apply(action, relay):
                return

    def _apply(self, action: DetectorAction, relay: PromptRelay) -> bool:
        if action.kind != ActionKind.FIRE_PROMPT:
            return True
        return relay.relay(action.question, action.options)

    @staticmethod
    def _next_event(
        lines: "queue.Queue[LineEvent]",
        cancel_token: CancelToken,
        timeout: Optional[float],
    ) -> Optional[LineEvent]:
        """Wait for the next line; None means cancelled or the stall timeout passed."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        while not cancel_token.cancelled:
            wait = CANCEL_POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                wait = min(wait, remaining)
            try:
                return lines.get(timeout=wait)
            except queue.Empty:
                continue
        return None

    def _wait(self, process: subprocess.Popen, cancel_token: CancelToken) -> int:
        if not cancel_token.cancelled:
            return process.wait()

        try:
            return process.wait(timeout=self.terminate_grace)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} ignored stdin EOF, terminating")
            _signal_group(process, signal.SIGTERM)
        try:
            return process.wait(timeout=self.terminate_grace)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} ignored terminate, killing")
            _signal_group(process, SIGKILL)
            return process.wait()

    @staticmethod
    def _map_exit(
        name: str, returncode: int, tail: TailBuffer, cancel_token: CancelToken
    ) -> RunResult:
        tail_text = tail.text() or None

        if cancel_token.cancelled:
            logger.info(f"{name} run cancelled ({cancel_token.reason}), exit status {returncode}")
            return RunResult(
                error=CancelledError(f"{name} command cancelled: {cancel_token.reason}"),
                tail=tail_text,
            )

        if returncode != 0:
            if tail_text:
                message = f"{name} command failed:\n{tail_text}"
            else:
                message = f"{name} command failed: exit status {returncode}"
            logger.error(f"{name} exited with status {returncode}")
            return RunResult(
                error=ExitFailureError(message, returncode=returncode, tail=tail_text),
                tail=tail_text,
            )

        logger.info(f"{name} completed successfully")
        return RunResult()
