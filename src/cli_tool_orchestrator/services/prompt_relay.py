"""Relay detected prompts to a handler and write answers to the subprocess."""

import logging
import queue
from typing import BinaryIO, Callable, List, Optional

from cli_tool_orchestrator.constants import CANCEL_POLL_INTERVAL
from cli_tool_orchestrator.models.prompt import InteractivePrompt
from cli_tool_orchestrator.utils.cancel import CancelToken

logger = logging.getLogger(__name__)

PromptHandler = Callable[[InteractivePrompt], None]


def close_stdin(stdin: Optional[BinaryIO]) -> None:
    """Close the subprocess stdin so a blocked read observes EOF."""
    if stdin is None or stdin.closed:
        return
    try:
        stdin.close()
    except OSError as e:
        # The subprocess may already be gone (broken pipe on flush).
        logger.debug(f"Ignoring error while closing stdin: {e}")


class PromptRelay:
    """Hands one prompt at a time to the handler and relays its answer.

    The driving loop blocks inside :meth:`relay` while the subprocess is itself
    blocked reading stdin, so at most one prompt is ever outstanding.
    """

    def __init__(
        self,
        handler: Optional[PromptHandler],
        stdin: BinaryIO,
        cancel_token: CancelToken,
        poll_interval: float = CANCEL_POLL_INTERVAL,
    ):
        self._handler = handler
        self._stdin = stdin
        self._cancel_token = cancel_token
        self._poll_interval = poll_interval
        self.prompts_fired = 0

    def relay(self, question: str, options: List[str]) -> bool:
        """Fire a prompt and wait for its answer.

        Returns:
            False when the run was cancelled while waiting, True otherwise
            (including when no handler is registered and the prompt is dropped).
        """
        if self._handler is None:
            logger.warning(
                f"No prompt handler registered, dropping prompt {question!r}; "
                "the tool may wait for input indefinitely"
            )
            return True

        prompt = InteractivePrompt(question, options)
        self.prompts_fired += 1
        logger.info(f"Prompt detected: {question!r} with {len(options)} options")
        self._handler(prompt)

        while True:
            if self._cancel_token.cancelled:
                logger.info(f"Run cancelled while waiting for an answer to {question!r}")
                close_stdin(self._stdin)
                return False
            try:
                answer = prompt.answer.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            # A cancel that raced the answer wins; nothing is written.
            if self._cancel_token.cancelled:
                close_stdin(self._stdin)
                return False
            self._write_answer(answer)
            return True

    def _write_answer(self, answer: str) -> None:
        logger.debug(f"Writing answer {answer!r} to subprocess stdin")
        try:
            self._stdin.write(f"{answer}\n".encode("utf-8"))
            self._stdin.flush()
        except (BrokenPipeError, ValueError) as e:
            logger.warning(f"Could not deliver answer, subprocess stdin is closed: {e}")
