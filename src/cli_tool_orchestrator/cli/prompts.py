"""Prompt handlers used by the command-line interface."""

import logging
from typing import List, Optional, Sequence

import click

from cli_tool_orchestrator.models.prompt import InteractivePrompt
from cli_tool_orchestrator.utils.cancel import CancelToken

logger = logging.getLogger(__name__)


def render_prompt(prompt: InteractivePrompt) -> str:
    lines = [prompt.question]
    for number, option in enumerate(prompt.options, start=1):
        lines.append(f"  {number}. {option}")
    return "\n".join(lines)


def console_prompt_handler(prompt: InteractivePrompt) -> None:
    """Ask the user on the terminal and send the selected option number."""
    click.echo(render_prompt(prompt))
    choice = click.prompt(
        "Select an option",
        type=click.IntRange(1, len(prompt.options)),
        default=1,
    )
    prompt.send(str(choice))


class ScriptedPromptHandler:
    """Answers prompts from a fixed list, in order.

    Once the list is exhausted the handler falls back to the terminal, or
    cancels the run when interactive input is disabled.
    """

    def __init__(
        self,
        answers: Sequence[str],
        cancel_token: CancelToken,
        interactive: bool = True,
    ):
        self._answers: List[str] = list(answers)
        self._cancel_token = cancel_token
        self._interactive = interactive
        self.asked: List[InteractivePrompt] = []

    def __call__(self, prompt: InteractivePrompt) -> None:
        self.asked.append(prompt)
        answer = self._next_answer(prompt)
        if answer is not None:
            click.echo(f"{render_prompt(prompt)}\n> {answer}")
            prompt.send(answer)
            return
        if self._interactive:
            console_prompt_handler(prompt)
            return
        logger.error(f"No answer available for prompt {prompt.question!r}")
        self._cancel_token.cancel(f"no answer for prompt {prompt.question!r}")

    def _next_answer(self, prompt: InteractivePrompt) -> Optional[str]:
        if not self._answers:
            return None
        answer = self._answers.pop(0)
        # Allow answering with the option text instead of its number.
        number = prompt.option_number(answer)
        return str(number) if number is not None else answer
