"""Heuristic detector for questions followed by a numbered option menu."""

import logging
import re
from typing import Optional

from cli_tool_orchestrator.constants import MAX_QUESTION_LENGTH
from cli_tool_orchestrator.models.prompt import (
    CONTINUE,
    IGNORE,
    DetectorAction,
)
from cli_tool_orchestrator.providers.base import PromptDetector

logger = logging.getLogger(__name__)

# Phrases that open a question even without a trailing "?"
QUESTION_PHRASE_PATTERN = r"where do you want|select an option"
# "1. foo" / "3) bar": a digit 1-9 immediately followed by "." or ")"
OPTION_LINE_PATTERN = r"^([1-9])[.)](.*)$"
# Cues printed after the menu while the tool waits on stdin
SELECT_CUE_PATTERN = r"select option|\[1/|\(1\)|enter your choice"
COMMENT_PREFIX = "#"


def is_question_line(line: str) -> bool:
    """Return True when a trimmed line looks like the start of a prompt."""
    text = line.strip()
    if re.search(QUESTION_PHRASE_PATTERN, text, re.IGNORECASE):
        return True
    return (
        text.endswith("?")
        and not text.startswith(COMMENT_PREFIX)
        and len(text) < MAX_QUESTION_LENGTH
    )


def parse_option_line(line: str) -> Optional[str]:
    """Return the option text of a numbered menu line, or None."""
    text = line.strip()
    if len(text) < 3:
        return None
    match = re.match(OPTION_LINE_PATTERN, text, re.DOTALL)
    if not match:
        return None
    return match.group(2).strip()


def is_select_cue(line: str) -> bool:
    return bool(re.search(SELECT_CUE_PATTERN, line, re.IGNORECASE))


class NumberedMenuDetector(PromptDetector):
    """Detects ``Question?`` followed by ``1. option`` lines.

    The detector is idle until a question-like line appears, then collects
    numbered options. The prompt fires on a select cue, on any other line once
    options exist, or on a stall. A question with no options is abandoned as
    a false alarm on the next non-option line.
    """

    def feed(self, line: str) -> DetectorAction:
        if not self.state.collecting:
            if is_question_line(line):
                self.state.collecting = True
                self.state.question = line.strip()
                self.state.options = []
                logger.debug(f"Question detected: {self.state.question!r}")
            return CONTINUE

        option = parse_option_line(line)
        if option is not None:
            self.state.options.append(option)
            return CONTINUE

        if not self.state.options:
            logger.debug(f"Abandoning question without options: {self.state.question!r}")
            self.reset()
            return IGNORE

        if not is_select_cue(line):
            logger.debug(f"Unexpected line after options, firing prompt: {line!r}")
        action = DetectorAction.fire(self.state.question, self.state.options)
        self.reset()
        return action
