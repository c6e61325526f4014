"""Progress reporting to the embedding application."""

import logging
from typing import Callable, Optional

from cli_tool_orchestrator.constants import LINE_PROGRESS
from cli_tool_orchestrator.models.progress import AnalysisPhase, PhaseUpdate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[PhaseUpdate], None]


class ProgressReporter:
    """Forwards output lines and lifecycle milestones as :class:`PhaseUpdate`.

    Progress is approximate: every output line carries the same phase marker
    and a fixed progress value because the tool reports neither.
    """

    def __init__(
        self,
        callback: Optional[ProgressCallback] = None,
        line_phase: AnalysisPhase = AnalysisPhase.DETECT_FEATURES,
        line_progress: float = LINE_PROGRESS,
    ):
        self._callback = callback
        self.line_phase = line_phase
        self.line_progress = line_progress

    def send(self, phase: AnalysisPhase, progress: float, message: str) -> None:
        if self._callback is None:
            return
        update = PhaseUpdate(phase=phase, progress=progress, message=message)
        try:
            self._callback(update)
        except Exception as e:
            logger.warning(f"Progress callback failed for {phase.value}: {e}")

    def line(self, text: str) -> None:
        self.send(self.line_phase, self.line_progress, text)

    def start(self, message: str) -> None:
        self.send(AnalysisPhase.SCAN_CODEBASE, 0.0, message)

    def complete(self, message: str) -> None:
        self.send(AnalysisPhase.GENERATE_DOCS, 1.0, message)
