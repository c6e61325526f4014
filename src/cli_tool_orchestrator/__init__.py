"""CLI Tool Orchestrator: drive interactive command-line tools programmatically."""

from cli_tool_orchestrator.models import (
    AnalysisPhase,
    EngineConfig,
    InteractivePrompt,
    PhaseUpdate,
    ProcessInvocation,
    RunResult,
)
from cli_tool_orchestrator.services.growth_service import GrowthEngine
from cli_tool_orchestrator.services.process_service import ProcessSupervisor
from cli_tool_orchestrator.services.progress_service import ProgressReporter
from cli_tool_orchestrator.utils.cancel import CancelToken

__version__ = "0.1.0"

__all__ = [
    "AnalysisPhase",
    "CancelToken",
    "EngineConfig",
    "GrowthEngine",
    "InteractivePrompt",
    "PhaseUpdate",
    "ProcessInvocation",
    "ProcessSupervisor",
    "ProgressReporter",
    "RunResult",
]
