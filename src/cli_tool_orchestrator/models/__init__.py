"""Data models for CLI Tool Orchestrator."""

from cli_tool_orchestrator.models.engine import EngineConfig
from cli_tool_orchestrator.models.process import LineEvent, ProcessInvocation, RunResult
from cli_tool_orchestrator.models.progress import AnalysisPhase, PhaseUpdate
from cli_tool_orchestrator.models.prompt import (
    ActionKind,
    DetectorAction,
    InteractivePrompt,
    PromptState,
)

__all__ = [
    "ActionKind",
    "AnalysisPhase",
    "DetectorAction",
    "EngineConfig",
    "InteractivePrompt",
    "LineEvent",
    "PhaseUpdate",
    "ProcessInvocation",
    "PromptState",
    "RunResult",
]
