"""Prompt detectors for external tools."""

from cli_tool_orchestrator.providers.base import PromptDetector
from cli_tool_orchestrator.providers.numbered_menu import NumberedMenuDetector

__all__ = ["NumberedMenuDetector", "PromptDetector"]
