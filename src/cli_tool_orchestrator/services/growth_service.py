"""Growth engine: runs ``uvx skene-growth`` commands in the selected project."""

import logging
import os
from typing import Callable, Dict, List, Optional

from cli_tool_orchestrator.clients.uvx import resolve as resolve_uvx
from cli_tool_orchestrator.constants import (
    GROWTH_MANIFEST_FILE,
    GROWTH_PACKAGE_NAME,
    GROWTH_PLAN_FILE,
    GROWTH_TEMPLATE_FILE,
    IMPLEMENTATION_PROMPT_FILE,
)
from cli_tool_orchestrator.exceptions import ExitFailureError, ResolutionError
from cli_tool_orchestrator.models.engine import EngineConfig
from cli_tool_orchestrator.models.process import ProcessInvocation, RunResult
from cli_tool_orchestrator.models.progress import PhaseUpdate
from cli_tool_orchestrator.services.process_service import ProcessSupervisor
from cli_tool_orchestrator.services.progress_service import ProgressReporter
from cli_tool_orchestrator.services.prompt_relay import PromptHandler
from cli_tool_orchestrator.utils.cancel import CancelToken

logger = logging.getLogger(__name__)

# Artifact name -> file name under the output directory
ANALYSIS_ARTIFACTS = {
    "growth_plan": GROWTH_PLAN_FILE,
    "manifest": GROWTH_MANIFEST_FILE,
    "growth_template": GROWTH_TEMPLATE_FILE,
}
PLAN_ARTIFACTS = {"growth_plan": GROWTH_PLAN_FILE}
BUILD_ARTIFACTS = {"implementation_prompt": IMPLEMENTATION_PROMPT_FILE}


def load_file_content(path: str) -> str:
    """Read a text artifact, returning an empty string when it is missing."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError:
        return ""


def wrap_error(prefix: str, error: Exception) -> Exception:
    """Prefix an error message while keeping its kind and diagnostics."""
    message = f"{prefix}: {error}"
    if isinstance(error, ExitFailureError):
        wrapped: Exception = ExitFailureError(message, returncode=error.returncode, tail=error.tail)
    else:
        wrapped = type(error)(message)
    wrapped.__cause__ = error
    return wrapped


class GrowthEngine:
    """Runs the external analyzer and collects the artifacts it writes.

    Args:
        config: Provider settings and project/output directories
        update_fn: Receives start/complete updates and every tool output line
        prompt_handler: Answers prompts detected in the tool output
        resolver: Returns the uvx path; defaults to the cached resolver
        supervisor: Prebuilt supervisor. When given, it owns line forwarding
            and prompt handling and ``prompt_handler`` is not used.
    """

    def __init__(
        self,
        config: EngineConfig,
        update_fn: Optional[Callable[[PhaseUpdate], None]] = None,
        prompt_handler: Optional[PromptHandler] = None,
        resolver: Optional[Callable[[], str]] = None,
        supervisor: Optional[ProcessSupervisor] = None,
    ):
        self.config = config
        self.progress = ProgressReporter(update_fn)
        self.resolver = resolver
        self.supervisor = supervisor or ProcessSupervisor(
            progress=self.progress, prompt_handler=prompt_handler
        )

    def analyze(self, cancel_token: Optional[CancelToken] = None) -> RunResult:
        """Run ``skene-growth analyze .`` and load plan, manifest and template."""
        self.progress.start(f"Starting analysis via uvx {GROWTH_PACKAGE_NAME}...")
        result = self._run_tool(["analyze", "."], "analysis failed", ANALYSIS_ARTIFACTS, cancel_token)
        if result.success:
            self.progress.complete("Analysis complete")
        return result

    def generate_plan(self, cancel_token: Optional[CancelToken] = None) -> RunResult:
        return self._run_tool(["plan"], "plan generation failed", PLAN_ARTIFACTS, cancel_token)

    def generate_build(self, cancel_token: Optional[CancelToken] = None) -> RunResult:
        return self._run_tool(["build"], "build generation failed", BUILD_ARTIFACTS, cancel_token)

    def validate_manifest(self, cancel_token: Optional[CancelToken] = None) -> RunResult:
        manifest_path = os.path.join(self.config.resolve_output_dir(), GROWTH_MANIFEST_FILE)
        return self._run_tool(
            ["validate", manifest_path],
            "validation failed",
            {},
            cancel_token,
            with_common_flags=False,
        )

    def build_invocation(
        self, uvx_path: str, subcommand: List[str], with_common_flags: bool = True
    ) -> ProcessInvocation:
        args = [GROWTH_PACKAGE_NAME, *subcommand]
        if with_common_flags:
            args.extend(self.config.common_flags())
        return ProcessInvocation(
            command=uvx_path,
            args=args,
            working_directory=self.config.project_dir,
            env=self.config.env_overlay(),
        )

    def _run_tool(
        self,
        subcommand: List[str],
        failure_prefix: str,
        artifacts: Dict[str, str],
        cancel_token: Optional[CancelToken],
        with_common_flags: bool = True,
    ) -> RunResult:
        try:
            uvx_path = (self.resolver or resolve_uvx)()
        except ResolutionError as e:
            logger.error(f"Failed to locate uvx: {e}")
            return RunResult(error=ResolutionError(f"{failure_prefix}: failed to locate uvx: {e}"))

        invocation = self.build_invocation(uvx_path, subcommand, with_common_flags)
        result = self.supervisor.run(invocation, cancel_token)
        if not result.success:
            return RunResult(error=wrap_error(failure_prefix, result.error), tail=result.tail)

        output_dir = self.config.resolve_output_dir()
        loaded = {
            name: load_file_content(os.path.join(output_dir, file_name))
            for name, file_name in artifacts.items()
        }
        return RunResult(artifacts=loaded)
