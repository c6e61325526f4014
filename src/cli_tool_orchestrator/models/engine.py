"""Engine configuration model."""

import os
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from cli_tool_orchestrator.constants import (
    ENV_API_KEY,
    ENV_BASE_URL,
    ENV_MODEL,
    ENV_PROVIDER,
    OUTPUT_DIR_NAME,
)


class EngineConfig(BaseModel):
    """Provider, credentials and paths used to build the tool invocation."""

    model_config = ConfigDict(frozen=True)

    provider: str = ""
    model: str = ""
    api_key: str = ""
    base_url: str = ""
    project_dir: str = "."
    output_dir: str = ""

    def common_flags(self) -> List[str]:
        """Build the ``--flag value`` pairs shared by every tool command."""
        flags: List[str] = []
        if self.provider:
            flags.extend(["--provider", self.provider])
        if self.model:
            flags.extend(["--model", self.model])
        if self.api_key:
            flags.extend(["--api-key", self.api_key])
        if self.base_url:
            flags.extend(["--base-url", self.base_url])
        return flags

    def env_overlay(self) -> Dict[str, str]:
        env: Dict[str, str] = {}
        if self.api_key:
            env[ENV_API_KEY] = self.api_key
        if self.provider:
            env[ENV_PROVIDER] = self.provider
        if self.model:
            env[ENV_MODEL] = self.model
        if self.base_url:
            env[ENV_BASE_URL] = self.base_url
        return env

    def resolve_output_dir(self) -> str:
        """Absolute output dirs are used as-is; relative ones live under the project."""
        if self.output_dir:
            if os.path.isabs(self.output_dir):
                return self.output_dir
            return os.path.join(self.project_dir, self.output_dir)
        return os.path.join(self.project_dir, OUTPUT_DIR_NAME)
