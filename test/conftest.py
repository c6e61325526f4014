"""Shared fixtures for CLI Tool Orchestrator tests."""

import os
import stat
import sys
from pathlib import Path

import pytest

from cli_tool_orchestrator.models.process import ProcessInvocation

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_TOOL = FIXTURES_DIR / "fake_tool.py"
FAKE_UVX = FIXTURES_DIR / "fake_uvx.py"


def fake_tool_invocation(*args: str, **kwargs) -> ProcessInvocation:
    return ProcessInvocation(
        command=sys.executable,
        args=["-u", str(FAKE_TOOL), *args],
        **kwargs,
    )


@pytest.fixture
def fake_uvx(tmp_path) -> str:
    """Executable wrapper that runs fake_uvx.py with this interpreter."""
    if os.name == "nt":
        pytest.skip("shebang launcher not supported on Windows")
    launcher = tmp_path / "bin" / "uvx"
    launcher.parent.mkdir()
    launcher.write_text(f"#!{sys.executable} -u\nimport runpy\nrunpy.run_path({str(FAKE_UVX)!r}, run_name='__main__')\n")
    launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)
    return str(launcher)


@pytest.fixture
def project_dir(tmp_path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def fake_tool():
    """Factory building invocations of the scriptable fake tool."""
    return fake_tool_invocation
