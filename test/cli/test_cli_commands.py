"""Tests for the cto command-line interface."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cli_tool_orchestrator.cli.main import cli
from cli_tool_orchestrator.cli.prompts import ScriptedPromptHandler, render_prompt
from cli_tool_orchestrator.exceptions import ResolutionError
from cli_tool_orchestrator.models.prompt import InteractivePrompt
from cli_tool_orchestrator.utils.cancel import CancelToken


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_uvx(fake_uvx):
    with patch("cli_tool_orchestrator.services.growth_service.resolve_uvx", return_value=fake_uvx):
        yield fake_uvx


class TestScriptedPromptHandler:
    def test_answers_in_order(self):
        handler = ScriptedPromptHandler(["2", "1"], CancelToken(), interactive=False)
        first = InteractivePrompt("First?", ["a", "b"])
        second = InteractivePrompt("Second?", ["c", "d"])

        handler(first)
        handler(second)

        assert first.answer.get_nowait() == "2"
        assert second.answer.get_nowait() == "1"
        assert handler.asked == [first, second]

    def test_option_text_maps_to_number(self):
        handler = ScriptedPromptHandler(["Content loop"], CancelToken(), interactive=False)
        prompt = InteractivePrompt("Which loop?", ["Referral loop", "Content loop"])

        handler(prompt)

        assert prompt.answer.get_nowait() == "2"

    def test_exhausted_without_input_cancels(self):
        token = CancelToken()
        handler = ScriptedPromptHandler([], token, interactive=False)
        prompt = InteractivePrompt("Continue?", ["yes", "no"])

        handler(prompt)

        assert token.cancelled
        assert "Continue?" in token.reason
        assert prompt.answer.empty()

    @patch("cli_tool_orchestrator.cli.prompts.console_prompt_handler")
    def test_exhausted_falls_back_to_console(self, mock_console):
        handler = ScriptedPromptHandler([], CancelToken())
        prompt = InteractivePrompt("Continue?", ["yes", "no"])

        handler(prompt)

        mock_console.assert_called_once_with(prompt)

    def test_render_prompt(self):
        prompt = InteractivePrompt("Continue?", ["yes", "no"])
        assert render_prompt(prompt) == "Continue?\n  1. yes\n  2. no"


class TestAnalyzeCommand:
    def test_scripted_answer(self, runner, project_dir, patched_uvx):
        result = runner.invoke(
            cli,
            ["analyze", "--project-dir", str(project_dir), "--answer", "Referral loop", "--provider", "openai"],
        )

        assert result.exit_code == 0, result.output
        assert "provider=openai env_provider=openai" in result.output
        assert "> 1" in result.output
        assert "growth_plan: 14 chars" in result.output
        assert "growth_template: missing" in result.output
        assert (project_dir / "skene-context" / "growth-plan.md").read_text() == "# Plan\nloop=1\n"

    def test_console_answer(self, runner, project_dir, patched_uvx):
        result = runner.invoke(cli, ["analyze", "--project-dir", str(project_dir)], input="2\n")

        assert result.exit_code == 0, result.output
        assert "  2. Content loop" in result.output
        assert (project_dir / "skene-context" / "growth-plan.md").read_text() == "# Plan\nloop=2\n"

    def test_no_input_cancels(self, runner, project_dir, patched_uvx):
        result = runner.invoke(cli, ["analyze", "--project-dir", str(project_dir), "--no-input"])

        assert result.exit_code == 1
        assert "analysis failed: uvx command cancelled" in result.output
        assert not (project_dir / "skene-context" / "growth-plan.md").exists()

    def test_quiet_hides_tool_output(self, runner, project_dir, patched_uvx):
        result = runner.invoke(
            cli, ["analyze", "--project-dir", str(project_dir), "--answer", "1", "--quiet"]
        )

        assert result.exit_code == 0, result.output
        assert "Detecting tech stack..." not in result.output
        assert "Output directory:" in result.output

    def test_tool_failure_shows_tail(self, runner, project_dir, patched_uvx, monkeypatch):
        monkeypatch.setenv("FAKE_UVX_FAIL", "1")

        result = runner.invoke(cli, ["analyze", "--project-dir", str(project_dir), "--quiet"])

        assert result.exit_code == 1
        assert "analysis failed: uvx command failed:" in result.output
        assert "RuntimeError: analyzer crashed" in result.output

    def test_missing_project_dir(self, runner, tmp_path):
        result = runner.invoke(cli, ["analyze", "--project-dir", str(tmp_path / "nope")])
        assert result.exit_code == 2

    @patch("cli_tool_orchestrator.services.growth_service.resolve_uvx")
    def test_resolution_failure(self, mock_resolve, runner, project_dir):
        mock_resolve.side_effect = ResolutionError("unsupported platform: plan9/mips")

        result = runner.invoke(cli, ["analyze", "--project-dir", str(project_dir)])

        assert result.exit_code == 1
        assert "failed to locate uvx: unsupported platform" in result.output


class TestOtherCommands:
    def test_plan_and_build(self, runner, project_dir, patched_uvx):
        plan = runner.invoke(cli, ["plan", "--project-dir", str(project_dir), "--quiet"])
        build = runner.invoke(cli, ["build", "--project-dir", str(project_dir), "--quiet"])

        assert plan.exit_code == 0, plan.output
        assert "growth_plan: 7 chars" in plan.output
        assert build.exit_code == 0, build.output
        assert "implementation_prompt: 9 chars" in build.output

    def test_validate_missing_manifest_fails(self, runner, project_dir, patched_uvx):
        result = runner.invoke(cli, ["validate", "--project-dir", str(project_dir)])

        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_validate_existing_manifest(self, runner, project_dir, patched_uvx):
        context = project_dir / "skene-context"
        context.mkdir()
        (context / "growth-manifest.json").write_text("{}")

        result = runner.invoke(cli, ["validate", "--project-dir", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert "Manifest is valid" in result.output


class TestResolveCommand:
    @patch("cli_tool_orchestrator.cli.commands.resolve.uvx_resolver")
    def test_prints_path(self, mock_resolver, runner):
        mock_resolver.resolve.return_value = "/home/me/.skene/bin/uvx"

        result = runner.invoke(cli, ["resolve"])

        assert result.exit_code == 0
        assert result.output.strip() == "/home/me/.skene/bin/uvx"

    @patch("cli_tool_orchestrator.cli.commands.resolve.uvx_resolver")
    def test_failure(self, mock_resolver, runner):
        mock_resolver.resolve.side_effect = ResolutionError("network down")

        result = runner.invoke(cli, ["resolve"])

        assert result.exit_code == 1
        assert "Failed to locate uvx: network down" in result.output

    def test_verbose_flag_is_accepted(self, runner):
        with patch("cli_tool_orchestrator.cli.commands.resolve.uvx_resolver", MagicMock()) as mock_resolver:
            mock_resolver.resolve.return_value = "/usr/bin/uvx"
            result = runner.invoke(cli, ["-v", "resolve"])
        assert result.exit_code == 0
