"""Commands that run the growth analyzer through uvx."""

import os

import click

from cli_tool_orchestrator.cli.prompts import ScriptedPromptHandler
from cli_tool_orchestrator.constants import ENV_API_KEY, ENV_BASE_URL, ENV_MODEL, ENV_PROVIDER
from cli_tool_orchestrator.exceptions import CancelledError
from cli_tool_orchestrator.models.engine import EngineConfig
from cli_tool_orchestrator.models.process import RunResult
from cli_tool_orchestrator.models.progress import PhaseUpdate
from cli_tool_orchestrator.services.growth_service import GrowthEngine
from cli_tool_orchestrator.utils.cancel import CancelToken


def engine_options(func):
    """Options shared by every command that launches the analyzer."""
    options = [
        click.option(
            "--project-dir",
            default=".",
            type=click.Path(exists=True, file_okay=False),
            help="Project to analyze (default: current directory)",
        ),
        click.option("--output-dir", default="", help="Output directory for generated files"),
        click.option("--provider", default="", envvar=ENV_PROVIDER, help="LLM provider"),
        click.option("--model", default="", envvar=ENV_MODEL, help="LLM model"),
        click.option("--api-key", default="", envvar=ENV_API_KEY, help="LLM API key"),
        click.option("--base-url", default="", envvar=ENV_BASE_URL, help="LLM base URL"),
        click.option(
            "--answer",
            "answers",
            multiple=True,
            help="Answer for the next prompt, by number or option text (repeatable)",
        ),
        click.option("--no-input", is_flag=True, help="Cancel instead of asking when answers run out"),
        click.option("--quiet", is_flag=True, help="Do not echo tool output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _echo_update(quiet: bool):
    def on_update(update: PhaseUpdate) -> None:
        if not quiet:
            click.echo(update.message)

    return on_update


def _run(action: str, kwargs: dict) -> RunResult:
    config = EngineConfig(
        provider=kwargs["provider"],
        model=kwargs["model"],
        api_key=kwargs["api_key"],
        base_url=kwargs["base_url"],
        project_dir=os.path.realpath(kwargs["project_dir"]),
        output_dir=kwargs["output_dir"],
    )
    cancel_token = CancelToken()
    handler = ScriptedPromptHandler(
        kwargs["answers"], cancel_token, interactive=not kwargs["no_input"]
    )
    engine = GrowthEngine(config, update_fn=_echo_update(kwargs["quiet"]), prompt_handler=handler)

    try:
        result = getattr(engine, action)(cancel_token)
    except (KeyboardInterrupt, click.Abort):
        raise click.ClickException("Cancelled by user")

    if result.error is not None:
        # Exit failures already carry the tail in their message.
        if isinstance(result.error, CancelledError) and result.tail:
            click.echo(f"Last output:\n{result.tail}", err=True)
        raise click.ClickException(str(result.error))

    for name, content in result.artifacts.items():
        status = f"{len(content)} chars" if content else "missing"
        click.echo(f"{name}: {status}")
    click.echo(f"Output directory: {config.resolve_output_dir()}")
    return result


@click.command()
@engine_options
def analyze(**kwargs):
    """Analyze a project with skene-growth."""
    _run("analyze", kwargs)


@click.command()
@engine_options
def plan(**kwargs):
    """Generate a growth plan."""
    _run("generate_plan", kwargs)


@click.command()
@engine_options
def build(**kwargs):
    """Generate an implementation prompt from the growth plan."""
    _run("generate_build", kwargs)


@click.command()
@engine_options
def validate(**kwargs):
    """Validate the generated growth manifest."""
    _run("validate_manifest", kwargs)
    click.echo("Manifest is valid")
