"""Resolve command for CLI Tool Orchestrator CLI."""

import click

from cli_tool_orchestrator.clients.uvx import uvx_resolver
from cli_tool_orchestrator.exceptions import ResolutionError


@click.command()
def resolve():
    """Print the uvx path, downloading uv into the cache if needed."""
    try:
        click.echo(uvx_resolver.resolve())
    except ResolutionError as e:
        raise click.ClickException(f"Failed to locate uvx: {e}")
