"""Main CLI entry point for CLI Tool Orchestrator."""

import logging
import os

import click

from cli_tool_orchestrator.cli.commands.resolve import resolve
from cli_tool_orchestrator.cli.commands.run import analyze, build, plan, validate

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """CLI Tool Orchestrator - drive interactive analyzers and answer their prompts."""
    level = "DEBUG" if verbose else os.getenv("CTO_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)


cli.add_command(analyze)
cli.add_command(plan)
cli.add_command(build)
cli.add_command(validate)
cli.add_command(resolve)


if __name__ == "__main__":
    cli()
