"""Command-line interface for CLI Tool Orchestrator."""
