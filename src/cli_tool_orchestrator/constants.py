"""Constants for CLI Tool Orchestrator (CTO).

This module defines the configuration constants used throughout CTO, including
subprocess supervision limits, prompt detection timing, and the names of the
external tool, its launcher cache, and the artifacts it writes.

CTO drives the interactive ``skene-growth`` analyzer through ``uvx``, relaying
its free-form prompts to an embedding application and writing answers back.
"""

from pathlib import Path

# =============================================================================
# Process Supervision
# =============================================================================
# Number of trailing output lines kept for failure diagnostics
TAIL_BUFFER_SIZE = 10

# Capacity of the line queue between the reader thread and the driving loop.
# A full queue blocks the reader, which leaves the pipe unread and in turn
# blocks the subprocess's own writes.
LINE_QUEUE_SIZE = 64

# Maximum bytes requested per read from the subprocess output pipe
READ_CHUNK_SIZE = 4096

# How often blocking waits wake up to check the cancel token (seconds)
CANCEL_POLL_INTERVAL = 0.05

# After cancellation, how long to wait for the subprocess to exit on its own
# before escalating to terminate() and then kill() (seconds)
TERMINATE_GRACE_SECONDS = 5.0

# =============================================================================
# Prompt Detection
# =============================================================================
# Inactivity window after which a question with collected options fires
STALL_TIMEOUT_SECONDS = 0.8

# Questions ending in "?" are only considered when shorter than this
MAX_QUESTION_LENGTH = 120

# Progress value attached to every forwarded output line. The tool reports no
# structured progress so this is a fixed midpoint.
LINE_PROGRESS = 0.5

# =============================================================================
# External Tool
# =============================================================================
GROWTH_PACKAGE_NAME = "skene-growth"
UVX_DOWNLOAD_BASE_URL = "https://github.com/astral-sh/uv/releases/latest/download"
DOWNLOAD_TIMEOUT_SECONDS = 120

# Launcher cache (~/.skene/bin)
SKENE_CACHE_DIR = Path.home() / ".skene"
SKENE_CACHE_BIN_DIR = SKENE_CACHE_DIR / "bin"

# Environment variables forwarded to the tool
ENV_API_KEY = "SKENE_API_KEY"
ENV_PROVIDER = "SKENE_PROVIDER"
ENV_MODEL = "SKENE_MODEL"
ENV_BASE_URL = "SKENE_BASE_URL"

# =============================================================================
# Output Artifacts
# =============================================================================
OUTPUT_DIR_NAME = "skene-context"
GROWTH_PLAN_FILE = "growth-plan.md"
GROWTH_MANIFEST_FILE = "growth-manifest.json"
GROWTH_TEMPLATE_FILE = "growth-template.json"
IMPLEMENTATION_PROMPT_FILE = "implementation-prompt.md"
