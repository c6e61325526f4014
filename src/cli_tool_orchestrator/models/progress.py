"""Progress update models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalysisPhase(str, Enum):
    """Coarse phase labels attached to progress updates."""

    SCAN_CODEBASE = "scan_codebase"
    DETECT_FEATURES = "detect_features"
    GROWTH_LOOPS = "growth_loops"
    MONETISATION = "monetisation"
    OPPORTUNITIES = "opportunities"
    GENERATE_DOCS = "generate_docs"


class PhaseUpdate(BaseModel):
    """A single progress notification sent to the embedding application."""

    model_config = ConfigDict(frozen=True)

    phase: AnalysisPhase
    progress: float = Field(default=0.0)
    message: str = ""

    @field_validator("progress")
    @classmethod
    def clamp_progress(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)
