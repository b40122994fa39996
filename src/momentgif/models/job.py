"""Conversion stage and job state models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from momentgif.models.options import ConversionOptions
from momentgif.models.result import ConversionResult


class ConversionStage(StrEnum):
    """Stages of one conversion."""

    IDLE = "idle"
    RESOLVING = "resolving"
    SAMPLING = "sampling"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ConversionState(BaseModel):
    """Current state of a conversion job."""

    job_id: str = Field(..., min_length=1)
    capture_id: str = Field(..., min_length=1)
    options: ConversionOptions = Field(default_factory=ConversionOptions)
    stage: ConversionStage = Field(default=ConversionStage.IDLE)
    progress: float = Field(default=0.0, ge=0, le=1)
    message: str = Field(default="")
    started_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    error_type: str | None = None
    output_path: str | None = None
    saved_path: str | None = None
    result: ConversionResult | None = None
