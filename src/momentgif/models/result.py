"""Sampling and conversion result models."""

from pathlib import Path

from pydantic import BaseModel, Field


class SamplingSchedule(BaseModel):
    """Evenly spaced timestamps to sample a clip at."""

    duration: float = Field(..., gt=0, description="Source duration in seconds")
    frame_count: int = Field(..., gt=0)
    frame_duration: float = Field(..., gt=0, description="Spacing between sampled timestamps")

    def timestamps(self) -> list[float]:
        return [i * self.frame_duration for i in range(self.frame_count)]


class SamplingReport(BaseModel):
    """Outcome of one sampling pass."""

    frame_count: int = Field(..., ge=0)
    emitted: int = Field(default=0, ge=0)
    skipped_timestamps: list[float] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_timestamps)


class ConversionResult(BaseModel):
    """Result of a successful conversion."""

    capture_id: str = Field(..., min_length=1)
    output_path: str = Field(..., description="Path to the finalized GIF")
    frame_count: int = Field(..., gt=0, description="Number of timestamps sampled")
    frames_written: int = Field(..., gt=0)
    skipped_frames: int = Field(default=0, ge=0, description="Timestamps that failed to decode")
    failed_appends: int = Field(default=0, ge=0, description="Decoded frames the encoder rejected")
    frame_rate: int = Field(..., gt=0)
    loop_count: int = Field(..., ge=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    file_size_bytes: int = Field(..., ge=0)

    @property
    def file_size_mb(self) -> float:
        return self.file_size_bytes / (1024 * 1024)

    @property
    def output_file(self) -> Path:
        return Path(self.output_path)
