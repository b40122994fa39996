"""Conversion option models."""

from pydantic import BaseModel, Field

from momentgif.config import Settings, get_settings


class ConversionOptions(BaseModel):
    """User-specified GIF conversion options. Immutable for one conversion."""

    model_config = {"frozen": True}

    frame_rate: int = Field(default=10, gt=0, description="Sampling rate in frames per second")
    loop_count: int = Field(default=0, ge=0, description="Number of loops, 0 loops forever")
    quality: float = Field(
        default=0.7, gt=0, le=1, description="Advisory quality, mapped to GIF palette size"
    )
    scale: float = Field(default=1.0, gt=0, description="Multiplier against the base frame size")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ConversionOptions":
        s = settings or get_settings()
        return cls(
            frame_rate=s.default_frame_rate,
            loop_count=s.default_loop_count,
            quality=s.default_quality,
            scale=s.default_scale,
        )

    @property
    def frame_delay(self) -> float:
        """Display duration of every output frame in seconds."""
        return 1.0 / self.frame_rate

    @property
    def palette_size(self) -> int:
        """Number of palette colors the quality setting maps to."""
        return max(2, min(256, round(256 * self.quality)))

    def max_dimension(self, base_size: int = 480) -> int:
        """Largest allowed width or height of a sampled frame."""
        return max(1, int(base_size * self.scale))
