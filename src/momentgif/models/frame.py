"""Sampled frame model."""

import numpy as np
from pydantic import BaseModel, Field, field_validator


class Frame(BaseModel):
    """A decoded RGB raster and how long it is displayed in the output."""

    model_config = {"arbitrary_types_allowed": True}

    image: np.ndarray
    duration: float = Field(..., gt=0, description="Display duration in seconds")
    timestamp: float = Field(default=0.0, ge=0, description="Source timestamp it was sampled at")

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: np.ndarray) -> np.ndarray:
        if v.ndim != 3 or v.shape[2] != 3:
            raise ValueError(f"Frame must be an HxWx3 array, got shape {v.shape}")
        if v.dtype != np.uint8:
            raise ValueError(f"Frame must be uint8, got {v.dtype}")
        return v

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])
