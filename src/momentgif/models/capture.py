"""Photo library capture and resource models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class ResourceType(StrEnum):
    """Kinds of resources a capture can be backed by."""

    PHOTO = "photo"
    PAIRED_VIDEO = "paired_video"
    VIDEO = "video"


class AssetResource(BaseModel):
    """One stored resource belonging to a capture."""

    capture_id: str = Field(..., min_length=1)
    type: ResourceType
    filename: str = Field(..., min_length=1)
    path: str = Field(..., description="Location of the resource in the library")
    size_bytes: int = Field(default=0, ge=0)

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""


class Capture(BaseModel):
    """A Live Photo: a still image plus its paired motion clip."""

    capture_id: str = Field(..., min_length=1)
    still_path: str
    video_path: str
    created_at: datetime
    pixel_width: int | None = Field(default=None, gt=0)
    pixel_height: int | None = Field(default=None, gt=0)
