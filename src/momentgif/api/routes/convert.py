"""Conversion endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, Field

from momentgif.api.dependencies import get_conversion_manager
from momentgif.models.errors import ValidationError
from momentgif.models.options import ConversionOptions
from momentgif.pipeline.manager import ConversionManager

router = APIRouter(prefix="/api/v1", tags=["convert"])


class ConvertRequest(BaseModel):
    capture_id: str = Field(..., min_length=1)
    options: ConversionOptions | None = None


@router.post("/convert")
async def start_conversion(
    request: ConvertRequest,
    background_tasks: BackgroundTasks,
    manager: ConversionManager = Depends(get_conversion_manager),
):
    """Start converting a capture to a GIF."""
    state = manager.create_job(request.capture_id, request.options)
    background_tasks.add_task(manager.process, state.job_id)
    return {
        "job_id": state.job_id,
        "capture_id": state.capture_id,
        "status": "queued",
        "message": "Conversion started",
    }


@router.delete("/convert/{job_id}")
async def cancel_conversion(
    job_id: str,
    manager: ConversionManager = Depends(get_conversion_manager),
):
    """Cancel a queued or running conversion."""
    state = manager.get_job_state(job_id)
    if not state:
        raise ValidationError(f"Job {job_id} not found")
    if not manager.cancel_job(job_id):
        raise ValidationError(f"Job has already finished (current stage: {state.stage.value})")
    return {"job_id": job_id, "status": "cancelled"}
