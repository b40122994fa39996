"""Status endpoint."""

from fastapi import APIRouter, Depends

from momentgif.api.dependencies import get_conversion_manager
from momentgif.models.errors import ValidationError
from momentgif.pipeline.manager import ConversionManager

router = APIRouter(prefix="/api/v1", tags=["status"])


@router.get("/status/{job_id}")
async def get_status(
    job_id: str,
    manager: ConversionManager = Depends(get_conversion_manager),
):
    """Get the conversion status of a job."""
    state = manager.get_job_state(job_id)
    if not state:
        raise ValidationError(f"Job {job_id} not found")

    return {
        "job_id": state.job_id,
        "capture_id": state.capture_id,
        "stage": state.stage.value,
        "progress": state.progress,
        "message": state.message,
        "started_at": state.started_at.isoformat() if state.started_at else None,
        "updated_at": state.updated_at.isoformat() if state.updated_at else None,
        "completed_at": state.completed_at.isoformat() if state.completed_at else None,
        "error": state.error,
        "error_type": state.error_type,
        "output_path": state.output_path,
        "saved_path": state.saved_path,
        "result": state.result.model_dump() if state.result else None,
    }
