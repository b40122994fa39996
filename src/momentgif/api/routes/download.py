"""Download endpoint."""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from momentgif.api.dependencies import get_conversion_manager
from momentgif.models.errors import ValidationError
from momentgif.models.job import ConversionStage
from momentgif.pipeline.manager import ConversionManager

router = APIRouter(prefix="/api/v1", tags=["download"])


@router.get("/download/{job_id}")
async def download_output(
    job_id: str,
    manager: ConversionManager = Depends(get_conversion_manager),
):
    """Download the converted GIF."""
    state = manager.get_job_state(job_id)
    if not state:
        raise ValidationError(f"Job {job_id} not found")

    if state.stage != ConversionStage.DONE:
        raise ValidationError(f"Job is not complete (current stage: {state.stage.value})")

    if not state.output_path or not Path(state.output_path).exists():
        raise ValidationError("Output file not found")

    return FileResponse(
        path=state.output_path,
        media_type="image/gif",
        filename=Path(state.output_path).name,
    )
