"""Save-to-library endpoint."""

from fastapi import APIRouter, Depends

from momentgif.api.dependencies import get_conversion_manager
from momentgif.pipeline.manager import ConversionManager

router = APIRouter(prefix="/api/v1", tags=["persist"])


@router.post("/persist/{job_id}")
async def persist_output(
    job_id: str,
    manager: ConversionManager = Depends(get_conversion_manager),
):
    """Save a converted GIF into the photo library."""
    state = manager.persist(job_id)
    return {
        "job_id": state.job_id,
        "output_path": state.output_path,
        "saved_path": state.saved_path,
        "message": state.message,
    }
