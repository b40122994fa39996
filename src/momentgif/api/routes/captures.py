"""Capture gallery endpoint."""

from fastapi import APIRouter, Depends

from momentgif.api.dependencies import get_conversion_manager
from momentgif.pipeline.manager import ConversionManager

router = APIRouter(prefix="/api/v1", tags=["captures"])


@router.get("/captures")
async def list_captures(manager: ConversionManager = Depends(get_conversion_manager)):
    """List Live Photo captures, newest first."""
    captures = manager.list_captures()
    return {
        "count": len(captures),
        "captures": [c.model_dump(mode="json") for c in captures],
    }
