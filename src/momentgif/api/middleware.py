"""Error handling middleware."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from momentgif.models.errors import (
    ConversionCancelled,
    ConverterBusy,
    DestinationUnavailable,
    EmptySource,
    ErrorResponse,
    FinalizeFailed,
    MomentGifError,
    PersistFailed,
    SourceUnavailable,
    TransferFailed,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[MomentGifError], int] = {
    ValidationError: 400,
    SourceUnavailable: 404,
    EmptySource: 422,
    TransferFailed: 502,
    ConversionCancelled: 409,
    ConverterBusy: 409,
    DestinationUnavailable: 500,
    FinalizeFailed: 500,
    PersistFailed: 500,
}

_GUIDANCE: dict[type[MomentGifError], str] = {
    ValidationError: "Check the request and try again.",
    SourceUnavailable: "Pick a Live Photo that still has its motion clip.",
    EmptySource: "The clip is too short; try a higher frame rate.",
    TransferFailed: "Check the connection to the photo library and retry.",
    FinalizeFailed: "Conversion failed; run the conversion again.",
    PersistFailed: "The GIF was created but could not be saved; retry saving it.",
}

_RETRYABLE = (
    TransferFailed,
    DestinationUnavailable,
    FinalizeFailed,
    PersistFailed,
    ConversionCancelled,
    ConverterBusy,
)


async def momentgif_error_handler(request: Request, exc: MomentGifError) -> JSONResponse:
    """Handle MomentGifError exceptions."""
    response = ErrorResponse.from_exception(
        exc, guidance=_get_guidance(exc), retry=isinstance(exc, _RETRYABLE)
    )
    status_code = _get_status_code(exc)
    if status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=response.model_dump())


def _get_status_code(exc: MomentGifError) -> int:
    """Map error type to HTTP status code."""
    return _STATUS_CODES.get(type(exc), 500)


def _get_guidance(exc: MomentGifError) -> str:
    """Generate actionable guidance based on error type."""
    return _GUIDANCE.get(type(exc), "Please try again.")
