"""Error hierarchy and error response models."""

from pydantic import BaseModel, Field


class MomentGifError(Exception):
    """Base error for all MomentGif errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class ValidationError(MomentGifError):
    """Invalid request input."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="validation", details=details)


class SourceUnavailable(MomentGifError):
    """No decodable video companion resource exists for the capture."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="source", details=details)


class TransferFailed(MomentGifError):
    """Byte acquisition from the source resource failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="source", details=details)


class EmptySource(MomentGifError):
    """The computed frame count is zero or negative."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="sampling", details=details)


class DestinationUnavailable(MomentGifError):
    """The output container could not be opened at the chosen path."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="encoding", details=details)


class FinalizeFailed(MomentGifError):
    """The encoder could not produce a valid container."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="encoding", details=details)


class PersistFailed(MomentGifError):
    """Saving a finished GIF to the photo library failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="library", details=details)


class ConversionCancelled(MomentGifError):
    """A conversion was cancelled before it finalized."""

    def __init__(self, message: str = "Conversion was cancelled", details: dict | None = None):
        super().__init__(message, component="pipeline", details=details)


class ConverterBusy(MomentGifError):
    """A converter instance was asked to run two conversions at once."""

    def __init__(
        self, message: str = "A conversion is already running", details: dict | None = None
    ):
        super().__init__(message, component="pipeline", details=details)


class ErrorResponse(BaseModel):
    """Standardized error response for API."""

    error_type: str = Field(..., description="Error category")
    component: str = Field(default="", description="Component that raised the error")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict)
    actionable_guidance: str = Field(default="", description="Suggested user action")
    retry_possible: bool = Field(default=False)

    @classmethod
    def from_exception(
        cls, exc: MomentGifError, guidance: str = "", retry: bool = False
    ) -> "ErrorResponse":
        return cls(
            error_type=type(exc).__name__,
            component=exc.component,
            message=exc.message,
            details=exc.details,
            actionable_guidance=guidance,
            retry_possible=retry,
        )
