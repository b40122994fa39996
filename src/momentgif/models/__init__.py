"""Data models for MomentGif."""

from momentgif.models.capture import AssetResource, Capture, ResourceType
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
from momentgif.models.frame import Frame
from momentgif.models.job import ConversionStage, ConversionState
from momentgif.models.options import ConversionOptions
from momentgif.models.result import ConversionResult, SamplingReport, SamplingSchedule

__all__ = [
    "AssetResource",
    "Capture",
    "ConversionCancelled",
    "ConversionOptions",
    "ConversionResult",
    "ConversionStage",
    "ConversionState",
    "ConverterBusy",
    "DestinationUnavailable",
    "EmptySource",
    "ErrorResponse",
    "FinalizeFailed",
    "Frame",
    "MomentGifError",
    "PersistFailed",
    "ResourceType",
    "SamplingReport",
    "SamplingSchedule",
    "SourceUnavailable",
    "TransferFailed",
    "ValidationError",
]
