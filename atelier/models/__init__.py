"""Data models for the Atelier composite generator."""

from .assets import Bucket, ImageAsset, IncomingFile, SkippedFile, UploadReport, is_image_upload
from .generation import (
    GeneratedMedia,
    GenerationParameters,
    GenerationRequest,
    GenerationResult,
    ImagePair,
    ImagePart,
    InlineData,
    MediaExtraction,
    OutputKind,
    TextPart,
    TransportFailurePolicy,
)
from .session import GenerationOutcome, ResultCard, VideoElement

__all__ = [
    "Bucket",
    "ImageAsset",
    "IncomingFile",
    "SkippedFile",
    "UploadReport",
    "is_image_upload",
    "GeneratedMedia",
    "GenerationParameters",
    "GenerationRequest",
    "GenerationResult",
    "ImagePair",
    "ImagePart",
    "InlineData",
    "MediaExtraction",
    "OutputKind",
    "TextPart",
    "TransportFailurePolicy",
    "GenerationOutcome",
    "ResultCard",
    "VideoElement",
]
