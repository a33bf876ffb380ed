"""Image encoding and response parsing helpers."""

from .image_encoding import EncodedImage, encode_for_transport, scaled_dimensions
from .media_extractor import extract_media

__all__ = [
    "EncodedImage",
    "encode_for_transport",
    "scaled_dimensions",
    "extract_media",
]
