"""Locate generated media inside a generateContent response."""

import base64
import binascii
import logging
from typing import Any

from pydantic import ValidationError

from ..models.generation import GenerateContentResponse, GeneratedMedia, MediaExtraction


logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def extract_media(response: Any) -> MediaExtraction:
    """Find the first inline media part in the first candidate.

    Walks candidates[0] -> content -> parts; the first part carrying
    non-empty inlineData wins. Never raises: a response that does not
    match the schema is reported as malformed, a well-formed one without
    media as absent.
    """
    if response is None:
        return MediaExtraction.absent("empty response")

    try:
        parsed = GenerateContentResponse.model_validate(response)
    except ValidationError as e:
        return MediaExtraction.malformed(f"unexpected response shape: {e.error_count()} error(s)")

    if not parsed.candidates:
        return MediaExtraction.absent("no candidates")

    content = parsed.candidates[0].content
    if content is None or not content.parts:
        return MediaExtraction.absent("first candidate has no parts")

    for index, part in enumerate(content.parts):
        inline = part.inline_data
        if inline is None or not inline.data:
            continue
        try:
            data = base64.b64decode(inline.data, validate=True)
        except (binascii.Error, ValueError):
            return MediaExtraction.malformed(f"part {index} carries invalid base64 data")
        mime_type = inline.mime_type or DEFAULT_MIME_TYPE
        logger.debug("Found %s media in part %d (%d bytes)", mime_type, index, len(data))
        return MediaExtraction.found(GeneratedMedia(data=data, mime_type=mime_type))

    return MediaExtraction.absent("no part carries inline media")
