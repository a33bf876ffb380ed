"""Request, response and result models for group generation."""

import base64
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field


class OutputKind(str, Enum):
    """What the remote model is asked to produce."""
    PHOTO = "photo"
    VIDEO = "video"

    @property
    def download_extension(self) -> str:
        return ".png" if self is OutputKind.PHOTO else ".mp4"

    @property
    def label(self) -> str:
        return "Group Photo" if self is OutputKind.PHOTO else "Group Video"


class TransportFailurePolicy(str, Enum):
    """What to do when the HTTP call to the model fails."""
    PROPAGATE = "propagate"
    DEGRADE_TO_PLACEHOLDER = "degrade_to_placeholder"

    @classmethod
    def default_for(cls, kind: OutputKind) -> "TransportFailurePolicy":
        # Video is best-effort and must never hard-fail the caller
        if kind is OutputKind.VIDEO:
            return cls.DEGRADE_TO_PLACEHOLDER
        return cls.PROPAGATE


# --- Request side (snake_case wire names) ---

class InlineData(BaseModel):
    mime_type: str = "image/jpeg"
    data: str  # base64


class TextPart(BaseModel):
    text: str


class ImagePart(BaseModel):
    inline_data: InlineData


class ImagePair(BaseModel):
    """One muse image matched by index with one garment image."""
    muse: ImagePart
    garment: ImagePart


class GenerationParameters(BaseModel):
    temperature: float = 0.4
    max_output_tokens: int | None = 8192

    @computed_field
    @property
    def candidate_count(self) -> int:
        return 1

    def to_payload(self) -> dict[str, Any]:
        config: dict[str, Any] = {
            "temperature": self.temperature,
            "candidateCount": self.candidate_count,
        }
        if self.max_output_tokens is not None:
            config["maxOutputTokens"] = self.max_output_tokens
        return config


class GenerationRequest(BaseModel):
    """A single group request covering every pair."""

    instruction: str
    pairs: list[ImagePair]
    kind: OutputKind = OutputKind.PHOTO
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    @property
    def parts(self) -> list[TextPart | ImagePart]:
        """Ordered parts: instruction, then muse/garment per pair."""
        parts: list[TextPart | ImagePart] = [TextPart(text=self.instruction)]
        for pair in self.pairs:
            parts.append(pair.muse)
            parts.append(pair.garment)
        return parts

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body expected by generateContent."""
        return {
            "contents": [{"parts": [part.model_dump() for part in self.parts]}],
            "generationConfig": self.parameters.to_payload(),
        }


# --- Response side (camelCase wire names) ---

class ResponseInlineData(BaseModel):
    mime_type: str | None = Field(default=None, alias="mimeType")
    data: str | None = None


class ResponsePart(BaseModel):
    text: str | None = None
    inline_data: ResponseInlineData | None = Field(default=None, alias="inlineData")


class ResponseContent(BaseModel):
    parts: list[ResponsePart] = Field(default_factory=list)


class ResponseCandidate(BaseModel):
    content: ResponseContent | None = None


class GenerateContentResponse(BaseModel):
    candidates: list[ResponseCandidate] = Field(default_factory=list)


def placeholder_video_response() -> dict[str, Any]:
    """Video-shaped response with empty media, used when no video was produced."""
    return {
        "candidates": [{
            "content": {
                "parts": [{
                    "inlineData": {
                        "mimeType": "video/mp4",
                        "data": "",
                    }
                }]
            }
        }]
    }


# --- Results ---

class GeneratedMedia(BaseModel):
    """Decoded media bytes returned by the model."""
    data: bytes
    mime_type: str

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class MediaExtraction(BaseModel):
    """Outcome of looking for inline media in a response."""
    status: Literal["found", "absent", "malformed"]
    media: GeneratedMedia | None = None
    detail: str | None = None

    @classmethod
    def found(cls, media: GeneratedMedia) -> "MediaExtraction":
        return cls(status="found", media=media)

    @classmethod
    def absent(cls, detail: str) -> "MediaExtraction":
        return cls(status="absent", detail=detail)

    @classmethod
    def malformed(cls, detail: str) -> "MediaExtraction":
        return cls(status="malformed", detail=detail)


class GenerationResult(BaseModel):
    """What a generation call resolved to."""

    success: bool = True
    simulated: bool = False
    kind: OutputKind
    extraction: MediaExtraction | None = None
    message: str = ""
    raw: dict[str, Any] | None = Field(default=None, repr=False)

    @property
    def media(self) -> GeneratedMedia | None:
        return self.extraction.media if self.extraction else None

    @property
    def has_media(self) -> bool:
        return self.media is not None
