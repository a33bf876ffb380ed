"""Rendered generation results and studio view state."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from .generation import GeneratedMedia, OutputKind


class VideoElement(BaseModel):
    """A playable video shown in place of the preview canvas."""
    source: str = Field(repr=False)  # data URL
    mime_type: str
    width: int
    height: int
    controls: bool = True
    autoplay: bool = True
    loop: bool = True


class ResultCard(BaseModel):
    """One entry in the results grid."""

    label: str
    kind: OutputKind
    status: Literal["media", "no_media", "error"]
    media: GeneratedMedia | None = Field(default=None, repr=False, exclude=True)
    message: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def download_filename(self) -> str | None:
        """File name offered by the download action."""
        if self.media is None:
            return None
        stem = "group_photo" if self.kind is OutputKind.PHOTO else "group_video"
        return f"{stem}{self.kind.download_extension}"

    @computed_field
    @property
    def media_source(self) -> str | None:
        return self.media.to_data_url() if self.media else None

    @classmethod
    def with_media(cls, kind: OutputKind, media: GeneratedMedia) -> "ResultCard":
        return cls(label=kind.label, kind=kind, status="media", media=media)

    @classmethod
    def no_media(cls, kind: OutputKind) -> "ResultCard":
        return cls(
            label=f"{kind.label} - No Media",
            kind=kind,
            status="no_media",
            message=f"No media generated for {kind.label}",
        )

    @classmethod
    def error(cls, kind: OutputKind, message: str) -> "ResultCard":
        return cls(
            label=f"{kind.label} - Error",
            kind=kind,
            status="error",
            message=message,
        )


class GenerationOutcome(BaseModel):
    """What the Generate action produced, for the caller to display."""

    status: Literal["media", "no_media", "error"]
    kind: OutputKind
    pair_count: int
    simulated: bool = False
    excluded_muses: int = 0
    excluded_garments: int = 0
    card: ResultCard
    error: str | None = None
