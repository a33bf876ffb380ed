"""Uploaded image models."""

import base64
import io
from dataclasses import dataclass, field
from enum import Enum

from PIL import Image, UnidentifiedImageError

from ..exceptions import ImageDecodeError


class Bucket(str, Enum):
    """Which collection an upload belongs to."""
    MUSE = "muse"
    GARMENT = "garment"


@dataclass(frozen=True)
class IncomingFile:
    """A file as received from the picker or a drop."""
    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class ImageAsset:
    """A decoded upload plus its natural dimensions and display source."""
    image: Image.Image = field(repr=False, compare=False)
    width: int
    height: int
    source: str = field(repr=False)  # data URL used for thumbnails
    filename: str | None = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> "ImageAsset":
        """Decode raw file bytes into an asset.

        Raises:
            ImageDecodeError: if Pillow cannot read the bytes as an image.
        """
        if not data:
            raise ImageDecodeError(filename, "empty file")
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            raise ImageDecodeError(filename, str(e)) from e

        mime_type = Image.MIME.get(image.format or "") or content_type or "image/png"
        source = f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
        return cls(
            image=image,
            width=image.width,
            height=image.height,
            source=source,
            filename=filename,
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def close(self) -> None:
        """Release the decoded bitmap."""
        self.image.close()


@dataclass(frozen=True)
class SkippedFile:
    """An upload that was not added to its collection."""
    filename: str
    reason: str


@dataclass
class UploadReport:
    """Outcome of adding a batch of files to a bucket."""
    bucket: Bucket
    added: int = 0
    skipped: list[SkippedFile] = field(default_factory=list)


def is_image_upload(content_type: str | None) -> bool:
    """Whether a declared MIME type is an image type."""
    return bool(content_type) and content_type.lower().startswith("image/")
