"""Downsample and re-encode images before sending them to the model."""

import base64
import io
from dataclasses import dataclass

from PIL import Image

from ..models.assets import ImageAsset


DEFAULT_MAX_DIMENSION = 768
DEFAULT_QUALITY = 0.7


@dataclass(frozen=True)
class EncodedImage:
    """Compressed image bytes ready for an inline_data part."""
    data: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def scaled_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Fit (width, height) so the longer side is at most max_dimension.

    Images already within bounds keep their size; nothing is upsampled.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        new_width = max_dimension
        new_height = round(height / width * max_dimension)
    else:
        new_height = max_dimension
        new_width = round(width / height * max_dimension)

    return max(1, new_width), max(1, new_height)


def encode_for_transport(
    image: ImageAsset | Image.Image,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    quality: float = DEFAULT_QUALITY,
) -> EncodedImage:
    """Downsample an image and re-encode it as JPEG.

    Args:
        image: The uploaded asset (or a bare Pillow image)
        max_dimension: Upper bound for the longer side, in pixels
        quality: JPEG quality in the 0-1 range

    Returns:
        EncodedImage with the JPEG bytes and the encoded dimensions
    """
    source = image.image if isinstance(image, ImageAsset) else image
    width, height = scaled_dimensions(source.width, source.height, max_dimension)

    # JPEG has no alpha channel
    rgb = source.convert("RGB")
    if (width, height) != rgb.size:
        rgb = rgb.resize((width, height), Image.Resampling.LANCZOS)

    output = io.BytesIO()
    rgb.save(output, format="JPEG", quality=round(quality * 100))
    return EncodedImage(data=output.getvalue(), width=width, height=height)
