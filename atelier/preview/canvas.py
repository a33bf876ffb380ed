"""Pillow-backed preview canvas."""

import io
import time

from PIL import Image, ImageEnhance

from ..config import PreviewConfig


class PreviewCanvas:
    """An RGBA drawing surface standing in for the preview area.

    Images are drawn scaled to fit and centered. A brightness flash can be
    started; while it lasts, rendered frames are brightened.
    """

    def __init__(self, config: PreviewConfig | None = None):
        self.config = config or PreviewConfig()
        self.width = self.config.width
        self.height = self.config.height
        self.visible = True
        self._flash_started: float | None = None
        self.image = self._blank()

    def _blank(self) -> Image.Image:
        return Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))

    def clear(self) -> None:
        self.image = self._blank()
        self._flash_started = None

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.clear()

    def fit_box(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Centered (x, y, w, h) for an image of the given size."""
        ratio = min(self.width / width, self.height / height) * self.config.fit_ratio
        scaled_w = max(1, round(width * ratio))
        scaled_h = max(1, round(height * ratio))
        x = round((self.width - scaled_w) / 2)
        y = round((self.height - scaled_h) / 2)
        return x, y, scaled_w, scaled_h

    def draw_image_scaled(self, image: Image.Image, opacity: float = 1.0) -> None:
        x, y, w, h = self.fit_box(image.width, image.height)
        layer = image.convert("RGBA").resize((w, h), Image.Resampling.LANCZOS)
        if opacity < 1.0:
            alpha = layer.getchannel("A").point(lambda a: round(a * opacity))
            layer.putalpha(alpha)
        self.image.alpha_composite(layer, dest=(x, y))

    def flash(self, now: float | None = None) -> None:
        self._flash_started = time.monotonic() if now is None else now

    def is_flashing(self, now: float | None = None) -> bool:
        if self._flash_started is None:
            return False
        now = time.monotonic() if now is None else now
        return now - self._flash_started < self.config.flash_duration

    def render(self, now: float | None = None) -> Image.Image:
        """Current frame, with the flash applied if it is still running."""
        if not self.is_flashing(now):
            return self.image.copy()
        rgb = ImageEnhance.Brightness(self.image.convert("RGB")).enhance(self.config.flash_brightness)
        frame = rgb.convert("RGBA")
        frame.putalpha(self.image.getchannel("A"))
        return frame

    def to_png(self, now: float | None = None) -> bytes:
        output = io.BytesIO()
        self.render(now).save(output, format="PNG")
        return output.getvalue()
