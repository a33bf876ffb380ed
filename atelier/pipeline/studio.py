"""Upload/preview manager and the Generate action."""

import asyncio
import io
import logging
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from ..config import AtelierConfig
from ..exceptions import (
    GenerationError,
    GenerationInProgressError,
    ImageDecodeError,
    InputValidationError,
)
from ..models import (
    Bucket,
    GeneratedMedia,
    GenerationOutcome,
    ImageAsset,
    IncomingFile,
    OutputKind,
    ResultCard,
    SkippedFile,
    UploadReport,
    VideoElement,
)
from ..preview import PreviewCanvas
from ..services import GeminiClient, build_group_request, pair_count


logger = logging.getLogger(__name__)

IDLE_LABELS = {
    OutputKind.PHOTO: "GENERATE PHOTOS",
    OutputKind.VIDEO: "GENERATE VIDEOS",
}
BUSY_LABEL = "CREATING..."


class Atelier:
    """Owns the muse and garment collections, the preview and the results.

    Flow:
    1. Files are decoded and appended to the muse or garment collection
    2. The first muse/garment pair is drawn on the preview canvas
    3. Generate builds one group request from all pairs and sends it
    4. The returned media replaces the preview and is added as a result card
    """

    def __init__(self, config: AtelierConfig, client: GeminiClient | None = None):
        self.config = config
        self.client = client or GeminiClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
            simulation=config.simulation,
        )
        self.canvas = PreviewCanvas(config.preview)

        self.muse_images: list[ImageAsset] = []
        self.garment_images: list[ImageAsset] = []
        self.output_kind = OutputKind.PHOTO

        self.video: VideoElement | None = None
        self.results: list[ResultCard] = []
        self.notice: str | None = None
        self._busy = False

    # --- Collections ---

    def collection(self, bucket: Bucket) -> list[ImageAsset]:
        if Bucket(bucket) is Bucket.MUSE:
            return self.muse_images
        return self.garment_images

    @property
    def pair_count(self) -> int:
        return pair_count(self.muse_images, self.garment_images)

    @property
    def counts(self) -> dict[str, int]:
        return {
            Bucket.MUSE.value: len(self.muse_images),
            Bucket.GARMENT.value: len(self.garment_images),
        }

    def thumbnails(self, bucket: Bucket) -> list[str]:
        """Display sources for a bucket, in order."""
        return [asset.source for asset in self.collection(bucket)]

    async def add_files(self, files: Iterable[IncomingFile], bucket: Bucket) -> UploadReport:
        """Decode files and append them to a bucket.

        A file that fails to decode is reported as skipped; the rest of the
        batch is still added.
        """
        bucket = Bucket(bucket)
        target = self.collection(bucket)
        report = UploadReport(bucket=bucket)

        for file in files:
            try:
                asset = await asyncio.to_thread(
                    ImageAsset.from_bytes, file.data, file.filename, file.content_type
                )
            except ImageDecodeError as e:
                logger.warning("Skipping %s: %s", file.filename, e.reason)
                report.skipped.append(SkippedFile(filename=file.filename, reason=e.reason))
                continue
            target.append(asset)
            report.added += 1

        self.draw_preview()
        return report

    def remove_image(self, bucket: Bucket, index: int) -> bool:
        """Remove an image by index. Out-of-range indices are ignored.

        Raises:
            GenerationInProgressError: while a generation is encoding the collections
        """
        if self._busy:
            raise GenerationInProgressError("Cannot remove images while a generation is in progress.")
        target = self.collection(bucket)
        if not 0 <= index < len(target):
            return False
        target.pop(index).close()
        self.draw_preview()
        return True

    # --- Preview ---

    def draw_preview(self) -> None:
        """Draw the first muse with the first garment overlaid."""
        self.canvas.clear()
        if self.muse_images:
            self.canvas.draw_image_scaled(self.muse_images[0].image)
        if self.garment_images:
            self.canvas.draw_image_scaled(
                self.garment_images[0].image,
                opacity=self.config.preview.overlay_opacity,
            )

    def resize_canvas(self, width: int, height: int) -> None:
        self.canvas.resize(width, height)
        self.draw_preview()

    def render_generation_result(self, media: GeneratedMedia, kind: OutputKind) -> None:
        """Show generated media in the preview area."""
        if OutputKind(kind) is OutputKind.VIDEO:
            self.canvas.visible = False
            if self.video is None:
                self.video = VideoElement(
                    source=media.to_data_url(),
                    mime_type=media.mime_type,
                    width=self.canvas.width,
                    height=self.canvas.height,
                )
            else:
                self.video = self.video.model_copy(update={
                    "source": media.to_data_url(),
                    "mime_type": media.mime_type,
                    "width": self.canvas.width,
                    "height": self.canvas.height,
                })
            return

        try:
            with Image.open(io.BytesIO(media.data)) as image:
                image.load()
                self.canvas.clear()
                self.canvas.draw_image_scaled(image)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError("generated image", str(e)) from e
        self.canvas.visible = True
        self.canvas.flash()

    # --- Generate ---

    def set_output_kind(self, kind: OutputKind) -> None:
        self.output_kind = OutputKind(kind)

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def generate_label(self) -> str:
        return BUSY_LABEL if self._busy else IDLE_LABELS[self.output_kind]

    async def generate(
        self,
        custom_instruction: str = "",
        kind: OutputKind | None = None,
    ) -> GenerationOutcome:
        """Run one group generation over every available pair.

        Raises:
            InputValidationError: if there is not at least one pair
            GenerationInProgressError: if a generation is already running
        """
        kind = OutputKind(kind or self.output_kind)
        count = self.pair_count
        if count == 0:
            raise InputValidationError("Please upload at least one muse and one garment.")
        if self._busy:
            raise GenerationInProgressError("A generation is already in progress.")

        excluded_muses = len(self.muse_images) - count
        excluded_garments = len(self.garment_images) - count
        if excluded_muses or excluded_garments:
            logger.warning(
                "Only %d pair(s) used; excluding %d muse(s) and %d garment(s) without a match",
                count, excluded_muses, excluded_garments,
            )

        self._busy = True
        self.notice = None
        self.results.clear()

        try:
            request = await build_group_request(
                self.muse_images[:count],
                self.garment_images[:count],
                (custom_instruction or "").strip(),
                kind,
                encoding=self.config.encoding,
                generation=self.config.generation,
            )

            try:
                result = await self.client.invoke_generation(request, kind)
            except GenerationError as e:
                self.notice = "Generation failed. Check the server log for details."
                card = ResultCard.error(kind, str(e))
                self.results.append(card)
                return GenerationOutcome(
                    status="error",
                    kind=kind,
                    pair_count=count,
                    excluded_muses=excluded_muses,
                    excluded_garments=excluded_garments,
                    card=card,
                    error=str(e),
                )

            media = result.media
            if media is None:
                card = ResultCard.no_media(kind)
            else:
                try:
                    self.render_generation_result(media, kind)
                    card = ResultCard.with_media(kind, media)
                except ImageDecodeError as e:
                    logger.warning("Generated media could not be displayed: %s", e)
                    card = ResultCard.no_media(kind)
            self.results.append(card)

            return GenerationOutcome(
                status=card.status,
                kind=kind,
                pair_count=count,
                simulated=result.simulated,
                excluded_muses=excluded_muses,
                excluded_garments=excluded_garments,
                card=card,
            )
        finally:
            self._busy = False
