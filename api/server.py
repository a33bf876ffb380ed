"""FastAPI server for the Atelier composite generator.

Serves the upload/preview/generate workflow to a browser front end:
- muse and garment photos are uploaded as multipart files
- the preview canvas is served as PNG
- generation results are offered as downloads
"""

import logging
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import Depends, FastAPI, File, HTTPException, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from atelier import __version__
from atelier.config import AtelierConfig
from atelier.exceptions import GenerationInProgressError, InputValidationError
from atelier.models import (
    Bucket,
    GenerationOutcome,
    IncomingFile,
    OutputKind,
    ResultCard,
    SkippedFile,
    VideoElement,
    is_image_upload,
)
from atelier.pipeline import Atelier
from atelier.services import ModelInfo


logger = logging.getLogger(__name__)


class UploadResponse(BaseModel):
    """Result of adding files to a bucket."""
    bucket: Bucket
    added: int
    skipped: list[SkippedFile] = Field(default_factory=list)
    counts: dict[str, int]


class RemoveResponse(BaseModel):
    removed: bool
    counts: dict[str, int]


class StudioState(BaseModel):
    """Everything the front end needs to render the page."""
    counts: dict[str, int]
    pair_count: int
    muse_thumbnails: list[str]
    garment_thumbnails: list[str]
    output_kind: OutputKind
    generate_label: str
    busy: bool
    canvas_visible: bool
    video: VideoElement | None = None
    results: list[ResultCard] = Field(default_factory=list)
    notice: str | None = None


class CanvasSize(BaseModel):
    width: int = Field(gt=0, le=8192)
    height: int = Field(gt=0, le=8192)


class OutputKindRequest(BaseModel):
    kind: OutputKind


class GenerateRequest(BaseModel):
    """Request body for group generation."""
    custom_instruction: str = ""
    kind: OutputKind | None = None


class HealthResponse(BaseModel):
    status: Literal["ok"]
    service: str
    version: str
    gemini: Literal["configured", "simulation"]


def get_studio(request: Request) -> Atelier:
    """The application object owned by this app instance."""
    return request.app.state.studio


def create_app(config: AtelierConfig | None = None, studio: Atelier | None = None) -> FastAPI:
    """Build the API around one Atelier instance."""
    config = config or AtelierConfig()  # Loads from .env automatically via pydantic-settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.studio.client.close()

    app = FastAPI(
        lifespan=lifespan,
        title="Atelier API",
        description="Group fashion photos and videos from muse and garment images",
        version=__version__,
    )
    app.state.studio = studio or Atelier(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_model=HealthResponse)
    @app.get("/health", response_model=HealthResponse)
    async def health(studio: Atelier = Depends(get_studio)):
        """Health check; reports whether generation is real or simulated."""
        return HealthResponse(
            status="ok",
            service="Atelier API",
            version=__version__,
            gemini="configured" if studio.client.has_credential else "simulation",
        )

    @app.post("/api/uploads/{bucket}", response_model=UploadResponse)
    async def upload(
        bucket: Bucket,
        files: list[UploadFile] = File(...),
        studio: Atelier = Depends(get_studio),
    ):
        """Add muse or garment images. Non-image files are skipped."""
        incoming = []
        skipped = []
        for upload in files:
            filename = upload.filename or "upload"
            if not is_image_upload(upload.content_type):
                skipped.append(SkippedFile(
                    filename=filename,
                    reason=f"not an image ({upload.content_type or 'unknown type'})",
                ))
                continue
            incoming.append(IncomingFile(
                filename=filename,
                content_type=upload.content_type,
                data=await upload.read(),
            ))

        report = await studio.add_files(incoming, bucket)
        return UploadResponse(
            bucket=bucket,
            added=report.added,
            skipped=skipped + report.skipped,
            counts=studio.counts,
        )

    @app.delete("/api/uploads/{bucket}/{index}", response_model=RemoveResponse)
    async def remove(bucket: Bucket, index: int, studio: Atelier = Depends(get_studio)):
        try:
            removed = studio.remove_image(bucket, index)
        except GenerationInProgressError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return RemoveResponse(removed=removed, counts=studio.counts)

    @app.get("/api/state", response_model=StudioState)
    async def state(studio: Atelier = Depends(get_studio)):
        return StudioState(
            counts=studio.counts,
            pair_count=studio.pair_count,
            muse_thumbnails=studio.thumbnails(Bucket.MUSE),
            garment_thumbnails=studio.thumbnails(Bucket.GARMENT),
            output_kind=studio.output_kind,
            generate_label=studio.generate_label,
            busy=studio.is_busy,
            canvas_visible=studio.canvas.visible,
            video=studio.video,
            results=studio.results,
            notice=studio.notice,
        )

    @app.get("/api/preview")
    async def preview(studio: Atelier = Depends(get_studio)):
        """Current preview canvas as PNG."""
        return Response(content=studio.canvas.to_png(), media_type="image/png")

    @app.put("/api/canvas", response_model=CanvasSize)
    async def resize_canvas(size: CanvasSize, studio: Atelier = Depends(get_studio)):
        studio.resize_canvas(size.width, size.height)
        return size

    @app.put("/api/output-kind", response_model=StudioState)
    async def set_output_kind(body: OutputKindRequest, studio: Atelier = Depends(get_studio)):
        studio.set_output_kind(body.kind)
        return await state(studio)

    @app.post("/api/generate", response_model=GenerationOutcome)
    async def generate(body: GenerateRequest, studio: Atelier = Depends(get_studio)):
        """Generate one group photo or video from every muse/garment pair.

        Returns:
            The outcome, including the result card; photo failures come back
            with status "error" rather than an HTTP error
        """
        try:
            return await studio.generate(body.custom_instruction, body.kind)
        except InputValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except GenerationInProgressError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @app.get("/api/results/{index}/download")
    async def download(index: int, studio: Atelier = Depends(get_studio)):
        if not 0 <= index < len(studio.results):
            raise HTTPException(status_code=404, detail="No such result")
        card = studio.results[index]
        if card.media is None:
            raise HTTPException(status_code=404, detail="Result has no media")
        return Response(
            content=card.media.data,
            media_type=card.media.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{card.download_filename}"'},
        )

    @app.get("/api/models", response_model=list[ModelInfo])
    async def models(studio: Atelier = Depends(get_studio)):
        """Image and video models available to the configured key."""
        return await studio.client.list_models()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
