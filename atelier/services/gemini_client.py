"""Client for the generateContent endpoint used for group photo and video generation."""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import BaseModel

from ..config import GeminiConfig, SimulationConfig
from ..exceptions import GenerationError
from ..models.generation import (
    GenerationRequest,
    GenerationResult,
    OutputKind,
    TransportFailurePolicy,
    placeholder_video_response,
)
from ..utils.media_extractor import extract_media


logger = logging.getLogger(__name__)

MODEL_KEYWORDS = ("veo", "gemini", "video")


class ModelInfo(BaseModel):
    """A model listed by the endpoint."""
    name: str
    version: str | None = None
    display_name: str | None = None


class GeminiClient:
    """Client for the remote generative model.

    Without a credential every call is simulated: nothing is sent and a
    success without media is returned after a fixed delay.
    """

    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None = None,
        simulation: SimulationConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._api_key = api_key
        self.simulation = simulation or SimulationConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def has_credential(self) -> bool:
        key = (self._api_key or "").strip()
        return bool(key) and key != "null"

    def model_for(self, kind: OutputKind) -> str:
        if kind is OutputKind.VIDEO:
            return self.config.video_model
        return self.config.photo_model

    async def invoke_generation(
        self,
        request: GenerationRequest,
        kind: OutputKind | None = None,
        on_transport_failure: TransportFailurePolicy | None = None,
    ) -> GenerationResult:
        """Send one group request and extract the returned media.

        Args:
            request: The built group request
            kind: Which endpoint to call; defaults to the request's kind
            on_transport_failure: Override the per-kind failure policy

        Returns:
            GenerationResult; its extraction tells found, absent and malformed apart

        Raises:
            GenerationError: on HTTP or network failure under the propagate policy
        """
        kind = OutputKind(kind or request.kind)
        policy = on_transport_failure or TransportFailurePolicy.default_for(kind)

        if not self.has_credential:
            logger.warning("No API key configured; simulating %s generation", kind.value)
            delay = self.simulation.video_delay if kind is OutputKind.VIDEO else self.simulation.photo_delay
            return await self._simulate(kind, delay)

        model = self.model_for(kind)
        logger.info(
            "Sending %s request to %s (%d pair(s))", kind.value, model, request.pair_count
        )

        try:
            data = await self._post(model, request.to_payload())
        except GenerationError as e:
            if policy is TransportFailurePolicy.DEGRADE_TO_PLACEHOLDER:
                logger.warning("%s generation failed, falling back to simulation: %s", kind.value, e)
                return await self._simulate(kind, self.simulation.fallback_delay)
            logger.error("%s generation failed: %s", kind.value, e)
            raise

        extraction = extract_media(data)
        if extraction.status == "malformed":
            logger.warning("Response did not match the expected shape: %s", extraction.detail)
        elif extraction.status == "absent":
            logger.info("Response carried no media: %s", extraction.detail)

        return GenerationResult(
            success=True,
            simulated=False,
            kind=kind,
            extraction=extraction,
            message=f"{kind.value} generation complete",
            raw=data if isinstance(data, dict) else None,
        )

    async def _post(self, model: str, payload: dict[str, Any]) -> Any:
        """POST a payload to a model endpoint and return the decoded JSON."""
        try:
            response = await self.client.post(
                self.config.endpoint(model),
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise GenerationError(f"Request to {model} failed: {e}") from e

        if not response.is_success:
            raise GenerationError(
                f"API Error: {response.status_code} {response.reason_phrase}\n{response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GenerationError(f"Invalid JSON from {model}: {e}") from e

    async def _simulate(self, kind: OutputKind, delay: float) -> GenerationResult:
        await asyncio.sleep(delay)
        raw = placeholder_video_response() if kind is OutputKind.VIDEO else None
        return GenerationResult(
            success=True,
            simulated=True,
            kind=kind,
            extraction=extract_media(raw),
            message=f"{kind.value} generation complete (Simulation)",
            raw=raw,
        )

    async def list_models(self) -> list[ModelInfo]:
        """List image and video capable models visible to the credential."""
        if not self.has_credential:
            logger.warning("No API key configured; cannot list models")
            return []

        try:
            response = await self.client.get(self.config.api_base, params={"key": self._api_key})
            response.raise_for_status()
            listing = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error listing models: %s", e)
            return []

        if not isinstance(listing, dict) or not isinstance(listing.get("models"), list):
            logger.warning("No models found in listing response")
            return []

        models = []
        for entry in listing["models"]:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name", "")
            if any(keyword in name for keyword in MODEL_KEYWORDS):
                models.append(ModelInfo(
                    name=name,
                    version=entry.get("version"),
                    display_name=entry.get("displayName"),
                ))
        return models

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
