"""Configuration management for the Atelier composite generator."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class GeminiConfig(BaseModel):
    """Remote model endpoint settings."""
    api_base: str = "https://generativelanguage.googleapis.com/v1beta/models"
    photo_model: str = "gemini-3-pro-image-preview"
    video_model: str = "veo-3.1-001"
    timeout: float = 300.0  # generation can take minutes

    def endpoint(self, model: str) -> str:
        return f"{self.api_base}/{model}:generateContent"


class GenerationConfig(BaseModel):
    """Generation parameters sent with every request."""
    temperature: float = 0.4
    max_output_tokens: int | None = 8192


class EncodingConfig(BaseModel):
    """Image downsampling applied before upload to the model."""
    max_dimension: int = Field(default=768, gt=0)
    quality: float = Field(default=0.7, gt=0.0, le=1.0)


class SimulationConfig(BaseModel):
    """Delays used when the model is not actually called."""
    photo_delay: float = 2.0
    video_delay: float = 3.0
    fallback_delay: float = 2.0  # video transport failure


class PreviewConfig(BaseModel):
    """Preview canvas settings."""
    width: int = 800
    height: int = 1000
    fit_ratio: float = 0.9
    overlay_opacity: float = 0.9
    flash_brightness: float = 1.3
    flash_duration: float = 0.3


class AtelierConfig(BaseSettings):
    """Main application configuration."""

    # Credential (loaded from .env); absent means simulation mode
    gemini_api_key: str | None = None

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)

    class Config:
        env_file = ".env"
        env_prefix = ""
        env_nested_delimiter = "__"
        extra = "ignore"

    @property
    def has_credential(self) -> bool:
        key = (self.gemini_api_key or "").strip()
        return bool(key) and key != "null"


def load_config() -> AtelierConfig:
    """Load configuration from environment and defaults."""
    return AtelierConfig()
