"""External services: payload assembly and the remote model client."""

from .gemini_client import GeminiClient, ModelInfo
from .payload import build_group_request, pair_count

__all__ = ["GeminiClient", "ModelInfo", "build_group_request", "pair_count"]
