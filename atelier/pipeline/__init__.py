"""Upload, preview and generation orchestration."""

from .studio import Atelier

__all__ = ["Atelier"]
