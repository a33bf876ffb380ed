"""Preview rendering."""

from .canvas import PreviewCanvas

__all__ = ["PreviewCanvas"]
