"""Atelier - group fashion composites from muse and garment photos."""

__version__ = "1.0.0"
