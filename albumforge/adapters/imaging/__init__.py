"""Adaptateurs de rendu d'images (Pillow)."""

from albumforge.adapters.imaging.pillow_renderer import PillowImageRenderer

__all__ = ["PillowImageRenderer"]
