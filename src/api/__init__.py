"""API routes for DeckRender."""

from .routes import presentations, slides

__all__ = [
    "presentations",
    "slides",
]
