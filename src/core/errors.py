"""Base exception for DeckRender."""


class DeckRenderError(Exception):
    """Root of all application-level errors."""
