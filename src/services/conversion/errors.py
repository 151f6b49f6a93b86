"""Conversion exceptions."""
from src.core.errors import DeckRenderError


class ConversionError(DeckRenderError):
    """A conversion could not produce any record, not even placeholders."""


class ConversionSetupError(ConversionError):
    """The output or scratch directory for a conversion could not be created."""
