"""Service layer for DeckRender."""

from .conversion import ConversionService, ConversionTools
from .registry import PresentationRegistry
from .toolchain import ToolchainProbe

__all__ = [
    "ConversionService",
    "ConversionTools",
    "PresentationRegistry",
    "ToolchainProbe",
]
