"""Pydantic models and schemas for type-safe data handling."""

from .presentation import (
    ConversionStatus,
    PresentationMetadata,
    PresentationRecord,
    PresentationSummary,
)

__all__ = [
    "ConversionStatus",
    "PresentationMetadata",
    "PresentationRecord",
    "PresentationSummary",
]
