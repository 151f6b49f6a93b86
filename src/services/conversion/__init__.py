"""Presentation to slide-image conversion."""

from .errors import ConversionError, ConversionSetupError
from .models import ConversionAttempt, StageKind, StageResult
from .service import ConversionService
from .tools import ConversionTools

__all__ = [
    "ConversionService",
    "ConversionTools",
    "ConversionAttempt",
    "StageKind",
    "StageResult",
    "ConversionError",
    "ConversionSetupError",
]
