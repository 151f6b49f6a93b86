"""In-memory presentation registry."""

from .errors import RegistryError, DuplicatePresentationError, PresentationDeleteError
from .service import PresentationRegistry

__all__ = [
    "PresentationRegistry",
    "RegistryError",
    "DuplicatePresentationError",
    "PresentationDeleteError",
]
