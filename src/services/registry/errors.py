"""Registry exceptions."""
from src.core.errors import DeckRenderError


class RegistryError(DeckRenderError):
    """Base class for registry failures."""


class DuplicatePresentationError(RegistryError):
    """A record with the same id is already registered."""


class PresentationDeleteError(RegistryError):
    """The slide files for a presentation could not be removed."""

    def __init__(self, presentation_id: str, reason: str):
        self.presentation_id = presentation_id
        self.reason = reason
        super().__init__(f"Failed to delete files for presentation {presentation_id}: {reason}")
