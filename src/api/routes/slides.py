"""Slide API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from src.api.dependencies import get_registry
from src.services.registry import PresentationRegistry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["slides"])


@router.get("/slides/{presentation_id}/{slide_number}")
async def get_slide(
    presentation_id: str,
    slide_number: str,
    registry: PresentationRegistry = Depends(get_registry),
) -> RedirectResponse:
    """
    Redirect to the image of a 1-indexed slide.

    The slide number is taken as a raw string so that non-numeric values
    answer 404 like any other unknown slide rather than a validation error.
    """
    slide_url = registry.get_slide(presentation_id, slide_number)

    if slide_url is None:
        raise HTTPException(status_code=404, detail="Slide not found")

    return RedirectResponse(url=slide_url, status_code=302)
