"""Presentation upload, lookup and deletion endpoints."""
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_app_settings, get_conversion_service, get_registry
from src.core.config import Settings
from src.models.presentation import PresentationMetadata
from src.services.conversion import ConversionError, ConversionService, ConversionSetupError
from src.services.registry import PresentationDeleteError, PresentationRegistry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["presentations"])

UPLOAD_CHUNK_SIZE = 1024 * 1024


async def save_upload(upload: UploadFile, uploads_dir: Path, max_size: int) -> Path:
    """
    Stream an upload to a uniquely named file under ``uploads_dir``.

    Raises HTTPException(413) if the upload exceeds ``max_size`` bytes.
    """
    uploads_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix.lower()
    dest_path = uploads_dir / f"{int(time.time() * 1000)}-{uuid.uuid4()}{suffix}"

    total_size = 0
    # Disk I/O stays off the event loop
    f = await run_in_threadpool(open, dest_path, "wb")
    try:
        try:
            while True:
                chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > max_size:
                    raise HTTPException(
                        status_code=413,
                        detail=f"File too large (limit {max_size // (1024 * 1024)}MB)",
                    )
                await run_in_threadpool(f.write, chunk)
        finally:
            await run_in_threadpool(f.close)
    except BaseException:
        dest_path.unlink(missing_ok=True)
        raise

    logger.info(f"Received file: {upload.filename} ({total_size} bytes)")
    return dest_path


@router.post("/convert")
@router.post("/presentations")
async def convert_presentation(
    presentation: Optional[UploadFile] = File(default=None),
    title: Optional[str] = Form(default=None),
    summary: Optional[str] = Form(default=None),
    author: Optional[str] = Form(default=None),
    author_id: Optional[str] = Form(default=None, alias="authorId"),
    topics: Optional[list[str]] = Form(default=None),
    service: ConversionService = Depends(get_conversion_service),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """
    Upload a presentation and convert it to slide images.

    Degraded conversions still answer 200; the ``status`` field tells
    real renders (``success``) apart from placeholder output
    (``placeholders_created``, ``fallback_placeholders``).
    """
    if presentation is None or not presentation.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    extension = Path(presentation.filename).suffix.lower()
    if extension not in settings.allowed_extensions:
        raise HTTPException(
            status_code=400,
            detail="Only PowerPoint files (.ppt, .pptx) and Keynote files (.key) are allowed",
        )

    input_file = await save_upload(presentation, settings.uploads_dir, settings.max_upload_size)

    metadata = PresentationMetadata(
        title=title or "",
        summary=summary or "",
        author=author or "Anonymous",
        author_id=author_id or "",
        topics=[t for t in (topics or []) if t.strip()],
    )

    try:
        record = await run_in_threadpool(service.convert, input_file, presentation.filename, metadata)
    except ConversionSetupError as e:
        logger.error(f"Conversion setup failed: {e}")
        raise HTTPException(status_code=500, detail="Could not prepare output directory")
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        raise HTTPException(status_code=500, detail="Conversion failed")

    return record.to_response()


@router.get("/presentation/{presentation_id}")
async def get_presentation(
    presentation_id: str,
    registry: PresentationRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Get the full record of a converted presentation."""
    record = registry.get(presentation_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Presentation not found")
    return record.model_dump(by_alias=True, mode="json")


@router.get("/presentations")
async def list_presentations(
    registry: PresentationRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """List summaries of all presentations."""
    return {
        "presentations": [
            summary.model_dump(by_alias=True, mode="json")
            for summary in registry.list_presentations()
        ]
    }


@router.get("/presentations/topic/{topic}")
async def presentations_by_topic(
    topic: str,
    registry: PresentationRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Presentations tagged with a topic (case-insensitive substring match)."""
    return {
        "presentations": [
            record.model_dump(by_alias=True, mode="json")
            for record in registry.by_topic(topic)
        ]
    }


@router.get("/topics")
async def list_topics(
    registry: PresentationRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Topics with the number of presentations tagged with each."""
    return {"topics": registry.topics()}


@router.delete("/presentation/{presentation_id}")
async def delete_presentation(
    presentation_id: str,
    registry: PresentationRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Delete a presentation and its slide images."""
    try:
        deleted = await run_in_threadpool(registry.delete, presentation_id)
    except PresentationDeleteError as e:
        logger.error(f"Error deleting presentation: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete presentation files")

    if not deleted:
        raise HTTPException(status_code=404, detail="Presentation not found")
    return {"success": True, "message": "Presentation deleted"}
