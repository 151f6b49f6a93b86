"""
Conversion Service

Turns an uploaded presentation into a deck of slide images by driving
LibreOffice and poppler through an ordered cascade of stages:

1. check_toolchain      - make sure the converter exists (install if not)
2. convert_via_pdf      - presentation -> PDF -> one JPEG per page
3. convert_direct       - presentation -> JPEG(s) straight from LibreOffice
4. create_placeholders  - synthetic slides when nothing else worked

Each stage returns a StageResult; the first success ends the run. Apart from
failing to create the output directory, conversion never raises: every
failure degrades to placeholder slides.
"""
import logging
import shutil
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from src.core.config import Settings, get_settings
from src.core.debug import record_conversion
from src.models.presentation import ConversionStatus, PresentationMetadata, PresentationRecord
from src.services.registry import PresentationRegistry
from src.services.toolchain import ToolchainProbe

from .errors import ConversionError, ConversionSetupError
from .models import ConversionAttempt, StageKind, StageResult
from .placeholders import render_placeholder
from .tools import ConversionTools

logger = logging.getLogger(__name__)

STAGE_TOOLCHAIN = "check_toolchain"
STAGE_PDF = "convert_via_pdf"
STAGE_DIRECT = "convert_direct"
STAGE_PLACEHOLDERS = "create_placeholders"

MISSING_TOOLCHAIN_MESSAGE = "LibreOffice is not available. Generated placeholder slides instead."
FALLBACK_MESSAGE = "Conversion failed. Generated distinct placeholder slides instead."


@dataclass(frozen=True)
class PageOutcome:
    """Result of rendering one PDF page into its final slide file."""

    page_number: int
    text: str
    placeholder: bool = False


class ConversionService:
    """Runs the conversion cascade and registers the finished record."""

    def __init__(
        self,
        registry: PresentationRegistry,
        probe: Optional[ToolchainProbe] = None,
        tools: Optional[ConversionTools] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._registry = registry
        self._probe = probe or ToolchainProbe(self._settings)
        self._tools = tools or ConversionTools(self._settings)
        self._stages: list[tuple[str, Callable[[ConversionAttempt], StageResult]]] = [
            (STAGE_TOOLCHAIN, self._check_toolchain),
            (STAGE_PDF, self._convert_via_pdf),
            (STAGE_DIRECT, self._convert_direct),
            (STAGE_PLACEHOLDERS, self._create_placeholders),
        ]

    @property
    def registry(self) -> PresentationRegistry:
        return self._registry

    @property
    def stage_names(self) -> list[str]:
        return [name for name, _ in self._stages]

    def convert(
        self,
        input_file: Path,
        original_name: str,
        metadata: Optional[PresentationMetadata] = None,
    ) -> PresentationRecord:
        """
        Convert an uploaded file and register the resulting presentation.

        The uploaded file is deleted on every outcome.

        Raises:
            ConversionSetupError: The output directory could not be created.
            ConversionError: Not even placeholder slides could be written.
        """
        input_file = Path(input_file)
        presentation_id = str(uuid.uuid4())
        logger.info(f"Converting {original_name} as presentation {presentation_id}")

        try:
            attempt = self._prepare(presentation_id, input_file, original_name)
            try:
                result = self._run_stages(attempt)
                record = self._build_record(attempt, result, metadata)
                self._registry.put(record)
            except Exception:
                self._discard_output(attempt)
                raise
            finally:
                attempt.remove_work_dir()
        finally:
            self._remove_upload(input_file)

        record_conversion(record.status.value)
        logger.info(
            f"Presentation {record.id} ready: {record.slide_count} slides, "
            f"status={record.status.value}, placeholders={len(record.placeholder_slides)}"
        )
        return record

    def _prepare(self, presentation_id: str, input_file: Path, original_name: str) -> ConversionAttempt:
        output_dir = self._registry.slide_dir_for(presentation_id)
        work_dir = self._settings.work_dir / presentation_id
        attempt = ConversionAttempt(
            presentation_id=presentation_id,
            input_file=input_file,
            original_name=original_name,
            output_dir=output_dir,
            work_dir=work_dir,
        )
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create directories for {presentation_id}: {e}")
            self._discard_output(attempt)
            attempt.remove_work_dir()
            raise ConversionSetupError(f"Cannot create directories for {presentation_id}: {e}") from e

        return attempt

    def _run_stages(self, attempt: ConversionAttempt) -> StageResult:
        index = 0
        while index < len(self._stages):
            name, stage = self._stages[index]
            logger.debug(f"[{attempt.presentation_id}] stage {name}")

            try:
                result = stage(attempt)
            except ConversionError:
                raise
            except Exception as e:
                logger.exception(f"[{attempt.presentation_id}] stage {name} crashed")
                attempt.reset()
                result = StageResult.fallthrough(f"{name} raised {type(e).__name__}: {e}")

            if result.kind is StageKind.SUCCESS:
                return result
            if result.kind is StageKind.FATAL:
                logger.error(f"[{attempt.presentation_id}] {name} failed: {result.reason}")
                raise ConversionError(result.reason)

            logger.info(f"[{attempt.presentation_id}] {name} fell through: {result.reason}")
            index = self._stage_index(result.next_stage) if result.next_stage else index + 1

        raise ConversionError("No conversion stage produced a result")

    def _stage_index(self, name: str) -> int:
        for i, (stage_name, _) in enumerate(self._stages):
            if stage_name == name:
                return i
        raise ConversionError(f"Unknown conversion stage: {name}")

    # Stages

    def _check_toolchain(self, attempt: ConversionAttempt) -> StageResult:
        if self._probe.is_available():
            return StageResult.fallthrough("toolchain available")

        logger.warning(f"{self._probe.converter_binary} not found, attempting installation")
        if self._probe.install():
            return StageResult.fallthrough("toolchain installed")

        attempt.placeholder_count = self._settings.missing_toolchain_placeholder_count
        attempt.placeholder_status = ConversionStatus.PLACEHOLDERS_CREATED
        attempt.message = MISSING_TOOLCHAIN_MESSAGE
        return StageResult.fallthrough("converter unavailable", next_stage=STAGE_PLACEHOLDERS)

    def _convert_via_pdf(self, attempt: ConversionAttempt) -> StageResult:
        pdf_path = self._tools.convert_to_pdf(
            attempt.input_file, attempt.work_dir / "pdf", attempt.profile_dir
        )
        if pdf_path is None:
            return StageResult.fallthrough("no PDF produced")

        page_count = self._tools.page_count(pdf_path)
        if page_count <= 0:
            return StageResult.fallthrough("PDF reports zero pages")
        logger.info(f"PDF has {page_count} pages")

        pages_dir = attempt.work_dir / "pages"
        pages_dir.mkdir(parents=True, exist_ok=True)
        workers = min(self._settings.rasterize_workers, page_count)
        try:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rasterize") as pool:
                outcomes = list(pool.map(
                    lambda page: self._render_page(attempt, pdf_path, pages_dir, page),
                    range(1, page_count + 1),
                ))
        finally:
            try:
                shutil.rmtree(pages_dir)
            except OSError as e:
                logger.error(f"Error cleaning up temp directory: {e}")

        for outcome in outcomes:
            attempt.add_slide(
                self._settings.slide_url(attempt.presentation_id, outcome.page_number),
                outcome.text,
                placeholder=outcome.placeholder,
            )

        failed = [o.page_number for o in outcomes if o.placeholder]
        if failed:
            logger.warning(f"{len(failed)} of {page_count} pages replaced by placeholders: {failed}")
        return StageResult.success(ConversionStatus.SUCCESS)

    def _render_page(
        self,
        attempt: ConversionAttempt,
        pdf_path: Path,
        pages_dir: Path,
        page_number: int,
    ) -> PageOutcome:
        final_path = attempt.slide_path(page_number)
        image = self._tools.rasterize_page(pdf_path, page_number, pages_dir / f"slide-{page_number}")

        if image is not None:
            try:
                shutil.move(str(image), str(final_path))
            except OSError as e:
                logger.error(f"Could not move page {page_number} into place: {e}")
                image = None

        if image is None:
            render_placeholder(
                final_path,
                page_number,
                f"Page {page_number} of {attempt.original_name}",
                reason="This page could not be rendered.",
            )
            return PageOutcome(page_number, f"Slide {page_number} (Error Placeholder)", placeholder=True)

        text = None
        if self._settings.extract_slide_text:
            text = self._tools.page_text(pdf_path, page_number)
        return PageOutcome(page_number, text or f"Slide {page_number}")

    def _convert_direct(self, attempt: ConversionAttempt) -> StageResult:
        images = self._tools.convert_to_images(
            attempt.input_file, attempt.work_dir / "direct", attempt.profile_dir
        )
        if not images:
            return StageResult.fallthrough("direct conversion produced no images")

        logger.info(f"Renaming {len(images)} slide images to standard format")
        for image in images:
            number = len(attempt.slides) + 1
            shutil.move(str(image), str(attempt.slide_path(number)))
            attempt.add_slide(
                self._settings.slide_url(attempt.presentation_id, number),
                f"Slide {number}",
            )

        if len(images) == 1:
            estimated = self._settings.fallback_placeholder_count
            logger.info(f"Only one slide converted. Padding to {estimated} with placeholders")
            for number in range(2, estimated + 1):
                self._add_placeholder(attempt, number)

        return StageResult.success(ConversionStatus.SUCCESS)

    def _create_placeholders(self, attempt: ConversionAttempt) -> StageResult:
        attempt.reset()
        count = attempt.placeholder_count or self._settings.fallback_placeholder_count
        status = attempt.placeholder_status
        reason = None
        if status is ConversionStatus.PLACEHOLDERS_CREATED:
            reason = "LibreOffice is not installed on the server."

        logger.info(f"Creating {count} placeholder slides")
        try:
            for number in range(1, count + 1):
                self._add_placeholder(attempt, number, reason=reason)
        except OSError as e:
            # Last stage: nothing left to fall through to
            return StageResult.fatal(f"Could not write placeholder slides: {e}")

        return StageResult.success(status, message=attempt.message or FALLBACK_MESSAGE)

    def _add_placeholder(self, attempt: ConversionAttempt, number: int, reason: Optional[str] = None) -> None:
        render_placeholder(attempt.slide_path(number), number, attempt.original_name, reason=reason)
        attempt.add_slide(
            self._settings.slide_url(attempt.presentation_id, number),
            f"Slide {number} (Placeholder)",
            placeholder=True,
        )

    # Bookkeeping

    def _build_record(
        self,
        attempt: ConversionAttempt,
        result: StageResult,
        metadata: Optional[PresentationMetadata],
    ) -> PresentationRecord:
        metadata = metadata or PresentationMetadata()
        return PresentationRecord(
            id=attempt.presentation_id,
            original_name=attempt.original_name,
            title=metadata.title or Path(attempt.original_name).stem,
            summary=metadata.summary,
            author=metadata.author or "Anonymous",
            author_id=metadata.author_id or str(uuid.uuid4()),
            topics=list(metadata.topics),
            slides=list(attempt.slides),
            slide_texts=list(attempt.slide_texts),
            placeholder_slides=sorted(attempt.placeholder_slides),
            status=result.status or ConversionStatus.SUCCESS,
            message=result.message,
        )

    def _discard_output(self, attempt: ConversionAttempt) -> None:
        try:
            if attempt.output_dir.exists():
                shutil.rmtree(attempt.output_dir)
        except OSError as e:
            logger.error(f"Error removing output directory {attempt.output_dir}: {e}")

    def _remove_upload(self, input_file: Path) -> None:
        try:
            input_file.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error deleting uploaded file: {e}")
