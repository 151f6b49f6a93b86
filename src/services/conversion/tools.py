"""
External tool contracts used by the conversion pipeline.

Each method wraps one tool invocation and knows which file the tool is
expected to produce. A call only counts as successful when the tool exits
cleanly AND the expected output exists.
"""
import logging
import os
import re
from pathlib import Path
from typing import Optional

from src.core.config import Settings, get_settings
from src.services.toolchain.runner import run_command

logger = logging.getLogger(__name__)

PAGES_PATTERN = re.compile(r"^Pages:\s+(\d+)", re.MULTILINE)
IMAGE_SUFFIXES = {".jpg", ".jpeg"}


def natural_sort_key(path: Path) -> tuple:
    """Order names with numbers numerically: slide2 before slide10."""
    parts = [
        int(token) if token.isdigit() else token.lower()
        for token in re.split(r"(\d+)", path.name)
    ]
    return (parts, path.name)


class ConversionTools:
    """LibreOffice and poppler invocations with explicit output contracts."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def _converter_command(self, profile_dir: Path, convert_to: str, out_dir: Path, input_file: Path) -> list[str]:
        # A private user profile per run lets several conversions run side by side
        return [
            self._settings.converter_binary,
            f"-env:UserInstallation={profile_dir.resolve().as_uri()}",
            "--headless",
            "--invisible",
            "--convert-to", convert_to,
            "--outdir", str(out_dir),
            str(input_file),
        ]

    def _converter_env(self, profile_dir: Path) -> dict[str, str]:
        return {**os.environ, "HOME": str(profile_dir)}  # LibreOffice needs a writable HOME

    def convert_to_pdf(self, input_file: Path, out_dir: Path, profile_dir: Path) -> Optional[Path]:
        """
        Convert ``input_file`` into ``out_dir/<stem>.pdf``.

        Returns the PDF path, or None if the converter failed or did not
        produce the expected file.
        """
        out_dir.mkdir(parents=True, exist_ok=True)
        profile_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Converting {input_file.name} to PDF")

        result = run_command(
            self._converter_command(profile_dir, "pdf", out_dir, input_file),
            timeout=self._settings.conversion_timeout,
            env=self._converter_env(profile_dir),
        )
        if not result.ok:
            logger.warning(f"PDF conversion failed: {result.describe()}")
            return None

        expected = out_dir / f"{input_file.stem}.pdf"
        if not expected.is_file():
            logger.warning(f"Converter exited cleanly but {expected.name} was not produced")
            return None

        logger.info(f"PDF created: {expected}")
        return expected

    def page_count(self, pdf_path: Path) -> int:
        """Number of pages reported by pdfinfo, 0 if it cannot be determined."""
        result = run_command(
            [self._settings.pdfinfo_binary, str(pdf_path)],
            timeout=self._settings.rasterize_timeout,
        )
        if not result.ok:
            return 0

        match = PAGES_PATTERN.search(result.stdout)
        return int(match.group(1)) if match else 0

    def rasterize_page(self, pdf_path: Path, page_number: int, output_prefix: Path) -> Optional[Path]:
        """
        Render one PDF page to ``<output_prefix>.jpg``.

        Returns the image path, or None when pdftoppm failed or wrote nothing.
        """
        output_prefix.parent.mkdir(parents=True, exist_ok=True)
        result = run_command(
            [
                self._settings.pdftoppm_binary,
                "-jpeg",
                "-r", str(self._settings.slide_dpi),
                "-f", str(page_number),
                "-l", str(page_number),
                "-singlefile",
                str(pdf_path),
                str(output_prefix),
            ],
            timeout=self._settings.rasterize_timeout,
        )
        if not result.ok:
            return None

        expected = output_prefix.with_name(f"{output_prefix.name}.jpg")
        if not expected.is_file() or expected.stat().st_size == 0:
            logger.warning(f"pdftoppm produced no image for page {page_number}")
            return None
        return expected

    def page_text(self, pdf_path: Path, page_number: int) -> Optional[str]:
        """Plain text of one PDF page, or None if pdftotext failed."""
        result = run_command(
            [
                self._settings.pdftotext_binary,
                "-f", str(page_number),
                "-l", str(page_number),
                str(pdf_path),
                "-",
            ],
            timeout=self._settings.rasterize_timeout,
        )
        if not result.ok:
            return None
        return result.stdout.strip()

    def convert_to_images(self, input_file: Path, out_dir: Path, profile_dir: Path) -> list[Path]:
        """
        Ask the converter to export ``input_file`` straight to JPEG.

        LibreOffice chooses the output names itself, so the images are taken
        from ``out_dir``, which holds nothing else, in natural name order.
        """
        out_dir.mkdir(parents=True, exist_ok=True)
        profile_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Converting {input_file.name} directly to JPEG")

        result = run_command(
            self._converter_command(profile_dir, "jpg:draw_jpg_Export", out_dir, input_file),
            timeout=self._settings.conversion_timeout,
            env=self._converter_env(profile_dir),
        )
        if not result.ok:
            logger.warning(f"Direct image conversion failed: {result.describe()}")
            return []

        images = sorted(
            (p for p in out_dir.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES),
            key=natural_sort_key,
        )
        logger.info(f"Found {len(images)} image files")
        return images
