"""
Placeholder slide images.

Placeholders stand in for slides that could not be rendered. Even and odd
slides use different colours and headlines, and every placeholder carries
its slide number and the source filename, both drawn on the image and stored
in the JPEG comment segment.
"""
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = (1280, 720)

# (background, foreground)
EVEN_COLORS = ((31, 58, 104), (255, 255, 255))
ODD_COLORS = ((236, 239, 244), (45, 45, 45))

FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "DejaVuSans.ttf",
)


def placeholder_text(slide_number: int, title: str, reason: Optional[str] = None) -> str:
    """Text rendered onto the placeholder for ``slide_number``."""
    if slide_number % 2 == 0:
        lines = [
            f"SLIDE {slide_number} - EVEN NUMBER",
            "",
            "This is an even-numbered slide placeholder.",
            f"Title: {title}",
            "",
            "Slide content would appear here.",
        ]
    else:
        lines = [
            f"SLIDE {slide_number} - ODD NUMBER",
            "",
            "This is an odd-numbered slide placeholder.",
            f"Title: {title}",
            "",
            "Different slide content would appear here.",
        ]
    if reason:
        lines.extend(["", reason])
    return "\n".join(lines)


def placeholder_colors(slide_number: int) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
    return EVEN_COLORS if slide_number % 2 == 0 else ODD_COLORS


def _load_font(size: int):
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default()


def render_placeholder(
    output_path: Path,
    slide_number: int,
    title: str,
    reason: Optional[str] = None,
) -> Path:
    """
    Write a placeholder JPEG for ``slide_number`` to ``output_path``.

    Args:
        output_path: Destination file, normally ``.../slide-<n>.jpg``
        slide_number: 1-indexed slide number
        title: Source presentation name shown on the slide
        reason: Optional extra line explaining why the slide is a placeholder

    Returns:
        The path that was written
    """
    text = placeholder_text(slide_number, title, reason)
    background, foreground = placeholder_colors(slide_number)
    width, height = PLACEHOLDER_SIZE

    img = Image.new("RGB", PLACEHOLDER_SIZE, color=background)
    draw = ImageDraw.Draw(img)
    font = _load_font(36)

    bbox = draw.multiline_textbbox((0, 0), text, font=font, align="center")
    text_width = bbox[2] - bbox[0]
    text_height = bbox[3] - bbox[1]
    x = (width - text_width) // 2
    y = (height - text_height) // 2
    draw.multiline_text((x, y), text, fill=foreground, font=font, align="center")

    # Frame the odd slides so the two variants differ in layout as well
    if slide_number % 2 == 1:
        draw.rectangle([20, 20, width - 21, height - 21], outline=foreground, width=6)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(output_path, format="JPEG", quality=85, comment=text.encode("utf-8"))
    logger.debug(f"Created placeholder for slide {slide_number} at {output_path}")
    return output_path
