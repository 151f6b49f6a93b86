"""Transient state for a single conversion run."""
import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from src.models.presentation import ConversionStatus

logger = logging.getLogger(__name__)


class StageKind(str, Enum):
    SUCCESS = "success"
    FALLTHROUGH = "fallthrough"
    FATAL = "fatal"


@dataclass(frozen=True)
class StageResult:
    """
    Tagged result returned by every conversion stage.

    ``next_stage`` lets a fallthrough skip ahead to a named stage instead of
    continuing with the one that follows.
    """

    kind: StageKind
    status: Optional[ConversionStatus] = None
    message: Optional[str] = None
    reason: str = ""
    next_stage: Optional[str] = None

    @classmethod
    def success(cls, status: ConversionStatus, message: Optional[str] = None) -> "StageResult":
        return cls(kind=StageKind.SUCCESS, status=status, message=message)

    @classmethod
    def fallthrough(cls, reason: str, next_stage: Optional[str] = None) -> "StageResult":
        return cls(kind=StageKind.FALLTHROUGH, reason=reason, next_stage=next_stage)

    @classmethod
    def fatal(cls, reason: str) -> "StageResult":
        return cls(kind=StageKind.FATAL, reason=reason)


@dataclass
class ConversionAttempt:
    """Working directories and accumulated slides for one conversion."""

    presentation_id: str
    input_file: Path
    original_name: str
    output_dir: Path
    work_dir: Path
    slides: list[str] = field(default_factory=list)
    slide_texts: list[str] = field(default_factory=list)
    placeholder_slides: list[int] = field(default_factory=list)
    placeholder_count: Optional[int] = None
    placeholder_status: ConversionStatus = ConversionStatus.FALLBACK_PLACEHOLDERS
    message: Optional[str] = None

    @property
    def profile_dir(self) -> Path:
        return self.work_dir / "profile"

    def slide_path(self, slide_number: int) -> Path:
        return self.output_dir / f"slide-{slide_number}.jpg"

    def add_slide(self, url: str, text: str, placeholder: bool = False) -> int:
        """Append the next slide and return its 1-indexed number."""
        self.slides.append(url)
        self.slide_texts.append(text)
        number = len(self.slides)
        if placeholder:
            self.placeholder_slides.append(number)
        return number

    def reset(self) -> None:
        """Forget accumulated slides and delete any slide files already written."""
        self.slides.clear()
        self.slide_texts.clear()
        self.placeholder_slides.clear()
        for path in self.output_dir.glob("slide-*.jpg"):
            try:
                path.unlink()
            except OSError as e:
                logger.error(f"Could not remove stale slide {path}: {e}")

    def remove_work_dir(self) -> None:
        try:
            if self.work_dir.exists():
                shutil.rmtree(self.work_dir)
        except OSError as e:
            logger.error(f"Error cleaning up work directory {self.work_dir}: {e}")
