"""Presentation-related Pydantic models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class ConversionStatus(str, Enum):
    """Outcome reported to clients for a finished conversion."""

    SUCCESS = "success"
    PLACEHOLDERS_CREATED = "placeholders_created"
    FALLBACK_PLACEHOLDERS = "fallback_placeholders"


class CamelModel(BaseModel):
    """Base model that serializes to camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PresentationMetadata(CamelModel):
    """Descriptive fields supplied alongside an upload."""

    title: str = Field(default="", description="Presentation title")
    summary: str = Field(default="", description="Short summary")
    author: str = Field(default="Anonymous", description="Author display name")
    author_id: str = Field(default="", description="Author identifier")
    topics: list[str] = Field(default_factory=list, description="Free-form topic tags")


class PresentationRecord(CamelModel):
    """
    A converted presentation and its slide artifacts.

    Records are immutable once built; the slide count and placeholder flag
    are derived from the slide lists so they cannot drift apart.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., description="Unique presentation identifier")
    original_name: str = Field(..., description="Uploaded filename")
    title: str = Field(default="", description="Presentation title")
    summary: str = Field(default="", description="Short summary")
    author: str = Field(default="Anonymous", description="Author display name")
    author_id: str = Field(default="", description="Author identifier")
    topics: list[str] = Field(default_factory=list, description="Topic tags")
    slides: list[str] = Field(default_factory=list, description="Slide image URLs, slide 1 first")
    slide_texts: list[str] = Field(default_factory=list, description="Text per slide")
    placeholder_slides: list[int] = Field(
        default_factory=list,
        description="1-indexed numbers of slides that are synthetic placeholders"
    )
    status: ConversionStatus = Field(default=ConversionStatus.SUCCESS)
    message: Optional[str] = Field(default=None, description="Explanation for degraded output")
    converted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field(alias="slideCount")
    @property
    def slide_count(self) -> int:
        return len(self.slides)

    @computed_field(alias="isPlaceholder")
    @property
    def is_placeholder(self) -> bool:
        return bool(self.placeholder_slides)

    def slide_url(self, slide_number: int) -> Optional[str]:
        """Return the URL for a 1-indexed slide, or None if out of range."""
        if 1 <= slide_number <= self.slide_count:
            return self.slides[slide_number - 1]
        return None

    def to_summary(self) -> "PresentationSummary":
        return PresentationSummary(
            id=self.id,
            original_name=self.original_name,
            title=self.title,
            author=self.author,
            topics=list(self.topics),
            slide_count=self.slide_count,
            converted_at=self.converted_at,
            is_placeholder=self.is_placeholder,
        )

    def to_response(self) -> dict:
        """Body returned by the upload endpoints."""
        body = {
            "id": self.id,
            "originalName": self.original_name,
            "title": self.title,
            "slideCount": self.slide_count,
            "slides": list(self.slides),
            "slideTexts": list(self.slide_texts),
            "topics": list(self.topics),
            "status": self.status.value,
        }
        if self.message:
            body["message"] = self.message
        return body


class PresentationSummary(CamelModel):
    """Listing entry for a presentation, without the slide list."""

    id: str
    original_name: str
    title: str = ""
    author: str = "Anonymous"
    topics: list[str] = Field(default_factory=list)
    slide_count: int = Field(..., ge=0)
    converted_at: datetime
    is_placeholder: bool = False
