"""
Unit tests for Pydantic models.
"""
import pytest
from pydantic import ValidationError

from src.models.presentation import (
    ConversionStatus,
    PresentationMetadata,
    PresentationRecord,
)


class TestPresentationMetadata:
    """Tests for PresentationMetadata model."""

    def test_default_values(self):
        """Test default values are set correctly."""
        metadata = PresentationMetadata()

        assert metadata.title == ""
        assert metadata.author == "Anonymous"
        assert metadata.topics == []

    def test_accepts_camel_case(self):
        """Test that camelCase input is accepted."""
        metadata = PresentationMetadata.model_validate({"authorId": "u-1", "title": "Q3"})

        assert metadata.author_id == "u-1"
        assert metadata.title == "Q3"


class TestPresentationRecord:
    """Tests for PresentationRecord model."""

    def test_derived_fields(self, record_factory):
        """Test slide count and placeholder flag are derived from the lists."""
        record = record_factory(slide_count=4, placeholder_slides=[3])

        assert record.slide_count == 4
        assert record.is_placeholder is True

    def test_no_placeholders(self, record_factory):
        """Test a fully rendered record."""
        record = record_factory(slide_count=2)

        assert record.is_placeholder is False
        assert record.status is ConversionStatus.SUCCESS

    def test_slide_url_bounds(self, record_factory):
        """Test slide URL lookup at and beyond the edges."""
        record = record_factory(presentation_id="p", slide_count=3)

        assert record.slide_url(1) == "/static/slides/p/slide-1.jpg"
        assert record.slide_url(3) == "/static/slides/p/slide-3.jpg"
        assert record.slide_url(0) is None
        assert record.slide_url(4) is None

    def test_record_is_frozen(self, record_factory):
        """Test that records cannot be modified."""
        record = record_factory()

        with pytest.raises(ValidationError):
            record.title = "Changed"

    def test_json_uses_camel_case(self, record_factory):
        """Test JSON serialization uses camelCase keys."""
        record = record_factory(slide_count=1, placeholder_slides=[1])
        data = record.model_dump(by_alias=True, mode="json")

        assert data["originalName"] == "deck.pptx"
        assert data["slideCount"] == 1
        assert data["isPlaceholder"] is True
        assert data["slideTexts"] == ["Slide 1"]
        assert data["status"] == "success"

    def test_response_body(self, record_factory):
        """Test the upload response body."""
        record = record_factory(
            slide_count=5,
            status=ConversionStatus.PLACEHOLDERS_CREATED,
            message="LibreOffice is not available.",
            topics=["sales"],
        )
        body = record.to_response()

        assert body["slideCount"] == 5
        assert len(body["slides"]) == 5
        assert body["status"] == "placeholders_created"
        assert body["message"] == "LibreOffice is not available."
        assert body["topics"] == ["sales"]

    def test_response_omits_empty_message(self, record_factory):
        """Test that no message key is sent for clean conversions."""
        body = record_factory().to_response()

        assert "message" not in body

    def test_summary(self, record_factory):
        """Test summary conversion."""
        record = record_factory(slide_count=7, placeholder_slides=[2], author="Ada")
        summary = record.to_summary()

        assert summary.id == record.id
        assert summary.slide_count == 7
        assert summary.author == "Ada"
        assert summary.is_placeholder is True
