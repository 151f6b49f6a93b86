"""
Unit tests for placeholder slide images.
"""
from PIL import Image

from src.services.conversion.placeholders import (
    EVEN_COLORS,
    ODD_COLORS,
    PLACEHOLDER_SIZE,
    placeholder_colors,
    placeholder_text,
    render_placeholder,
)


class TestPlaceholderText:
    """Tests for the text drawn on placeholders."""

    def test_even_slide(self):
        """Test headline for even slides."""
        text = placeholder_text(2, "deck.pptx")

        assert text.startswith("SLIDE 2 - EVEN NUMBER")
        assert "Title: deck.pptx" in text

    def test_odd_slide(self):
        """Test headline for odd slides."""
        text = placeholder_text(3, "deck.pptx")

        assert text.startswith("SLIDE 3 - ODD NUMBER")
        assert "Title: deck.pptx" in text

    def test_reason_is_appended(self):
        """Test that a reason line is added last."""
        text = placeholder_text(1, "deck.pptx", reason="LibreOffice is not installed on the server.")

        assert text.endswith("LibreOffice is not installed on the server.")

    def test_colors_alternate(self):
        """Test that even and odd slides use different colours."""
        assert placeholder_colors(2) == EVEN_COLORS
        assert placeholder_colors(5) == ODD_COLORS
        assert EVEN_COLORS != ODD_COLORS


class TestRenderPlaceholder:
    """Tests for the rendered JPEG files."""

    def test_writes_jpeg(self, tmp_path):
        """Test that a JPEG of the expected size is written."""
        path = render_placeholder(tmp_path / "p" / "slide-1.jpg", 1, "deck.pptx")

        assert path.is_file()
        with Image.open(path) as img:
            assert img.format == "JPEG"
            assert img.size == PLACEHOLDER_SIZE

    def test_comment_carries_slide_text(self, tmp_path):
        """Test that the JPEG comment holds the slide text."""
        path = render_placeholder(tmp_path / "slide-4.jpg", 4, "quarterly.pptx")

        with Image.open(path) as img:
            comment = img.info.get("comment", b"")
        if isinstance(comment, bytes):
            comment = comment.decode("utf-8")

        assert "SLIDE 4 - EVEN NUMBER" in comment
        assert "quarterly.pptx" in comment

    def test_adjacent_slides_differ(self, tmp_path):
        """Test that neighbouring placeholders are not identical."""
        first = render_placeholder(tmp_path / "slide-1.jpg", 1, "deck.pptx")
        second = render_placeholder(tmp_path / "slide-2.jpg", 2, "deck.pptx")

        assert first.read_bytes() != second.read_bytes()

    def test_same_parity_slides_differ(self, tmp_path):
        """Test that slides of the same parity still differ."""
        first = render_placeholder(tmp_path / "slide-1.jpg", 1, "deck.pptx")
        third = render_placeholder(tmp_path / "slide-3.jpg", 3, "deck.pptx")

        assert first.read_bytes() != third.read_bytes()
