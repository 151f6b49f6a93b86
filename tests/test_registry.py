"""
Unit tests for the presentation registry.
"""
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from src.services.registry import (
    DuplicatePresentationError,
    PresentationDeleteError,
    PresentationRegistry,
)


class TestRegistryLookup:
    """Tests for inserting and reading records."""

    def test_put_and_get(self, registry, record_factory):
        """Test storing and reading a record."""
        record = record_factory("abc")
        registry.put(record)

        assert registry.get("abc") is record
        assert "abc" in registry
        assert len(registry) == 1

    def test_get_unknown(self, registry):
        """Test reading an unknown id."""
        assert registry.get("missing") is None

    def test_duplicate_id_rejected(self, registry, record_factory):
        """Test that a live id cannot be registered twice."""
        registry.put(record_factory("abc"))

        with pytest.raises(DuplicatePresentationError):
            registry.put(record_factory("abc"))

    def test_list_is_ordered_by_conversion_time(self, registry, record_factory):
        """Test summaries are ordered oldest first."""
        now = datetime.now(timezone.utc)
        registry.put(record_factory("newer", converted_at=now))
        registry.put(record_factory("older", converted_at=now - timedelta(minutes=5)))

        summaries = registry.list_presentations()

        assert [s.id for s in summaries] == ["older", "newer"]

    def test_concurrent_puts(self, registry, record_factory):
        """Test inserts from many threads."""
        def worker(n):
            registry.put(record_factory(f"p-{n}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 20


class TestGetSlide:
    """Tests for slide lookup."""

    @pytest.fixture
    def populated(self, registry, record_factory):
        registry.put(record_factory("p", slide_count=10))
        return registry

    def test_valid_slide(self, populated):
        """Test lookup by int and by digit string."""
        assert populated.get_slide("p", 1) == "/static/slides/p/slide-1.jpg"
        assert populated.get_slide("p", "3") == "/static/slides/p/slide-3.jpg"
        assert populated.get_slide("p", "10") == "/static/slides/p/slide-10.jpg"

    @pytest.mark.parametrize(
        "slide_number",
        [0, 11, -1, "0", "11", "abc", "", None, True, "1_0", "+2", " 3 ", "٣", "2.0", "-1"],
    )
    def test_invalid_slide(self, populated, slide_number):
        """Test that out-of-range and non-numeric slide numbers are not found."""
        assert populated.get_slide("p", slide_number) is None

    def test_unknown_presentation(self, populated):
        """Test lookup on an unknown presentation."""
        assert populated.get_slide("other", 1) is None


class TestDelete:
    """Tests for deleting records and their files."""

    def test_delete_removes_record_and_files(self, registry, record_factory):
        """Test delete removes both record and slide directory."""
        registry.put(record_factory("p"))
        slide_dir = registry.slide_dir_for("p")
        slide_dir.mkdir(parents=True)
        (slide_dir / "slide-1.jpg").write_bytes(b"jpeg")

        assert registry.delete("p") is True
        assert registry.get("p") is None
        assert not slide_dir.exists()

    def test_delete_without_files(self, registry, record_factory):
        """Test delete when no slide directory exists."""
        registry.put(record_factory("p"))

        assert registry.delete("p") is True

    def test_delete_unknown(self, registry):
        """Test deleting an unknown id."""
        assert registry.delete("missing") is False

    def test_failed_file_removal_keeps_record(self, registry, record_factory):
        """Test the record survives when its files cannot be removed."""
        registry.put(record_factory("p"))
        registry.slide_dir_for("p").mkdir(parents=True)

        with patch("src.services.registry.service.shutil.rmtree", side_effect=OSError("busy")):
            with pytest.raises(PresentationDeleteError) as exc_info:
                registry.delete("p")

        assert exc_info.value.presentation_id == "p"
        assert registry.get("p") is not None


class TestTopics:
    """Tests for topic queries."""

    @pytest.fixture
    def tagged(self, registry, record_factory):
        registry.put(record_factory("a", topics=["Machine Learning", "Sales"]))
        registry.put(record_factory("b", topics=["sales"]))
        registry.put(record_factory("c", topics=[]))
        return registry

    def test_by_topic_is_case_insensitive_substring(self, tagged):
        """Test topic matching ignores case and matches substrings."""
        ids = sorted(r.id for r in tagged.by_topic("SALE"))

        assert ids == ["a", "b"]

    def test_by_topic_blank(self, tagged):
        """Test a blank topic matches nothing."""
        assert tagged.by_topic("   ") == []

    def test_topic_counts(self, tagged):
        """Test topic counts ordered by frequency."""
        assert tagged.topics() == [
            {"name": "sales", "count": 2},
            {"name": "machine learning", "count": 1},
        ]

    def test_empty_registry_topics(self, tmp_path):
        """Test topics of an empty registry."""
        assert PresentationRegistry(tmp_path).topics() == []
