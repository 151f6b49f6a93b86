"""
Pytest configuration and fixtures.
"""
import pytest
from pathlib import Path

from src.core import Settings
from src.core.debug import reset_conversion_counts
from src.models.presentation import PresentationRecord
from src.services.registry import PresentationRegistry


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary data directory."""
    settings = Settings(
        data_dir=tmp_path / "data",
        toolchain_auto_install=False,
        rasterize_workers=2,
    )
    settings.ensure_directories()
    return settings


@pytest.fixture
def registry(settings):
    """Empty registry writing under the temporary slides directory."""
    return PresentationRegistry(settings.slides_dir)


@pytest.fixture(autouse=True)
def clean_conversion_counts():
    """Conversion counters are process-global; start every test from zero."""
    reset_conversion_counts()
    yield
    reset_conversion_counts()


@pytest.fixture
def clean_environment(monkeypatch):
    """Provide a clean environment for tests."""
    env_vars = [
        "APP_NAME",
        "PORT",
        "DATA_DIR",
        "CONVERTER_BINARY",
        "SLIDE_DPI",
        "DEBUG",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


def make_record(presentation_id: str = "pres-1", slide_count: int = 3, **kwargs) -> PresentationRecord:
    """Build a record whose slide URLs follow the served layout."""
    slides = [f"/static/slides/{presentation_id}/slide-{n}.jpg" for n in range(1, slide_count + 1)]
    defaults = dict(
        id=presentation_id,
        original_name="deck.pptx",
        title="Deck",
        slides=slides,
        slide_texts=[f"Slide {n}" for n in range(1, slide_count + 1)],
    )
    defaults.update(kwargs)
    return PresentationRecord(**defaults)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def upload_file(tmp_path) -> Path:
    """A staged upload as the route would leave it on disk."""
    path = tmp_path / "upload-deck.pptx"
    path.write_bytes(b"PK\x03\x04 fake pptx")
    return path
