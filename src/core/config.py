"""
Application settings using Pydantic for validation and type safety.
All values can be overridden with environment variables or a .env file.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration with validation."""

    # Application
    app_name: str = Field(default="DeckRender", description="Application name")
    debug: bool = Field(default=False, description="Debug mode flag")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, ge=1, le=65535, description="Server port")

    # Paths (relative to workspace root)
    data_dir: Path = Field(default=Path("data"), description="Data directory")

    @property
    def uploads_dir(self) -> Path:
        """Get the directory where uploaded files are staged."""
        return self.data_dir / "uploads"

    @property
    def slides_dir(self) -> Path:
        """Get the root directory for rendered slide images."""
        return self.data_dir / "slides"

    @property
    def work_dir(self) -> Path:
        """Get the scratch directory used while a conversion is running."""
        return self.data_dir / "work"

    slides_url_prefix: str = Field(
        default="/static/slides",
        description="URL prefix under which slide images are served"
    )

    # Upload Configuration
    max_upload_size: int = Field(
        default=50 * 1024 * 1024,
        ge=1,
        description="Maximum accepted upload size in bytes"
    )
    allowed_extensions: list[str] = Field(
        default=[".ppt", ".pptx", ".key"],
        description="Accepted presentation file extensions"
    )

    # External toolchain
    converter_binary: str = Field(
        default="libreoffice",
        description="Document converter executable (LibreOffice)"
    )
    pdfinfo_binary: str = Field(default="pdfinfo", description="poppler pdfinfo executable")
    pdftoppm_binary: str = Field(default="pdftoppm", description="poppler pdftoppm executable")
    pdftotext_binary: str = Field(default="pdftotext", description="poppler pdftotext executable")
    toolchain_auto_install: bool = Field(
        default=True,
        description="Attempt a package install when the converter is missing"
    )
    toolchain_packages: list[str] = Field(
        default=["libreoffice", "poppler-utils"],
        description="Packages passed to apt-get when installing the toolchain"
    )

    # Timeouts (seconds)
    conversion_timeout: int = Field(
        default=180,
        ge=1,
        le=3600,
        description="Timeout for a single LibreOffice invocation"
    )
    rasterize_timeout: int = Field(
        default=120,
        ge=1,
        le=3600,
        description="Timeout for a single poppler invocation"
    )
    install_timeout: int = Field(
        default=900,
        ge=1,
        description="Timeout for each package installation step"
    )

    # Rendering
    slide_dpi: int = Field(default=150, ge=36, le=600, description="Rasterization resolution")
    rasterize_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Parallel page rasterizations per conversion"
    )
    extract_slide_text: bool = Field(
        default=True,
        description="Extract per-slide text with pdftotext"
    )
    missing_toolchain_placeholder_count: int = Field(
        default=5,
        ge=1,
        description="Placeholder slides created when the converter is unavailable"
    )
    fallback_placeholder_count: int = Field(
        default=23,
        ge=1,
        description="Estimated slide count used when conversion produced nothing usable"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("data_dir")
    @classmethod
    def validate_data_dir(cls, v: Path) -> Path:
        """Ensure data directory path is valid."""
        return Path(v)

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure they start with a dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @field_validator("slides_url_prefix")
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:
        """Slide URLs are absolute paths without a trailing slash."""
        return "/" + v.strip("/")

    def slide_url(self, presentation_id: str, slide_number: int) -> str:
        """Public URL of a rendered slide image."""
        return f"{self.slides_url_prefix}/{presentation_id}/slide-{slide_number}.jpg"

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        for dir_path in [
            self.data_dir,
            self.uploads_dir,
            self.slides_dir,
            self.work_dir,
        ]:
            dir_path.mkdir(parents=True, exist_ok=True)

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
