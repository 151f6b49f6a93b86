"""
DeckRender - Main Application Entry Point

Accepts uploaded presentations, renders every slide to an image with
LibreOffice and poppler, and serves the images plus metadata over HTTP.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from src import __version__
from src.core import (
    Settings,
    get_settings,
    get_conversion_counts,
    get_debug_status,
    init_debug_mode,
    is_debug_mode,
    setup_logging,
)
from src.api.routes import presentations, slides
from src.services.conversion import ConversionService
from src.services.registry import PresentationRegistry
from src.services.toolchain import ToolchainProbe

init_debug_mode()

logger = logging.getLogger(__name__)


def _install_in_background(app: FastAPI, probe: ToolchainProbe) -> None:
    """Start a toolchain install without holding up startup."""
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, probe.install)

    def _report(fut: asyncio.Future) -> None:
        if fut.cancelled():
            return
        if fut.exception() is not None:
            logger.error(f"Failed to automatically install LibreOffice: {fut.exception()}")
        elif fut.result():
            logger.info("✅ LibreOffice installed during startup")
        else:
            logger.error("Failed to automatically install LibreOffice")

    future.add_done_callback(_report)
    app.state.install_task = future


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    settings: Settings = app.state.settings
    probe: ToolchainProbe = app.state.probe

    # Startup
    logger.info(f"🚀 Starting {settings.app_name}...")
    settings.ensure_directories()

    if is_debug_mode():
        logger.info("🐛 Debug mode is \033[92mACTIVE\033[0m")

    logger.info(f"📁 Data directory: \033[93m{settings.data_dir}\033[0m")
    logger.info(f"🖼️  Slides directory: \033[93m{settings.slides_dir}\033[0m")

    if probe.is_available():
        logger.info(f"✅ LibreOffice found: \033[96m{probe.version() or settings.converter_binary}\033[0m")
    else:
        logger.warning("⚠️  LibreOffice is not installed. Conversions will produce placeholder slides")
        if settings.toolchain_auto_install:
            logger.info("Attempting to install LibreOffice and PDF utilities in the background...")
            _install_in_background(app, probe)

    yield

    # Shutdown
    logger.info(f"👋 Shutting down {settings.app_name}...")
    logger.warning(f"Discarding {len(app.state.registry)} in-memory presentations")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    settings.ensure_directories()

    app = FastAPI(
        title=settings.app_name,
        description="Converts uploaded presentations into per-slide images",
        version=__version__,
        lifespan=lifespan,
    )

    # Services are created once per app and shared by every request
    registry = PresentationRegistry(settings.slides_dir)
    probe = ToolchainProbe(settings)
    app.state.settings = settings
    app.state.registry = registry
    app.state.probe = probe
    app.state.conversion_service = ConversionService(registry, probe=probe, settings=settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(presentations.router, tags=["presentations"])
    app.include_router(slides.router, tags=["slides"])

    # Serve rendered slide images
    app.mount(
        settings.slides_url_prefix,
        StaticFiles(directory=settings.slides_dir),
        name="slides",
    )

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        """Liveness banner."""
        return "PowerPoint Conversion Server is running"

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        debug_status = get_debug_status()

        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "converter_available": app.state.probe.is_available(),
            "presentations": len(app.state.registry),
            "debug_mode": debug_status["debug_mode"],
        }

    @app.get("/status")
    async def status():
        """Registry size, toolchain status and conversion counters."""
        return {
            "presentation_count": len(app.state.registry),
            "toolchain": await run_in_threadpool(app.state.probe.status),
            "conversions": get_conversion_counts(),
            "persistent": False,
            "version": __version__,
        }

    return app


# Configure logging
setup_logging(logging.DEBUG if is_debug_mode() else logging.INFO)

# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
