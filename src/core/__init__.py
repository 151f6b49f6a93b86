"""Core configuration module for DeckRender."""

from .debug import (
    init_debug_mode,
    is_debug_mode,
    get_debug_status,
    record_conversion,
    get_conversion_counts,
)
from .config import Settings, get_settings
from .errors import DeckRenderError
from .logging import setup_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "DeckRenderError",
    "setup_logging",
    "get_logger",
    "init_debug_mode",
    "is_debug_mode",
    "get_debug_status",
    "record_conversion",
    "get_conversion_counts",
]
