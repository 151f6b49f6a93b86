"""Debug mode and process-local conversion counters."""

import os
import logging
import threading
from collections import Counter

logger = logging.getLogger(__name__)
_debug_mode_enabled = False
_conversion_counts: Counter = Counter()
_counts_lock = threading.Lock()


def init_debug_mode() -> bool:
    global _debug_mode_enabled
    _debug_mode_enabled = os.environ.get("DEBUG", "").lower() in ("true", "1", "yes", "on")

    if _debug_mode_enabled:
        logger.info("🐛 Debug mode \033[92mENABLED\033[0m")

    return _debug_mode_enabled


def is_debug_mode() -> bool:
    return _debug_mode_enabled


def record_conversion(status: str) -> int:
    """Count a finished conversion by its status."""
    with _counts_lock:
        _conversion_counts[status] += 1
        return _conversion_counts[status]


def get_conversion_counts() -> dict[str, int]:
    with _counts_lock:
        return dict(_conversion_counts)


def reset_conversion_counts() -> None:
    with _counts_lock:
        _conversion_counts.clear()


def get_debug_status() -> dict:
    counts = get_conversion_counts()
    return {
        "debug_mode": _debug_mode_enabled,
        "conversion_count": sum(counts.values()),
        "conversions": counts,
    }
