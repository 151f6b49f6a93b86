"""
External Tool Probe

Checks whether the LibreOffice/poppler toolchain is present and can attempt
a best-effort installation through apt-get.
"""
import logging
import shutil
import threading
from typing import Optional

from src.core.config import Settings, get_settings

from .runner import run_command

logger = logging.getLogger(__name__)


class ToolchainProbe:
    """Presence, version and installation of the conversion toolchain."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._install_lock = threading.Lock()

    @property
    def converter_binary(self) -> str:
        return self._settings.converter_binary

    def is_available(self) -> bool:
        """Whether the converter is on PATH, regardless of its version."""
        return shutil.which(self._settings.converter_binary) is not None

    def version(self) -> Optional[str]:
        """First line of ``<converter> --version``, or None if unavailable."""
        if not self.is_available():
            return None
        result = run_command(
            [self._settings.converter_binary, "--version"],
            timeout=30,
        )
        if not result.ok:
            return None
        lines = result.stdout.strip().splitlines()
        return lines[0].strip() if lines else None

    def install(self) -> bool:
        """
        Try to install the toolchain with apt-get.

        Failure is never raised; callers treat a False return as "still
        unavailable". Concurrent callers share one installation attempt.
        """
        if not self._settings.toolchain_auto_install:
            logger.info("Toolchain auto-install is disabled")
            return self.is_available()

        with self._install_lock:
            # Another request may have finished installing while we waited
            if self.is_available():
                return True

            packages = list(self._settings.toolchain_packages)
            logger.info(f"Attempting to install {', '.join(packages)}...")
            timeout = self._settings.install_timeout

            update = run_command(["apt-get", "update"], timeout=timeout)
            if not update.ok:
                logger.error(f"apt-get update failed: {update.describe()}")
                return False

            install = run_command(["apt-get", "install", "-y", *packages], timeout=timeout)
            if not install.ok:
                logger.error(f"Toolchain installation failed: {install.describe()}")
                return False

            available = self.is_available()
            if available:
                logger.info("✅ Toolchain installation completed")
            else:
                logger.error(f"{self._settings.converter_binary} still not available after installation")
            return available

    def status(self) -> dict:
        """Resolved paths of every external tool plus the converter version."""
        s = self._settings
        tools = {
            "converter": s.converter_binary,
            "pdfinfo": s.pdfinfo_binary,
            "pdftoppm": s.pdftoppm_binary,
            "pdftotext": s.pdftotext_binary,
        }
        return {
            "available": self.is_available(),
            "version": self.version(),
            "tools": {
                name: {"binary": binary, "path": shutil.which(binary)}
                for name, binary in tools.items()
            },
        }
