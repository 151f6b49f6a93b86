"""External conversion toolchain: probing, installation and command execution."""

from .runner import CommandResult, run_command
from .service import ToolchainProbe

__all__ = [
    "CommandResult",
    "run_command",
    "ToolchainProbe",
]
