"""Subprocess execution with captured output and a bounded timeout."""
import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external tool invocation."""

    args: tuple[str, ...]
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.error is None

    def describe(self) -> str:
        if self.timed_out:
            return "timed out"
        if self.error:
            return self.error
        detail = self.stderr.strip() or self.stdout.strip()
        return f"exit code {self.returncode}" + (f": {detail[:500]}" if detail else "")


def run_command(
    args: Sequence[str],
    timeout: float,
    env: Optional[dict[str, str]] = None,
) -> CommandResult:
    """
    Run an external command and capture its output.

    Never raises for tool failures: a missing binary, a timeout or a non-zero
    exit are all returned as a CommandResult whose ``ok`` is False.
    """
    cmd = [str(a) for a in args]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        # New session: on timeout the whole group goes, soffice.bin included
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
            start_new_session=True,
        )
    except FileNotFoundError:
        logger.warning(f"Executable not found: {cmd[0]}")
        return CommandResult(args=tuple(cmd), returncode=None, error=f"{cmd[0]} not found")
    except OSError as e:
        logger.warning(f"Could not start {cmd[0]}: {e}")
        return CommandResult(args=tuple(cmd), returncode=None, error=str(e))

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"Command timed out after {timeout}s: {cmd[0]}")
        _kill_process_group(proc)
        return CommandResult(args=tuple(cmd), returncode=None, timed_out=True)

    result = CommandResult(
        args=tuple(cmd),
        returncode=proc.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
    )
    if result.ok:
        if result.stderr.strip():
            logger.debug(f"{cmd[0]} stderr: {result.stderr.strip()}")
    else:
        logger.warning(f"{cmd[0]} failed: {result.describe()}")
    return result


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill every process in ``proc``'s session and reap the leader."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError as e:
        logger.error(f"Could not kill process group {proc.pid}: {e}")
        proc.kill()
    proc.communicate()
