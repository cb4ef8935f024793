"""Shell execution utilities.

Provides subprocess execution for package manager queries and for
install commands and post-install hooks.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command (empty when discarded).
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command and capture its output.

    Used for short read-only queries (installed versions, registry
    metadata, tool versions).

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_shell(
    command: str,
    *,
    env: dict[str, str] | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command line through the shell, discarding stdout.

    Standard output is sent to /dev/null so it does not interleave with
    the terminal spinner; standard error is captured for diagnostics.
    There is no timeout: the call blocks until the command exits.

    Args:
        command: Command line to execute.
        env: Additional environment variables (merged with current env).
        cwd: Working directory for the command.

    Returns:
        CommandResult with empty stdout, captured stderr and returncode.

    Raises:
        OSError: If the shell cannot be started.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(  # nosec: B602
        command,
        shell=True,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return CommandResult(
        stdout="",
        stderr=result.stderr or "",
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
