"""Shell execution utilities.

Provides subprocess execution with captured output. Every command's
output is mirrored to the run log so failures can be diagnosed later.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass

from dockstrap.core.errors import CommandLaunchFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
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

    @property
    def error_output(self) -> str:
        """Best available error text: stderr, falling back to stdout."""
        return self.stderr.strip() or self.stdout.strip()


def run_command(
    args: list[str],
    *,
    timeout: float | None = None,
) -> CommandResult:
    """Execute a command and return the result.

    The command line and its captured output are written to the log at
    DEBUG level. Package-manager operations can take arbitrarily long, so
    no timeout applies unless one is given.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        CommandLaunchFailed: If the executable is missing or not executable.
        subprocess.TimeoutExpired: If command exceeds timeout.
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except OSError as e:
        raise CommandLaunchFailed.from_os_error(args, e) from e

    if result.stdout:
        logger.debug("stdout of %s:\n%s", args[0], result.stdout.rstrip())
    if result.stderr:
        logger.debug("stderr of %s:\n%s", args[0], result.stderr.rstrip())
    logger.debug("%s exited with %d", args[0], result.returncode)

    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
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


def command_path(name: str) -> str | None:
    """Return the resolved path of a command, or None if it is not on PATH."""
    return shutil.which(name)
