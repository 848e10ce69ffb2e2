"""Error taxonomy for the installation pipeline.

Every stage raises one of these exceptions on a fatal condition. The CLI
catches :class:`InstallerError` in one place, prints the message together
with its remediation hints, runs the cleanup hook and exits with
:attr:`InstallerError.exit_code`.
"""

from __future__ import annotations

# Generic remediation hint per process exit code.
EXIT_CODE_HINTS: dict[int, str] = {
    1: "Check the network connection or configure a proxy.",
    2: "Make sure the installer runs with root privileges (sudo).",
    126: "A command could not be executed, check file permissions.",
    127: "A command was not found, check the PATH environment variable.",
}

DEFAULT_EXIT_HINT = "See the detailed error output above."


def hint_for_exit_code(code: int) -> str:
    """Return the generic remediation hint for an exit code."""
    return EXIT_CODE_HINTS.get(code, DEFAULT_EXIT_HINT)


class InstallerError(Exception):
    """Base exception for all fatal installer conditions.

    Attributes:
        exit_code: Process exit code to use when this error ends the run.
        hints: Ordered remediation suggestions shown to the operator.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        hints: list[str] | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.hints: list[str] = list(hints or [])
        if exit_code is not None:
            self.exit_code = exit_code


class UnsupportedPlatform(InstallerError):
    """Raised when the architecture or distribution is not supported."""


class InsufficientPrivilege(InstallerError):
    """Raised when the installer does not run as root."""

    exit_code = 2


class NetworkUnreachable(InstallerError):
    """Raised when none of the probe hosts answers."""


class InsufficientDiskSpace(InstallerError):
    """Raised when the root filesystem has less free space than required."""


class PackageOperationFailed(InstallerError):
    """Raised when a package-manager operation fails.

    Covers index refresh, dependency install, repository registration,
    engine install and uninstall.

    Attributes:
        output: Captured error output of the package manager, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        hints: list[str] | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message, hints=hints, exit_code=exit_code)
        self.output = output


class ServiceStartFailed(InstallerError):
    """Raised when the runtime service does not become active."""


class VerificationFailed(InstallerError):
    """Raised when a post-install verification check fails."""


class InvalidVersionFormat(InstallerError):
    """Raised when a requested version is not of the form X.Y.Z."""


class InvalidChoice(InstallerError):
    """Raised when an interactive answer is not one of the offered options."""


class CommandLaunchFailed(InstallerError):
    """Raised when an external command cannot be started at all.

    The exit code mirrors the shell convention: 127 when the executable
    does not exist, 126 when it exists but cannot be executed.
    """

    @classmethod
    def from_os_error(cls, args: list[str], error: OSError) -> CommandLaunchFailed:
        """Build the error for a failed launch of ``args``."""
        command = args[0] if args else "<empty>"
        if isinstance(error, FileNotFoundError):
            return cls(f"Command not found: {command}", exit_code=127)
        if isinstance(error, PermissionError):
            return cls(f"Command not executable: {command}", exit_code=126)
        return cls(f"Cannot run {command}: {error}")
