"""Unit tests for the installer error taxonomy."""

import pytest
from dockstrap.core.errors import (
    CommandLaunchFailed,
    InstallerError,
    InsufficientPrivilege,
    NetworkUnreachable,
    PackageOperationFailed,
    hint_for_exit_code,
)


class TestInstallerError:
    """Tests for InstallerError and subclasses."""

    def test_defaults(self) -> None:
        """Errors exit with 1 and carry no hints by default."""
        error = NetworkUnreachable("no network")

        assert error.exit_code == 1
        assert error.hints == []
        assert str(error) == "no network"

    def test_class_exit_code(self) -> None:
        """Privilege failures exit with 2."""
        assert InsufficientPrivilege("not root").exit_code == 2

    def test_exit_code_override(self) -> None:
        """An explicit exit code wins over the class default."""
        assert InstallerError("x", exit_code=42).exit_code == 42

    def test_package_failure_output(self) -> None:
        """Package failures keep the manager output."""
        error = PackageOperationFailed("failed", output="E: broken", hints=["retry"])

        assert error.output == "E: broken"
        assert error.hints == ["retry"]


class TestCommandLaunchFailed:
    """Tests for CommandLaunchFailed.from_os_error."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (FileNotFoundError(2, "No such file"), 127),
            (PermissionError(13, "Permission denied"), 126),
            (OSError(7, "Argument list too long"), 1),
        ],
    )
    def test_exit_codes(self, error: OSError, code: int) -> None:
        """Launch failures map to shell exit codes."""
        assert CommandLaunchFailed.from_os_error(["apt-get"], error).exit_code == code


class TestHintForExitCode:
    """Tests for hint_for_exit_code function."""

    @pytest.mark.parametrize(
        ("code", "fragment"),
        [(1, "network"), (2, "root"), (126, "permissions"), (127, "PATH")],
    )
    def test_known_codes(self, code: int, fragment: str) -> None:
        """Known exit codes have a specific hint."""
        assert fragment in hint_for_exit_code(code)

    def test_unknown_code(self) -> None:
        """Other codes get the generic hint."""
        assert "error output above" in hint_for_exit_code(99)
