"""Models for detecting and reconciling a prior Docker installation."""

from dataclasses import dataclass, field
from enum import Enum


class ReconcileAction(Enum):
    """Operator decision when an existing installation is found.

    Attributes:
        REINSTALL: Uninstall the existing runtime, then install fresh.
        SKIP: Keep the existing runtime and end the run successfully.
        UPGRADE_IN_PLACE: Install over the existing runtime.
        ABORT: End the run without changes.
    """

    REINSTALL = "reinstall"
    SKIP = "skip"
    UPGRADE_IN_PLACE = "upgrade"
    ABORT = "abort"


@dataclass(frozen=True, slots=True)
class ExistingInstallation:
    """Result of probing the host for a prior installation.

    Attributes:
        binary_path: Location of the docker binary, if on PATH.
        runtime_version: Version reported by ``docker --version``.
        matched_packages: Known Docker package names present in the
            package database, in detection order.
    """

    binary_path: str | None = None
    runtime_version: str | None = None
    matched_packages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        """Check if either detection method found something."""
        return self.binary_path is not None or bool(self.matched_packages)
