"""Platform models describing the host being provisioned."""

from dataclasses import dataclass
from enum import Enum


class Architecture(Enum):
    """CPU architectures Docker Engine packages exist for.

    Values are the canonical ``uname -m`` names.
    """

    X86_64 = "x86_64"
    ARM64 = "aarch64"
    ARMV7 = "armv7l"

    @classmethod
    def from_machine(cls, machine: str) -> "Architecture | None":
        """Map a ``uname -m`` string to an Architecture.

        ``arm64`` (as reported on some kernels) is folded into ``aarch64``.

        Returns:
            The matching Architecture, or None if unsupported.
        """
        normalized = "aarch64" if machine == "arm64" else machine
        for arch in cls:
            if arch.value == normalized:
                return arch
        return None


class PackageManager(Enum):
    """Package-manager families the installer can drive."""

    APT = "apt"
    YUM = "yum"
    DNF = "dnf"

    @property
    def is_debian_family(self) -> bool:
        """Check if this manager installs .deb packages."""
        return self == PackageManager.APT

    @property
    def is_redhat_family(self) -> bool:
        """Check if this manager installs .rpm packages."""
        return self in (PackageManager.YUM, PackageManager.DNF)


@dataclass(frozen=True, slots=True)
class SystemProfile:
    """Identity of the host, created once by the system prober.

    Attributes:
        architecture: CPU architecture.
        distribution_id: ``ID`` from os-release (e.g. 'ubuntu', 'rocky').
        distribution_version: ``VERSION_ID`` from os-release.
        package_manager: Package-manager family for the distribution.
        codename: ``VERSION_CODENAME`` (Debian family only).
        pretty_name: ``PRETTY_NAME`` for display.
    """

    architecture: Architecture
    distribution_id: str
    distribution_version: str
    package_manager: PackageManager
    codename: str | None = None
    pretty_name: str | None = None

    def __post_init__(self) -> None:
        """Validate profile data after initialization."""
        if not self.distribution_id:
            msg = "Distribution id cannot be empty"
            raise ValueError(msg)

    @property
    def display_name(self) -> str:
        """Human-readable system description."""
        name = self.pretty_name or f"{self.distribution_id} {self.distribution_version}"
        return f"{name} ({self.architecture.value})"
