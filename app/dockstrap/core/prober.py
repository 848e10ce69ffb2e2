"""System prober.

Determines the host's CPU architecture and Linux distribution and maps
the distribution to a package-manager family. Reads only; any unsupported
combination is fatal.
"""

import logging
import platform
import shlex
from pathlib import Path

from dockstrap.core.errors import UnsupportedPlatform
from dockstrap.models.platform import Architecture, PackageManager, SystemProfile

logger = logging.getLogger(__name__)

SUPPORTED_DISTRIBUTIONS: dict[str, PackageManager] = {
    "ubuntu": PackageManager.APT,
    "debian": PackageManager.APT,
    "centos": PackageManager.YUM,
    "rhel": PackageManager.YUM,
    "rocky": PackageManager.YUM,
    "almalinux": PackageManager.YUM,
    "fedora": PackageManager.DNF,
}

# Distributions with a native Docker package and a dedicated hint.
_NATIVE_PACKAGE_HINTS: dict[str, str] = {
    "arch": "On Arch Linux install Docker directly: sudo pacman -S docker",
    "manjaro": "On Manjaro install Docker directly: sudo pacman -S docker",
}


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release(5) content into a dictionary.

    Values may be quoted with shell quoting rules; comments and malformed
    lines are ignored.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            logger.debug("Skipping malformed os-release line: %r", line)
            continue
        fields[key.strip()] = " ".join(parts)
    return fields


def detect_architecture(machine: str | None = None) -> Architecture:
    """Detect the CPU architecture.

    Args:
        machine: ``uname -m`` value; read from the running kernel if None.

    Raises:
        UnsupportedPlatform: If the architecture is not supported.
    """
    machine = machine if machine is not None else platform.machine()
    arch = Architecture.from_machine(machine)
    if arch is None:
        raise UnsupportedPlatform(
            f"Unsupported architecture: {machine}",
            hints=["Docker packages exist for x86_64, ARM64 and ARMv7 only."],
        )
    return arch


def detect_system(os_release_path: Path, machine: str | None = None) -> SystemProfile:
    """Build the SystemProfile for the host.

    Args:
        os_release_path: Location of the os-release file.
        machine: ``uname -m`` value; read from the running kernel if None.

    Returns:
        Immutable SystemProfile.

    Raises:
        UnsupportedPlatform: If the architecture or distribution is not
            supported, or the os-release file is missing.
    """
    arch = detect_architecture(machine)
    logger.info("Architecture: %s", arch.value)

    try:
        release = parse_os_release(os_release_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise UnsupportedPlatform(
            f"Cannot detect the Linux distribution ({os_release_path} is missing)",
        ) from e
    except OSError as e:
        raise UnsupportedPlatform(f"Cannot read {os_release_path}: {e}") from e

    distro = release.get("ID", "").lower()
    manager = SUPPORTED_DISTRIBUTIONS.get(distro)
    if manager is None:
        hints = []
        if distro in _NATIVE_PACKAGE_HINTS:
            hints.append(_NATIVE_PACKAGE_HINTS[distro])
        hints.append("Supported: Ubuntu, Debian, CentOS, RHEL, Rocky Linux, AlmaLinux, Fedora.")
        raise UnsupportedPlatform(
            f"Unsupported Linux distribution: {distro or 'unknown'}",
            hints=hints,
        )

    profile = SystemProfile(
        architecture=arch,
        distribution_id=distro,
        distribution_version=release.get("VERSION_ID", ""),
        package_manager=manager,
        codename=release.get("VERSION_CODENAME") or release.get("UBUNTU_CODENAME") or None,
        pretty_name=release.get("PRETTY_NAME") or release.get("NAME") or None,
    )
    logger.info(
        "Detected %s %s, package manager %s",
        profile.distribution_id,
        profile.distribution_version,
        manager.value,
    )
    return profile
