"""Unit tests for the system prober."""

from pathlib import Path

import pytest
from dockstrap.core.errors import UnsupportedPlatform
from dockstrap.core.prober import detect_architecture, detect_system, parse_os_release
from dockstrap.models.platform import Architecture, PackageManager


def os_release(distro: str, version: str = "1", codename: str | None = None) -> str:
    lines = [f"ID={distro}", f'VERSION_ID="{version}"', f'PRETTY_NAME="{distro} {version}"']
    if codename:
        lines.append(f"VERSION_CODENAME={codename}")
    return "\n".join(lines) + "\n"


class TestParseOsRelease:
    """Tests for parse_os_release function."""

    def test_quoted_and_bare_values(self) -> None:
        """Quotes are removed, bare values kept."""
        fields = parse_os_release('ID=ubuntu\nNAME="Ubuntu"\nVERSION_ID=\'24.04\'\n')

        assert fields == {"ID": "ubuntu", "NAME": "Ubuntu", "VERSION_ID": "24.04"}

    def test_ignores_comments_and_junk(self) -> None:
        """Comments, blank and malformed lines are skipped."""
        fields = parse_os_release('# comment\n\nnonsense\nID=debian\nBROKEN="unterminated\n')

        assert fields == {"ID": "debian"}


class TestDetectArchitecture:
    """Tests for detect_architecture function."""

    def test_arm64_alias(self) -> None:
        """arm64 is reported as aarch64."""
        assert detect_architecture("arm64") is Architecture.ARM64

    def test_unsupported(self) -> None:
        """Other architectures are rejected."""
        with pytest.raises(UnsupportedPlatform, match="Unsupported architecture: i686"):
            detect_architecture("i686")


class TestDetectSystem:
    """Tests for detect_system function."""

    @pytest.mark.parametrize(
        ("distro", "manager"),
        [
            ("ubuntu", PackageManager.APT),
            ("debian", PackageManager.APT),
            ("centos", PackageManager.YUM),
            ("rhel", PackageManager.YUM),
            ("rocky", PackageManager.YUM),
            ("almalinux", PackageManager.YUM),
            ("fedora", PackageManager.DNF),
        ],
    )
    @pytest.mark.parametrize("machine", ["x86_64", "aarch64", "arm64", "armv7l"])
    def test_supported_pairs(
        self, tmp_path: Path, distro: str, manager: PackageManager, machine: str
    ) -> None:
        """Every supported architecture and distribution maps to its family."""
        path = tmp_path / "os-release"
        path.write_text(os_release(distro))

        profile = detect_system(path, machine=machine)

        assert profile.package_manager is manager
        assert profile.distribution_id == distro
        assert profile.architecture is Architecture.from_machine(machine)

    def test_reads_codename(self, tmp_path: Path) -> None:
        """Codename and pretty name are captured."""
        path = tmp_path / "os-release"
        path.write_text(os_release("debian", "12", "bookworm"))

        profile = detect_system(path, machine="x86_64")

        assert profile.codename == "bookworm"
        assert profile.distribution_version == "12"
        assert profile.pretty_name == "debian 12"

    def test_ubuntu_codename_fallback(self, tmp_path: Path) -> None:
        """UBUNTU_CODENAME is used when VERSION_CODENAME is absent."""
        path = tmp_path / "os-release"
        path.write_text("ID=ubuntu\nVERSION_ID=20.04\nUBUNTU_CODENAME=focal\n")

        assert detect_system(path, machine="x86_64").codename == "focal"

    def test_id_is_lowercased(self, tmp_path: Path) -> None:
        """Distribution ids are compared case-insensitively."""
        path = tmp_path / "os-release"
        path.write_text(os_release("Ubuntu"))

        assert detect_system(path, machine="x86_64").distribution_id == "ubuntu"

    @pytest.mark.parametrize("distro", ["arch", "manjaro"])
    def test_pacman_hint(self, tmp_path: Path, distro: str) -> None:
        """Arch-based systems are pointed at pacman."""
        path = tmp_path / "os-release"
        path.write_text(os_release(distro))

        with pytest.raises(UnsupportedPlatform) as exc_info:
            detect_system(path, machine="x86_64")

        assert "pacman -S docker" in exc_info.value.hints[0]

    def test_unknown_distribution(self, tmp_path: Path) -> None:
        """Unknown distributions are unsupported."""
        path = tmp_path / "os-release"
        path.write_text(os_release("opensuse-leap"))

        with pytest.raises(UnsupportedPlatform, match="opensuse-leap"):
            detect_system(path, machine="x86_64")

    def test_unsupported_architecture_on_supported_distro(self, tmp_path: Path) -> None:
        """A supported distribution on an unsupported architecture fails."""
        path = tmp_path / "os-release"
        path.write_text(os_release("ubuntu"))

        with pytest.raises(UnsupportedPlatform):
            detect_system(path, machine="s390x")

    def test_missing_os_release(self, tmp_path: Path) -> None:
        """A missing os-release file is unsupported."""
        with pytest.raises(UnsupportedPlatform, match="is missing"):
            detect_system(tmp_path / "missing", machine="x86_64")
