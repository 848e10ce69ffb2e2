"""Typed package version strings and the resolved package set.

Docker's repositories publish version strings whose shape depends on the
package-manager family:

- Debian family: ``epoch:version-revision~distro.release~codename``,
  e.g. ``5:27.5.0-1~ubuntu.24.04~noble``.
- Red Hat family: ``[epoch:]version-release.el{N}`` or ``.fc{N}``,
  e.g. ``3:27.5.0-1.el9``.

Both are parsed into structured values so resolution compares fields
instead of searching raw text.
"""

import re
from dataclasses import dataclass

from dockstrap.models.platform import PackageManager

ENGINE_PACKAGE = "docker-ce"
CLI_PACKAGE = "docker-ce-cli"
SHIM_PACKAGE = "containerd.io"
BUILDX_PACKAGE = "docker-buildx-plugin"
COMPOSE_PACKAGE = "docker-compose-plugin"

# Only engine and CLI follow the requested version; shim and plugins float.
VERSION_PINNED_PACKAGES = frozenset({ENGINE_PACKAGE, CLI_PACKAGE})

_DEBIAN_VERSION = re.compile(
    r"^(?:(?P<epoch>\d+):)?"
    r"(?P<upstream>[^-]+)-(?P<revision>[^~]+)"
    r"(?:~(?P<distro>[a-z]+)\.(?P<release>[0-9.]+)~(?P<codename>[a-z]+))?$"
)

_RPM_VERSION = re.compile(
    r"^(?:(?P<epoch>\d+):)?"
    r"(?P<version>[^-]+)-(?P<release>[^.]+)\.(?P<dist>el|fc)(?P<major>\d+)$"
)


@dataclass(frozen=True, slots=True)
class DebianVersion:
    """A parsed Debian-family package version.

    Attributes:
        raw: The full version string as listed by apt.
        upstream: Upstream version (e.g. '27.5.0').
        revision: Package revision (e.g. '1').
        epoch: Version epoch, if present.
        distro: Distribution tag (e.g. 'ubuntu').
        release: Distribution release (e.g. '24.04').
        codename: Distribution codename (e.g. 'noble').
    """

    raw: str
    upstream: str
    revision: str
    epoch: int | None = None
    distro: str | None = None
    release: str | None = None
    codename: str | None = None

    @classmethod
    def parse(cls, text: str) -> "DebianVersion | None":
        """Parse an apt version string.

        Returns:
            DebianVersion, or None if the text does not follow the grammar.
        """
        match = _DEBIAN_VERSION.match(text.strip())
        if match is None:
            return None
        epoch = match.group("epoch")
        return cls(
            raw=text.strip(),
            upstream=match.group("upstream"),
            revision=match.group("revision"),
            epoch=int(epoch) if epoch is not None else None,
            distro=match.group("distro"),
            release=match.group("release"),
            codename=match.group("codename"),
        )

    def matches(self, version: str, codename: str | None = None) -> bool:
        """Check if this entry is ``version`` built for ``codename``.

        A codename is only compared when both sides carry one.
        """
        if self.upstream != version:
            return False
        if codename and self.codename and self.codename != codename:
            return False
        return True

    @property
    def pin(self) -> str:
        """Version string to pass to ``apt-get install name=<pin>``."""
        return self.raw


@dataclass(frozen=True, slots=True)
class RpmVersion:
    """A parsed Red-Hat-family package version.

    Attributes:
        raw: The full version string as listed by yum/dnf.
        version: Upstream version (e.g. '27.5.0').
        release: Package release (e.g. '1').
        dist: Distribution tag family, 'el' or 'fc'.
        major: Distribution major version the package targets.
        epoch: Version epoch, if present.
    """

    raw: str
    version: str
    release: str
    dist: str
    major: int
    epoch: int | None = None

    @classmethod
    def parse(cls, text: str) -> "RpmVersion | None":
        """Parse a yum/dnf version string.

        Returns:
            RpmVersion, or None if the text does not follow the grammar.
        """
        match = _RPM_VERSION.match(text.strip())
        if match is None:
            return None
        epoch = match.group("epoch")
        return cls(
            raw=text.strip(),
            version=match.group("version"),
            release=match.group("release"),
            dist=match.group("dist"),
            major=int(match.group("major")),
            epoch=int(epoch) if epoch is not None else None,
        )

    def matches(self, version: str, dist: str, major: int) -> bool:
        """Check if this entry is ``version`` built for ``{dist}{major}``."""
        return self.version == version and self.dist == dist and self.major == major

    @property
    def pin(self) -> str:
        """Version string to append as ``name-<pin>`` (epoch omitted)."""
        return f"{self.version}-{self.release}.{self.dist}{self.major}"


@dataclass(frozen=True, slots=True)
class ResolvedPackageSet:
    """Packages to install and the version they are pinned to.

    ``exact_version is None`` is the unpinned marker: the package manager
    installs whatever it considers the latest version.

    Attributes:
        package_manager: Family whose pin syntax applies.
        package_names: Packages to install, in order.
        exact_version: Manager-specific version string, or None.
    """

    package_manager: PackageManager
    package_names: tuple[str, ...]
    exact_version: str | None = None

    def __post_init__(self) -> None:
        """Validate the package list."""
        if not self.package_names:
            msg = "Package set cannot be empty"
            raise ValueError(msg)

    @property
    def is_pinned(self) -> bool:
        """Check if engine and CLI are pinned to an exact version."""
        return self.exact_version is not None

    def install_specs(self) -> list[str]:
        """Build package arguments for the install command.

        Returns:
            Package specs with the exact version applied to engine and CLI.
        """
        if self.exact_version is None:
            return list(self.package_names)

        separator = "=" if self.package_manager.is_debian_family else "-"
        return [
            f"{name}{separator}{self.exact_version}" if name in VERSION_PINNED_PACKAGES else name
            for name in self.package_names
        ]
