"""Version resolver.

Turns a requested X.Y.Z version into the exact version string the host's
package manager expects. Listing entries are parsed with the grammar of the
manager family and compared field by field: the upstream version must be
equal, and the distribution codename (Debian family) or dist tag and major
version (Red Hat family) must match the host. The first match in listing
order (newest first) wins.

When nothing matches, the resolver falls back to the unpinned package set
and warns the operator; it never fails.
"""

import logging
from collections.abc import Iterable

from dockstrap.core.installer import build_package_names
from dockstrap.models.platform import SystemProfile
from dockstrap.models.request import InstallRequest
from dockstrap.models.version import (
    ENGINE_PACKAGE,
    DebianVersion,
    ResolvedPackageSet,
    RpmVersion,
)
from dockstrap.operators.base import PackageOperator
from dockstrap.utils.formatting import print_info, print_warning

logger = logging.getLogger(__name__)

# Number of listing entries echoed into the log.
_LISTING_LOG_LIMIT = 10


def match_debian(
    listing: Iterable[str],
    version: str,
    codename: str | None = None,
) -> DebianVersion | None:
    """Return the first apt listing entry for ``version``.

    Entries that do not follow the modern Docker grammar are skipped.
    """
    for raw in listing:
        parsed = DebianVersion.parse(raw)
        if parsed is None:
            logger.debug("Ignoring unparseable apt version %r", raw)
            continue
        if parsed.matches(version, codename):
            return parsed
    return None


def match_rpm(
    listing: Iterable[str],
    version: str,
    dist: str,
    major: int,
) -> RpmVersion | None:
    """Return the first yum/dnf listing entry for ``version`` on ``{dist}{major}``."""
    for raw in listing:
        parsed = RpmVersion.parse(raw)
        if parsed is None:
            logger.debug("Ignoring unparseable rpm version %r", raw)
            continue
        if parsed.matches(version, dist, major):
            return parsed
    return None


def find_exact_version(
    listing: list[str],
    version: str,
    profile: SystemProfile,
    operator: PackageOperator,
) -> str | None:
    """Resolve ``version`` against a listing for the host's manager family.

    Returns:
        The manager-specific pin string, or None if nothing matches.
    """
    if profile.package_manager.is_debian_family:
        deb = match_debian(listing, version, profile.codename)
        return deb.pin if deb is not None else None

    target = operator.release_target()
    if target is None:
        logger.warning("Distribution release tag unknown, cannot pin %s", version)
        return None
    dist, major = target
    rpm = match_rpm(listing, version, dist, major)
    return rpm.pin if rpm is not None else None


def resolve_packages(
    request: InstallRequest,
    profile: SystemProfile,
    operator: PackageOperator,
) -> ResolvedPackageSet:
    """Resolve the requested version and assemble the package set.

    Args:
        request: The install request.
        profile: Host profile.
        operator: Package operator used to list available versions.

    Returns:
        ResolvedPackageSet, pinned when the version was found.
    """
    print_info(f"Looking up available versions of {ENGINE_PACKAGE}...")
    listing = operator.list_versions(ENGINE_PACKAGE)
    for raw in listing[:_LISTING_LOG_LIMIT]:
        logger.info("  available: %s", raw)

    exact = find_exact_version(listing, request.desired_version, profile, operator)
    names = build_package_names(request.install_compose)

    if exact is None:
        print_warning(
            f"Version {request.desired_version} not found, installing the latest available version"
        )
    else:
        print_info(f"Found version: {exact}")

    return ResolvedPackageSet(
        package_manager=profile.package_manager,
        package_names=names,
        exact_version=exact,
    )
