"""Installer stage: package selection and installation."""

import logging

from dockstrap.models.version import (
    BUILDX_PACKAGE,
    CLI_PACKAGE,
    COMPOSE_PACKAGE,
    ENGINE_PACKAGE,
    SHIM_PACKAGE,
    ResolvedPackageSet,
)
from dockstrap.operators.base import PackageOperator
from dockstrap.utils.formatting import print_info

logger = logging.getLogger(__name__)


def build_package_names(install_compose: bool) -> tuple[str, ...]:
    """Return the packages to install, in install order.

    Engine, CLI, container shim and the buildx plugin are always included;
    the compose plugin only on request.
    """
    names = [ENGINE_PACKAGE, CLI_PACKAGE, SHIM_PACKAGE, BUILDX_PACKAGE]
    if install_compose:
        names.append(COMPOSE_PACKAGE)
    return tuple(names)


def install_packages(operator: PackageOperator, resolved: ResolvedPackageSet) -> list[str]:
    """Install the resolved package set.

    Args:
        operator: Package operator for the host.
        resolved: Packages and optional exact version.

    Returns:
        The package specs passed to the package manager.

    Raises:
        PackageOperationFailed: If the package manager reports a failure.
    """
    specs = resolved.install_specs()
    print_info(f"Installing: {' '.join(specs)}")
    operator.install(specs)
    return specs
