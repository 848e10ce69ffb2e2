"""Repository provisioner.

Chooses between Docker's official endpoint and the regional mirror and
registers the package repository through the host's operator. The choice
applies to both the signing key and the package source.
"""

import logging

from dockstrap.core.paths import InstallPaths
from dockstrap.core.settings import InstallerSettings
from dockstrap.models.platform import SystemProfile
from dockstrap.operators.base import PackageOperator
from dockstrap.utils.formatting import print_info, print_success

logger = logging.getLogger(__name__)


def provision_repository(
    operator: PackageOperator,
    profile: SystemProfile,
    settings: InstallerSettings,
    paths: InstallPaths,
    *,
    use_mirror: bool,
) -> str:
    """Add the Docker package repository.

    Args:
        operator: Package operator for the host.
        profile: Host profile.
        settings: Installer settings holding both endpoints.
        paths: System paths.
        use_mirror: Use the regional mirror instead of the official endpoint.

    Returns:
        Description of the registered repository.

    Raises:
        PackageOperationFailed: If the key, source or index refresh fails.
    """
    base_url = settings.repository_base_url(use_mirror)
    label = "regional mirror" if use_mirror else "official Docker repository"
    print_info(f"Using {label}: {base_url}")

    registered = operator.configure_repository(base_url, profile, paths)
    print_success(f"Docker repository added ({registered})")
    return registered
