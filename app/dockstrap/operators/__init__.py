"""Package operators for the supported package-manager families.

This module provides the abstract operator interface, the concrete
APT/YUM/DNF implementations and a factory keyed by package manager.
"""

from dockstrap.models.platform import PackageManager
from dockstrap.operators.apt import AptOperator
from dockstrap.operators.base import PackageOperator
from dockstrap.operators.rpm import DnfOperator, YumOperator


def get_operator(manager: PackageManager) -> PackageOperator:
    """Return the operator for a package-manager family.

    Args:
        manager: Package manager detected for the host.

    Returns:
        A new operator instance.
    """
    operators: dict[PackageManager, type[PackageOperator]] = {
        PackageManager.APT: AptOperator,
        PackageManager.YUM: YumOperator,
        PackageManager.DNF: DnfOperator,
    }
    return operators[manager]()


__all__ = ["AptOperator", "DnfOperator", "PackageOperator", "YumOperator", "get_operator"]
