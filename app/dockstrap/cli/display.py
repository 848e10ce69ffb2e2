"""Rich display functions for the installer's reports.

Renders the existing-installation overview shown before the reconcile
menu, the final installation summary, next steps and the failure report.
"""

from datetime import datetime
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from dockstrap.core.errors import InstallerError, hint_for_exit_code
from dockstrap.core.paths import InstallPaths
from dockstrap.core.pipeline import InstallReport
from dockstrap.models.installation import ExistingInstallation
from dockstrap.utils.formatting import (
    console,
    create_key_value_table,
    err_console,
    print_error,
    print_hints,
)


def create_existing_table(existing: ExistingInstallation) -> Table:
    """Create a table describing a detected installation.

    Args:
        existing: Detection result.

    Returns:
        Rich Table with the binary, version and matched packages.
    """
    table = create_key_value_table("Existing Docker Installation")
    binary = existing.binary_path
    version = existing.runtime_version
    table.add_row("Binary", escape(binary) if binary else "[muted]not on PATH[/]")
    table.add_row("Version", escape(version) if version else "[muted]unknown[/]")
    packages = escape("\n".join(existing.matched_packages)) or "[muted]none[/]"
    table.add_row("Packages", packages)
    return table


def create_summary_table(
    report: InstallReport,
    *,
    log_path: Path | None,
    enabled_state: str | None,
    paths: InstallPaths,
    now: datetime | None = None,
) -> Table:
    """Create the installation summary table.

    Args:
        report: Report of a completed run.
        log_path: Run log file, if one was written.
        enabled_state: Output of ``systemctl is-enabled docker``.
        paths: System paths shown for config and data.
        now: Completion time.

    Returns:
        Rich Table for the summary.
    """
    table = create_key_value_table("Installation Summary")
    verification = report.verification
    if verification is not None:
        table.add_row("Docker version", f"[success]{escape(verification.runtime_version)}[/]")
    else:
        table.add_row("Docker version", "[muted]unknown[/]")
    if report.request is not None and report.request.install_compose:
        compose = verification.compose_version if verification else None
        table.add_row("Docker Compose", escape(compose) if compose else "[warning]unavailable[/]")
    if report.resolved is not None:
        pin = report.resolved.exact_version
        pin_text = f"[pinned]{escape(pin)}[/]" if pin else "[unpinned]latest[/]"
        table.add_row("Package version", pin_text)
    table.add_row("Installed at", (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S"))
    profile = report.profile
    table.add_row("System", escape(profile.display_name))
    table.add_row("Log file", escape(str(log_path)) if log_path else "[muted]not written[/]")
    table.add_row("Config file", escape(str(report.daemon_config_path or paths.daemon_config)))
    table.add_row("Data directory", escape(str(paths.docker_data_dir)))
    table.add_row("Registry mirrors", "enabled")
    table.add_row("Start at boot", escape(enabled_state) if enabled_state else "[muted]not set[/]")
    if report.backup_path is not None:
        table.add_row("Config backup", escape(str(report.backup_path)))
    return table


def print_next_steps(report: InstallReport, user: str | None) -> None:
    """Print follow-up commands for the operator."""
    compose = report.request is not None and report.request.install_compose
    console.print()
    console.rule("[step]Next steps[/]", style="border")

    step = 1
    if user and user != "root":
        console.print(f"{step}. Log in again so the docker group applies, or run:")
        console.print("   [header]newgrp docker[/]")
        step += 1

    console.print(f"{step}. Check the installation:")
    console.print("   [header]docker --version[/]")
    console.print("   [header]docker run hello-world[/]")
    console.print("   [header]docker info[/]")
    step += 1

    if compose:
        console.print(f"{step}. Docker Compose:")
        console.print("   [header]docker compose up[/]      [muted]# start services[/]")
        console.print("   [header]docker compose down[/]    [muted]# stop services[/]")
        step += 1

    console.print(f"{step}. Manage the service:")
    console.print("   [header]sudo systemctl status docker[/]")
    console.print("   [header]sudo systemctl restart docker[/]")
    step += 1

    if report.uninstall_command:
        console.print(f"{step}. Uninstall:")
        console.print(f"   [header]{escape(report.uninstall_command)}[/]")


def report_failure(error: InstallerError, log_path: Path | None) -> None:
    """Print a fatal error with its remediation hints and exit-code hint."""
    print_error(str(error))
    print_hints(error.hints)
    err_console.print(f"[muted]{hint_for_exit_code(error.exit_code)}[/]")
    if log_path is not None:
        err_console.print(f"[muted]Full log: {escape(str(log_path))}[/]")
