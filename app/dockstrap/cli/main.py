"""Main CLI application entry point.

Defines the Typer application, its options and the single place where
installer errors are turned into exit codes.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from dockstrap import __version__
from dockstrap.cli.display import create_summary_table, print_next_steps, report_failure
from dockstrap.cli.prompts import ConsolePrompter
from dockstrap.core.configurer import invoking_user
from dockstrap.core.errors import InstallerError
from dockstrap.core.logs import setup_logging, teardown_logging
from dockstrap.core.paths import InstallPaths
from dockstrap.core.pipeline import InstallOutcome, InstallPipeline, SystemOperations
from dockstrap.core.service import DOCKER_SERVICE
from dockstrap.core.settings import load_settings
from dockstrap.models.request import InstallFlags, validate_version
from dockstrap.runtime import DockerCli
from dockstrap.services import SystemdServiceManager
from dockstrap.utils.formatting import console, print_info, print_success, print_warning

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dockstrap",
    help="Install Docker Engine on Linux hosts.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dockstrap version {__version__}")
        raise typer.Exit()


def build_operations() -> SystemOperations:
    """Create the host collaborators for a real run."""
    return SystemOperations(services=SystemdServiceManager(), docker=DockerCli())


@app.command()
def install(
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            help="Docker version to install (X.Y.Z, e.g. 24.0.7).",
            show_default=False,
        ),
    ] = None,
    no_compose: Annotated[
        bool,
        typer.Option("--no-compose", help="Do not install the Docker Compose plugin."),
    ] = False,
    no_mirror: Annotated[
        bool,
        typer.Option("--no-mirror", help="Use the official Docker repository, not the mirror."),
    ] = False,
    no_autostart: Annotated[
        bool,
        typer.Option("--no-autostart", help="Do not enable the Docker service at boot."),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/dockstrap/config.toml).",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Record command output in the log file."),
    ] = False,
    installer_version: Annotated[
        bool | None,
        typer.Option(
            "--installer-version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show the installer version and exit.",
        ),
    ] = None,
) -> None:
    """Install Docker Engine, the CLI, containerd and optionally Compose.

    Without [bold]--version[/bold] you are asked which version to install;
    without [bold]--no-compose[/bold] you are asked whether to install
    Docker Compose. Must run as root.
    """
    try:
        requested = validate_version(version) if version is not None else None
        settings = load_settings(config)
    except InstallerError as e:
        report_failure(e, None)
        raise typer.Exit(code=e.exit_code) from None

    log_path = setup_logging(settings.log_dir, verbose=verbose)
    if log_path is None:
        print_warning(f"Cannot write a log file in {settings.log_dir}, continuing without one")
    else:
        print_info(f"Log file: {log_path}")
    logger.info("dockstrap %s starting", __version__)

    flags = InstallFlags(
        version=requested,
        install_compose=False if no_compose else None,
        use_mirror=not no_mirror,
        auto_start=not no_autostart,
    )
    ops = build_operations()
    paths = InstallPaths()
    pipeline = InstallPipeline(settings, flags, ConsolePrompter(), ops, paths)

    try:
        report = pipeline.run()
    except InstallerError as e:
        report_failure(e, log_path)
        try:
            pipeline.cleanup()
        except InstallerError as cleanup_error:
            print_warning(f"Cleanup failed: {cleanup_error}")
        teardown_logging()
        raise typer.Exit(code=e.exit_code) from None

    if report.outcome is InstallOutcome.COMPLETED:
        print_success("Docker installed successfully")
        console.print()
        console.print(
            create_summary_table(
                report,
                log_path=log_path,
                enabled_state=ops.services.enabled_state(DOCKER_SERVICE),
                paths=paths,
            )
        )
        print_next_steps(report, invoking_user(ops.environ))
    teardown_logging()


if __name__ == "__main__":
    app()
