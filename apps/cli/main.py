"""CLI application for the Drupal updater."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from core.errors import CommandFailedError, UpdaterError
from core.models import (
    DEFAULT_AUTHOR,
    DEFAULT_ENVIRONMENT,
    DEFAULT_TIMEOUT,
    RunConfig,
    parse_environments,
)
from core.output import UpdateOutput
from core.updater import UpdateContext, run

console = Console()

HELP = """Update composer packages.

Update includes:

  - Commit current configuration not exported (Drupal 8+).

  - Identify updatable composer packages (outdated).

  - For each package try to update and commit it (recovers previous state if fails).
"""


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_package_list(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


app = typer.Typer(
    name="drupal-updater",
    help="Drupal updater - Update composer packages of a Drupal site one by one",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Drupal updater - Update composer packages of a Drupal site one by one."""


@app.command(help=HELP)
def update(
    environments: str = typer.Option(
        DEFAULT_ENVIRONMENT,
        "--environments",
        "--envs",
        envvar="DRUPAL_UPDATER_ENVIRONMENTS",
        help="Comma separated drush aliases to update",
    ),
    author: str = typer.Option(
        DEFAULT_AUTHOR, "--author", "-a", envvar="DRUPAL_UPDATER_AUTHOR", help="Git author"
    ),
    security: bool = typer.Option(False, "--security", "-s", help="Only update security packages"),
    no_dev: bool = typer.Option(False, "--no-dev", help="Only update main requirements"),
    packages: str | None = typer.Option(
        None, "--packages", help="Comma separated packages to update (skips the full report)"
    ),
    working_dir: Path = typer.Option(Path("."), "--working-dir", "-d", help="Drupal project root"),
    web_root: str = typer.Option("web", "--web-root", help="Drupal docroot, relative to the project root"),
    config_dir: str = typer.Option(
        "config", "--config-dir", help="Configuration sync directory, relative to the project root"
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, "--timeout", envvar="DRUPAL_UPDATER_TIMEOUT", help="Seconds allowed per command"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command"),
) -> None:
    """Update composer packages of a Drupal site."""
    configure_logging(verbose)

    env_list = parse_environments(environments)
    if not env_list:
        console.print("Error: No environments given", style="red")
        raise typer.Exit(1)

    working_dir = working_dir.resolve()
    if not (working_dir / "composer.lock").exists():
        console.print(f"Error: composer.lock not found in {working_dir}", style="red")
        raise typer.Exit(1)

    config = RunConfig(
        environments=env_list,
        author=author,
        only_security=security,
        no_dev=no_dev,
        packages=parse_package_list(packages),
        working_dir=working_dir,
        web_root=web_root,
        config_dir=config_dir,
        timeout=timeout,
    )

    try:
        run(UpdateContext.create(config, output=UpdateOutput(console)))
    except CommandFailedError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        if e.result.stderr.strip():
            console.print(e.result.stderr.rstrip(), markup=False, highlight=False)
        raise typer.Exit(1)
    except UpdaterError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
