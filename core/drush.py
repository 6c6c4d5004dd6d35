"""Drush wrapper, one call per site alias."""

import logging
from pathlib import Path

from .models import filter_package_names
from .process import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

UNSUPPORTED_MODULES_SCRIPT = Path(__file__).parent / "scripts" / "unsupported-modules.php"


class Drush:
    """Site administration commands run against drush aliases."""

    def __init__(self, runner: CommandRunner, binary: str = "drush"):
        self.runner = runner
        self.binary = binary

    def run(self, environment: str, *args: str) -> CommandResult:
        """Run a drush command on one environment without checking the result."""
        return self.runner.run([self.binary, environment, *args])

    def cache_rebuild(self, environment: str) -> CommandResult:
        return self.run(environment, "cr")

    def config_import(self, environment: str) -> CommandResult:
        return self.run(environment, "cim", "-y")

    def config_export(self, environment: str) -> CommandResult:
        return self.run(environment, "cex", "-y")

    def update_database(self, environment: str) -> CommandResult:
        return self.run(environment, "updb", "-y")

    def security_packages(self) -> list[str]:
        """Packages drush reports as having pending security releases.

        pm:security exits non-zero when it finds updates, so whatever it
        printed is used. A site drush cannot bootstrap yields nothing.
        """
        result = self.runner.run(
            [self.binary, "pm:security", "--fields=name", "--format=list"]
        )
        if not result.ok and not result.stdout.strip():
            logger.warning("drush pm:security failed: %s", result.stderr.strip())
        return filter_package_names(result.stdout.splitlines())

    def security_report(self) -> str:
        result = self.runner.run(
            [self.binary, "pm:security", "--fields=name", "--format=list"]
        )
        return result.stdout or result.stderr

    def unsupported_modules_json(self, environment: str) -> str:
        """Raw output of the unsupported modules script on an environment."""
        result = self.run(
            environment, "php:script", str(UNSUPPORTED_MODULES_SCRIPT)
        ).check()
        return result.stdout
