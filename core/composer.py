"""Composer and composer-lock-diff wrappers."""

from .models import filter_package_names, unique
from .process import CommandResult, CommandRunner

LOCK_FILES = ["composer.json", "composer.lock"]


def parse_audit_packages(output: str) -> list[str]:
    """Extract package names from `composer audit --format plain` output.

    Args:
        output: Combined audit output

    Returns:
        Unique affected package names, in order of appearance
    """
    names = []
    for line in output.splitlines():
        if line.startswith("Package") and ":" in line:
            names.append(line.split(":", 1)[1])
    return unique(filter_package_names(names))


def parse_package_type(output: str) -> str:
    """Read the `type` field from `composer show <package>` output."""
    for line in output.splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "type":
            return value.strip()
    return ""


def is_drupal_extension(package_type: str) -> bool:
    """Module, theme, profile or drush package, but not a plain library."""
    return package_type.startswith("drupal") and package_type != "drupal-library"


class Composer:
    """Dependency manager operations used by the updater."""

    def __init__(
        self,
        runner: CommandRunner,
        no_dev: bool = False,
        binary: str = "composer",
        lock_diff_binary: str = "composer-lock-diff",
    ):
        self.runner = runner
        self.no_dev = no_dev
        self.binary = binary
        self.lock_diff_binary = lock_diff_binary

    def _no_dev_args(self) -> list[str]:
        return ["--no-dev"] if self.no_dev else []

    def _run(self, *args: str) -> CommandResult:
        return self.runner.run([self.binary, *args])

    def direct_packages(self) -> list[str]:
        """List the direct requirements of the project."""
        result = self._run(
            "show", "--locked", "--direct", "--name-only", *self._no_dev_args()
        ).check()
        return filter_package_names(result.stdout.splitlines())

    def audit_packages(self) -> list[str]:
        """Packages with known security advisories.

        Composer audit exits non-zero when it finds advisories, so the exit
        code is not treated as a failure here.
        """
        result = self._run(
            "audit", "--locked", *self._no_dev_args(), "--format", "plain"
        )
        return parse_audit_packages(result.output)

    def update(self, package: str) -> CommandResult:
        """Update one package together with its dependencies."""
        return self._run("update", package, "--with-dependencies")

    def package_type(self, package: str) -> str:
        result = self._run("show", package).check()
        return parse_package_type(result.stdout)

    def lock_diff(
        self, from_file: str | None = None, to_file: str | None = None
    ) -> CommandResult:
        """Diff two lock files, by default the committed one and the working copy."""
        args = [self.lock_diff_binary]
        if from_file:
            args += ["--from", from_file]
        if to_file:
            args += ["--to", to_file]
        return self.runner.run(args)

    def outdated(self, direct: bool = False) -> str:
        args = ["show", "--locked", "--outdated"]
        if direct:
            args.append("--direct")
        return self._run(*args).check().stdout

    def audit_report(self) -> str:
        return self._run("audit", "--locked").output
