"""Update workflow: consolidate, discover, update, report."""

import logging
import shutil
from dataclasses import dataclass, field

from .composer import LOCK_FILES, Composer, is_drupal_extension
from .drush import Drush
from .git import Git
from .lockfile import locked_versions, read_lock_bytes
from .models import (
    RunConfig,
    UnsupportedModuleReport,
    UpdateOutcome,
    UpdateStatus,
    filter_package_names,
    unique,
)
from .output import UpdateOutput
from .process import CommandResult, CommandRunner
from .reporting import parse_unsupported_modules

logger = logging.getLogger(__name__)


@dataclass
class UpdateContext:
    """Configuration and collaborators shared by every phase."""

    config: RunConfig
    composer: Composer
    drush: Drush
    git: Git
    output: UpdateOutput = field(default_factory=UpdateOutput)

    @classmethod
    def create(
        cls,
        config: RunConfig,
        runner: CommandRunner | None = None,
        output: UpdateOutput | None = None,
    ) -> "UpdateContext":
        """Build the collaborators for a config, sharing one command runner."""
        runner = runner or CommandRunner(config.working_dir, timeout=config.timeout)
        return cls(
            config=config,
            composer=Composer(
                runner,
                no_dev=config.no_dev,
                binary=config.composer_binary,
                lock_diff_binary=config.lock_diff_binary,
            ),
            drush=Drush(runner, binary=config.drush_binary),
            git=Git(runner, author=config.author),
            output=output or UpdateOutput(),
        )


def run_drush_everywhere(ctx: UpdateContext, *args: str) -> list[CommandResult]:
    """Run a drush command on each environment, stopping at the first failure.

    Returns:
        Results of the commands that ran; only the last one can be a failure
    """
    results = []
    for environment in ctx.config.environments:
        ctx.output.line(f'Running drush {" ".join(args)} on the "{environment}" environment:\n')
        result = ctx.drush.run(environment, *args)
        results.append(result)
        if not result.ok:
            break
        if result.stdout.strip():
            ctx.output.line(result.stdout.rstrip())
    return results


def _first_failure(results: list[CommandResult]) -> CommandResult | None:
    return next((result for result in results if not result.ok), None)


def consolidate_configuration(ctx: UpdateContext) -> None:
    """Commit the configuration each environment holds but the code does not.

    One commit per environment, so the configuration must be consistent
    between environments before running the updater.
    """
    config = ctx.config
    for environment in config.environments:
        ctx.output.line(f"Consolidating {environment} environment")
        ctx.drush.cache_rebuild(environment).check()
        ctx.drush.config_import(environment).check()
        ctx.drush.config_export(environment).check()

        if not ctx.git.has_changes(config.config_dir):
            ctx.output.line("No changes to commit")
            continue

        ctx.git.add(config.config_dir)
        ctx.git.commit(
            f"CONFIG - Consolidate current configuration on {environment}"
        )
        logger.info("Committed configuration of %s", environment)

    # Load the consolidated configuration everywhere
    for environment in config.environments:
        ctx.drush.cache_rebuild(environment).check()
        ctx.drush.config_import(environment).check()


def find_packages_to_update(ctx: UpdateContext) -> list[str]:
    """Decide which packages the update loop will try.

    An explicit package list wins; otherwise security-only mode asks
    composer and drush for advisories, and the default mode takes every
    direct requirement.
    """
    config = ctx.config
    if config.packages is not None:
        packages = filter_package_names(config.packages)
        discarded = set(config.packages) - set(packages)
        if discarded:
            logger.warning("Ignoring invalid package names: %s", ", ".join(sorted(discarded)))
    elif config.only_security:
        packages = unique(ctx.composer.audit_packages() + ctx.drush.security_packages())
    else:
        packages = ctx.composer.direct_packages()

    ctx.output.line("\n".join(packages))
    return packages


def _revert(ctx: UpdateContext, package: str, error: str, *site_paths: str) -> UpdateOutcome:
    """Put the lock files, and any site paths touched so far, back to HEAD."""
    ctx.output.failure(package, error)
    ctx.git.restore(*LOCK_FILES, *site_paths)
    if site_paths:
        ctx.git.clean(*site_paths)
    return UpdateOutcome(package=package, status=UpdateStatus.FAILED, error=error)


def update_package(ctx: UpdateContext, package: str) -> UpdateOutcome:
    """Update one package and commit the result.

    A failing composer update or a failing post-update drush step restores
    composer.json and composer.lock and returns a failed outcome instead
    of raising. A failing drush step also resets the web root and the
    config directory, so no code of the failed package is left behind.
    Other command failures abort the run.
    """
    config = ctx.config
    ctx.output.header2(f"Updating: {package}")

    lock_before = read_lock_bytes(config.lock_file)
    versions_before = locked_versions(config.lock_file)

    result = ctx.composer.update(package)
    if not result.ok:
        return _revert(ctx, package, result.stderr or result.stdout)

    if read_lock_bytes(config.lock_file) == lock_before:
        ctx.output.line(f"Package {package} has not been updated")
        return UpdateOutcome(package=package, status=UpdateStatus.NOT_CHANGED)

    versions_after = locked_versions(config.lock_file)

    diff = None
    diff_result = ctx.composer.lock_diff()
    if diff_result.ok:
        diff = diff_result.stdout.strip() or None
        ctx.output.line("\nUpdated packages:")
        ctx.output.line(diff_result.stdout.rstrip())
    else:
        logger.warning("Could not diff composer.lock: %s", diff_result.stderr.strip())

    paths = list(LOCK_FILES)
    if is_drupal_extension(ctx.composer.package_type(package)):
        for args in (("cr",), ("updb", "-y"), ("cex", "-y")):
            failure = _first_failure(run_drush_everywhere(ctx, *args))
            if failure is not None:
                return _revert(
                    ctx,
                    package,
                    failure.stderr or failure.stdout,
                    config.web_root,
                    config.config_dir,
                )
        paths += [config.web_root, config.config_dir]

    ctx.git.add(*paths)
    ctx.git.commit(f"UPDATE - {package}", body=diff)
    logger.info("Committed update of %s", package)

    return UpdateOutcome(
        package=package,
        status=UpdateStatus.UPDATED,
        from_version=versions_before.get(package),
        to_version=versions_after.get(package),
        diff=diff,
    )


def update_packages(ctx: UpdateContext, packages: list[str]) -> list[UpdateOutcome]:
    """Try every package in order; a failing one never stops the batch."""
    return [update_package(ctx, package) for package in packages]


def collect_unsupported_modules(ctx: UpdateContext) -> UnsupportedModuleReport:
    """Run the reporting script on each environment and merge the findings."""
    report = UnsupportedModuleReport()
    for environment in ctx.config.environments:
        output = ctx.drush.unsupported_modules_json(environment)
        report.merge(environment, parse_unsupported_modules(output))
    return report


def report(ctx: UpdateContext, outcomes: list[UpdateOutcome]) -> None:
    """Print what changed during the run and what is still pending."""
    config = ctx.config
    ctx.output.outcomes(outcomes)
    ctx.output.line()

    ctx.output.header2("Lock file changes")
    diff = ctx.composer.lock_diff(
        from_file=config.snapshot_file.name, to_file=config.lock_file.name
    ).check()
    ctx.output.line(diff.stdout.rstrip())

    if not config.full_report:
        return

    if not config.only_security:
        ctx.output.header2("Not updated packages (direct)")
        ctx.output.line(ctx.composer.outdated(direct=True).rstrip())
        ctx.output.header2("Not updated packages (all)")
        ctx.output.line(ctx.composer.outdated().rstrip())

    ctx.output.header2("Not updated securities (Packagist)")
    ctx.output.line(ctx.composer.audit_report().rstrip())
    ctx.output.header2("Not updated securities (Drupal)")
    ctx.output.line(ctx.drush.security_report().rstrip())

    ctx.output.header2("Unsupported modules")
    ctx.output.unsupported_modules(collect_unsupported_modules(ctx))


def run(ctx: UpdateContext) -> list[UpdateOutcome]:
    """Run the four phases, removing the lock file snapshot at the end.

    Raises:
        CommandFailedError: When a command outside the update loop fails
    """
    config = ctx.config
    ctx.output.setup(config)
    shutil.copyfile(config.lock_file, config.snapshot_file)
    try:
        ctx.output.summary()
        ctx.output.header1("1. Consolidating configuration")
        consolidate_configuration(ctx)

        ctx.output.header1("2. Checking packages")
        packages = find_packages_to_update(ctx)
        ctx.output.line()

        ctx.output.header1("3. Updating packages")
        outcomes = update_packages(ctx, packages)
        ctx.output.line()

        ctx.output.header1("4. Report")
        report(ctx, outcomes)
    finally:
        config.snapshot_file.unlink(missing_ok=True)

    return outcomes
