"""Core data models for the Drupal updater."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

PACKAGE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+/[A-Za-z0-9_-]+$")

DEFAULT_ENVIRONMENT = "@self"
DEFAULT_AUTHOR = "Drupal <drupal@update-helper>"
DEFAULT_TIMEOUT = 300.0

# Reporting script marker for obsolete modules (no newer release to recommend)
OBSOLETE_RECOMMENDATION = "None"


def parse_environments(value: str) -> list[str]:
    """Split a comma separated list of drush aliases.

    Args:
        value: Raw option value, e.g. "@stage, @prod"

    Returns:
        Ordered aliases without blanks or duplicates
    """
    environments: list[str] = []
    for item in value.split(","):
        item = item.strip()
        if item and item not in environments:
            environments.append(item)
    return environments


def filter_package_names(lines: list[str]) -> list[str]:
    """Keep the lines that look like a composer package name.

    Args:
        lines: Raw output lines of a listing command

    Returns:
        Trimmed vendor/name identifiers, in input order
    """
    packages = []
    for line in lines:
        name = line.strip()
        if PACKAGE_NAME_PATTERN.match(name):
            packages.append(name)
    return packages


def unique(items: list[str]) -> list[str]:
    """Drop duplicates keeping the first occurrence."""
    return list(dict.fromkeys(items))


@dataclass
class RunConfig:
    """Settings for a single updater run."""

    environments: list[str] = field(default_factory=lambda: [DEFAULT_ENVIRONMENT])
    author: str = DEFAULT_AUTHOR
    only_security: bool = False
    no_dev: bool = False
    packages: list[str] | None = None  # explicit list, skips discovery
    working_dir: Path = field(default_factory=Path.cwd)
    config_dir: str = "config"
    web_root: str = "web"
    timeout: float = DEFAULT_TIMEOUT
    composer_binary: str = "composer"
    drush_binary: str = "drush"
    lock_diff_binary: str = "composer-lock-diff"

    @property
    def full_report(self) -> bool:
        return self.packages is None

    @property
    def lock_file(self) -> Path:
        return self.working_dir / "composer.lock"

    @property
    def snapshot_file(self) -> Path:
        return self.working_dir / "composer.drupalupdater.lock"


class UpdateStatus(str, Enum):
    """What happened to a package during the update loop."""

    UPDATED = "updated"
    NOT_CHANGED = "not_changed"
    FAILED = "failed"


@dataclass
class UpdateOutcome:
    """Result of trying to update one package."""

    package: str
    status: UpdateStatus
    from_version: str | None = None
    to_version: str | None = None
    diff: str | None = None
    error: str | None = None


@dataclass
class UnsupportedModule:
    """A module flagged as unsupported in one or more environments."""

    name: str
    current_version: str
    recommended_version: str | None
    environments: list[str] = field(default_factory=list)


class UnsupportedModuleReport:
    """Unsupported modules keyed by name, merged across environments."""

    def __init__(self):
        self._modules: dict[str, UnsupportedModule] = {}

    def merge(self, environment: str, modules: list[UnsupportedModule]) -> None:
        """Add the findings of one environment.

        A module already seen keeps its first versions and gets the
        environment appended to its list.
        """
        for module in modules:
            existing = self._modules.get(module.name)
            if existing is None:
                self._modules[module.name] = UnsupportedModule(
                    name=module.name,
                    current_version=module.current_version,
                    recommended_version=module.recommended_version,
                    environments=[environment],
                )
            elif environment not in existing.environments:
                existing.environments.append(environment)

    @property
    def modules(self) -> list[UnsupportedModule]:
        return list(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)
