"""Reading composer.lock files."""

import json
from pathlib import Path


def read_lock_bytes(path: Path) -> bytes | None:
    """Raw lock file content, or None when the file does not exist."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def locked_versions(path: Path) -> dict[str, str]:
    """Map every locked package, dev ones included, to its version.

    Args:
        path: Path to a composer.lock file

    Returns:
        Package name to version; empty if the file is missing or unreadable
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}

    versions = {}
    for section in ("packages", "packages-dev"):
        for package in data.get(section) or []:
            if "name" in package:
                versions[package["name"]] = package.get("version", "")
    return versions
