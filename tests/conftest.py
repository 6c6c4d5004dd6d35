"""Pytest configuration and fixtures."""

import json

import pytest
from rich.console import Console

from core.models import RunConfig
from core.output import UpdateOutput
from core.process import CommandResult
from core.updater import UpdateContext


class FakeRunner:
    """Command runner returning scripted results and recording every call."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self._rules = []

    def on(self, *prefix, returncode=0, stdout="", stderr="", effect=None):
        """Script the result of commands starting with prefix.

        The most recently added matching rule wins. effect, if given, is
        called with the full argument list before the result is returned.
        """
        self._rules.append((list(prefix), returncode, stdout, stderr, effect))
        return self

    def run(self, args):
        args = list(args)
        self.calls.append(args)
        for prefix, returncode, stdout, stderr, effect in reversed(self._rules):
            if args[: len(prefix)] == prefix:
                if effect is not None:
                    effect(args)
                return CommandResult(args=args, returncode=returncode, stdout=stdout, stderr=stderr)
        return CommandResult(args=args, returncode=0)

    def matching(self, *prefix):
        """Recorded calls starting with prefix."""
        return [call for call in self.calls if call[: len(prefix)] == list(prefix)]


def lock_content(versions: dict[str, str], types: dict[str, str] | None = None) -> str:
    types = types or {}
    packages = [
        {"name": name, "version": version, "type": types.get(name, "library")}
        for name, version in versions.items()
    ]
    return json.dumps({"packages": packages, "packages-dev": []}, indent=4)


@pytest.fixture
def project_dir(tmp_path):
    """A Drupal project root with a composer.lock."""
    (tmp_path / "composer.json").write_text("{}")
    (tmp_path / "composer.lock").write_text(
        lock_content({"drupal/core": "10.1.0", "drupal/token": "1.12.0", "psr/log": "1.1.4"})
    )
    return tmp_path


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def console():
    return Console(record=True, width=200, force_terminal=False)


@pytest.fixture
def make_context(project_dir, runner, console):
    """Factory building an UpdateContext wired to the fake runner."""

    def _make(**overrides):
        config = RunConfig(working_dir=project_dir, **overrides)
        return UpdateContext.create(config, runner=runner, output=UpdateOutput(console))

    return _make


@pytest.fixture
def bump_lock(project_dir):
    """Effect factory that rewrites composer.lock like a successful update."""

    def _bump(versions: dict[str, str]):
        def effect(args):
            (project_dir / "composer.lock").write_text(lock_content(versions))

        return effect

    return _bump
