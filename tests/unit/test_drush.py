"""Tests for the drush wrapper."""

import pytest

from core.drush import UNSUPPORTED_MODULES_SCRIPT, Drush
from core.errors import CommandFailedError


class TestDrush:
    """Test drush commands per environment."""

    def test_site_commands(self, runner):
        drush = Drush(runner)
        drush.cache_rebuild("@stage")
        drush.config_import("@stage")
        drush.config_export("@prod")
        drush.update_database("@prod")

        assert runner.calls == [
            ["drush", "@stage", "cr"],
            ["drush", "@stage", "cim", "-y"],
            ["drush", "@prod", "cex", "-y"],
            ["drush", "@prod", "updb", "-y"],
        ]

    def test_failures_are_returned(self, runner):
        runner.on("drush", "@stage", "cr", returncode=1, stderr="Bootstrap failed")
        result = Drush(runner).cache_rebuild("@stage")

        assert not result.ok
        assert result.stderr == "Bootstrap failed"

    def test_security_packages_with_updates(self, runner):
        """pm:security exits non-zero when updates exist."""
        runner.on("drush", "pm:security", returncode=3, stdout="drupal/core\ndrupal/webform\n")

        assert Drush(runner).security_packages() == ["drupal/core", "drupal/webform"]

    def test_security_packages_unavailable(self, runner):
        runner.on("drush", "pm:security", returncode=1, stderr="Command not defined")

        assert Drush(runner).security_packages() == []

    def test_unsupported_modules_json(self, runner):
        runner.on("drush", "@prod", "php:script", stdout="[]")

        assert Drush(runner).unsupported_modules_json("@prod") == "[]"
        assert runner.calls == [
            ["drush", "@prod", "php:script", str(UNSUPPORTED_MODULES_SCRIPT)]
        ]

    def test_unsupported_modules_failure_is_fatal(self, runner):
        runner.on("drush", "@prod", "php:script", returncode=1, stderr="PHP Fatal error")

        with pytest.raises(CommandFailedError):
            Drush(runner).unsupported_modules_json("@prod")
