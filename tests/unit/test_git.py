"""Tests for the git wrapper."""

import pytest

from core.errors import CommandFailedError
from core.git import Git


class TestGit:
    """Test git commands."""

    def test_has_changes(self, runner):
        runner.on("git", "status", stdout=" M config/system.site.yml\n")
        git = Git(runner, author="Bot <bot@example.com>")

        assert git.has_changes("config") is True
        assert runner.calls == [["git", "status", "--porcelain", "--", "config"]]

    def test_has_no_changes(self, runner):
        assert Git(runner, author="x").has_changes("config") is False

    def test_commit_with_author_and_body(self, runner):
        git = Git(runner, author="Bot <bot@example.com>")
        git.commit("UPDATE - drupal/token", body="drupal/token 1.12.0 1.13.0")

        assert runner.calls == [
            [
                "git",
                "commit",
                "-m",
                "UPDATE - drupal/token",
                "-m",
                "drupal/token 1.12.0 1.13.0",
                "--author=Bot <bot@example.com>",
                "-n",
            ]
        ]

    def test_commit_without_body(self, runner):
        Git(runner, author="Bot <bot@example.com>").commit("CONFIG - x")
        assert runner.calls[0] == ["git", "commit", "-m", "CONFIG - x", "--author=Bot <bot@example.com>", "-n"]

    def test_restore(self, runner):
        Git(runner, author="x").restore("composer.json", "composer.lock")
        assert runner.calls == [["git", "checkout", "HEAD", "--", "composer.json", "composer.lock"]]

    def test_failures_are_fatal(self, runner):
        runner.on("git", "add", returncode=128, stderr="fatal: not a git repository")

        with pytest.raises(CommandFailedError):
            Git(runner, author="x").add("config")

    def test_clean(self, runner):
        Git(runner, author="x").clean("web", "config")
        assert runner.calls == [["git", "clean", "-fd", "--", "web", "config"]]
