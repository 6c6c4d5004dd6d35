"""Tests for the command runner."""

import sys

import pytest

from core.errors import CommandFailedError
from core.process import CommandResult, CommandRunner


class TestCommandRunner:
    """Test running real commands."""

    def test_captures_stdout(self, tmp_path):
        runner = CommandRunner(tmp_path)
        result = runner.run([sys.executable, "-c", "print('hello')"])

        assert result.ok
        assert result.stdout.strip() == "hello"

    def test_runs_in_working_directory(self, tmp_path):
        runner = CommandRunner(tmp_path)
        result = runner.run([sys.executable, "-c", "import os; print(os.getcwd())"])

        assert result.stdout.strip() == str(tmp_path)

    def test_failure_is_returned_not_raised(self, tmp_path):
        """Should return a failed result carrying stderr."""
        runner = CommandRunner(tmp_path)
        result = runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
        )

        assert not result.ok
        assert result.returncode == 3
        assert result.stderr == "boom"

    def test_missing_binary(self, tmp_path):
        runner = CommandRunner(tmp_path)
        result = runner.run(["definitely-not-a-real-binary-xyz"])

        assert not result.ok
        assert result.returncode == 127
        assert "not found" in result.stderr

    def test_timeout(self, tmp_path):
        runner = CommandRunner(tmp_path, timeout=0.5)
        result = runner.run([sys.executable, "-c", "import time; time.sleep(5)"])

        assert not result.ok
        assert "timed out" in result.stderr


class TestCommandResult:
    """Test the command result helpers."""

    def test_check_returns_self_on_success(self):
        result = CommandResult(args=["git", "status"], returncode=0, stdout="ok")
        assert result.check() is result

    def test_check_raises_on_failure(self):
        result = CommandResult(args=["git", "commit", "-m", "a message"], returncode=1, stderr="nope")

        with pytest.raises(CommandFailedError) as excinfo:
            result.check()

        assert excinfo.value.result is result
        assert "git commit -m 'a message'" in str(excinfo.value)

    def test_output_combines_streams(self):
        result = CommandResult(args=["x"], returncode=1, stdout="out", stderr="err")
        assert result.output == "out\nerr"
