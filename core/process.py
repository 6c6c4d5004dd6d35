"""Running external commands."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import CommandFailedError
from .models import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished command with its captured output."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return shlex.join(self.args)

    @property
    def output(self) -> str:
        """Stdout followed by stderr, like a shell `2>&1`."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def check(self) -> "CommandResult":
        """Return self, or raise CommandFailedError if the command failed."""
        if not self.ok:
            raise CommandFailedError(self)
        return self


class CommandRunner:
    """Runs commands synchronously inside the project directory."""

    def __init__(self, cwd: Path, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the runner.

        Args:
            cwd: Directory every command runs in
            timeout: Seconds before a command is considered failed
        """
        self.cwd = cwd
        self.timeout = timeout

    def run(self, args: list[str]) -> CommandResult:
        """Run a command and wait for it to finish.

        Never raises for a failing command: a non-zero exit, a timeout or a
        missing binary all come back as a failed CommandResult.

        Args:
            args: Program and arguments, no shell involved

        Returns:
            The captured result
        """
        logger.debug("Running: %s", shlex.join(args))
        try:
            completed = subprocess.run(
                args,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Timed out after %ss: %s", self.timeout, shlex.join(args))
            return CommandResult(
                args=args,
                returncode=-1,
                stderr=f"Command timed out after {self.timeout:g} seconds",
            )
        except FileNotFoundError:
            return CommandResult(
                args=args, returncode=127, stderr=f"Command not found: {args[0]}"
            )

        logger.debug("Exit code %s: %s", completed.returncode, shlex.join(args))
        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
