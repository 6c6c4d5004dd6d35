"""Git operations on the project working tree."""

from .process import CommandResult, CommandRunner


class Git:
    """The handful of git commands the updater needs."""

    def __init__(self, runner: CommandRunner, author: str):
        self.runner = runner
        self.author = author

    def _run(self, *args: str) -> CommandResult:
        return self.runner.run(["git", *args])

    def has_changes(self, *paths: str) -> bool:
        """True if any of the paths differ from HEAD or are untracked."""
        result = self._run("status", "--porcelain", "--", *paths).check()
        return bool(result.stdout.strip())

    def add(self, *paths: str) -> None:
        self._run("add", "--", *paths).check()

    def commit(self, message: str, body: str | None = None) -> None:
        """Commit the index with the override author, skipping hooks."""
        args = ["commit", "-m", message]
        if body:
            args += ["-m", body]
        args += [f"--author={self.author}", "-n"]
        self._run(*args).check()

    def restore(self, *paths: str) -> None:
        """Put paths back to their last committed content."""
        self._run("checkout", "HEAD", "--", *paths).check()

    def clean(self, *paths: str) -> None:
        """Remove untracked files and directories under paths."""
        self._run("clean", "-fd", "--", *paths).check()
