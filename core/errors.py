"""Exceptions raised by the updater."""


class UpdaterError(Exception):
    """Base class for errors that abort an updater run."""


class CommandFailedError(UpdaterError):
    """An external command exited with an error nobody recovers from."""

    def __init__(self, result):
        self.result = result
        super().__init__(
            f"Command failed with exit code {result.returncode}: {result.command}"
        )


class ReportError(UpdaterError):
    """The unsupported modules script returned something we cannot read."""
