"""Exceptions raised by dojoup."""

from __future__ import annotations

import shlex
from collections.abc import Sequence


class DojoupError(Exception):
    """Base exception with optional user-facing remediation text."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def format(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class ConfigError(DojoupError):
    """Conflicting or invalid options."""


class MissingDependencyError(DojoupError):
    """A required external command is not installed."""

    def __init__(self, command: str) -> None:
        super().__init__(
            f"need '{command}' (command not found)",
            hint=f"Install {command} and make sure it is on your PATH.",
        )
        self.command = command


class UnsupportedPlatformError(DojoupError):
    pass


class NoReleaseFoundError(DojoupError):
    """The release feed did not yield a usable tag."""


class ReleaseNotFoundError(DojoupError):
    """The release artifact for the resolved tag does not exist."""


class ParseError(DojoupError):
    pass


class ExternalCommandError(DojoupError):
    """A subprocess exited with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = [str(c) for c in command]
        self.returncode = returncode
        self.output = output
        rendered = " ".join(shlex.quote(c) for c in self.command)
        if returncode is None:
            message = f"command failed: {rendered}"
        else:
            message = f"command failed (exit {returncode}): {rendered}"
        super().__init__(message, hint=output.strip() or None)


class BuildError(ExternalCommandError):
    """Compiling the toolchain failed."""
