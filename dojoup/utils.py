"""Utility functions for dojoup."""

from __future__ import annotations

import logging
import platform
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import ExternalCommandError, MissingDependencyError, UnsupportedPlatformError

# All user-facing output goes to stderr, like the shell installer it replaces
console = Console(stderr=True, highlight=False, emoji=False)
logger = logging.getLogger("dojoup")

_STYLES = {
    "info": "blue",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
    "debug": "dim",
}
_verbose = False


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    global _verbose  # noqa: PLW0603
    _verbose = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def log(message: str, level: str = "default") -> None:
    """Print a prefixed message to stderr with a style based on the level.

    ``debug`` messages are only shown with ``--verbose``.
    """
    if level == "debug" and not _verbose:
        return
    style = _STYLES.get(level)
    text = escape(f"dojoup: {message}")
    console.print(f"[{style}]{text}[/{style}]" if style else text)


@dataclass(frozen=True)
class PlatformInfo:
    """The host platform as named by the release artifacts."""

    os: str
    arch: str
    archive_ext: str

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.os == "win32" else ""


def is_translated() -> bool:
    """Return True when running as an x86_64 process under Rosetta."""
    try:
        result = subprocess.run(
            ["sysctl", "-n", "sysctl.proc_translated"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return False
    return result.stdout.strip() == "1"


def current_platform(
    system: str | None = None,
    machine: str | None = None,
    translated: bool | None = None,
) -> PlatformInfo:
    """Detect the current platform and architecture."""
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()

    archive_ext = "tar.gz"
    if system == "linux":
        os_name = "linux"
    elif system == "darwin":
        os_name = "darwin"
    elif system == "windows" or system.startswith(("mingw", "msys", "cygwin")):
        os_name = "win32"
        archive_ext = "zip"
    else:
        msg = f"unsupported platform: {system}"
        raise UnsupportedPlatformError(msg)

    if machine in ("x86_64", "amd64"):
        if os_name == "darwin" and translated is None:
            translated = is_translated()
        arch = "arm64" if translated else "amd64"
    elif machine in ("arm64", "aarch64"):
        arch = "arm64"
    else:
        arch = "amd64"

    return PlatformInfo(os=os_name, arch=arch, archive_ext=archive_ext)


def check_cmd(name: str) -> bool:
    """Return True when ``name`` is found on the PATH."""
    return shutil.which(name) is not None


def need_cmd(name: str) -> None:
    if not check_cmd(name):
        raise MissingDependencyError(name)


def run_command(
    args: Sequence[str | Path],
    *,
    cwd: Path | None = None,
    capture: bool = False,
    error_cls: type[ExternalCommandError] = ExternalCommandError,
) -> str:
    """Run a command and raise ``error_cls`` naming it if it fails."""
    command = [str(a) for a in args]
    logger.debug("Running: %s", shlex.join(command))
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            check=True,
            capture_output=capture,
            text=True,
        )
    except OSError as e:
        raise error_cls(command, output=str(e)) from e
    except subprocess.CalledProcessError as e:
        raise error_cls(command, e.returncode, e.stderr or e.stdout or "") from e
    return result.stdout or ""
