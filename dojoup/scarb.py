"""Keep the companion ``scarb`` install in step with the installed toolchain."""

from __future__ import annotations

import tempfile
from pathlib import Path

import requests

from .config import DojoupConfig
from .errors import DojoupError
from .releases import parse_version_token
from .result import Result
from .utils import check_cmd, log, run_command

SCARB = "scarb"
# Binary whose ``--version`` report names the scarb version it was built against
VERSION_SOURCE = "sozo"


def required_scarb_version(config: DojoupConfig) -> str:
    output = run_command([config.bin_dir / VERSION_SOURCE, "--version"], capture=True)
    return parse_version_token(output, SCARB)


def current_scarb_version() -> str | None:
    """Return the active scarb version, or None when scarb is not usable."""
    if not check_cmd(SCARB):
        return None
    try:
        output = run_command([SCARB, "--version"], capture=True)
        return parse_version_token(output, SCARB)
    except DojoupError:
        return None


def install_with_asdf(version: str) -> None:
    plugins = run_command(["asdf", "plugin", "list"], capture=True)
    if SCARB not in plugins.split():
        run_command(["asdf", "plugin", "add", SCARB])
    run_command(["asdf", "install", SCARB, version])
    run_command(["asdf", "global", SCARB, version])


def install_with_script(version: str, script_url: str) -> None:
    """Run the upstream scarb install script for ``version``."""
    try:
        response = requests.get(script_url, timeout=30)
        response.raise_for_status()
    except requests.RequestException as e:
        msg = f"could not download scarb installer from {script_url}: {e}"
        raise DojoupError(msg) from e

    try:
        with tempfile.TemporaryDirectory() as tmp_dir:
            script = Path(tmp_dir) / "install.sh"
            script.write_text(response.text, encoding="utf-8")
            run_command(["sh", script, "-v", version])
    except (OSError, UnicodeError) as e:
        msg = f"could not run scarb installer: {e}"
        raise DojoupError(msg) from e


def install_scarb(config: DojoupConfig) -> Result[str, str]:
    """Install the scarb version required by the toolchain, best effort.

    Returns the installed (or already active) version, or an error message.
    """
    try:
        required = required_scarb_version(config)
        current = current_scarb_version()
        if current == required:
            log(f"scarb {required} already installed", "debug")
            return Result.ok(required)

        log(f"installing scarb {required}...", "info")
        if check_cmd("asdf"):
            install_with_asdf(required)
        else:
            install_with_script(required, config.scarb_install_url)
    except DojoupError as e:
        return Result.err(e.format())
    except OSError as e:
        return Result.err(str(e))
    log(f"installed scarb {required}", "success")
    return Result.ok(required)
