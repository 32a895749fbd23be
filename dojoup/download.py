"""Download prebuilt release archives."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import requests

from .errors import ReleaseNotFoundError
from .utils import PlatformInfo, log, run_command

logger = logging.getLogger(__name__)


def artifact_name(version: str, platform: PlatformInfo) -> str:
    return f"dojo_{version}_{platform.os}_{platform.arch}.{platform.archive_ext}"


def artifact_url(release_url: str, version: str, platform: PlatformInfo) -> str:
    """Return ``<release_url>/dojo_<version>_<os>_<arch>.<ext>``."""
    return f"{release_url}/{artifact_name(version, platform)}"


def artifact_exists(url: str) -> bool:
    """Check that ``url`` resolves, following redirects to the asset storage."""
    try:
        response = requests.head(url, allow_redirects=True, timeout=30)
    except requests.RequestException as e:
        logger.debug("HEAD %s failed: %s", url, e)
        return False
    return response.ok


def ensure_artifact_exists(url: str, repo: str, tag: str) -> None:
    if not artifact_exists(url):
        msg = f"no prebuilt binaries found for {tag} at {url}"
        raise ReleaseNotFoundError(
            msg,
            hint=(
                f"Check https://github.com/{repo}/releases for available "
                "versions and pass one with --version, or build from source with --branch."
            ),
        )


def download_file(url: str, destination: Path) -> Path:
    """Download a file from a URL to a destination path."""
    log(f"downloading {url}", "info")
    try:
        response = requests.get(url, stream=True, timeout=30)
        response.raise_for_status()

        with destination.open("wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)
    except requests.RequestException as e:
        msg = f"failed to download {url}: {e}"
        raise ReleaseNotFoundError(msg) from e

    return destination


def verify_installed_binary(bin_path: Path, name: str) -> str:
    """Run ``<bin_path> --version`` and warn when ``name`` resolves elsewhere on the PATH."""
    version = run_command([bin_path, "--version"], capture=True).strip()
    first_line = version.splitlines()[0] if version else name
    log(f"installed - {first_line}", "success")

    which_path = shutil.which(name)
    if which_path is not None and Path(which_path).resolve() != bin_path.resolve():
        log(
            f"there are multiple binaries with the name '{name}' present in your PATH; "
            f"this may be the result of installing '{name}' using another method, "
            f"like Cargo or other package managers. You may need to run "
            f"'rm {which_path}' or move '{bin_path.parent}' in your 'PATH' to allow "
            "the newly installed version to take precedence!",
            "warning",
        )
    return version


def verify_installed_binaries(bin_paths: list[Path]) -> None:
    for bin_path in bin_paths:
        verify_installed_binary(bin_path, bin_path.name.removesuffix(".exe"))
