"""dojoup - the Dojo toolchain installer.

Installs ``katana``, ``sozo``, ``torii`` and ``dojo-language-server`` from a
prebuilt release, a git branch, tag, pull request or commit, or a local source
tree, and keeps the companion ``scarb`` version in step.
"""

from __future__ import annotations

__version__ = "0.1.0"

from . import cli, config, download, extract, options, releases, scarb, source, strategy, utils
from .cli import main, update_dojo
from .config import DojoupConfig
from .options import OptionSet, RemoteSelector
from .releases import ReleaseVersion, resolve_release
from .strategy import LocalBuild, PrebuiltDownload, SourceBuild, choose_strategy, run_strategy
from .utils import current_platform, setup_logging

__all__ = [
    "DojoupConfig",
    "LocalBuild",
    "OptionSet",
    "PrebuiltDownload",
    "ReleaseVersion",
    "RemoteSelector",
    "SourceBuild",
    "choose_strategy",
    "cli",
    "config",
    "current_platform",
    "download",
    "extract",
    "main",
    "options",
    "releases",
    "resolve_release",
    "run_strategy",
    "scarb",
    "setup_logging",
    "source",
    "strategy",
    "update_dojo",
    "utils",
]
