"""Choose and run the installation strategy for a set of options."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Union

from .config import DojoupConfig
from .download import (
    artifact_name,
    artifact_url,
    download_file,
    ensure_artifact_exists,
    verify_installed_binaries,
)
from .extract import install_binaries_from_archive
from .options import OptionSet, RemoteSelector
from .releases import resolve_release
from .source import cargo_build_release, cargo_install, ensure_clone, link_binary, sync_checkout
from .utils import PlatformInfo, current_platform, log, need_cmd


@dataclass(frozen=True)
class LocalBuild:
    """Build a local source tree and symlink its binaries."""

    path: Path
    required_commands: ClassVar[tuple[str, ...]] = ("cargo",)


@dataclass(frozen=True)
class PrebuiltDownload:
    """Download a released archive for this platform."""

    repo: str
    version: str | None = None
    tag: str | None = None
    required_commands: ClassVar[tuple[str, ...]] = ()


@dataclass(frozen=True)
class SourceBuild:
    """Clone the repository and ``cargo install`` each binary."""

    repo: str
    selector: RemoteSelector = RemoteSelector()
    commit: str | None = None
    required_commands: ClassVar[tuple[str, ...]] = ("git", "cargo")


InstallStrategy = Union[LocalBuild, PrebuiltDownload, SourceBuild]


def choose_strategy(options: OptionSet, config: DojoupConfig) -> InstallStrategy:
    """Pick exactly one strategy: local path, then prebuilt upstream, then source."""
    if options.path:
        ignored = options.ignored_by_path(config.repo)
        if ignored:
            flags = ", ".join(f"--{name}" for name in ignored)
            log(f"--path was specified, ignoring {flags}", "warning")
        return LocalBuild(path=Path(options.path).expanduser().resolve())

    if options.is_upstream(config.repo) and not (options.branch or options.pr or options.commit):
        return PrebuiltDownload(repo=options.repo, version=options.version, tag=options.tag)

    if options.version:
        log("--version is ignored when building from source", "warning")
    return SourceBuild(
        repo=options.repo,
        selector=options.remote_selector(),
        commit=options.commit,
    )


def check_requirements(strategy: InstallStrategy) -> None:
    for command in strategy.required_commands:
        need_cmd(command)


def install_local(
    strategy: LocalBuild,
    config: DojoupConfig,
    platform: PlatformInfo | None = None,
) -> list[Path]:
    suffix = (platform or current_platform()).exe_suffix
    release_dir = cargo_build_release(strategy.path)
    return [
        link_binary(release_dir / f"{name}{suffix}", config.bin_dir, f"{name}{suffix}")
        for name in config.binaries
    ]


def install_prebuilt(
    strategy: PrebuiltDownload,
    config: DojoupConfig,
    platform: PlatformInfo | None = None,
) -> list[Path]:
    release = resolve_release(
        strategy.repo,
        strategy.version,
        strategy.tag,
        api_url=config.api_url,
    )
    platform = platform or current_platform()
    url = artifact_url(config.release_download_url(strategy.repo, release.tag), release.version, platform)
    log(f"installing dojo (version {release.version}, tag {release.tag})", "info")
    ensure_artifact_exists(url, strategy.repo, release.tag)

    with tempfile.TemporaryDirectory(prefix="dojoup-") as tmp_dir:
        tmp_path = Path(tmp_dir)
        archive = download_file(url, tmp_path / artifact_name(release.version, platform))
        names = [f"{name}{platform.exe_suffix}" for name in config.binaries]
        installed = install_binaries_from_archive(archive, tmp_path / "extracted", config.bin_dir, names)

    verify_installed_binaries(installed)
    return installed


def install_from_source(strategy: SourceBuild, config: DojoupConfig) -> list[Path]:
    repo_path = ensure_clone(
        strategy.repo,
        config.repo_cache_dir(strategy.repo),
        config.download_base_url,
    )
    sync_checkout(repo_path, strategy.selector, strategy.commit)
    for name in config.binaries:
        cargo_install(repo_path, name, config.dojo_dir)
    return [config.bin_dir / name for name in config.binaries]


def run_strategy(strategy: InstallStrategy, config: DojoupConfig) -> list[Path]:
    """Run ``strategy`` and return the paths of the installed binaries."""
    if isinstance(strategy, LocalBuild):
        return install_local(strategy, config)
    if isinstance(strategy, PrebuiltDownload):
        return install_prebuilt(strategy, config)
    if isinstance(strategy, SourceBuild):
        return install_from_source(strategy, config)
    msg = f"unknown install strategy: {strategy!r}"
    raise TypeError(msg)
