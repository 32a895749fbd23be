"""Build the toolchain from a git checkout or a local source tree."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import BuildError
from .extract import remove_existing
from .options import RemoteSelector
from .utils import log, run_command

DEFAULT_BRANCH = "main"


def clone_url(repo: str, base_url: str) -> str:
    return f"{base_url}/{repo}"


def ensure_clone(repo: str, repo_path: Path, base_url: str) -> Path:
    """Clone ``repo`` into ``repo_path`` unless a checkout is already there."""
    if (repo_path / ".git").exists():
        log(f"using cached clone at {repo_path}", "debug")
        return repo_path
    repo_path.parent.mkdir(parents=True, exist_ok=True)
    log(f"cloning {repo}...", "info")
    run_command(["git", "clone", clone_url(repo, base_url), repo_path.name], cwd=repo_path.parent)
    return repo_path


def tracking_ref(selector: RemoteSelector) -> str:
    """Return the ref name to fetch into under ``refs/remotes/origin``."""
    return selector.ref or DEFAULT_BRANCH


def sync_checkout(repo_path: Path, selector: RemoteSelector, commit: str | None = None) -> str:
    """Force the checkout at ``repo_path`` to the selected remote ref.

    Local modifications are discarded. When ``commit`` is given it is checked
    out on top of the synchronized ref. Returns the ref that was checked out.
    """
    ref = tracking_ref(selector)
    local = f"refs/remotes/origin/{ref}"
    log(f"fetching {ref}...", "info")
    run_command(["git", "fetch", "origin", f"+{ref}:{local}"], cwd=repo_path)
    run_command(["git", "checkout", "--force", local], cwd=repo_path)
    if commit:
        run_command(["git", "checkout", "--force", commit], cwd=repo_path)
        return commit
    return local


def cargo_install(repo_path: Path, binary_name: str, root: Path) -> None:
    log(f"building {binary_name}...", "info")
    run_command(
        [
            "cargo",
            "install",
            "--path",
            f"./bin/{binary_name}",
            binary_name,
            "--locked",
            "--force",
            "--root",
            root,
        ],
        cwd=repo_path,
        error_cls=BuildError,
    )


def cargo_build_release(path: Path) -> Path:
    """Build every binary in release mode and return the output directory."""
    log(f"building binaries in {path}...", "info")
    run_command(["cargo", "build", "--bins", "--release"], cwd=path, error_cls=BuildError)
    return path / "target" / "release"


def link_binary(source_path: Path, destination_dir: Path, binary_name: str) -> Path:
    """Replace ``destination_dir/binary_name`` with a symlink to ``source_path``."""
    dest_path = destination_dir / binary_name
    remove_existing(dest_path)
    os.symlink(source_path, dest_path)
    log(f"linked {dest_path} -> {source_path}", "debug")
    return dest_path
