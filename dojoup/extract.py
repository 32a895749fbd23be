"""Extract toolchain binaries from release archives."""

from __future__ import annotations

import shutil
import tarfile
import zipfile
from pathlib import Path

from .errors import DojoupError
from .utils import log


class ExtractionError(DojoupError):
    """Error during extraction process."""


def extract_archive(archive_path: Path, dest_dir: Path) -> None:
    """Extract a ``.tar.gz`` or ``.zip`` archive to a destination directory."""
    # Check file type
    with archive_path.open("rb") as f:
        header = f.read(4)

    try:
        if header.startswith(b"\x1f\x8b") or archive_path.name.endswith((".tar.gz", ".tgz")):
            with tarfile.open(archive_path, mode="r:gz") as tar:
                if hasattr(tarfile, "data_filter"):
                    tar.extractall(path=dest_dir, filter="data")
                else:
                    tar.extractall(path=dest_dir)
        elif header.startswith(b"PK") or archive_path.name.endswith(".zip"):
            with zipfile.ZipFile(archive_path) as zip_file:
                zip_file.extractall(path=dest_dir)
        else:
            msg = f"unsupported archive format: {archive_path.name}"
            raise ExtractionError(msg)
    except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
        msg = f"failed to extract {archive_path.name}: {e}"
        raise ExtractionError(msg) from e


def find_binary(extracted_dir: Path, binary_name: str) -> Path:
    """Locate ``binary_name`` inside an extracted archive.

    An exact match at the top level wins; otherwise a single match anywhere
    below, preferring one inside a ``bin/`` directory.
    """
    top_level = extracted_dir / binary_name
    if top_level.is_file():
        return top_level

    matches = [p for p in extracted_dir.glob(f"**/{binary_name}") if p.is_file()]
    if len(matches) == 1:
        return matches[0]
    bin_matches = [p for p in matches if p.parent.name == "bin"]
    if len(bin_matches) == 1:
        return bin_matches[0]

    if not matches:
        msg = f"{binary_name} not found in archive"
    else:
        found = ", ".join(str(p.relative_to(extracted_dir)) for p in matches)
        msg = f"{len(matches)} candidates for {binary_name} found in archive: {found}"
    raise ExtractionError(msg)


def remove_existing(path: Path) -> None:
    """Remove a file or symlink so the new binary replaces it instead of writing through."""
    if path.is_symlink() or path.is_file():
        path.unlink()


def copy_binary_to_destination(
    source_path: Path,
    destination_dir: Path,
    binary_name: str,
) -> Path:
    """Copy the binary to its destination and set permissions."""
    dest_path = destination_dir / binary_name
    remove_existing(dest_path)
    shutil.copy2(source_path, dest_path)
    dest_path.chmod(dest_path.stat().st_mode | 0o755)
    log(f"installed {dest_path}", "debug")
    return dest_path


def install_binaries_from_archive(
    archive_path: Path,
    extract_dir: Path,
    bin_dir: Path,
    binary_names: list[str],
) -> list[Path]:
    """Extract ``archive_path`` into ``extract_dir`` and install every binary into ``bin_dir``.

    All binaries are located before any is copied, so an incomplete archive
    leaves ``bin_dir`` untouched.
    """
    extract_archive(archive_path, extract_dir)
    sources = {name: find_binary(extract_dir, name) for name in binary_names}
    bin_dir.mkdir(parents=True, exist_ok=True)
    return [
        copy_binary_to_destination(source, bin_dir, name)
        for name, source in sources.items()
    ]

