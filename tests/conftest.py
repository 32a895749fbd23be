"""Configuration for pytest fixtures used in dojoup tests."""

from __future__ import annotations

import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Callable

import pytest
import requests

import dojoup
from dojoup.config import DojoupConfig
from dojoup.errors import ExternalCommandError

BINARIES = ["katana", "sozo", "torii", "dojo-language-server"]


class FakeResponse:
    """Minimal stand-in for :class:`requests.Response`."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        content: bytes = b"",
        text: str = "",
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.content = content
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            msg = f"{self.status_code} Error"
            raise requests.HTTPError(msg)

    def json(self) -> Any:
        if self._json_data is None:
            msg = "Expecting value"
            raise ValueError(msg)
        return self._json_data

    def iter_content(self, chunk_size: int = 8192) -> Any:
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]


class FakeRunner:
    """Records commands instead of running them.

    Commands are keyed by program basename plus arguments, e.g.
    ``"sozo --version"``. ``outputs`` maps keys to stdout, ``failures`` holds
    keys that exit non-zero.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path | None]] = []
        self.outputs: dict[str, str] = {}
        self.failures: set[str] = set()

    @staticmethod
    def key(command: list[str]) -> str:
        return " ".join([Path(command[0]).name, *command[1:]])

    def __call__(
        self,
        args: Any,
        *,
        cwd: Path | None = None,
        capture: bool = False,  # noqa: ARG002
        error_cls: type[ExternalCommandError] = ExternalCommandError,
    ) -> str:
        command = [str(a) for a in args]
        self.calls.append((command, cwd))
        key = self.key(command)
        if key in self.failures:
            raise error_cls(command, 1)
        return self.outputs.get(key, "")

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]


@pytest.fixture
def config(tmp_path: Path) -> DojoupConfig:
    """A configuration rooted in a temporary dojo directory."""
    return DojoupConfig(dojo_dir=tmp_path / ".dojo")


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    """Replace every external command invocation with a recorder."""
    fake = FakeRunner()
    for module in (dojoup.source, dojoup.download, dojoup.scarb):
        monkeypatch.setattr(module, "run_command", fake)
    monkeypatch.setattr(dojoup.utils, "check_cmd", lambda _name: True)
    monkeypatch.setattr(dojoup.download.shutil, "which", lambda _name: None)
    return fake


@pytest.fixture
def create_dummy_archive() -> Callable:
    r"""Create an archive file with binary files for testing.

    Returns a function that creates archive files with specified binaries.

    Usage:
        archive_path = create_dummy_archive(
            dest_path=tmp_path / "test.tar.gz",
            binary_names=["katana", "sozo"],
            archive_type="tar.gz",
            binary_content="#!/bin/sh\necho test"
        )
    """

    def _create_archive(
        dest_path: Path,
        binary_names: str | list[str] = BINARIES,
        archive_type: str = "tar.gz",
        binary_content: str = "#!/usr/bin/env echo\n",
        nested_dir: str | None = None,
    ) -> Path:
        if isinstance(binary_names, str):
            binary_names = [binary_names]

        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir)

            # Create nested directory if requested
            if nested_dir:
                bin_dir = tmp_path / nested_dir
                bin_dir.mkdir(exist_ok=True, parents=True)
            else:
                bin_dir = tmp_path

            created_files = []
            for binary in binary_names:
                bin_file = bin_dir / binary
                bin_file.write_text(binary_content)
                bin_file.chmod(0o755)
                created_files.append(bin_file)

            if archive_type == "tar.gz":
                with tarfile.open(dest_path, "w:gz") as tar:
                    for file_path in created_files:
                        tar.add(file_path, arcname=str(file_path.relative_to(tmp_path)))
            elif archive_type == "zip":
                with zipfile.ZipFile(dest_path, "w") as zipf:
                    for file_path in created_files:
                        zipf.write(file_path, arcname=str(file_path.relative_to(tmp_path)))
            else:  # pragma: no cover
                msg = f"Unsupported archive type: {archive_type}"
                raise ValueError(msg)

            return dest_path

    return _create_archive
