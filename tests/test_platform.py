"""Tests for host platform detection."""

from __future__ import annotations

import subprocess
from typing import Any

import pytest

import dojoup.utils
from dojoup.errors import UnsupportedPlatformError
from dojoup.utils import PlatformInfo, current_platform


@pytest.mark.parametrize(
    ("machine", "translated", "expected"),
    [
        ("x86_64", False, "amd64"),
        ("x86_64", True, "arm64"),
        ("amd64", False, "amd64"),
        ("arm64", False, "arm64"),
        ("aarch64", False, "arm64"),
        ("riscv64", False, "amd64"),
        ("i686", True, "amd64"),
    ],
)
def test_arch_mapping(machine: str, translated: bool, expected: str) -> None:  # noqa: FBT001
    info = current_platform(system="Darwin", machine=machine, translated=translated)
    assert info.arch == expected


@pytest.mark.parametrize(
    ("system", "expected"),
    [
        ("Linux", PlatformInfo("linux", "amd64", "tar.gz")),
        ("Darwin", PlatformInfo("darwin", "amd64", "tar.gz")),
        ("Windows", PlatformInfo("win32", "amd64", "zip")),
        ("MINGW64_NT-10.0", PlatformInfo("win32", "amd64", "zip")),
        ("CYGWIN_NT-10.0", PlatformInfo("win32", "amd64", "zip")),
    ],
)
def test_os_mapping(system: str, expected: PlatformInfo) -> None:
    assert current_platform(system=system, machine="x86_64", translated=False) == expected


def test_unsupported_os_is_an_error() -> None:
    with pytest.raises(UnsupportedPlatformError, match="freebsd"):
        current_platform(system="FreeBSD", machine="x86_64")


def test_windows_binaries_have_exe_suffix() -> None:
    assert current_platform(system="Windows", machine="x86_64").exe_suffix == ".exe"
    assert current_platform(system="Linux", machine="x86_64").exe_suffix == ""


def test_rosetta_probe_only_runs_on_darwin(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_probe() -> bool:
        calls.append(True)
        return True

    monkeypatch.setattr(dojoup.utils, "is_translated", fake_probe)
    assert current_platform(system="Linux", machine="x86_64").arch == "amd64"
    assert calls == []
    assert current_platform(system="Darwin", machine="x86_64").arch == "arm64"
    assert calls == [True]


def test_missing_probe_means_not_translated(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing_sysctl(*_args: Any, **_kwargs: Any) -> None:
        raise FileNotFoundError("sysctl")

    monkeypatch.setattr(subprocess, "run", missing_sysctl)
    assert dojoup.utils.is_translated() is False


def test_probe_reads_sysctl_output(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: list[str], **_kwargs: Any) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args, 0, stdout="1\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert dojoup.utils.is_translated() is True
