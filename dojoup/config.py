"""Configuration management for dojoup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REPO = "dojoengine/dojo"
DEFAULT_BINARIES = ("katana", "sozo", "torii", "dojo-language-server")
GITHUB_API_URL = "https://api.github.com"
GITHUB_URL = "https://github.com"
SCARB_INSTALL_URL = "https://docs.swmansion.com/scarb/install.sh"


def default_dojo_dir(environ: dict[str, str] | None = None) -> Path:
    """Return ``$DOJO_DIR`` or ``${XDG_CONFIG_HOME:-$HOME}/.dojo``."""
    env = os.environ if environ is None else environ
    if env.get("DOJO_DIR"):
        return Path(env["DOJO_DIR"]).expanduser()
    base = env.get("XDG_CONFIG_HOME") or env.get("HOME") or str(Path.home())
    return Path(base).expanduser() / ".dojo"


@dataclass
class DojoupConfig:
    """Configuration for dojoup."""

    dojo_dir: Path = field(default_factory=default_dojo_dir)
    repo: str = DEFAULT_REPO
    binaries: tuple[str, ...] = DEFAULT_BINARIES
    api_url: str = GITHUB_API_URL
    download_base_url: str = GITHUB_URL
    scarb_install_url: str = SCARB_INSTALL_URL

    @property
    def bin_dir(self) -> Path:
        return self.dojo_dir / "bin"

    def repo_cache_dir(self, repo: str) -> Path:
        """Return the clone location ``<dojo_dir>/<author>/<name>`` for ``repo``."""
        author, _, name = repo.partition("/")
        return self.dojo_dir / author / name

    def release_download_url(self, repo: str, tag: str) -> str:
        return f"{self.download_base_url}/{repo}/releases/download/{tag}"

    def validate(self) -> None:
        """Validate the configuration."""
        if self.repo.count("/") != 1 or not all(self.repo.split("/")):
            msg = f"repository must be given as 'author/name', got '{self.repo}'"
            raise ConfigError(msg)
        if not self.binaries:
            msg = "at least one binary must be configured"
            raise ConfigError(msg)

    def ensure_dirs(self) -> None:
        self.bin_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any], dojo_dir: Path | None = None) -> DojoupConfig:
        known = {"repo", "binaries", "api_url", "download_base_url", "scarb_install_url"}
        unknown = set(data) - known - {"dojo_dir"}
        for key in sorted(unknown):
            logger.warning("Ignoring unknown configuration key '%s'", key)
        kwargs: dict[str, Any] = {k: v for k, v in data.items() if k in known}
        if "binaries" in kwargs:
            binaries = kwargs["binaries"]
            if isinstance(binaries, str):
                binaries = [binaries]
            kwargs["binaries"] = tuple(binaries)
        if dojo_dir is not None:
            kwargs["dojo_dir"] = dojo_dir
        elif isinstance(data.get("dojo_dir"), str):
            kwargs["dojo_dir"] = Path(os.path.expanduser(data["dojo_dir"]))
        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def load_from_file(cls, config_path: str | Path | None = None) -> DojoupConfig:
        """Load configuration from a YAML file, falling back to defaults."""
        dojo_dir = default_dojo_dir()
        if not config_path:
            config_path = os.environ.get("DOJOUP_CONFIG") or dojo_dir / "dojoup.yaml"
        config_path = Path(config_path)

        try:
            with config_path.open() as file:
                config_data = yaml.safe_load(file) or {}
        except FileNotFoundError:
            logger.debug("No configuration file at %s, using defaults", config_path)
            return cls(dojo_dir=dojo_dir)
        except yaml.YAMLError as e:
            msg = f"invalid YAML in configuration file: {config_path}"
            raise ConfigError(msg, hint=str(e)) from e

        if not isinstance(config_data, dict):
            msg = f"configuration file {config_path} must contain a mapping"
            raise ConfigError(msg)
        # DOJO_DIR in the environment wins over the file
        env_dir = dojo_dir if os.environ.get("DOJO_DIR") else None
        return cls.from_dict(config_data, dojo_dir=env_dir)
