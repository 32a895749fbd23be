"""Installation options and remote selector resolution."""

from __future__ import annotations

from dataclasses import dataclass

from .config import DEFAULT_REPO
from .errors import ConfigError

EXCLUSIVE_OPTIONS = ("branch", "tag", "pr", "commit")


@dataclass(frozen=True)
class RemoteSelector:
    """The git ref a source build should track.

    ``kind`` is one of ``none``, ``branch``, ``tag`` or ``pr``.
    """

    kind: str = "none"
    name: str = ""

    @property
    def ref(self) -> str | None:
        """Return the ref to fetch, rewriting pull requests to their head ref."""
        if self.kind == "none":
            return None
        if self.kind == "pr":
            return f"refs/pull/{self.name}/head"
        return self.name


@dataclass(frozen=True)
class OptionSet:
    """User-supplied installation directives, validated on construction."""

    repo: str = DEFAULT_REPO
    branch: str | None = None
    tag: str | None = None
    version: str | None = None
    path: str | None = None
    pr: str | None = None
    commit: str | None = None

    def __post_init__(self) -> None:
        self.active_selector()
        if self.pr is not None and not self.pr.isdigit():
            msg = f"pull request must be a number, got '{self.pr}'"
            raise ConfigError(msg)

    def active_selector(self) -> str | None:
        """Return the single exclusive option that is set, or None."""
        active = [name for name in EXCLUSIVE_OPTIONS if getattr(self, name)]
        if len(active) > 1:
            flags = ", ".join(f"--{name}" for name in active)
            msg = f"only one of --branch, --tag, --pr or --commit can be given (got {flags})"
            raise ConfigError(msg)
        return active[0] if active else None

    def remote_selector(self) -> RemoteSelector:
        active = self.active_selector()
        if active in ("branch", "tag", "pr"):
            return RemoteSelector(kind=active, name=getattr(self, active))
        return RemoteSelector()

    def is_upstream(self, upstream: str = DEFAULT_REPO) -> bool:
        return self.repo == upstream

    def ignored_by_path(self, upstream: str = DEFAULT_REPO) -> list[str]:
        """Return the options a local ``path`` install will ignore."""
        if not self.path:
            return []
        ignored = [name for name in ("branch", "tag", "version", "pr", "commit") if getattr(self, name)]
        if not self.is_upstream(upstream):
            ignored.insert(0, "repo")
        return ignored
