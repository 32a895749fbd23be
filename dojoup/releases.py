"""Release version resolution against the GitHub releases API."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any

import requests

from .errors import NoReleaseFoundError, ParseError
from .utils import log

logger = logging.getLogger(__name__)

STABLE = "stable"
STABLE_TAG_RE = re.compile(r"^v\d+\.\d+\.\d+(-rc\.\d+)?$")


@dataclass(frozen=True)
class ReleaseVersion:
    """A requested version and the release tag it resolved to."""

    requested: str
    tag: str
    version: str


def _maybe_github_token_header() -> dict[str, str]:
    token = os.environ.get("GITHUB_TOKEN")
    return {"Authorization": f"Bearer {token}"} if token else {}


def fetch_releases(
    repo: str,
    api_url: str,
    session: requests.Session | None = None,
) -> Any:
    """Return the decoded release list for ``repo``."""
    url = f"{api_url}/repos/{repo}/releases"
    log(f"fetching releases from {url}", "debug")
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, headers=_maybe_github_token_header(), timeout=30)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        msg = f"could not fetch releases for {repo}: {e}"
        raise NoReleaseFoundError(msg) from e


def pick_stable_tag(releases: Any) -> str | None:
    """Return the first non-prerelease tag in feed order matching ``vX.Y.Z[-rc.N]``."""
    if not isinstance(releases, list):
        return None
    for release in releases:
        if not isinstance(release, dict) or release.get("prerelease"):
            continue
        tag = release.get("tag_name")
        if isinstance(tag, str) and STABLE_TAG_RE.match(tag):
            return tag
    return None


def normalize_version(version: str) -> str:
    """Prefix numeric versions with ``v``; leave anything else untouched."""
    if version[:1].isdigit():
        return f"v{version}"
    return version


def parse_version_token(output: str, label: str) -> str:
    """Extract the version following ``label`` in a ``--version`` report.

    ``label`` is matched literally and may be followed by a colon, e.g. both
    ``scarb: 2.8.4`` and ``scarb 2.8.4`` yield ``2.8.4`` for ``label="scarb"``.
    """
    match = re.search(rf"{re.escape(label)}:?\s+(\d+(?:\.\d+)*(?:-[0-9A-Za-z.]+)?)", output)
    if not match:
        msg = f"no '{label}' version found in: {output.strip()!r}"
        raise ParseError(msg)
    return match.group(1)


def resolve_release(
    repo: str,
    version: str | None,
    tag: str | None,
    *,
    api_url: str,
    session: requests.Session | None = None,
) -> ReleaseVersion:
    """Resolve the requested version or tag to a concrete release tag."""
    if tag:
        return ReleaseVersion(requested=tag, tag=tag, version=tag)

    requested = version or STABLE
    if requested == STABLE:
        releases = fetch_releases(repo, api_url, session)
        stable_tag = pick_stable_tag(releases)
        if stable_tag is None:
            msg = f"no stable release found for {repo}"
            raise NoReleaseFoundError(
                msg,
                hint="Pass --version or --tag to select a release explicitly.",
            )
        logger.debug("Resolved stable to %s", stable_tag)
        return ReleaseVersion(requested=requested, tag=stable_tag, version=stable_tag)

    normalized = normalize_version(requested)
    return ReleaseVersion(requested=requested, tag=normalized, version=normalized)
