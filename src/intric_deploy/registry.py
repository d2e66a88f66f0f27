"""
GitHub Container Registry client for published Helm chart versions.

Only the first page of package versions is fetched.
"""

import re
from typing import Any, Iterable, List, Optional, Tuple
from urllib.parse import quote

from intric_deploy.api_client import ApiClient

GITHUB_API_URL = "https://api.github.com"
DEFAULT_ORG = "inoolabs"
DEFAULT_PACKAGE = "charts/intric-helm"

_DIGITS = re.compile(r"(\d+)")


def _char_order(c: str) -> int:
    # Same ranking as GNU sort -V: '~' first, then the end of the run,
    # then letters, then everything else.
    if c == "~":
        return -1
    if c.isalpha():
        return ord(c)
    return ord(c) + 256


def version_key(tag: str) -> List[Tuple[Tuple[int, ...], int]]:
    """
    Sort key comparing digit runs numerically and other runs by character.

    "1.10.0" sorts after "1.9.0", "1.0.0" before "1.0.0-rc1", and
    "1.0~rc1" before "1.0".
    """
    parts = _DIGITS.split(tag)
    key = []
    for i in range(0, len(parts), 2):
        text = tuple(_char_order(c) for c in parts[i]) + (0,)
        number = int(parts[i + 1]) if i + 1 < len(parts) else -1
        key.append((text, number))
    return key


def sort_versions(tags: Iterable[str]) -> List[str]:
    """Return tags newest first."""
    return sorted(tags, key=version_key, reverse=True)


def flatten_tags(versions: Any) -> List[str]:
    """Collect metadata.container.tags from every package version."""
    tags: List[str] = []
    if not isinstance(versions, list):
        return tags
    for version in versions:
        if not isinstance(version, dict):
            continue
        container = (version.get("metadata") or {}).get("container") or {}
        tags.extend(t for t in container.get("tags") or [] if isinstance(t, str))
    return tags


class RegistryClient(ApiClient):
    """Read-only client for the GitHub Packages API."""

    def __init__(self, token: str, api_url: str = GITHUB_API_URL):
        super().__init__(
            api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            },
        )

    def list_versions(
        self,
        org: str = DEFAULT_ORG,
        package: str = DEFAULT_PACKAGE,
        per_page: Optional[int] = None,
    ) -> List[Any]:
        params = {"per_page": per_page} if per_page else None
        return self._make_request(
            "GET",
            f"/orgs/{org}/packages/container/{quote(package, safe='')}/versions",
            action="list package versions",
            params=params,
        )

    def list_tags(
        self,
        org: str = DEFAULT_ORG,
        package: str = DEFAULT_PACKAGE,
        per_page: Optional[int] = None,
    ) -> List[str]:
        """Return all tags of the package, newest first."""
        return sort_versions(flatten_tags(self.list_versions(org, package, per_page)))
